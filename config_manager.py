"""Configuration manager for JSON persistence and live updates."""

import json
import logging
from pathlib import Path
from typing import Callable

from config import MonitorConfig, DEFAULT_CONFIG

logger = logging.getLogger(__name__)


def default_config() -> MonitorConfig:
    """Fresh copy of the default configuration."""
    return MonitorConfig.from_dict(DEFAULT_CONFIG.to_dict())


class ConfigManager:
    """Manages configuration loading, saving, and live updates."""

    def __init__(self, config_path: str | Path = "config.json") -> None:
        self.config_path = Path(config_path)
        self._config: MonitorConfig | None = None
        self._change_callbacks: list[Callable[[MonitorConfig], None]] = []

    @property
    def config(self) -> MonitorConfig:
        if self._config is None:
            self._config = self.load()
        return self._config

    def load(self) -> MonitorConfig:
        """Load config from JSON file, or return defaults if missing or invalid."""
        if self.config_path.exists():
            try:
                with open(self.config_path) as f:
                    data = json.load(f)
                self._config = MonitorConfig.from_dict(data)
                logger.info("Loaded config from %s", self.config_path)
            except (json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning("Error loading config: %s, using defaults", e)
                self._config = default_config()
        else:
            logger.info("No config file found at %s, using defaults", self.config_path)
            self._config = default_config()
        return self._config

    def save(self) -> None:
        """Save current config to JSON file."""
        if self._config is None:
            return
        with open(self.config_path, "w") as f:
            json.dump(self._config.to_dict(), f, indent=2)
        logger.info("Saved config to %s", self.config_path)

    def reload(self) -> MonitorConfig:
        """Reload config from file."""
        self._config = None
        config = self.load()
        self._notify_change()
        return config

    def update(self, new_config: MonitorConfig) -> None:
        """Update config and notify listeners."""
        self._config = new_config
        self._notify_change()

    def update_from_dict(self, data: dict) -> None:
        """Update config from dictionary.

        Raises:
            ValueError: If the data holds an invalid timeout
        """
        self._config = MonitorConfig.from_dict(data)
        self._notify_change()

    def on_change(self, callback: Callable[[MonitorConfig], None]) -> None:
        """Register a callback for config changes."""
        self._change_callbacks.append(callback)

    def _notify_change(self) -> None:
        """Notify all listeners of config change."""
        if self._config is None:
            return
        for callback in self._change_callbacks:
            try:
                callback(self._config)
            except Exception:
                logger.exception("Error in config change callback")
