"""Configuration for the idle monitor application."""

from dataclasses import dataclass, field
from typing import Any

from idle_monitor import DEFAULT_TIMEOUT_MS, is_valid_timeout


@dataclass
class WebConfig:
    """Settings for the status web API."""
    enabled: bool = True
    host: str = "127.0.0.1"
    port: int = 8086

    def to_dict(self) -> dict[str, Any]:
        return {"enabled": self.enabled, "host": self.host, "port": self.port}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WebConfig":
        return cls(
            enabled=data.get("enabled", True),
            host=data.get("host", "127.0.0.1"),
            port=data.get("port", 8086),
        )


@dataclass
class MonitorConfig:
    """Main configuration."""
    # Inactivity period before the user counts as idle
    timeout_ms: int = DEFAULT_TIMEOUT_MS

    # Activity source: registered name plus per-source options
    source: str = "pygame"
    sources: dict[str, dict[str, Any]] = field(default_factory=dict)

    # Web server
    web: WebConfig = field(default_factory=WebConfig)

    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not is_valid_timeout(self.timeout_ms):
            raise ValueError(f"timeout_ms must be a positive number, got {self.timeout_ms!r}")

    def source_options(self, name: str | None = None) -> dict[str, Any]:
        """Options for a source (the selected one by default)."""
        return dict(self.sources.get(name or self.source, {}))

    def to_dict(self) -> dict[str, Any]:
        return {
            "timeout_ms": self.timeout_ms,
            "source": self.source,
            "sources": {name: dict(opts) for name, opts in self.sources.items()},
            "web": self.web.to_dict(),
            "log_level": self.log_level,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MonitorConfig":
        return cls(
            timeout_ms=data.get("timeout_ms", DEFAULT_TIMEOUT_MS),
            source=data.get("source", "pygame"),
            sources={name: dict(opts) for name, opts in data.get("sources", {}).items()},
            web=WebConfig.from_dict(data.get("web", {})),
            log_level=data.get("log_level", "INFO"),
        )


DEFAULT_CONFIG = MonitorConfig(
    sources={
        "pygame": {"poll_interval": 0.02},
        "osc": {"host": "127.0.0.1", "port": 9001},
    }
)
