"""Tests for the application wiring and CLI."""

import asyncio
import json
import logging
from pathlib import Path

import pytest

from config import MonitorConfig
from config_manager import ConfigManager
from inputs.manual import ManualSource
from inputs.osc_server import OSCSource
from main import IdleMonitorApp, parse_args
from scheduler import VirtualClock


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "timeout_ms": 50,
        "source": "osc",
        "sources": {"osc": {"port": 9222}},
        "web": {"enabled": False},
    }))
    return path


class TestParseArgs:
    """Tests for command line parsing."""

    def test_defaults(self):
        args = parse_args([])
        assert args.config == "config.json"
        assert args.timeout is None
        assert args.source is None
        assert args.no_web is False

    def test_options(self):
        args = parse_args(["--config", "x.json", "--timeout", "5000", "--source", "manual", "--no-web"])
        assert args.config == "x.json"
        assert args.timeout == 5000
        assert args.source == "manual"
        assert args.no_web is True

    def test_unknown_source_rejected(self):
        with pytest.raises(SystemExit):
            parse_args(["--source", "telepathy"])


class TestIdleMonitorApp:
    """Tests for IdleMonitorApp wiring."""

    def test_source_built_from_config(self, config_path: Path):
        app = IdleMonitorApp(str(config_path))
        assert isinstance(app.source, OSCSource)
        assert app.source.config.port == 9222
        assert app.monitor.timeout_ms == 50

    def test_injected_source_and_scheduler(self, config_path: Path):
        source, clock = ManualSource(), VirtualClock()
        app = IdleMonitorApp(str(config_path), source=source, scheduler=clock)
        assert app.source is source
        assert app.monitor.scheduler is clock

    def test_uses_given_config_manager(self, config_path: Path):
        manager = ConfigManager(str(config_path))
        app = IdleMonitorApp("ignored.json", source=ManualSource(), config_manager=manager)
        assert app.config_manager is manager
        assert app.config is manager.config
        assert app.monitor.timeout_ms == 50

    def test_logs_transitions(self, config_path: Path, caplog):
        source, clock = ManualSource(), VirtualClock()
        app = IdleMonitorApp(str(config_path), source=source, scheduler=clock)

        with caplog.at_level(logging.INFO, logger="main"):
            app.monitor.start()
            clock.advance(50)
            source.pointer_moved()

        assert "User idle" in caplog.text
        assert "User active" in caplog.text

    def test_config_change_updates_timeout(self, config_path: Path):
        app = IdleMonitorApp(str(config_path), source=ManualSource(), scheduler=VirtualClock())
        app.config_manager.update(MonitorConfig(timeout_ms=777, source="manual"))
        assert app.monitor.timeout_ms == 777
        assert app.config.timeout_ms == 777

    def test_stop_before_run_is_noop(self, config_path: Path):
        app = IdleMonitorApp(str(config_path), source=ManualSource(), scheduler=VirtualClock())
        app.stop()
        assert app.monitor.is_running() is False

    @pytest.mark.asyncio
    async def test_run_until_source_stops(self, config_path: Path):
        source = ManualSource()
        app = IdleMonitorApp(str(config_path), source=source)
        task = asyncio.create_task(app.run(timeout_ms=20))

        await asyncio.sleep(0.1)
        assert app.monitor.is_running() is True
        assert app.monitor.is_idle() is True

        source.pointer_moved()
        assert app.monitor.is_idle() is False

        source.stop()
        await asyncio.wait_for(task, timeout=1.0)
        assert app.monitor.is_running() is False
