"""Pytest configuration and fixtures for the idle monitor tests."""

import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import pytest

from idle_monitor import IdleMonitor
from inputs.manual import ManualSource
from scheduler import VirtualClock


@pytest.fixture
def clock() -> VirtualClock:
    """Virtual clock starting at t=0."""
    return VirtualClock()


@pytest.fixture
def source() -> ManualSource:
    """In-process activity source."""
    return ManualSource()


@pytest.fixture
def monitor(clock: VirtualClock, source: ManualSource) -> IdleMonitor:
    """Stopped monitor with a 1000ms timeout on the virtual clock."""
    return IdleMonitor(clock, source, timeout_ms=1000)


@pytest.fixture
def sample_config_dict() -> dict:
    """Sample configuration dictionary for testing."""
    return {
        "timeout_ms": 60000,
        "source": "osc",
        "sources": {
            "osc": {"host": "0.0.0.0", "port": 9100},
            "pygame": {"poll_interval": 0.05},
        },
        "web": {"enabled": False, "host": "0.0.0.0", "port": 8090},
        "log_level": "DEBUG",
    }
