"""Activity sources for the idle monitor.

A source reports two signals, pointer movement and key presses, to whatever
listeners are attached to it:
- ActivitySource: Abstract base class for sources
- SourceConfig: Base configuration class
- register / get_source / list_sources: Source registry
- create_source: Build the source named in config

Available sources:
- "manual": fed by direct calls from the host application
- "pygame": mouse and keyboard events in a pygame window
- "osc": signals forwarded over OSC/UDP by another process
"""

from .base import ActivitySource, ActivityListener, SourceConfig
from .registry import register, list_sources, get_source, create_source

# Import all sources to trigger @register decorators
from .manual import ManualSource
from .pygame_window import PygameSource, PygameConfig
from .osc_server import OSCSource, OSCConfig

__all__ = [
    "ActivitySource",
    "ActivityListener",
    "SourceConfig",
    "register",
    "list_sources",
    "get_source",
    "create_source",
    "ManualSource",
    "PygameSource",
    "PygameConfig",
    "OSCSource",
    "OSCConfig",
]
