"""Base class for activity sources."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, ClassVar

from events import ActivitySignal

ActivityListener = Callable[[ActivitySignal], None]


@dataclass
class SourceConfig:
    """Base configuration for activity sources.

    Subclasses should extend this with source-specific fields.
    All fields should have defaults so sources work out of the box.
    """
    enabled: bool = True


class ActivitySource(ABC):
    """Abstract base class for anything that reports user activity.

    A source delivers two signals, pointer movement and key presses, to the
    listeners attached to it. The idle monitor attaches one listener on
    start and detaches it on stop; the source itself keeps running in its
    own task independently of that.

    To create a new source:
    1. Extend this class
    2. Define class-level metadata (name, description, config_class)
    3. Implement run() async method, calling emit() for each signal
    4. Optionally override stop() for cleanup
    5. Add @register decorator from registry.py
    """

    # Class-level metadata - override in subclasses
    name: ClassVar[str] = "unknown"
    description: ClassVar[str] = ""
    config_class: ClassVar[type[SourceConfig]] = SourceConfig

    def __init__(self, config: SourceConfig | None = None) -> None:
        """Initialize the source.

        Args:
            config: Source-specific configuration (uses defaults if None)
        """
        self.config = config or self.config_class()
        self._listeners: list[ActivityListener] = []
        self._running = False

    def attach(self, listener: ActivityListener) -> None:
        """Attach a listener. Attaching the same listener again has no effect."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def detach(self, listener: ActivityListener) -> None:
        """Detach a listener. Unknown listeners are ignored."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(self, signal: ActivitySignal) -> None:
        """Deliver a signal to every attached listener."""
        for listener in list(self._listeners):
            listener(signal)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    @abstractmethod
    async def run(self) -> None:
        """Main async loop for the source.

        Should set self._running = True at start and check it in the loop.
        Must be cancellable.
        """
        pass

    def stop(self) -> None:
        """Stop the source.

        Override this method for custom cleanup (closing windows, sockets).
        Always call super().stop() or set self._running = False.
        """
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r} running={self._running}>"
