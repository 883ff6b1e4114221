"""Idle detection state machine."""

import logging
import math
from typing import Any, Callable

from events import ActivitySignal, EventEmitter, IdleEvent
from inputs.base import ActivitySource
from scheduler import Scheduler, TimerHandle

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 30000


def is_valid_timeout(value: Any) -> bool:
    """True for a finite positive number of milliseconds (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value > 0


class IdleMonitor:
    """Tracks whether the user is idle and publishes transitions.

    While running, the monitor is either active or idle. It starts active
    with a countdown of ``timeout_ms``. Every activity signal from the source
    restarts the countdown; when it runs out the monitor goes idle and
    publishes IdleEvent.IDLE. The next signal makes it active again,
    publishes IdleEvent.ACTIVE and starts a fresh countdown.

    Subscribers are called synchronously, in registration order, from
    whatever context delivers the signal or timer (normally the asyncio
    loop). stop() and start() may be called from inside a subscriber.
    Subscriptions survive stop/start cycles.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        source: ActivitySource,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
    ) -> None:
        """Initialize the monitor.

        Args:
            scheduler: Arms and cancels the idle countdown
            source: Delivers pointer/key activity signals
            timeout_ms: Inactivity period before the user counts as idle

        Raises:
            ValueError: If timeout_ms is not a positive number
        """
        if not is_valid_timeout(timeout_ms):
            raise ValueError(f"timeout_ms must be a positive number, got {timeout_ms!r}")
        self.scheduler = scheduler
        self.source = source
        self.timeout_ms = timeout_ms
        self.session_timeout_ms = timeout_ms
        self.events = EventEmitter()
        self._enabled = False
        self._idle = False
        self._timer: TimerHandle | None = None

    # --- Queries ---

    def is_running(self) -> bool:
        return self._enabled

    def is_idle(self) -> bool:
        """Whether the user is currently idle.

        Only meaningful while is_running() is True; after stop() this keeps
        whatever value the last session ended with.
        """
        return self._idle

    # --- Lifecycle ---

    def start(self, timeout_ms: int | None = None) -> None:
        """Start (or restart) monitoring in the active state.

        Args:
            timeout_ms: Optional timeout for this session only. Values that
                are not positive numbers are ignored and the configured
                timeout is used instead.
        """
        if self._enabled:
            self._detach()
        self._enabled = True
        self._idle = False

        if timeout_ms is not None and is_valid_timeout(timeout_ms):
            self.session_timeout_ms = timeout_ms
        else:
            if timeout_ms is not None:
                logger.debug("Ignoring invalid timeout override %r", timeout_ms)
            self.session_timeout_ms = self.timeout_ms

        self.source.attach(self._handle_activity)
        self._arm()
        logger.debug("Idle monitor started (timeout=%sms)", self.session_timeout_ms)

    def stop(self) -> None:
        """Stop monitoring. No event is published; calling again is a no-op."""
        if not self._enabled:
            return
        self._enabled = False
        self._detach()
        logger.debug("Idle monitor stopped")

    def set_timeout(self, timeout_ms: int) -> None:
        """Change the configured timeout used by later start() calls.

        Raises:
            ValueError: If timeout_ms is not a positive number
        """
        if not is_valid_timeout(timeout_ms):
            raise ValueError(f"timeout_ms must be a positive number, got {timeout_ms!r}")
        self.timeout_ms = timeout_ms

    # --- Subscriptions ---

    def subscribe(self, kind: IdleEvent | str, callback: Callable[..., Any], context: Any = None) -> None:
        """Call ``callback`` on every transition of ``kind``. See EventEmitter.subscribe."""
        self.events.subscribe(kind, callback, context)

    def unsubscribe(self, kind: IdleEvent | str, callback: Callable[..., Any] | None = None) -> None:
        """Remove one subscription, or all of ``kind`` when callback is omitted."""
        self.events.unsubscribe(kind, callback)

    # --- Internals ---

    def _arm(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        self._timer = self.scheduler.call_later(self.session_timeout_ms, self._handle_timeout)

    def _detach(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self.source.detach(self._handle_activity)

    def _handle_timeout(self) -> None:
        if not self._enabled or self._idle:
            return
        self._idle = True
        logger.debug("User idle after %sms", self.session_timeout_ms)
        self.events.publish(IdleEvent.IDLE)

    def _handle_activity(self, signal: ActivitySignal | None = None) -> None:
        if not self._enabled:
            return

        if self._idle:
            self._idle = False
            logger.debug("User active again (%s)", signal.value if signal else "activity")
            self.events.publish(IdleEvent.ACTIVE)
            # a subscriber may have stopped or restarted the monitor
            if not self._enabled:
                return

        self._arm()

    def __repr__(self) -> str:
        return (
            f"<IdleMonitor running={self._enabled} idle={self._idle} "
            f"timeout_ms={self.session_timeout_ms}>"
        )
