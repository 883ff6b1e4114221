"""Timer scheduling for the idle monitor.

The monitor never sleeps or reads the clock itself. It asks a Scheduler to
call it back after a delay and cancels that request when activity arrives.
AsyncioScheduler backs this with the running event loop; VirtualClock is a
manually advanced stand-in used by tests and simulations.
"""

import asyncio
import heapq
import itertools
from abc import ABC, abstractmethod
from typing import Callable, Protocol


class TimerHandle(Protocol):
    """Pending callback returned by Scheduler.call_later."""

    def cancel(self) -> None:
        """Cancel the callback. Safe to call after it fired or was cancelled."""
        ...


class Scheduler(ABC):
    """Arms and cancels delayed callbacks, in milliseconds."""

    @abstractmethod
    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle:
        """Schedule ``callback`` to run once after ``delay_ms``."""
        pass


class AsyncioScheduler(Scheduler):
    """Scheduler on an asyncio event loop.

    If no loop is given, the loop running at call time is used, so the
    scheduler can be created before asyncio.run().
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay_ms / 1000.0, callback)


class VirtualTimer:
    """Timer entry in a VirtualClock."""

    def __init__(self, due_ms: int, callback: Callable[[], None]) -> None:
        self.due_ms = due_ms
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def __repr__(self) -> str:
        return f"<VirtualTimer due={self.due_ms} pending={self.pending}>"


class VirtualClock(Scheduler):
    """Deterministic scheduler driven by advance().

    Time only moves when advance() is called. Timers due inside the advanced
    window fire in due order (ties in scheduling order), with ``now_ms`` set
    to each timer's due time while its callback runs. Timers armed by those
    callbacks fire too if they fall inside the window.
    """

    def __init__(self, start_ms: int = 0) -> None:
        self.now_ms = start_ms
        self._queue: list[tuple[int, int, VirtualTimer]] = []
        self._seq = itertools.count()

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> VirtualTimer:
        timer = VirtualTimer(self.now_ms + max(0, delay_ms), callback)
        heapq.heappush(self._queue, (timer.due_ms, next(self._seq), timer))
        return timer

    def advance(self, delta_ms: int) -> int:
        """Move time forward by ``delta_ms``. Returns the number of timers fired."""
        if delta_ms < 0:
            raise ValueError("Cannot move a virtual clock backwards")
        target = self.now_ms + delta_ms
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            _, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self.now_ms = timer.due_ms
            timer.fired = True
            fired += 1
            timer.callback()
        self.now_ms = target
        return fired

    @property
    def pending(self) -> int:
        """Number of timers still waiting to fire."""
        return sum(1 for _, _, timer in self._queue if timer.pending)
