"""In-process activity source, driven by direct calls."""

import asyncio

from events import ActivitySignal
from .base import ActivitySource
from .registry import register


@register
class ManualSource(ActivitySource):
    """Source for hosts that already have their own input loop.

    The host calls pointer_moved() and key_pressed() from its input
    callbacks; the source forwards them to attached listeners.
    """

    name = "manual"
    description = "In-process source fed by pointer_moved() / key_pressed() calls"

    def __init__(self, config=None) -> None:
        super().__init__(config)
        self._stopped = asyncio.Event()

    def pointer_moved(self) -> None:
        self.emit(ActivitySignal.POINTER_MOVE)

    def key_pressed(self) -> None:
        self.emit(ActivitySignal.KEY_DOWN)

    async def run(self) -> None:
        """Wait until stopped; signals arrive through direct calls."""
        self._running = True
        await self._stopped.wait()
        self._running = False

    def stop(self) -> None:
        super().stop()
        self._stopped.set()
