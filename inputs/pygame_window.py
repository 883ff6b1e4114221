"""Activity source reading mouse and keyboard events from a pygame window."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from events import ActivitySignal
from .base import ActivitySource, SourceConfig
from .registry import register

logger = logging.getLogger(__name__)


@dataclass
class PygameConfig(SourceConfig):
    """Configuration for the pygame window source."""
    poll_interval: float = 0.02  # seconds between event queue drains
    window_width: int = 320
    window_height: int = 120
    caption: str = "Idle Monitor"


@register
class PygameSource(ActivitySource):
    """Watches a pygame window for pointer movement and key presses.

    pygame only delivers input for its own window, so this source opens a
    small one and drains its event queue on every poll. Closing the window
    stops the source.
    """

    name = "pygame"
    description = "Mouse motion and key presses in a pygame window"
    config_class = PygameConfig

    def __init__(self, config: PygameConfig | None = None) -> None:
        super().__init__(config)
        self._pygame_available = False
        self._screen: Any = None

    def _init_pygame(self) -> bool:
        """Initialize pygame and open the window. Returns True on success."""
        if self._pygame_available:
            return True
        try:
            import pygame
        except ImportError:
            logger.warning("pygame not installed. Window activity source disabled.")
            return False

        pygame.init()
        self._screen = pygame.display.set_mode(
            (self.config.window_width, self.config.window_height)
        )
        pygame.display.set_caption(self.config.caption)
        self._pygame_available = True
        logger.info("pygame window opened (%dx%d)", self.config.window_width, self.config.window_height)
        return True

    def translate(self, event: Any) -> ActivitySignal | None:
        """Map a pygame event to an activity signal, or None if it is not one."""
        import pygame

        if event.type == pygame.MOUSEMOTION:
            return ActivitySignal.POINTER_MOVE
        if event.type == pygame.KEYDOWN:
            return ActivitySignal.KEY_DOWN
        return None

    def process(self, events: list[Any]) -> int:
        """Emit signals for a batch of pygame events.

        Returns the number of signals emitted. A QUIT event stops the source.
        """
        import pygame

        emitted = 0
        for event in events:
            if event.type == pygame.QUIT:
                logger.info("pygame window closed")
                self._running = False
                continue
            signal = self.translate(event)
            if signal is not None:
                self.emit(signal)
                emitted += 1
        return emitted

    async def run(self) -> None:
        """Poll the pygame event queue until stopped."""
        if not self._init_pygame():
            return

        import pygame

        self._running = True
        while self._running:
            try:
                events = pygame.event.get()
            except pygame.error as e:
                logger.error("pygame event queue unavailable: %s", e)
                break
            self.process(events)
            await asyncio.sleep(self.config.poll_interval)
        self._running = False

    def stop(self) -> None:
        """Stop polling and close the window."""
        super().stop()
        if self._pygame_available:
            import pygame
            pygame.quit()
            self._pygame_available = False
            self._screen = None
