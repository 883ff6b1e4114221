"""OSC server receiving activity signals forwarded by a host input layer."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from events import ActivitySignal
from .base import ActivitySource, SourceConfig
from .registry import register

logger = logging.getLogger(__name__)

POINTER_ADDRESS = "/activity/pointer"
KEY_ADDRESS = "/activity/key"


@dataclass
class OSCConfig(SourceConfig):
    """Configuration for the OSC activity source."""
    host: str = "127.0.0.1"
    port: int = 9001


@register
class OSCSource(ActivitySource):
    """OSC server for hosts that forward input over UDP.

    A browser page, game or desktop hook sends ``/activity/pointer`` on
    pointer movement and ``/activity/key`` on key presses. Message arguments
    are ignored; any other address is dropped.
    """

    name = "osc"
    description = "OSC server for forwarded pointer and key activity"
    config_class = OSCConfig

    def __init__(self, config: OSCConfig | None = None) -> None:
        super().__init__(config)
        self._transport: Any = None

    def _handle_pointer(self, address: str, *args: Any) -> None:
        self.emit(ActivitySignal.POINTER_MOVE)

    def _handle_key(self, address: str, *args: Any) -> None:
        self.emit(ActivitySignal.KEY_DOWN)

    def _default_handler(self, address: str, *args: Any) -> None:
        logger.debug("Ignoring OSC message %s", address)

    def build_dispatcher(self) -> Any:
        """Create the python-osc dispatcher mapping addresses to signals."""
        from pythonosc.dispatcher import Dispatcher

        dispatcher = Dispatcher()
        dispatcher.map(POINTER_ADDRESS, self._handle_pointer)
        dispatcher.map(KEY_ADDRESS, self._handle_key)
        dispatcher.set_default_handler(self._default_handler)
        return dispatcher

    async def run(self) -> None:
        """Run the OSC server."""
        try:
            from pythonosc.osc_server import AsyncIOOSCUDPServer
        except ImportError:
            logger.warning("python-osc not installed. OSC activity source disabled.")
            return

        self._running = True
        server = AsyncIOOSCUDPServer(
            (self.config.host, self.config.port),
            self.build_dispatcher(),
            asyncio.get_running_loop(),
        )
        self._transport, _ = await server.create_serve_endpoint()
        logger.info("OSC activity source listening on %s:%d", self.config.host, self.config.port)

        try:
            while self._running:
                await asyncio.sleep(0.5)
        finally:
            self._close_transport()

    def _close_transport(self) -> None:
        if self._transport:
            self._transport.close()
            self._transport = None

    def stop(self) -> None:
        """Stop the OSC server."""
        super().stop()
        self._close_transport()
