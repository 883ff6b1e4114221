#!/usr/bin/env python3
"""Idle Monitor - Main entry point."""

import argparse
import asyncio
import logging
import signal
import time

from config import MonitorConfig
from config_manager import ConfigManager
from events import IdleEvent
from idle_monitor import IdleMonitor
from inputs import ActivitySource, create_source, list_sources
from scheduler import AsyncioScheduler, Scheduler

logger = logging.getLogger(__name__)


class IdleMonitorApp:
    """Wires the configured activity source, scheduler and monitor together."""

    def __init__(
        self,
        config_path: str = "config.json",
        source: ActivitySource | None = None,
        scheduler: Scheduler | None = None,
        config_manager: ConfigManager | None = None,
    ) -> None:
        # Load configuration unless the caller already did
        self.config_manager = config_manager or ConfigManager(config_path)
        self.config = self.config_manager.config
        self._running = False

        # Create activity source from config unless one is injected
        self.source = source or create_source(
            self.config.source, self.config.source_options()
        )

        self.scheduler = scheduler or AsyncioScheduler()
        self.monitor = IdleMonitor(self.scheduler, self.source, self.config.timeout_ms)

        # Log transitions with the time spent in the previous state
        self._last_change = time.monotonic()
        self.monitor.subscribe(IdleEvent.IDLE, self._on_idle)
        self.monitor.subscribe(IdleEvent.ACTIVE, self._on_active)

        self.config_manager.on_change(self._apply_config)

        # Web server reference (set during run)
        self._web_server = None

    def _elapsed(self) -> float:
        now = time.monotonic()
        elapsed, self._last_change = now - self._last_change, now
        return elapsed

    def _on_idle(self) -> None:
        logger.info("User idle (active for %.1fs)", self._elapsed())

    def _on_active(self) -> None:
        logger.info("User active (idle for %.1fs)", self._elapsed())

    def _apply_config(self, config: MonitorConfig) -> None:
        """Pick up a new timeout; it takes effect on the next start."""
        self.config = config
        self.monitor.set_timeout(config.timeout_ms)
        logger.info("Idle timeout set to %sms", config.timeout_ms)

    async def _run_web_server(self) -> None:
        """Run the FastAPI web server."""
        import uvicorn
        from web import create_app

        app = create_app(self)
        config = uvicorn.Config(
            app,
            host=self.config.web.host,
            port=self.config.web.port,
            log_level="warning",
        )
        self._web_server = uvicorn.Server(config)
        await self._web_server.serve()

    async def run(self, timeout_ms: int | None = None) -> None:
        """Run the monitor until stopped."""
        print("=" * 50)
        print("Idle Monitor")
        print("=" * 50)
        print(f"Idle timeout: {timeout_ms or self.config.timeout_ms}ms")
        print(f"Activity source: {self.source.name} ({self.source.description})")
        if self.config.web.enabled:
            print(f"Web API: http://{self.config.web.host}:{self.config.web.port}/api/status")
        print("=" * 50)

        self._running = True
        self._last_change = time.monotonic()
        self.monitor.start(timeout_ms)

        tasks = [asyncio.create_task(self.source.run(), name=f"source_{self.source.name}")]
        if self.config.web.enabled:
            tasks.append(asyncio.create_task(self._run_web_server(), name="web"))

        print("\nRunning... Press Ctrl+C to exit\n")

        # Without a live source there is nothing left to watch
        try:
            await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            pass
        finally:
            self.stop()
            for task in tasks:
                task.cancel()
            results = await asyncio.gather(*tasks, return_exceptions=True)
            for task, result in zip(tasks, results):
                if isinstance(result, Exception):
                    logger.error("Task %s failed: %s", task.get_name(), result)

    def stop(self) -> None:
        """Stop the monitor, its source and the web server."""
        if not self._running:
            return
        logger.info("Shutting down...")
        self._running = False
        self.monitor.stop()
        self.source.stop()
        if self._web_server:
            self._web_server.should_exit = True


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Report when the user goes idle and comes back")
    parser.add_argument("--config", default="config.json", help="Path to JSON config file")
    parser.add_argument("--timeout", type=int, default=None, help="Idle timeout in ms for this run")
    parser.add_argument(
        "--source", choices=sorted(list_sources()), default=None,
        help="Activity source (overrides config)",
    )
    parser.add_argument("--no-web", action="store_true", help="Disable the web API")
    return parser.parse_args(argv)


async def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = parse_args(argv)

    manager = ConfigManager(args.config)
    logging.basicConfig(
        level=manager.config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    source = None
    if args.source:
        source = create_source(args.source, manager.config.source_options(args.source))

    controller = IdleMonitorApp(args.config, source=source, config_manager=manager)
    if args.no_web:
        controller.config.web.enabled = False

    loop = asyncio.get_running_loop()

    def shutdown() -> None:
        controller.stop()
        for task in asyncio.all_tasks(loop):
            task.cancel()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, shutdown)

    await controller.run(args.timeout)


def cli() -> None:
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    cli()
