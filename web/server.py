"""FastAPI server for the idle monitor status API."""

from typing import TYPE_CHECKING

from fastapi import FastAPI

if TYPE_CHECKING:
    from main import IdleMonitorApp


def create_app(monitor_app: "IdleMonitorApp") -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Idle Monitor",
        description="Status and control of the idle monitor",
        version="1.0.0",
    )

    # Store application reference for API routes
    app.state.monitor_app = monitor_app

    from .api import router
    app.include_router(router, prefix="/api")

    return app
