"""REST API endpoints for the idle monitor."""

from typing import Any

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from events import IdleEvent

router = APIRouter()


# Pydantic models for request/response
class StartModel(BaseModel):
    timeout_ms: int | None = Field(default=None, gt=0)


class StatusResponse(BaseModel):
    running: bool
    idle: bool
    timeout_ms: float
    session_timeout_ms: float
    source: str
    subscribers: dict[str, int]


def get_app(request: Request):
    """Get the idle monitor application from app state."""
    return request.app.state.monitor_app


def _status(request: Request) -> StatusResponse:
    app = get_app(request)
    monitor = app.monitor
    return StatusResponse(
        running=monitor.is_running(),
        # the idle flag is stale once stopped
        idle=monitor.is_running() and monitor.is_idle(),
        timeout_ms=monitor.timeout_ms,
        session_timeout_ms=monitor.session_timeout_ms,
        source=monitor.source.name,
        subscribers={kind.value: monitor.events.count(kind) for kind in IdleEvent},
    )


# === Status Endpoints ===

@router.get("/status")
async def get_status(request: Request) -> StatusResponse:
    """Get the current monitor state."""
    return _status(request)


@router.post("/start")
async def start_monitor(request: Request, body: StartModel | None = None) -> StatusResponse:
    """Start or restart the monitor, optionally with a session timeout."""
    app = get_app(request)
    app.monitor.start(body.timeout_ms if body else None)
    return _status(request)


@router.post("/stop")
async def stop_monitor(request: Request) -> StatusResponse:
    """Stop the monitor."""
    app = get_app(request)
    app.monitor.stop()
    return _status(request)


# === Config Endpoints ===

@router.get("/config")
async def get_config(request: Request) -> dict[str, Any]:
    """Get the full configuration."""
    app = get_app(request)
    return app.config_manager.config.to_dict()


@router.put("/config")
async def update_config(request: Request, data: dict[str, Any]) -> dict[str, str]:
    """Update the full configuration."""
    app = get_app(request)
    try:
        app.config_manager.update_from_dict(data)
    except (TypeError, ValueError) as e:
        raise HTTPException(status_code=422, detail=str(e))
    return {"status": "ok"}


@router.post("/config/save")
async def save_config(request: Request) -> dict[str, str]:
    """Save configuration to JSON file."""
    app = get_app(request)
    app.config_manager.save()
    return {"status": "saved"}


@router.post("/config/reload")
async def reload_config(request: Request) -> dict[str, Any]:
    """Reload configuration from JSON file."""
    app = get_app(request)
    config = app.config_manager.reload()
    return config.to_dict()
