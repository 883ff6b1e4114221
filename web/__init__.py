"""Web interface for the idle monitor."""

from .server import create_app

__all__ = ["create_app"]
