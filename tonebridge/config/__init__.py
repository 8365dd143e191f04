"""Configuration module exports (env names and defaults only)."""

from .server import DEFAULT_PORT
from .websocket import DEFAULT_WS_ENDPOINT_PATH

__all__ = [
    "DEFAULT_PORT",
    "DEFAULT_WS_ENDPOINT_PATH",
]
