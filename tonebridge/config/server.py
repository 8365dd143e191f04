"""HTTP server configuration (env names and defaults only)."""

from __future__ import annotations

ENV_HOST = "HOST"
ENV_PORT = "PORT"
ENV_CORS_ORIGINS = "CORS_ORIGINS"

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 5055
DEFAULT_CORS_ORIGINS = "*"

__all__ = [
    "DEFAULT_CORS_ORIGINS",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "ENV_CORS_ORIGINS",
    "ENV_HOST",
    "ENV_PORT",
]
