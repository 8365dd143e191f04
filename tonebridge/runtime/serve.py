"""`tonebridge-server` entry point."""

from __future__ import annotations

import uvicorn

from .settings_loader import load_settings


def main() -> None:
    settings = load_settings()
    uvicorn.run(
        "tonebridge.server:app",
        host=settings.server.host,
        port=settings.server.port,
        log_level="info",
    )


__all__ = ["main"]
