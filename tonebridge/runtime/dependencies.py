"""Runtime dependency construction (codec gateways + session table)."""

from __future__ import annotations

import logging

from tonebridge.state import RuntimeDeps
from tonebridge.state.settings import AppSettings
from tonebridge.relay.registry import SessionRegistry
from tonebridge.codec.batch import BatchCodecGateway
from tonebridge.codec.streaming import StreamingDecodeGateway

from .settings_loader import load_settings

logger = logging.getLogger(__name__)


def build_runtime_deps(settings: AppSettings | None = None) -> RuntimeDeps:
    settings = settings or load_settings()
    tools = settings.tools
    logger.info("tools: to_file=%s from_file=%s cli=%s ffmpeg=%s", tools.to_file, tools.from_file, tools.cli, tools.ffmpeg)

    return RuntimeDeps(
        settings=settings,
        sessions=SessionRegistry(max_sessions=settings.limits.max_concurrent_sessions),
        batch=BatchCodecGateway(tools),
        streaming=StreamingDecodeGateway(tools, settings.conversion),
    )


__all__ = ["RuntimeDeps", "build_runtime_deps"]
