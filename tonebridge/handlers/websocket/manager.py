"""Primary WebSocket connection handler orchestration."""

from __future__ import annotations

import logging
import contextlib

from fastapi import WebSocket

from tonebridge.state.runtime import RuntimeDeps
from tonebridge.relay.session import SessionRelay
from tonebridge.errors import SpawnFailed, ToolUnavailable
from tonebridge.config.websocket import (
    WS_CLOSE_BUSY_CODE,
    WS_CLOSE_INTERNAL_CODE,
    WS_ERROR_CLI_UNAVAILABLE,
    WS_ERROR_SERVER_AT_CAPACITY,
    WS_CLOSE_CLI_UNAVAILABLE_REASON,
)

from .errors import reject_connection
from .message_loop import run_relay_loop

logger = logging.getLogger(__name__)


async def handle_websocket_connection(ws: WebSocket, runtime_deps: RuntimeDeps) -> None:
    relay = SessionRelay(
        runtime_deps.settings.tools,
        outbound_queue_max=runtime_deps.settings.websocket.outbound_queue_max,
    )
    if not await runtime_deps.sessions.admit(relay):
        await reject_connection(
            ws,
            error_code=WS_ERROR_SERVER_AT_CAPACITY,
            message="Server cannot accept new sessions. Please try again later.",
            close_code=WS_CLOSE_BUSY_CODE,
        )
        return

    exit_code: int | None = None
    try:
        await ws.accept()
        try:
            await relay.start()
        except (ToolUnavailable, SpawnFailed) as exc:
            logger.warning("session %s: %s", relay.session_id, exc)
            await reject_connection(
                ws,
                error_code=WS_ERROR_CLI_UNAVAILABLE,
                message=str(exc),
                close_code=WS_CLOSE_INTERNAL_CODE,
                reason=WS_CLOSE_CLI_UNAVAILABLE_REASON,
                accepted=True,
            )
            return

        logger.info(
            "WebSocket session %s accepted. Active: %s",
            relay.session_id,
            runtime_deps.sessions.count(),
        )
        exit_code = await run_relay_loop(ws, relay)
    finally:
        with contextlib.suppress(Exception):
            await relay.close()
        await runtime_deps.sessions.remove(relay.session_id)
        logger.info(
            "WebSocket session %s closed (cli exit %s). Active: %s",
            relay.session_id,
            exit_code if exit_code is not None else relay.session.exit_code,
            runtime_deps.sessions.count(),
        )


__all__ = ["handle_websocket_connection"]
