"""Bidirectional pump between one WebSocket and its SessionRelay."""

from __future__ import annotations

import asyncio
import logging
import contextlib

from fastapi import WebSocket

from tonebridge.relay.session import SessionRelay
from tonebridge.config.websocket import WS_CLOSE_NORMAL_CODE, WS_CLOSE_CLI_EXIT_REASON_PREFIX

from .errors import safe_send_json
from .parser import parse_client_message

logger = logging.getLogger(__name__)


async def _receive_commands(ws: WebSocket, relay: SessionRelay) -> None:
    while True:
        message = await ws.receive()
        if message.get("type") == "websocket.disconnect":
            logger.info("session %s: client disconnected", relay.session_id)
            return

        raw = message.get("text")
        if raw is None:
            raw = (message.get("bytes") or b"").decode("utf-8", errors="replace")

        try:
            text = parse_client_message(raw)
        except ValueError as exc:
            # A noisy control channel must not end the session.
            logger.debug("session %s: dropping inbound frame: %s", relay.session_id, exc)
            continue
        relay.submit(text)


async def _forward_events(ws: WebSocket, relay: SessionRelay) -> int | None:
    async for event in relay.events():
        frame = event.to_frame()
        if frame is None:
            reason = f"{WS_CLOSE_CLI_EXIT_REASON_PREFIX}{event.exit_code}"
            with contextlib.suppress(Exception):
                await ws.close(code=WS_CLOSE_NORMAL_CODE, reason=reason)
            return event.exit_code
        if not await safe_send_json(ws, frame):
            logger.info("session %s: connection gone while forwarding output", relay.session_id)
            return None
    return None


async def run_relay_loop(ws: WebSocket, relay: SessionRelay) -> int | None:
    """Pump frames until either side finishes.

    Returns the subprocess exit code when the subprocess ended first, None when
    the connection did.
    """
    forward = asyncio.create_task(_forward_events(ws, relay))
    receive = asyncio.create_task(_receive_commands(ws, relay))
    try:
        await asyncio.wait({forward, receive}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in (forward, receive):
            if not task.done():
                task.cancel()
        await asyncio.gather(forward, receive, return_exceptions=True)

    if forward.done() and not forward.cancelled() and forward.exception() is None:
        return forward.result()
    return None


__all__ = ["run_relay_loop"]
