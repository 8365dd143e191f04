"""Send/close helpers for the relay WebSocket."""

from __future__ import annotations

import logging
import contextlib
from typing import Any

import orjson
from fastapi import WebSocket, WebSocketDisconnect

from tonebridge.config.websocket import WS_KEY_CODE, WS_KEY_TYPE, WS_TYPE_ERROR, WS_KEY_MESSAGE

logger = logging.getLogger(__name__)


def build_error_frame(code: str, message: str) -> dict[str, Any]:
    return {WS_KEY_TYPE: WS_TYPE_ERROR, WS_KEY_CODE: code, WS_KEY_MESSAGE: message}


async def safe_send_text(ws: WebSocket, text: str) -> bool:
    try:
        await ws.send_text(text)
    except WebSocketDisconnect:
        return False
    except Exception:
        logger.debug("WebSocket send failed", exc_info=True)
        return False
    return True


async def safe_send_json(ws: WebSocket, frame: dict[str, Any]) -> bool:
    return await safe_send_text(ws, orjson.dumps(frame).decode("utf-8"))


async def reject_connection(
    ws: WebSocket,
    *,
    error_code: str,
    message: str,
    close_code: int,
    reason: str | None = None,
    accepted: bool = False,
) -> None:
    # Accept so we can send a structured error, then close.
    if not accepted:
        try:
            await ws.accept()
        except Exception:
            return
    await safe_send_json(ws, build_error_frame(error_code, message))
    with contextlib.suppress(Exception):
        await ws.close(code=close_code, reason=reason or message)


__all__ = [
    "build_error_frame",
    "reject_connection",
    "safe_send_json",
    "safe_send_text",
]
