"""Client frame parsing/validation for the relay channel."""

from __future__ import annotations

import json

from tonebridge.config.websocket import WS_KEY_TEXT, WS_KEY_TYPE, WS_TYPE_SEND


def parse_client_message(raw: str) -> str:
    """Return the text of a `{"type": "send", "text": ...}` frame.

    Raises ValueError for anything else.
    """
    try:
        msg = json.loads(raw)
    except Exception as exc:
        raise ValueError(f"invalid JSON: {exc}") from exc

    if not isinstance(msg, dict):
        raise ValueError("message must be a JSON object")

    msg_type = msg.get(WS_KEY_TYPE)
    if msg_type != WS_TYPE_SEND:
        raise ValueError(f"unsupported message type: {msg_type!r}")

    text = msg.get(WS_KEY_TEXT)
    if not isinstance(text, str):
        raise ValueError("message 'text' must be a string")
    return text


__all__ = ["parse_client_message"]
