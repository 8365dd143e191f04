"""Client side of the relay WebSocket."""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator
from urllib.parse import urlparse, urlunparse

import websockets
from websockets.protocol import State
from websockets.asyncio.client import connect

from tonebridge.state.events import RelayEvent
from tonebridge.codec.lines import extract_received_message
from tonebridge.config.websocket import (
    WS_KEY_CODE,
    WS_KEY_DATA,
    WS_KEY_TEXT,
    WS_KEY_TYPE,
    WS_TYPE_SEND,
    WS_TYPE_ERROR,
    WS_KEY_MESSAGE,
    WS_TYPE_STDERR,
    WS_TYPE_STDOUT,
    WS_TYPE_DECODED,
    DEFAULT_WS_ENDPOINT_PATH,
    WS_CLOSE_CLI_EXIT_REASON_PREFIX,
)

logger = logging.getLogger(__name__)


def ws_url(server: str, path: str = DEFAULT_WS_ENDPOINT_PATH) -> str:
    """Build the relay WebSocket URL from an http(s)/ws(s) base or a bare host."""
    server = (server or "").strip()
    if server.startswith(("ws://", "wss://", "http://", "https://")):
        parsed = urlparse(server)
        scheme = {"http": "ws", "https": "wss"}.get(parsed.scheme, parsed.scheme)
        base_path = (parsed.path or "").rstrip("/")
        if not base_path.endswith(path):
            base_path = f"{base_path}{path}"
        return urlunparse((scheme, parsed.netloc, base_path, "", parsed.query, ""))
    return f"ws://{server.rstrip('/')}{path}"


def parse_exit_code(reason: str | None) -> int | None:
    if not reason or not reason.startswith(WS_CLOSE_CLI_EXIT_REASON_PREFIX):
        return None
    try:
        return int(reason[len(WS_CLOSE_CLI_EXIT_REASON_PREFIX) :])
    except ValueError:
        return None


def events_from_frame(frame: dict) -> list[RelayEvent]:
    kind = frame.get(WS_KEY_TYPE)
    if kind == WS_TYPE_STDOUT:
        return [RelayEvent.stdout(str(frame.get(WS_KEY_DATA) or ""))]
    if kind == WS_TYPE_STDERR:
        line = str(frame.get(WS_KEY_DATA) or "")
        events = [RelayEvent.stderr(line)]
        # ggwave-cli reports receptions on stderr, which the server does not classify.
        received = extract_received_message(line)
        if received is not None:
            events.append(RelayEvent.decoded(received))
        return events
    if kind == WS_TYPE_DECODED:
        return [RelayEvent.decoded(str(frame.get(WS_KEY_MESSAGE) or ""))]
    return []


class RelaySessionClient:
    def __init__(self, server: str, *, path: str = DEFAULT_WS_ENDPOINT_PATH) -> None:
        self.url = ws_url(server, path)
        self._ws = None
        self._closed = False
        self.error: str | None = None

    @property
    def is_open(self) -> bool:
        return self._ws is not None and not self._closed and self._ws.state is State.OPEN

    async def connect(self) -> None:
        if self._ws is not None:
            raise RuntimeError("relay session already connected")
        self._ws = await connect(self.url)
        logger.info("relay session connected: %s", self.url)

    async def send(self, text: str) -> None:
        if not self.is_open:
            raise RuntimeError("relay session is not open")
        await self._ws.send(json.dumps({WS_KEY_TYPE: WS_TYPE_SEND, WS_KEY_TEXT: text}))

    async def events(self) -> AsyncIterator[RelayEvent]:
        """Yield relay events until the server closes; ends with a CLOSED event."""
        if self._ws is None:
            raise RuntimeError("relay session is not connected")
        try:
            async for raw in self._ws:
                frame = self._parse(raw)
                if frame is None:
                    continue
                if frame.get(WS_KEY_TYPE) == WS_TYPE_ERROR:
                    self.error = f"{frame.get(WS_KEY_CODE)}: {frame.get(WS_KEY_MESSAGE)}"
                    logger.warning("relay session error: %s", self.error)
                    continue
                for event in events_from_frame(frame):
                    yield event
        except websockets.ConnectionClosed as exc:
            logger.info("relay session dropped: %s", exc)
        finally:
            self._closed = True
        yield RelayEvent.closed(parse_exit_code(getattr(self._ws, "close_reason", None)))

    async def close(self) -> None:
        self._closed = True
        if self._ws is not None:
            await self._ws.close()

    @staticmethod
    def _parse(raw) -> dict | None:
        try:
            if isinstance(raw, bytes | bytearray):
                raw = raw.decode("utf-8", errors="ignore")
            frame = json.loads(raw)
        except Exception:
            return None
        return frame if isinstance(frame, dict) else None


__all__ = ["RelaySessionClient", "events_from_frame", "parse_exit_code", "ws_url"]
