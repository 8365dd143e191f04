"""Outgoing/incoming message orchestration for one client.

Outgoing text goes over the live relay session when one is open and falls back
to batch encode plus local playback otherwise. All outgoing traffic shares one
lock, so a script occupies the audio channel until its last line has played.
"""

from __future__ import annotations

import re
import asyncio
import logging
from pathlib import Path
from collections.abc import Callable, Awaitable

import httpx
import websockets

from tonebridge.errors import ApiError
from tonebridge.state.events import RelayEventKind
from tonebridge.config.client import DEFAULT_SCRIPT_PAUSE_S
from tonebridge.config.codec import NO_MESSAGE_PLACEHOLDER

from .api import CodecApiClient
from .playback import play_wav
from .capture import CaptureSource
from .session import RelaySessionClient

logger = logging.getLogger(__name__)

Player = Callable[[bytes], Awaitable[None]]
MessageCallback = Callable[[str], None]

_LINE_SPLIT_RE = re.compile(r"\r?\n")


def split_script(script: str) -> list[str]:
    return [line.strip() for line in _LINE_SPLIT_RE.split(script or "") if line.strip()]


class ClientRelayController:
    def __init__(
        self,
        api: CodecApiClient,
        *,
        session: RelaySessionClient | None = None,
        player: Player = play_wav,
        pause_s: float = DEFAULT_SCRIPT_PAUSE_S,
        on_message: MessageCallback | None = None,
    ) -> None:
        self._api = api
        self._session = session
        self._player = player
        self._pause_s = max(0.0, pause_s)
        self._on_message = on_message
        self._channel = asyncio.Lock()

    @property
    def session(self) -> RelaySessionClient | None:
        return self._session

    async def send(self, text: str) -> None:
        if not (text or "").strip():
            return
        async with self._channel:
            await self._send_one(text)

    async def play_script(self, script: str) -> int:
        """Send every non-blank line in order; returns the number of lines sent."""
        lines = split_script(script)
        async with self._channel:
            for index, line in enumerate(lines):
                if index:
                    await asyncio.sleep(self._pause_s)
                await self._send_one(line)
        return len(lines)

    async def listen(self, capture: CaptureSource) -> int:
        """Decode captured chunks until capture stops; returns the number of messages heard."""
        heard = 0
        async for chunk in capture.chunks():
            try:
                result = await self._api.decode_chunk(chunk.data)
            except (ApiError, httpx.HTTPError) as exc:
                logger.warning("chunk %d: decode request failed: %s", chunk.seq, exc)
                continue
            if result.found:
                heard += 1
                self._deliver(result.message)
        return heard

    async def follow_session(self) -> int | None:
        """Deliver decoded relay events until the session closes; returns the cli exit code."""
        if self._session is None:
            raise RuntimeError("no relay session configured")
        async for event in self._session.events():
            if event.kind is RelayEventKind.DECODED:
                self._deliver(event.data)
            elif event.kind is RelayEventKind.CLOSED:
                return event.exit_code
            else:
                logger.debug("relay %s: %s", event.kind.value, event.data)
        return None

    async def decode_file(self, path: str | Path) -> str:
        data = await asyncio.to_thread(Path(path).read_bytes)
        result = await self._api.decode(data, filename=Path(path).name)
        return result.message if result.found else NO_MESSAGE_PLACEHOLDER

    async def _send_one(self, text: str) -> None:
        if self._session is not None and self._session.is_open:
            try:
                await self._session.send(text)
            except websockets.ConnectionClosed as exc:
                logger.info("relay closed while sending, playing locally: %s", exc)
            else:
                logger.debug("sent over relay: %r", text)
                return
        audio = await self._api.encode(text)
        await self._player(audio)
        logger.debug("played locally: %r (%d bytes)", text, len(audio))

    def _deliver(self, message: str) -> None:
        logger.info("message: %s", message)
        if self._on_message is not None:
            self._on_message(message)


__all__ = ["ClientRelayController", "split_script"]
