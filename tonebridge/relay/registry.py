"""Process-wide table of live relay sessions."""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .session import SessionRelay

logger = logging.getLogger(__name__)


class SessionRegistry:
    def __init__(self, *, max_sessions: int) -> None:
        self._max = max(1, int(max_sessions))
        self._lock = asyncio.Lock()
        self._sessions: dict[str, SessionRelay] = {}

    async def admit(self, relay: SessionRelay) -> bool:
        """Register a relay unless the server is at capacity."""
        async with self._lock:
            if len(self._sessions) >= self._max:
                return False
            self._sessions[relay.session_id] = relay
            return True

    async def remove(self, session_id: str) -> None:
        async with self._lock:
            self._sessions.pop(session_id, None)

    def snapshot(self) -> list[SessionRelay]:
        # Copy so callers can iterate while connections come and go.
        return list(self._sessions.values())

    def get(self, session_id: str) -> SessionRelay | None:
        return self._sessions.get(session_id)

    def count(self) -> int:
        return len(self._sessions)

    async def close_all(self) -> None:
        relays = self.snapshot()
        for relay in relays:
            with contextlib.suppress(Exception):
                await relay.close()
        if relays:
            logger.info("closed %d live session(s)", len(relays))


__all__ = ["SessionRegistry"]
