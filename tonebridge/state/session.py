"""Per-connection session record owned by the relay."""

from __future__ import annotations

import enum
import time
import uuid
import asyncio
from dataclasses import field, dataclass


class SessionState(enum.Enum):
    CONNECTING = "connecting"
    ACTIVE = "active"
    CLOSING = "closing"
    CLOSED = "closed"


@dataclass(slots=True)
class Session:
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    state: SessionState = SessionState.CONNECTING
    process: asyncio.subprocess.Process | None = None
    created_at: float = field(default_factory=time.time)
    exit_code: int | None = None

    @property
    def pid(self) -> int | None:
        return self.process.pid if self.process is not None else None


__all__ = ["Session", "SessionState"]
