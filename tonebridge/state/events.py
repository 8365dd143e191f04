"""Relay events emitted from a codec subprocess to its connection."""

from __future__ import annotations

import enum
from typing import Any
from dataclasses import dataclass

from tonebridge.config.websocket import (
    WS_KEY_DATA,
    WS_KEY_TYPE,
    WS_KEY_MESSAGE,
    WS_TYPE_STDERR,
    WS_TYPE_STDOUT,
    WS_TYPE_DECODED,
)


class RelayEventKind(enum.Enum):
    STDOUT = WS_TYPE_STDOUT
    STDERR = WS_TYPE_STDERR
    DECODED = WS_TYPE_DECODED
    CLOSED = "closed"


@dataclass(frozen=True, slots=True)
class RelayEvent:
    kind: RelayEventKind
    data: str = ""
    exit_code: int | None = None

    @classmethod
    def stdout(cls, line: str) -> RelayEvent:
        return cls(RelayEventKind.STDOUT, line)

    @classmethod
    def stderr(cls, line: str) -> RelayEvent:
        return cls(RelayEventKind.STDERR, line)

    @classmethod
    def decoded(cls, message: str) -> RelayEvent:
        return cls(RelayEventKind.DECODED, message)

    @classmethod
    def closed(cls, exit_code: int | None) -> RelayEvent:
        return cls(RelayEventKind.CLOSED, exit_code=exit_code)

    def to_frame(self) -> dict[str, Any] | None:
        if self.kind is RelayEventKind.CLOSED:
            return None
        if self.kind is RelayEventKind.DECODED:
            return {WS_KEY_TYPE: WS_TYPE_DECODED, WS_KEY_MESSAGE: self.data}
        return {WS_KEY_TYPE: self.kind.value, WS_KEY_DATA: self.data}


__all__ = ["RelayEvent", "RelayEventKind"]
