"""Ephemeral value objects for batch and streaming codec requests."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ConversionRequest:
    message: str
    volume: int | None = None
    sample_rate: int | None = None
    protocol: int | None = None


@dataclass(frozen=True, slots=True)
class DecodeResult:
    """Outcome of one decode; an empty message means nothing was found."""

    message: str
    raw: str

    @property
    def found(self) -> bool:
        return bool(self.message)

    def to_payload(self) -> dict[str, str]:
        return {"message": self.message, "raw": self.raw}


@dataclass(frozen=True, slots=True)
class ToolResult:
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


__all__ = ["ConversionRequest", "DecodeResult", "ToolResult"]
