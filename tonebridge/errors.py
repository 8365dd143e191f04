"""Shared error types for the tonebridge server and client."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(eq=False)
class CodecError(Exception):
    """Base class for failures surfaced at a gateway or relay boundary."""

    message: str
    details: str = ""

    def __str__(self) -> str:
        return self.message

    def to_payload(self) -> dict[str, str]:
        payload = {"error": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationError(CodecError):
    """Required input missing; raised before any workspace or subprocess exists."""


class ToolUnavailable(CodecError):
    """A configured codec executable is missing or not executable."""


class SpawnFailed(CodecError):
    """The OS refused to start a subprocess."""


@dataclass(eq=False)
class SubprocessExitNonZero(CodecError):
    """A tool ran to completion but reported failure."""

    returncode: int = 1


class EncodeFailed(CodecError):
    """Text -> audio conversion did not produce an output file."""


class DecodeFailed(CodecError):
    """The decoder could not run or died without producing a report."""


class ConversionFailed(CodecError):
    """The format-conversion stage rejected the input audio."""


@dataclass(eq=False)
class ApiError(Exception):
    """Raised by the HTTP client when the server answers with a non-2xx status."""

    status: int
    error: str
    details: str = ""

    def __str__(self) -> str:
        if self.details:
            return f"{self.status} {self.error}: {self.details}"
        return f"{self.status} {self.error}"


__all__ = [
    "ApiError",
    "CodecError",
    "ConversionFailed",
    "DecodeFailed",
    "EncodeFailed",
    "SpawnFailed",
    "SubprocessExitNonZero",
    "ToolUnavailable",
    "ValidationError",
]
