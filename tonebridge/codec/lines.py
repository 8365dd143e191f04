"""Classification of codec tool output into relay events.

Every line is forwarded as-is; known shapes additionally yield a derived
event. Lines nothing recognises are passed through, never dropped.
"""

from __future__ import annotations

import re

from tonebridge.state.requests import DecodeResult
from tonebridge.state.events import RelayEvent
from tonebridge.config.codec import DECODED_MESSAGE_PATTERN, RECEIVED_MESSAGE_PATTERN

_DECODED_RE = re.compile(DECODED_MESSAGE_PATTERN)
_RECEIVED_RE = re.compile(RECEIVED_MESSAGE_PATTERN)


def extract_decoded_message(text: str) -> str | None:
    match = _DECODED_RE.search(text or "")
    return match.group(1) if match else None


def extract_received_message(text: str) -> str | None:
    match = _RECEIVED_RE.search(text or "")
    return match.group(1) if match else None


def decode_result_from_report(report: str) -> DecodeResult:
    return DecodeResult(message=extract_decoded_message(report) or "", raw=report)


def classify_stdout_line(line: str) -> list[RelayEvent]:
    events = [RelayEvent.stdout(line)]
    message = extract_decoded_message(line)
    if message is not None:
        events.append(RelayEvent.decoded(message))
    return events


def classify_stderr_line(line: str) -> list[RelayEvent]:
    return [RelayEvent.stderr(line)]


__all__ = [
    "classify_stderr_line",
    "classify_stdout_line",
    "decode_result_from_report",
    "extract_decoded_message",
    "extract_received_message",
]
