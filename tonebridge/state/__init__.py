from .runtime import RuntimeDeps
from .settings import AppSettings
from .session import Session, SessionState
from .capture import CaptureChunk
from .events import RelayEvent, RelayEventKind
from .requests import ToolResult, DecodeResult, ConversionRequest

__all__ = [
    "AppSettings",
    "CaptureChunk",
    "ConversionRequest",
    "DecodeResult",
    "RelayEvent",
    "RelayEventKind",
    "RuntimeDeps",
    "Session",
    "SessionState",
    "ToolResult",
]
