"""Runtime settings (dataclasses only)."""

from __future__ import annotations

from pathlib import Path
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ToolSettings:
    to_file: Path
    from_file: Path
    cli: Path
    ffmpeg: str
    cli_protocol: int
    workspace_dir: Path | None = None


@dataclass(frozen=True, slots=True)
class ConversionSettings:
    sample_rate: int
    channels: int


@dataclass(frozen=True, slots=True)
class ServerSettings:
    host: str
    port: int
    cors_origins: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class WebSocketSettings:
    endpoint_path: str
    outbound_queue_max: int


@dataclass(frozen=True, slots=True)
class LimitsSettings:
    max_concurrent_sessions: int


@dataclass(frozen=True, slots=True)
class CaptureSettings:
    sample_rate: int
    channels: int
    chunk_seconds: float
    level_period_s: float
    blocksize: int
    level_window: int
    level_queue_max: int
    device: int | str | None = None


@dataclass(frozen=True, slots=True)
class ClientSettings:
    server: str
    timeout_s: float
    script_pause_s: float


@dataclass(frozen=True, slots=True)
class AppSettings:
    tools: ToolSettings
    conversion: ConversionSettings
    server: ServerSettings
    websocket: WebSocketSettings
    limits: LimitsSettings


__all__ = [
    "AppSettings",
    "CaptureSettings",
    "ClientSettings",
    "ConversionSettings",
    "LimitsSettings",
    "ServerSettings",
    "ToolSettings",
    "WebSocketSettings",
]
