"""Environment parsing for runtime settings."""

from __future__ import annotations

import os
from pathlib import Path

from tonebridge.config.server import (
    ENV_HOST,
    ENV_PORT,
    DEFAULT_HOST,
    DEFAULT_PORT,
    ENV_CORS_ORIGINS,
    DEFAULT_CORS_ORIGINS,
)
from tonebridge.config.limits import ENV_MAX_CONCURRENT_SESSIONS, DEFAULT_MAX_CONCURRENT_SESSIONS
from tonebridge.config.client import (
    ENV_SCRIPT_PAUSE_S,
    ENV_CLIENT_TIMEOUT_S,
    ENV_TONEBRIDGE_SERVER,
    DEFAULT_SCRIPT_PAUSE_S,
    DEFAULT_CLIENT_TIMEOUT_S,
    DEFAULT_TONEBRIDGE_SERVER,
)
from tonebridge.config.websocket import (
    ENV_WS_ENDPOINT_PATH,
    DEFAULT_WS_ENDPOINT_PATH,
    ENV_WS_OUTBOUND_QUEUE_MAX,
    DEFAULT_WS_OUTBOUND_QUEUE_MAX,
)
from tonebridge.config.codec import (
    ENV_CONVERSION_CHANNELS,
    ENV_CONVERSION_SAMPLE_RATE,
    DEFAULT_CONVERSION_CHANNELS,
    DEFAULT_CONVERSION_SAMPLE_RATE,
)
from tonebridge.state.settings import (
    AppSettings,
    ToolSettings,
    LimitsSettings,
    ClientSettings,
    ServerSettings,
    CaptureSettings,
    WebSocketSettings,
    ConversionSettings,
)
from tonebridge.config.tools import (
    CLI_NAME,
    TO_FILE_NAME,
    ENV_FFMPEG_BIN,
    ENV_GGWAVE_CLI,
    FROM_FILE_NAME,
    ENV_GGWAVE_BIN_DIR,
    ENV_GGWAVE_TO_FILE,
    DEFAULT_FFMPEG_BIN,
    ENV_WORKSPACE_DIR,
    ENV_GGWAVE_FROM_FILE,
    DEFAULT_GGWAVE_BIN_DIR,
    ENV_GGWAVE_CLI_PROTOCOL,
    DEFAULT_GGWAVE_CLI_PROTOCOL,
)
from tonebridge.config.capture import (
    ENV_CAPTURE_DEVICE,
    ENV_CAPTURE_CHANNELS,
    ENV_CAPTURE_SAMPLE_RATE,
    DEFAULT_CAPTURE_CHANNELS,
    DEFAULT_CAPTURE_BLOCKSIZE,
    ENV_CAPTURE_CHUNK_SECONDS,
    ENV_CAPTURE_LEVEL_PERIOD_S,
    DEFAULT_CAPTURE_SAMPLE_RATE,
    DEFAULT_CAPTURE_LEVEL_WINDOW,
    DEFAULT_CAPTURE_CHUNK_SECONDS,
    DEFAULT_CAPTURE_LEVEL_PERIOD_S,
    DEFAULT_CAPTURE_LEVEL_QUEUE_MAX,
)


def _str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except Exception:
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except Exception:
        return default


def _path_env(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return Path(raw.strip()).expanduser()


def _optional_path_env(name: str) -> Path | None:
    raw = (os.getenv(name) or "").strip()
    return Path(raw).expanduser() if raw else None


def _device_env(name: str) -> int | str | None:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return None
    return int(raw) if raw.isdigit() else raw


def _load_tool_settings() -> ToolSettings:
    bin_dir = _path_env(ENV_GGWAVE_BIN_DIR, Path(DEFAULT_GGWAVE_BIN_DIR))
    return ToolSettings(
        to_file=_path_env(ENV_GGWAVE_TO_FILE, bin_dir / TO_FILE_NAME),
        from_file=_path_env(ENV_GGWAVE_FROM_FILE, bin_dir / FROM_FILE_NAME),
        cli=_path_env(ENV_GGWAVE_CLI, bin_dir / CLI_NAME),
        ffmpeg=_str_env(ENV_FFMPEG_BIN, DEFAULT_FFMPEG_BIN),
        cli_protocol=_int_env(ENV_GGWAVE_CLI_PROTOCOL, DEFAULT_GGWAVE_CLI_PROTOCOL),
        workspace_dir=_optional_path_env(ENV_WORKSPACE_DIR),
    )


def _load_conversion_settings() -> ConversionSettings:
    return ConversionSettings(
        sample_rate=max(1, _int_env(ENV_CONVERSION_SAMPLE_RATE, DEFAULT_CONVERSION_SAMPLE_RATE)),
        channels=max(1, _int_env(ENV_CONVERSION_CHANNELS, DEFAULT_CONVERSION_CHANNELS)),
    )


def _load_server_settings() -> ServerSettings:
    origins = _str_env(ENV_CORS_ORIGINS, DEFAULT_CORS_ORIGINS)
    return ServerSettings(
        host=_str_env(ENV_HOST, DEFAULT_HOST),
        port=_int_env(ENV_PORT, DEFAULT_PORT),
        cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
    )


def _load_websocket_settings() -> WebSocketSettings:
    path = _str_env(ENV_WS_ENDPOINT_PATH, DEFAULT_WS_ENDPOINT_PATH)
    if not path.startswith("/"):
        path = f"/{path}"
    return WebSocketSettings(
        endpoint_path=path,
        outbound_queue_max=max(0, _int_env(ENV_WS_OUTBOUND_QUEUE_MAX, DEFAULT_WS_OUTBOUND_QUEUE_MAX)),
    )


def _load_limits_settings() -> LimitsSettings:
    return LimitsSettings(
        max_concurrent_sessions=max(1, _int_env(ENV_MAX_CONCURRENT_SESSIONS, DEFAULT_MAX_CONCURRENT_SESSIONS)),
    )


def load_settings() -> AppSettings:
    return AppSettings(
        tools=_load_tool_settings(),
        conversion=_load_conversion_settings(),
        server=_load_server_settings(),
        websocket=_load_websocket_settings(),
        limits=_load_limits_settings(),
    )


def load_capture_settings() -> CaptureSettings:
    return CaptureSettings(
        sample_rate=max(1, _int_env(ENV_CAPTURE_SAMPLE_RATE, DEFAULT_CAPTURE_SAMPLE_RATE)),
        channels=max(1, _int_env(ENV_CAPTURE_CHANNELS, DEFAULT_CAPTURE_CHANNELS)),
        chunk_seconds=max(0.1, _float_env(ENV_CAPTURE_CHUNK_SECONDS, DEFAULT_CAPTURE_CHUNK_SECONDS)),
        level_period_s=max(0.01, _float_env(ENV_CAPTURE_LEVEL_PERIOD_S, DEFAULT_CAPTURE_LEVEL_PERIOD_S)),
        blocksize=DEFAULT_CAPTURE_BLOCKSIZE,
        level_window=DEFAULT_CAPTURE_LEVEL_WINDOW,
        level_queue_max=DEFAULT_CAPTURE_LEVEL_QUEUE_MAX,
        device=_device_env(ENV_CAPTURE_DEVICE),
    )


def load_client_settings() -> ClientSettings:
    return ClientSettings(
        server=_str_env(ENV_TONEBRIDGE_SERVER, DEFAULT_TONEBRIDGE_SERVER),
        timeout_s=max(1.0, _float_env(ENV_CLIENT_TIMEOUT_S, DEFAULT_CLIENT_TIMEOUT_S)),
        script_pause_s=max(0.0, _float_env(ENV_SCRIPT_PAUSE_S, DEFAULT_SCRIPT_PAUSE_S)),
    )


__all__ = ["load_capture_settings", "load_client_settings", "load_settings"]
