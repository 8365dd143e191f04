from __future__ import annotations

from pathlib import Path

from tonebridge.runtime.settings_loader import load_settings, load_client_settings, load_capture_settings

_ENV_NAMES = (
    "GGWAVE_BIN_DIR",
    "GGWAVE_TO_FILE",
    "GGWAVE_FROM_FILE",
    "GGWAVE_CLI",
    "GGWAVE_CLI_PROTOCOL",
    "FFMPEG_BIN",
    "WORKSPACE_DIR",
    "PORT",
    "HOST",
    "CORS_ORIGINS",
    "WS_ENDPOINT_PATH",
    "MAX_CONCURRENT_SESSIONS",
    "CAPTURE_DEVICE",
    "CAPTURE_CHUNK_SECONDS",
    "TONEBRIDGE_SERVER",
)


def _clear(monkeypatch) -> None:
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_defaults(monkeypatch) -> None:
    _clear(monkeypatch)
    settings = load_settings()
    assert settings.server.port == 5055
    assert settings.server.cors_origins == ("*",)
    assert settings.tools.to_file == Path("/usr/local/bin/ggwave-to-file")
    assert settings.tools.cli == Path("/usr/local/bin/ggwave-cli")
    assert settings.tools.ffmpeg == "ffmpeg"
    assert settings.tools.cli_protocol == 1
    assert settings.tools.workspace_dir is None
    assert settings.websocket.endpoint_path == "/ws/cli"
    assert settings.conversion.sample_rate == 48000
    assert settings.conversion.channels == 1


def test_bin_dir_and_overrides(monkeypatch, tmp_path) -> None:
    _clear(monkeypatch)
    monkeypatch.setenv("GGWAVE_BIN_DIR", str(tmp_path))
    monkeypatch.setenv("GGWAVE_CLI", "/opt/ggwave/cli")
    monkeypatch.setenv("PORT", "6000")
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test,")
    monkeypatch.setenv("WS_ENDPOINT_PATH", "relay")
    monkeypatch.setenv("WORKSPACE_DIR", str(tmp_path / "work"))
    settings = load_settings()
    assert settings.tools.from_file == tmp_path / "ggwave-from-file"
    assert settings.tools.cli == Path("/opt/ggwave/cli")
    assert settings.tools.workspace_dir == tmp_path / "work"
    assert settings.server.port == 6000
    assert settings.server.cors_origins == ("http://a.test", "http://b.test")
    assert settings.websocket.endpoint_path == "/relay"


def test_invalid_numbers_fall_back_to_defaults(monkeypatch) -> None:
    _clear(monkeypatch)
    monkeypatch.setenv("PORT", "not-a-port")
    monkeypatch.setenv("MAX_CONCURRENT_SESSIONS", "0")
    settings = load_settings()
    assert settings.server.port == 5055
    assert settings.limits.max_concurrent_sessions == 1


def test_capture_and_client_settings(monkeypatch) -> None:
    _clear(monkeypatch)
    monkeypatch.setenv("CAPTURE_DEVICE", "3")
    monkeypatch.setenv("CAPTURE_CHUNK_SECONDS", "1.5")
    monkeypatch.setenv("TONEBRIDGE_SERVER", "http://bridge.test:5055")
    capture = load_capture_settings()
    assert capture.device == 3
    assert capture.chunk_seconds == 1.5
    assert capture.sample_rate == 48000
    assert capture.level_window == 1024
    assert load_client_settings().server == "http://bridge.test:5055"
