from __future__ import annotations

from dataclasses import replace

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from tonebridge.server import create_app
from tonebridge.state.settings import LimitsSettings


@pytest.fixture
def client(app_settings):
    with TestClient(create_app(app_settings)) as test_client:
        yield test_client


def _receive_until_decoded(ws) -> tuple[list[dict], dict]:
    frames: list[dict] = []
    while True:
        frame = ws.receive_json()
        if frame["type"] == "decoded":
            return frames, frame
        frames.append(frame)


def test_health_reports_tool_availability(client) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True, "toFile": True, "fromFile": True, "cli": True}


def test_health_reports_missing_tools(app_settings, tmp_path) -> None:
    settings = replace(app_settings, tools=replace(app_settings.tools, cli=tmp_path / "missing"))
    with TestClient(create_app(settings)) as test_client:
        assert test_client.get("/health").json()["cli"] is False


def test_encode_returns_wav_attachment(client) -> None:
    response = client.post("/encode", json={"message": "hi", "sampleRate": 48000, "volume": 20})
    assert response.status_code == 200
    assert response.headers["content-type"] == "audio/wav"
    assert response.headers["content-disposition"] == 'inline; filename="message.wav"'
    assert response.content == b"FAKEWAV\nhi"


def test_encode_without_message_is_400(client) -> None:
    for kwargs in ({"json": {}}, {"json": {"message": ""}}, {}):
        response = client.post("/encode", **kwargs)
        assert response.status_code == 400
        assert response.json() == {"error": "message is required"}


def test_encode_failure_is_500_with_details(client) -> None:
    response = client.post("/encode", json={"message": "!fail"})
    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "encode failed"
    assert "encoder refused" in body["details"]


def test_encode_accepts_numeric_message_as_text(client) -> None:
    response = client.post("/encode", json={"message": 123})
    assert response.status_code == 200
    assert response.content == b"FAKEWAV\n123"


def test_encode_with_mistyped_field_is_400(client) -> None:
    response = client.post("/encode", json={"message": "hi", "volume": "loud"})
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "invalid request"
    assert "volume" in body["details"]
    assert "detail" not in body


def test_unusable_workspace_is_500_json(app_settings, tmp_path) -> None:
    tools = replace(app_settings.tools, workspace_dir=tmp_path / "does-not-exist")
    with TestClient(create_app(replace(app_settings, tools=tools))) as test_client:
        encoded = test_client.post("/encode", json={"message": "hi"})
        decoded = test_client.post("/decode", files={"file": ("m.wav", b"FAKEWAV\nhi", "audio/wav")})
        chunk = test_client.post("/decode-webm", files={"file": ("c.webm", b"FAKEWEBM\nhi", "audio/webm")})
    for response in (encoded, decoded, chunk):
        assert response.status_code == 500
        assert response.json()["error"] == "workspace unavailable"
        assert "does-not-exist" in response.json()["details"]


def test_decode_upload(client) -> None:
    response = client.post("/decode", files={"file": ("m.wav", b"FAKEWAV\nhello", "audio/wav")})
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "hello"
    assert "Decoded message" in body["raw"]


def test_decode_without_file_is_400(client) -> None:
    response = client.post("/decode")
    assert response.status_code == 400
    assert response.json() == {"error": "file is required (audio/wav)"}


def test_decode_with_missing_decoder_is_500(app_settings, tmp_path) -> None:
    settings = replace(app_settings, tools=replace(app_settings.tools, from_file=tmp_path / "missing"))
    with TestClient(create_app(settings)) as test_client:
        response = test_client.post("/decode", files={"file": ("m.wav", b"FAKEWAV\nhello", "audio/wav")})
    assert response.status_code == 500
    assert response.json() == {
        "error": "ggwave-from-file binary not found. Build it first.",
        "details": str(tmp_path / "missing"),
    }


def test_decode_webm_hit_and_miss(client) -> None:
    hit = client.post("/decode-webm", files={"file": ("c.webm", b"FAKEWEBM\nyo", "audio/webm")})
    assert hit.status_code == 200
    assert hit.json()["message"] == "yo"

    miss = client.post("/decode-webm", files={"file": ("c.webm", b"FAKEWEBM\n", "audio/webm")})
    assert miss.status_code == 200
    assert miss.json()["message"] == ""


def test_decode_webm_conversion_failure_is_distinct_from_miss(client) -> None:
    response = client.post("/decode-webm", files={"file": ("c.webm", b"\x1a\x45garbage", "audio/webm")})
    assert response.status_code == 500
    assert response.json()["error"] == "ffmpeg failed"


def test_cors_allows_configured_origin(client) -> None:
    response = client.get("/health", headers={"Origin": "http://example.test"})
    assert response.headers["access-control-allow-origin"] == "*"


def test_relay_round_trip(client) -> None:
    with client.websocket_connect("/ws/cli") as ws:
        ws.send_json({"type": "send", "text": "hello"})
        frames, decoded = _receive_until_decoded(ws)
    assert decoded == {"type": "decoded", "message": "hello"}
    assert {"type": "stdout", "data": "Decoded message with length 5: 'hello'"} in frames


def test_relay_ignores_malformed_frames(client) -> None:
    with client.websocket_connect("/ws/cli") as ws:
        ws.send_text("definitely not json")
        ws.send_json({"type": "ping"})
        ws.send_json({"type": "send", "text": 7})
        ws.send_bytes(b'{"type": "send", "text": "binary"}')
        ws.send_json({"type": "send", "text": "ok"})
        _, first = _receive_until_decoded(ws)
        _, second = _receive_until_decoded(ws)
    assert [first["message"], second["message"]] == ["binary", "ok"]


def test_relay_closes_with_cli_exit_code(client) -> None:
    with client.websocket_connect("/ws/cli") as ws:
        ws.send_json({"type": "send", "text": "!exit 5"})
        with pytest.raises(WebSocketDisconnect) as excinfo:
            while True:
                ws.receive_json()
    assert excinfo.value.code == 1000
    assert excinfo.value.reason == "cli_exit_5"


def test_relay_rejects_when_cli_missing(app_settings, tmp_path) -> None:
    settings = replace(app_settings, tools=replace(app_settings.tools, cli=tmp_path / "missing"))
    with TestClient(create_app(settings)) as test_client:
        with test_client.websocket_connect("/ws/cli") as ws:
            frame = ws.receive_json()
            with pytest.raises(WebSocketDisconnect) as excinfo:
                ws.receive_json()
    assert frame["type"] == "error"
    assert frame["code"] == "cli_unavailable"
    assert excinfo.value.code == 1011
    assert excinfo.value.reason == "ggwave-cli not available"


def test_relay_rejects_beyond_capacity(app_settings) -> None:
    settings = replace(app_settings, limits=LimitsSettings(max_concurrent_sessions=1))
    with TestClient(create_app(settings)) as test_client:
        with test_client.websocket_connect("/ws/cli") as first:
            with test_client.websocket_connect("/ws/cli") as second:
                frame = second.receive_json()
                with pytest.raises(WebSocketDisconnect) as excinfo:
                    second.receive_json()
            first.send_json({"type": "send", "text": "still here"})
            _, decoded = _receive_until_decoded(first)
    assert frame["code"] == "server_at_capacity"
    assert excinfo.value.code == 4002
    assert decoded["message"] == "still here"
