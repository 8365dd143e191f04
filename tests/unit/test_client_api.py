from __future__ import annotations

import json

import httpx
import pytest

from tonebridge.errors import ApiError
from tonebridge.client.api import CodecApiClient


def _client(handler) -> CodecApiClient:
    return CodecApiClient("http://tonebridge.test/", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_encode_sends_camel_case_parameters() -> None:
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, content=b"RIFFwav", headers={"content-type": "audio/wav"})

    async with _client(handler) as api:
        audio = await api.encode("hello", sample_rate=48000, protocol=2)
    assert audio == b"RIFFwav"
    assert seen == {"path": "/encode", "body": {"message": "hello", "sampleRate": 48000, "protocol": 2}}


@pytest.mark.asyncio
async def test_decode_chunk_uploads_multipart_file() -> None:
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["content_type"] = request.headers["content-type"]
        seen["body"] = request.content
        return httpx.Response(200, json={"message": "yo", "raw": "Decoded message: 'yo'"})

    async with _client(handler) as api:
        result = await api.decode_chunk(b"flacdata")
    assert result.message == "yo"
    assert seen["path"] == "/decode-webm"
    assert seen["content_type"].startswith("multipart/form-data")
    assert b'name="file"' in seen["body"]
    assert b"flacdata" in seen["body"]


@pytest.mark.asyncio
async def test_error_responses_raise_api_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": "ffmpeg failed", "details": "Invalid data"})

    async with _client(handler) as api:
        with pytest.raises(ApiError) as excinfo:
            await api.decode(b"x")
    assert excinfo.value.status == 500
    assert excinfo.value.error == "ffmpeg failed"
    assert excinfo.value.details == "Invalid data"


@pytest.mark.asyncio
async def test_non_json_error_uses_reason_phrase() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="bad gateway")

    async with _client(handler) as api:
        with pytest.raises(ApiError) as excinfo:
            await api.health()
    assert excinfo.value.status == 502
    assert excinfo.value.error == "Bad Gateway"


@pytest.mark.asyncio
async def test_success_with_unreadable_body_raises_api_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/decode":
            return httpx.Response(200, json=["not", "an", "object"])
        return httpx.Response(200, text="not json")

    async with _client(handler) as api:
        with pytest.raises(ApiError) as chunk_error:
            await api.decode_chunk(b"flacdata")
        with pytest.raises(ApiError) as decode_error:
            await api.decode(b"wav")
    assert chunk_error.value.status == 200
    assert chunk_error.value.error == "invalid response body"
    assert decode_error.value.details == "list"
