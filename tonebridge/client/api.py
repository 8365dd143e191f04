"""HTTP client for the codec endpoints."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from tonebridge.errors import ApiError
from tonebridge.state.requests import DecodeResult
from tonebridge.config.codec import WAV_FILENAME, WAV_MEDIA_TYPE
from tonebridge.config.client import DEFAULT_CLIENT_TIMEOUT_S
from tonebridge.config.capture import CAPTURE_CHUNK_FILENAME, CAPTURE_CHUNK_MEDIA_TYPE

logger = logging.getLogger(__name__)


class CodecApiClient:
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_CLIENT_TIMEOUT_S,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=transport)

    async def __aenter__(self) -> CodecApiClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def health(self) -> dict[str, Any]:
        response = await self._client.get("/health")
        _raise_for_status(response)
        return response.json()

    async def encode(
        self,
        message: str,
        *,
        volume: int | None = None,
        sample_rate: int | None = None,
        protocol: int | None = None,
    ) -> bytes:
        payload: dict[str, Any] = {"message": message}
        if volume is not None:
            payload["volume"] = volume
        if sample_rate is not None:
            payload["sampleRate"] = sample_rate
        if protocol is not None:
            payload["protocol"] = protocol
        response = await self._client.post("/encode", json=payload)
        _raise_for_status(response)
        return response.content

    async def decode(self, data: bytes, *, filename: str = WAV_FILENAME) -> DecodeResult:
        return await self._upload("/decode", data, filename, WAV_MEDIA_TYPE)

    async def decode_chunk(
        self,
        data: bytes,
        *,
        filename: str = CAPTURE_CHUNK_FILENAME,
        media_type: str = CAPTURE_CHUNK_MEDIA_TYPE,
    ) -> DecodeResult:
        return await self._upload("/decode-webm", data, filename, media_type)

    async def _upload(self, path: str, data: bytes, filename: str, media_type: str) -> DecodeResult:
        response = await self._client.post(path, files={"file": (filename, data, media_type)})
        _raise_for_status(response)
        try:
            body = response.json()
        except ValueError as exc:
            raise ApiError(status=response.status_code, error="invalid response body", details=str(exc)) from exc
        if not isinstance(body, dict):
            raise ApiError(status=response.status_code, error="invalid response body", details=type(body).__name__)
        return DecodeResult(message=str(body.get("message") or ""), raw=str(body.get("raw") or ""))


def _raise_for_status(response: httpx.Response) -> None:
    if response.is_success:
        return
    error = response.reason_phrase or "request failed"
    details = ""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        error = str(body.get("error") or error)
        details = str(body.get("details") or "")
    logger.debug("%s %s -> %s %s", response.request.method, response.request.url.path, response.status_code, error)
    raise ApiError(status=response.status_code, error=error, details=details)


__all__ = ["CodecApiClient"]
