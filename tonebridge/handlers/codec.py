"""HTTP routes for health, batch encode/decode and chunked decode."""

from __future__ import annotations

import logging

from pydantic import Field, BaseModel, ConfigDict, field_validator
from fastapi.responses import ORJSONResponse
from fastapi import File, Request, Response, APIRouter, UploadFile
from fastapi.exceptions import RequestValidationError

from tonebridge.state import RuntimeDeps
from tonebridge.codec.tools import tool_health
from tonebridge.state.requests import ConversionRequest
from tonebridge.errors import CodecError, ValidationError
from tonebridge.config.codec import WAV_FILENAME, WAV_MEDIA_TYPE

logger = logging.getLogger(__name__)

router = APIRouter()


class EncodeBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str | None = None
    volume: int | None = None
    sample_rate: int | None = Field(default=None, alias="sampleRate")
    protocol: int | None = None

    @field_validator("message", mode="before")
    @classmethod
    def _stringify_message(cls, value: object) -> object:
        # Numbers are accepted as text: {"message": 123} encodes "123".
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    def to_request(self) -> ConversionRequest:
        return ConversionRequest(
            message=self.message or "",
            volume=self.volume,
            sample_rate=self.sample_rate,
            protocol=self.protocol,
        )


def _runtime_deps(request: Request) -> RuntimeDeps:
    runtime_deps = getattr(request.app.state, "runtime_deps", None)
    if runtime_deps is None:
        raise RuntimeError("Runtime dependencies are not initialized")
    return runtime_deps


async def _read_upload(file: UploadFile | None) -> bytes | None:
    if file is None:
        return None
    try:
        return await file.read()
    finally:
        await file.close()


@router.get("/health")
async def health(request: Request) -> dict[str, bool]:
    tools = _runtime_deps(request).settings.tools
    return {"ok": True, **tool_health(tools)}


@router.post("/encode")
async def encode(request: Request, body: EncodeBody | None = None) -> Response:
    conversion = body.to_request() if body is not None else ConversionRequest(message="")
    audio = await _runtime_deps(request).batch.encode(conversion)
    return Response(
        content=audio,
        media_type=WAV_MEDIA_TYPE,
        headers={"Content-Disposition": f'inline; filename="{WAV_FILENAME}"'},
    )


@router.post("/decode")
async def decode(request: Request, file: UploadFile | None = File(default=None)) -> dict[str, str]:
    result = await _runtime_deps(request).batch.decode(await _read_upload(file))
    return result.to_payload()


@router.post("/decode-webm")
async def decode_webm(request: Request, file: UploadFile | None = File(default=None)) -> dict[str, str]:
    result = await _runtime_deps(request).streaming.decode_chunk(await _read_upload(file))
    return result.to_payload()


async def codec_error_handler(request: Request, exc: CodecError) -> ORJSONResponse:
    status = 400 if isinstance(exc, ValidationError) else 500
    if status >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
    return ORJSONResponse(status_code=status, content=exc.to_payload())


def _describe_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        parts.append(f"{location}: {error.get('msg', 'invalid')}")
    return "; ".join(parts)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> ORJSONResponse:
    details = _describe_validation_errors(exc)
    logger.info("%s %s rejected: %s", request.method, request.url.path, details)
    return ORJSONResponse(status_code=400, content={"error": "invalid request", "details": details})


__all__ = ["EncodeBody", "codec_error_handler", "request_validation_handler", "router"]
