"""Chunked decode: format conversion piped into the decoder.

Misses at the decode stage are routine (most chunks hold silence or half a
tone burst) and come back as empty results; only conversion failures are
reported as errors.
"""

from __future__ import annotations

import logging
from pathlib import Path

from tonebridge.config.tools import FROM_FILE_NAME
from tonebridge.state.requests import DecodeResult
from tonebridge.errors import SpawnFailed, ValidationError, ConversionFailed
from tonebridge.config.codec import CHUNK_INPUT_NAME, CHUNK_CONVERTED_NAME
from tonebridge.state.settings import ToolSettings, ConversionSettings

from .tools import require_tool
from .process import run_tool
from .lines import decode_result_from_report
from .workspace import write_file, temp_workspace

logger = logging.getLogger(__name__)


def build_conversion_argv(ffmpeg: str, source: Path, target: Path, conversion: ConversionSettings) -> list[str]:
    return [
        ffmpeg,
        "-y",
        "-v",
        "error",
        "-i",
        str(source),
        "-ar",
        str(conversion.sample_rate),
        "-ac",
        str(conversion.channels),
        "-f",
        "wav",
        str(target),
    ]


class StreamingDecodeGateway:
    def __init__(self, tools: ToolSettings, conversion: ConversionSettings) -> None:
        self._tools = tools
        self._conversion = conversion

    async def decode_chunk(self, data: bytes | None) -> DecodeResult:
        if data is None:
            raise ValidationError("file is required (audio/webm)")
        require_tool(self._tools.from_file, FROM_FILE_NAME)

        try:
            async with temp_workspace(self._tools.workspace_dir) as workspace:
                source = workspace / CHUNK_INPUT_NAME
                target = workspace / CHUNK_CONVERTED_NAME
                await write_file(source, data)
                await self._convert(source, target)
                return await self._decode_converted(target)
        except OSError as exc:
            logger.warning("decode-chunk: workspace error: %s", exc)
            raise ConversionFailed("workspace unavailable", details=str(exc)) from exc

    async def _convert(self, source: Path, target: Path) -> None:
        argv = build_conversion_argv(self._tools.ffmpeg, source, target, self._conversion)
        try:
            result = await run_tool(argv)
        except SpawnFailed as exc:
            logger.warning("decode-chunk: %s", exc)
            raise ConversionFailed("ffmpeg not found or failed", details=exc.details) from exc
        if not result.ok:
            logger.info("decode-chunk: conversion failed with code %s", result.returncode)
            raise ConversionFailed("ffmpeg failed", details=result.stderr)

    async def _decode_converted(self, target: Path) -> DecodeResult:
        try:
            result = await run_tool([self._tools.from_file, target])
        except SpawnFailed as exc:
            logger.debug("decode-chunk: decoder did not start: %s", exc)
            return DecodeResult(message="", raw="")
        if not result.ok:
            logger.debug("decode-chunk: decoder exited with code %s", result.returncode)
            return DecodeResult(message="", raw=result.stdout)
        return decode_result_from_report(result.stdout)


__all__ = ["StreamingDecodeGateway", "build_conversion_argv"]
