"""One-shot text <-> audio conversions against a scoped workspace."""

from __future__ import annotations

import logging
from pathlib import Path

from tonebridge.state.settings import ToolSettings
from tonebridge.state.requests import DecodeResult, ConversionRequest
from tonebridge.config.tools import TO_FILE_NAME, FROM_FILE_NAME
from tonebridge.config.codec import DECODE_INPUT_NAME, ENCODE_OUTPUT_NAME
from tonebridge.errors import (
    SpawnFailed,
    DecodeFailed,
    EncodeFailed,
    ValidationError,
    SubprocessExitNonZero,
)

from .tools import require_tool
from .lines import decode_result_from_report
from .process import run_tool, check_result
from .workspace import read_file, write_file, temp_workspace

logger = logging.getLogger(__name__)


def build_encode_argv(tool: Path, output: Path, request: ConversionRequest) -> list[str]:
    argv = [str(tool), f"-f{output}"]
    # Zero/empty parameters mean "use the tool default".
    if request.volume:
        argv.append(f"-v{request.volume}")
    if request.sample_rate:
        argv.append(f"-s{request.sample_rate}")
    if request.protocol:
        argv.append(f"-p{request.protocol}")
    return argv



class BatchCodecGateway:
    def __init__(self, tools: ToolSettings) -> None:
        self._tools = tools

    async def encode(self, request: ConversionRequest) -> bytes:
        if not request.message:
            raise ValidationError("message is required")
        require_tool(self._tools.to_file, TO_FILE_NAME)

        try:
            async with temp_workspace(self._tools.workspace_dir) as workspace:
                audio = await self._encode_in(workspace, request)
        except OSError as exc:
            logger.warning("encode: workspace error: %s", exc)
            raise EncodeFailed("workspace unavailable", details=str(exc)) from exc

        logger.info("encode: %d chars -> %d bytes", len(request.message), len(audio))
        return audio

    async def _encode_in(self, workspace: Path, request: ConversionRequest) -> bytes:
        output = workspace / ENCODE_OUTPUT_NAME
        argv = build_encode_argv(self._tools.to_file, output, request)
        try:
            result = await run_tool(argv, stdin=request.message.encode("utf-8"))
            check_result(result, TO_FILE_NAME)
        except SpawnFailed as exc:
            logger.warning("encode: %s", exc)
            raise EncodeFailed(exc.message, details=exc.details) from exc
        except SubprocessExitNonZero as exc:
            logger.warning("encode: %s", exc)
            raise EncodeFailed("encode failed", details=exc.details) from exc

        try:
            return await read_file(output)
        except OSError as exc:
            raise EncodeFailed("read wav failed", details=str(exc)) from exc

    async def decode(self, data: bytes | None) -> DecodeResult:
        if data is None:
            raise ValidationError("file is required (audio/wav)")
        require_tool(self._tools.from_file, FROM_FILE_NAME)

        try:
            async with temp_workspace(self._tools.workspace_dir) as workspace:
                wav_path = workspace / DECODE_INPUT_NAME
                await write_file(wav_path, data)
                try:
                    result = await run_tool([self._tools.from_file, wav_path])
                except SpawnFailed as exc:
                    logger.warning("decode: %s", exc)
                    raise DecodeFailed(exc.message, details=exc.details) from exc
        except OSError as exc:
            logger.warning("decode: workspace error: %s", exc)
            raise DecodeFailed("workspace unavailable", details=str(exc)) from exc

        if not result.ok and not result.stdout.strip():
            # Died before printing any report: nothing to salvage.
            raise DecodeFailed("decode failed", details=result.stderr)

        decoded = decode_result_from_report(result.stdout)
        logger.info("decode: %d bytes -> found=%s (exit %s)", len(data), decoded.found, result.returncode)
        return decoded


__all__ = ["BatchCodecGateway", "build_encode_argv"]
