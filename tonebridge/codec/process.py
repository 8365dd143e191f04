"""One-shot subprocess execution with captured output."""

from __future__ import annotations

import os
import asyncio
import logging
import contextlib
from pathlib import Path
from collections.abc import Sequence

from tonebridge.state.requests import ToolResult
from tonebridge.errors import SpawnFailed, SubprocessExitNonZero

logger = logging.getLogger(__name__)

Argv = Sequence[str | os.PathLike]


def _tool_name(argv: Argv) -> str:
    return Path(str(argv[0])).name if argv else "<empty>"


async def spawn(argv: Argv, **kwargs) -> asyncio.subprocess.Process:
    """Start a subprocess, translating OS-level launch errors into SpawnFailed."""
    if not argv:
        raise SpawnFailed("empty command line")
    try:
        return await asyncio.create_subprocess_exec(*(str(arg) for arg in argv), **kwargs)
    except OSError as exc:
        name = _tool_name(argv)
        raise SpawnFailed(f"failed to start {name}: {exc.strerror or exc}", details=str(exc)) from exc


async def run_tool(argv: Argv, *, stdin: bytes | None = None) -> ToolResult:
    """Run a tool to completion and capture stdout/stderr as text.

    The process is killed and reaped if the awaiting task is cancelled.
    """
    process = await spawn(
        argv,
        stdin=asyncio.subprocess.PIPE if stdin is not None else asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    logger.debug("spawned %s pid=%s", _tool_name(argv), process.pid)
    try:
        stdout, stderr = await process.communicate(stdin)
    finally:
        if process.returncode is None:
            with contextlib.suppress(ProcessLookupError):
                process.kill()
            with contextlib.suppress(Exception):
                await process.wait()

    result = ToolResult(
        returncode=int(process.returncode if process.returncode is not None else -1),
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
    )
    logger.debug("%s exited with code %s", _tool_name(argv), result.returncode)
    return result


def check_result(result: ToolResult, name: str) -> ToolResult:
    if not result.ok:
        raise SubprocessExitNonZero(
            f"{name} exited with code {result.returncode}",
            details=result.stderr,
            returncode=result.returncode,
        )
    return result


__all__ = ["check_result", "run_tool", "spawn"]
