"""Lazy availability checks for the configured codec executables."""

from __future__ import annotations

import os
from pathlib import Path

from tonebridge.errors import ToolUnavailable
from tonebridge.state.settings import ToolSettings
from tonebridge.config.tools import CLI_NAME, TO_FILE_NAME, FROM_FILE_NAME


def is_executable(path: str | Path) -> bool:
    return os.access(path, os.X_OK)


def require_tool(path: str | Path, name: str) -> None:
    # Checked on every call so a rebuilt binary is picked up without a restart.
    if not is_executable(path):
        raise ToolUnavailable(f"{name} binary not found. Build it first.", details=str(path))


def tool_health(tools: ToolSettings) -> dict[str, bool]:
    return {
        "toFile": is_executable(tools.to_file),
        "fromFile": is_executable(tools.from_file),
        "cli": is_executable(tools.cli),
    }


__all__ = ["CLI_NAME", "FROM_FILE_NAME", "TO_FILE_NAME", "is_executable", "require_tool", "tool_health"]
