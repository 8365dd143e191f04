"""Codec executable configuration (env names and defaults only)."""

from __future__ import annotations

ENV_GGWAVE_BIN_DIR = "GGWAVE_BIN_DIR"
ENV_GGWAVE_TO_FILE = "GGWAVE_TO_FILE"
ENV_GGWAVE_FROM_FILE = "GGWAVE_FROM_FILE"
ENV_GGWAVE_CLI = "GGWAVE_CLI"
ENV_GGWAVE_CLI_PROTOCOL = "GGWAVE_CLI_PROTOCOL"
ENV_FFMPEG_BIN = "FFMPEG_BIN"
ENV_WORKSPACE_DIR = "WORKSPACE_DIR"

DEFAULT_GGWAVE_BIN_DIR = "/usr/local/bin"
TO_FILE_NAME = "ggwave-to-file"
FROM_FILE_NAME = "ggwave-from-file"
CLI_NAME = "ggwave-cli"

# Protocol 1 is ggwave's "Fast" audible protocol.
DEFAULT_GGWAVE_CLI_PROTOCOL = 1

# Resolved through PATH at spawn time.
DEFAULT_FFMPEG_BIN = "ffmpeg"

__all__ = [
    "CLI_NAME",
    "DEFAULT_FFMPEG_BIN",
    "DEFAULT_GGWAVE_BIN_DIR",
    "DEFAULT_GGWAVE_CLI_PROTOCOL",
    "ENV_FFMPEG_BIN",
    "ENV_GGWAVE_BIN_DIR",
    "ENV_GGWAVE_CLI",
    "ENV_GGWAVE_CLI_PROTOCOL",
    "ENV_GGWAVE_FROM_FILE",
    "ENV_GGWAVE_TO_FILE",
    "ENV_WORKSPACE_DIR",
    "FROM_FILE_NAME",
    "TO_FILE_NAME",
]
