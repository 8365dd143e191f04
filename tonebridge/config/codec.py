"""Codec report parsing, workspace layout and conversion constants."""

from __future__ import annotations

# ggwave-from-file / ggwave-cli print e.g. "Decoded message with length 5: 'hello'".
DECODED_MESSAGE_PATTERN = r"Decoded message[^:]*:\s*'([^']*)'"

# ggwave-cli reports successful receptions on stderr.
RECEIVED_MESSAGE_PATTERN = r"Received sound data successfully:\s*'([^']+)'"

WORKSPACE_PREFIX = "ggwave-"
ENCODE_OUTPUT_NAME = "out.wav"
DECODE_INPUT_NAME = "in.wav"
CHUNK_INPUT_NAME = "in.webm"
CHUNK_CONVERTED_NAME = "in.wav"

WAV_MEDIA_TYPE = "audio/wav"
WAV_FILENAME = "message.wav"

ENV_CONVERSION_SAMPLE_RATE = "CONVERSION_SAMPLE_RATE"
ENV_CONVERSION_CHANNELS = "CONVERSION_CHANNELS"

# ggwave decodes mono PCM at 48 kHz.
DEFAULT_CONVERSION_SAMPLE_RATE = 48000
DEFAULT_CONVERSION_CHANNELS = 1

NO_MESSAGE_PLACEHOLDER = "(no message detected)"

# Appended to a relayed output line cut at the per-line byte limit.
TRUNCATED_LINE_MARKER = " [truncated]"

__all__ = [
    "CHUNK_CONVERTED_NAME",
    "CHUNK_INPUT_NAME",
    "DECODED_MESSAGE_PATTERN",
    "DECODE_INPUT_NAME",
    "DEFAULT_CONVERSION_CHANNELS",
    "DEFAULT_CONVERSION_SAMPLE_RATE",
    "ENCODE_OUTPUT_NAME",
    "ENV_CONVERSION_CHANNELS",
    "ENV_CONVERSION_SAMPLE_RATE",
    "NO_MESSAGE_PLACEHOLDER",
    "RECEIVED_MESSAGE_PATTERN",
    "TRUNCATED_LINE_MARKER",
    "WAV_FILENAME",
    "WAV_MEDIA_TYPE",
    "WORKSPACE_PREFIX",
]
