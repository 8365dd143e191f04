"""Microphone capture configuration (env names and defaults only)."""

from __future__ import annotations

ENV_CAPTURE_SAMPLE_RATE = "CAPTURE_SAMPLE_RATE"
ENV_CAPTURE_CHANNELS = "CAPTURE_CHANNELS"
ENV_CAPTURE_CHUNK_SECONDS = "CAPTURE_CHUNK_SECONDS"
ENV_CAPTURE_LEVEL_PERIOD_S = "CAPTURE_LEVEL_PERIOD_S"
ENV_CAPTURE_DEVICE = "CAPTURE_DEVICE"

DEFAULT_CAPTURE_SAMPLE_RATE = 48000
DEFAULT_CAPTURE_CHANNELS = 1
# Longer chunks give the decoder a whole tone burst more often.
DEFAULT_CAPTURE_CHUNK_SECONDS = 2.0
DEFAULT_CAPTURE_LEVEL_PERIOD_S = 0.05
DEFAULT_CAPTURE_BLOCKSIZE = 1024
DEFAULT_CAPTURE_LEVEL_WINDOW = 1024
DEFAULT_CAPTURE_LEVEL_QUEUE_MAX = 64

CAPTURE_CHUNK_FORMAT = "FLAC"
CAPTURE_CHUNK_FILENAME = "chunk.flac"
CAPTURE_CHUNK_MEDIA_TYPE = "audio/flac"

__all__ = [
    "CAPTURE_CHUNK_FILENAME",
    "CAPTURE_CHUNK_FORMAT",
    "CAPTURE_CHUNK_MEDIA_TYPE",
    "DEFAULT_CAPTURE_BLOCKSIZE",
    "DEFAULT_CAPTURE_CHANNELS",
    "DEFAULT_CAPTURE_CHUNK_SECONDS",
    "DEFAULT_CAPTURE_LEVEL_PERIOD_S",
    "DEFAULT_CAPTURE_LEVEL_QUEUE_MAX",
    "DEFAULT_CAPTURE_LEVEL_WINDOW",
    "DEFAULT_CAPTURE_SAMPLE_RATE",
    "ENV_CAPTURE_CHANNELS",
    "ENV_CAPTURE_CHUNK_SECONDS",
    "ENV_CAPTURE_DEVICE",
    "ENV_CAPTURE_LEVEL_PERIOD_S",
    "ENV_CAPTURE_SAMPLE_RATE",
]
