"""Local playback of encoded WAV payloads."""

from __future__ import annotations

import io
import asyncio
import logging

import soundfile as sf

from .audio_backend import require_sounddevice

logger = logging.getLogger(__name__)


def _play_blocking(data: bytes) -> None:
    sd = require_sounddevice()
    samples, sample_rate = sf.read(io.BytesIO(data), dtype="float32")
    logger.debug("playing %d frames at %d Hz", len(samples), sample_rate)
    sd.play(samples, sample_rate)
    sd.wait()


async def play_wav(data: bytes) -> None:
    """Play a WAV payload on the default output device; returns when playback ends."""
    await asyncio.to_thread(_play_blocking, data)


__all__ = ["play_wav"]
