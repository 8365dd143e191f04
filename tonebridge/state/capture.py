"""Captured audio segments handed to the streaming decode pipeline."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CaptureChunk:
    seq: int
    timestamp: float
    data: bytes
    level: float
    sample_rate: int
    frames: int

    @property
    def duration_s(self) -> float:
        return self.frames / float(self.sample_rate) if self.sample_rate else 0.0


__all__ = ["CaptureChunk"]
