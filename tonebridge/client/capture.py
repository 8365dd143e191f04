"""Microphone capture split into compressed chunks plus a live level feed.

The PortAudio callback runs on its own thread; it only copies the block and
hands it to the event loop. Chunking, FLAC encoding and level tracking all
happen on the loop, so chunk order is capture order.
"""

from __future__ import annotations

import io
import time
import asyncio
import logging
import contextlib
from typing import Any
from collections.abc import Callable, AsyncIterator

import numpy as np
import soundfile as sf

from tonebridge.state.capture import CaptureChunk
from tonebridge.state.settings import CaptureSettings
from tonebridge.config.capture import CAPTURE_CHUNK_FORMAT

from .audio_backend import require_sounddevice

logger = logging.getLogger(__name__)

StreamFactory = Callable[..., Any]


def rms_level(samples: np.ndarray) -> float:
    if samples.size == 0:
        return 0.0
    level = float(np.sqrt(np.mean(np.square(samples, dtype=np.float64))))
    return min(1.0, level)


def encode_chunk(samples: np.ndarray, sample_rate: int) -> bytes:
    buffer = io.BytesIO()
    sf.write(buffer, samples, sample_rate, format=CAPTURE_CHUNK_FORMAT, subtype="PCM_16")
    return buffer.getvalue()


def _default_stream_factory(**kwargs) -> Any:
    return require_sounddevice().InputStream(**kwargs)


class CaptureSource:
    def __init__(self, settings: CaptureSettings, *, stream_factory: StreamFactory | None = None) -> None:
        self._settings = settings
        self._stream_factory = stream_factory or _default_stream_factory
        self._chunk_frames = max(1, int(round(settings.sample_rate * settings.chunk_seconds)))

        self._loop: asyncio.AbstractEventLoop | None = None
        self._stream: Any = None
        self._started = False
        self._finished = False

        self._pending: list[np.ndarray] = []
        self._pending_frames = 0
        self._window = np.zeros(0, dtype=np.float32)
        self._seq = 0

        self._chunks: asyncio.Queue[CaptureChunk | None] = asyncio.Queue()
        self._levels: asyncio.Queue[float | None] = asyncio.Queue(maxsize=max(1, settings.level_queue_max))
        self._level_task: asyncio.Task | None = None
        self._chunks_taken = False

    @property
    def running(self) -> bool:
        return self._started and not self._finished

    async def __aenter__(self) -> CaptureSource:
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()

    async def start(self) -> None:
        if self._started:
            raise RuntimeError("capture already started")
        self._loop = asyncio.get_running_loop()
        stream = self._stream_factory(
            samplerate=self._settings.sample_rate,
            channels=self._settings.channels,
            blocksize=self._settings.blocksize,
            device=self._settings.device,
            dtype="float32",
            callback=self._callback,
        )
        try:
            stream.start()
        except Exception:
            with contextlib.suppress(Exception):
                stream.close()
            raise

        self._stream = stream
        self._started = True
        self._level_task = asyncio.create_task(self._emit_levels())
        logger.info(
            "capture started: %d Hz x%d, %.1fs chunks",
            self._settings.sample_rate,
            self._settings.channels,
            self._settings.chunk_seconds,
        )

    async def stop(self) -> None:
        if not self._started or self._finished:
            return
        stream, self._stream = self._stream, None
        if stream is not None:
            with contextlib.suppress(Exception):
                stream.stop()
            with contextlib.suppress(Exception):
                stream.close()
        # Let blocks already handed over by the callback land before flushing.
        await asyncio.sleep(0)

        if self._pending_frames:
            self._emit_chunk(self._take(self._pending_frames))
        self._finished = True

        if self._level_task is not None:
            self._level_task.cancel()
            await asyncio.gather(self._level_task, return_exceptions=True)
            self._level_task = None

        self._chunks.put_nowait(None)
        self._push_level(None)
        logger.info("capture stopped after %d chunks", self._seq)

    def chunks(self) -> AsyncIterator[CaptureChunk]:
        if self._chunks_taken:
            raise RuntimeError("capture chunks can only be consumed once")
        self._chunks_taken = True
        return self._iter_chunks()

    async def levels(self) -> AsyncIterator[float]:
        while True:
            level = await self._levels.get()
            if level is None:
                return
            yield level

    async def _iter_chunks(self) -> AsyncIterator[CaptureChunk]:
        while True:
            chunk = await self._chunks.get()
            if chunk is None:
                return
            yield chunk

    def _callback(self, indata, frames, time_info, status) -> None:
        if status:
            logger.debug("capture status: %s", status)
        loop = self._loop
        if loop is None or self._finished:
            return
        with contextlib.suppress(RuntimeError):
            loop.call_soon_threadsafe(self._ingest, np.array(indata, dtype=np.float32, copy=True))

    def _ingest(self, block: np.ndarray) -> None:
        if self._finished:
            return
        if block.ndim == 1:
            block = block.reshape(-1, 1)
        self._update_window(block)
        self._pending.append(block)
        self._pending_frames += len(block)
        while self._pending_frames >= self._chunk_frames:
            self._emit_chunk(self._take(self._chunk_frames))

    def _take(self, frames: int) -> np.ndarray:
        buffered = np.concatenate(self._pending, axis=0)
        head, tail = buffered[:frames], buffered[frames:]
        self._pending = [tail] if len(tail) else []
        self._pending_frames = len(tail)
        return head

    def _emit_chunk(self, samples: np.ndarray) -> None:
        chunk = CaptureChunk(
            seq=self._seq,
            timestamp=time.time(),
            data=encode_chunk(samples, self._settings.sample_rate),
            level=rms_level(samples),
            sample_rate=self._settings.sample_rate,
            frames=len(samples),
        )
        self._seq += 1
        self._chunks.put_nowait(chunk)

    def _update_window(self, block: np.ndarray) -> None:
        mono = block.mean(axis=1)
        self._window = np.concatenate([self._window, mono])[-self._settings.level_window :]

    async def _emit_levels(self) -> None:
        while True:
            await asyncio.sleep(self._settings.level_period_s)
            self._push_level(rms_level(self._window))

    def _push_level(self, level: float | None) -> None:
        # Slow consumers see the newest levels; the oldest sample is dropped.
        if self._levels.full():
            with contextlib.suppress(asyncio.QueueEmpty):
                self._levels.get_nowait()
        self._levels.put_nowait(level)


__all__ = ["CaptureSource", "encode_chunk", "rms_level"]
