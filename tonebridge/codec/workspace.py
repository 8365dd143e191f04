"""Request-scoped temporary directories for codec intermediates."""

from __future__ import annotations

import shutil
import asyncio
import logging
import tempfile
from pathlib import Path
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from tonebridge.config.codec import WORKSPACE_PREFIX

logger = logging.getLogger(__name__)


@asynccontextmanager
async def temp_workspace(root: Path | None = None) -> AsyncIterator[Path]:
    """Create a private directory and remove it on every exit path."""
    path = Path(await asyncio.to_thread(tempfile.mkdtemp, prefix=WORKSPACE_PREFIX, dir=root))
    logger.debug("workspace created: %s", path)
    try:
        yield path
    finally:
        await asyncio.to_thread(shutil.rmtree, path, ignore_errors=True)
        logger.debug("workspace removed: %s", path)


async def write_file(path: Path, data: bytes) -> None:
    await asyncio.to_thread(path.write_bytes, data)


async def read_file(path: Path) -> bytes:
    return await asyncio.to_thread(path.read_bytes)


__all__ = ["read_file", "temp_workspace", "write_file"]
