"""Runtime dependency bundle built once per server lifespan."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from tonebridge.state.settings import AppSettings
    from tonebridge.relay.registry import SessionRegistry
    from tonebridge.codec.batch import BatchCodecGateway
    from tonebridge.codec.streaming import StreamingDecodeGateway


@dataclass(slots=True)
class RuntimeDeps:
    settings: AppSettings
    sessions: SessionRegistry
    batch: BatchCodecGateway
    streaming: StreamingDecodeGateway

    async def shutdown(self) -> None:
        try:
            await self.sessions.close_all()
        except Exception:
            logger.exception("runtime shutdown failed")


__all__ = ["RuntimeDeps"]
