"""Log noise filters for third-party libraries.

Only logger levels are adjusted here; every client chunk upload would
otherwise log a request line from httpx and a frame trace from websockets.
"""

from __future__ import annotations

import os
import logging

from tonebridge.config.logging import ENV_SHOW_THIRD_PARTY_LOGS

_NOISY_LOGGERS = ("httpx", "httpcore", "websockets", "multipart", "python_multipart")


def configure() -> None:
    if (os.getenv(ENV_SHOW_THIRD_PARTY_LOGS) or "").strip().lower() in {"1", "true", "yes"}:
        return
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


__all__ = ["configure"]
