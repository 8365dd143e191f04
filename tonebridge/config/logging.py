"""Logging configuration."""

from __future__ import annotations

import os

LOG_LEVEL = (os.getenv("LOG_LEVEL") or "INFO").strip().upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

ENV_SHOW_THIRD_PARTY_LOGS = "SHOW_THIRD_PARTY_LOGS"

__all__ = ["ENV_SHOW_THIRD_PARTY_LOGS", "LOG_FORMAT", "LOG_LEVEL"]
