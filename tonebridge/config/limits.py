"""Admission control configuration (env names and defaults only)."""

from __future__ import annotations

ENV_MAX_CONCURRENT_SESSIONS = "MAX_CONCURRENT_SESSIONS"

# Each session owns one ggwave-cli process.
DEFAULT_MAX_CONCURRENT_SESSIONS = 32

__all__ = [
    "DEFAULT_MAX_CONCURRENT_SESSIONS",
    "ENV_MAX_CONCURRENT_SESSIONS",
]
