"""Client-side relay configuration (env names and defaults only)."""

from __future__ import annotations

ENV_TONEBRIDGE_SERVER = "TONEBRIDGE_SERVER"
ENV_CLIENT_TIMEOUT_S = "CLIENT_TIMEOUT_S"
ENV_SCRIPT_PAUSE_S = "SCRIPT_PAUSE_S"

DEFAULT_TONEBRIDGE_SERVER = "http://localhost:5055"
DEFAULT_CLIENT_TIMEOUT_S = 60.0
# Gap between scripted lines so consecutive tone bursts stay separable.
DEFAULT_SCRIPT_PAUSE_S = 0.3

__all__ = [
    "DEFAULT_CLIENT_TIMEOUT_S",
    "DEFAULT_SCRIPT_PAUSE_S",
    "DEFAULT_TONEBRIDGE_SERVER",
    "ENV_CLIENT_TIMEOUT_S",
    "ENV_SCRIPT_PAUSE_S",
    "ENV_TONEBRIDGE_SERVER",
]
