"""Lazy access to the PortAudio bindings.

`sounddevice` raises OSError at import time on hosts without PortAudio. The
HTTP-only parts of the client must keep working there, so the failure is
deferred to the first call that actually needs an audio device.
"""

from __future__ import annotations

try:
    import sounddevice as sd
except OSError as exc:
    sd = None
    _IMPORT_ERROR: OSError | None = exc
else:
    _IMPORT_ERROR = None


def require_sounddevice():
    if sd is None:
        raise RuntimeError(f"audio device support unavailable: {_IMPORT_ERROR}")
    return sd


__all__ = ["require_sounddevice"]
