"""Runtime package.

Keep this module dependency-light: importing `tonebridge.runtime.*` from the
client and from unit tests should not pull in the server.
"""

__all__: list[str] = []
