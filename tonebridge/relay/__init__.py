from .session import SessionRelay
from .registry import SessionRegistry

__all__ = ["SessionRegistry", "SessionRelay"]
