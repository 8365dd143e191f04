"""Client library: HTTP codec client, relay session, capture and playback."""

from .api import CodecApiClient
from .session import RelaySessionClient
from .controller import ClientRelayController

__all__ = ["ClientRelayController", "CodecApiClient", "RelaySessionClient"]
