from .batch import BatchCodecGateway
from .streaming import StreamingDecodeGateway

__all__ = ["BatchCodecGateway", "StreamingDecodeGateway"]
