from .codec import router, codec_error_handler, request_validation_handler
from .websocket import handle_websocket_connection

__all__ = ["codec_error_handler", "handle_websocket_connection", "request_validation_handler", "router"]
