"""WebSocket relay protocol configuration and constants."""

from __future__ import annotations

# Frame keys
WS_KEY_TYPE = "type"
WS_KEY_TEXT = "text"
WS_KEY_DATA = "data"
WS_KEY_MESSAGE = "message"
WS_KEY_CODE = "code"

# Frame types
WS_TYPE_SEND = "send"
WS_TYPE_STDOUT = "stdout"
WS_TYPE_STDERR = "stderr"
WS_TYPE_DECODED = "decoded"
WS_TYPE_ERROR = "error"

# Close codes
WS_CLOSE_NORMAL_CODE = 1000
WS_CLOSE_INTERNAL_CODE = 1011
WS_CLOSE_BUSY_CODE = 4002

WS_CLOSE_CLI_UNAVAILABLE_REASON = "ggwave-cli not available"
WS_CLOSE_CLI_EXIT_REASON_PREFIX = "cli_exit_"

# Errors (error frame code values)
WS_ERROR_SERVER_AT_CAPACITY = "server_at_capacity"
WS_ERROR_CLI_UNAVAILABLE = "cli_unavailable"

ENV_WS_ENDPOINT_PATH = "WS_ENDPOINT_PATH"
ENV_WS_OUTBOUND_QUEUE_MAX = "WS_OUTBOUND_QUEUE_MAX"

DEFAULT_WS_ENDPOINT_PATH = "/ws/cli"
# 0 means unbounded; the relay never drops subprocess output.
DEFAULT_WS_OUTBOUND_QUEUE_MAX = 0

__all__ = [
    "DEFAULT_WS_ENDPOINT_PATH",
    "DEFAULT_WS_OUTBOUND_QUEUE_MAX",
    "ENV_WS_ENDPOINT_PATH",
    "ENV_WS_OUTBOUND_QUEUE_MAX",
    "WS_CLOSE_BUSY_CODE",
    "WS_CLOSE_CLI_EXIT_REASON_PREFIX",
    "WS_CLOSE_CLI_UNAVAILABLE_REASON",
    "WS_CLOSE_INTERNAL_CODE",
    "WS_CLOSE_NORMAL_CODE",
    "WS_ERROR_CLI_UNAVAILABLE",
    "WS_ERROR_SERVER_AT_CAPACITY",
    "WS_KEY_CODE",
    "WS_KEY_DATA",
    "WS_KEY_MESSAGE",
    "WS_KEY_TEXT",
    "WS_KEY_TYPE",
    "WS_TYPE_DECODED",
    "WS_TYPE_ERROR",
    "WS_TYPE_SEND",
    "WS_TYPE_STDERR",
    "WS_TYPE_STDOUT",
]
