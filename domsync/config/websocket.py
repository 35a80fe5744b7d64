"""WebSocket channel configuration and constants."""

from __future__ import annotations

ENV_WS_PING_INTERVAL_S = "DOMSYNC_WS_PING_INTERVAL_S"
ENV_WS_PING_TIMEOUT_S = "DOMSYNC_WS_PING_TIMEOUT_S"
ENV_WS_OPEN_TIMEOUT_S = "DOMSYNC_WS_OPEN_TIMEOUT_S"
ENV_WS_MAX_MESSAGE_BYTES = "DOMSYNC_WS_MAX_MESSAGE_BYTES"

DEFAULT_WS_PING_INTERVAL_S = 20.0
DEFAULT_WS_PING_TIMEOUT_S = 20.0
DEFAULT_WS_OPEN_TIMEOUT_S = 10.0
DEFAULT_WS_MAX_MESSAGE_BYTES = 16 * 1024 * 1024

# Close codes
WS_CLOSE_CLIENT_REQUEST_CODE = 1000
WS_CLOSE_CLIENT_REQUEST_REASON = "client closed"
WS_CLOSE_RECONNECT_REASON = "client reconnect"

# WebSocket-style readyState values exposed on subscriptions
WS_READY_CONNECTING = 0
WS_READY_OPEN = 1
WS_READY_CLOSED = 3

__all__ = [
    "DEFAULT_WS_MAX_MESSAGE_BYTES",
    "DEFAULT_WS_OPEN_TIMEOUT_S",
    "DEFAULT_WS_PING_INTERVAL_S",
    "DEFAULT_WS_PING_TIMEOUT_S",
    "ENV_WS_MAX_MESSAGE_BYTES",
    "ENV_WS_OPEN_TIMEOUT_S",
    "ENV_WS_PING_INTERVAL_S",
    "ENV_WS_PING_TIMEOUT_S",
    "WS_CLOSE_CLIENT_REQUEST_CODE",
    "WS_CLOSE_CLIENT_REQUEST_REASON",
    "WS_CLOSE_RECONNECT_REASON",
    "WS_READY_CLOSED",
    "WS_READY_CONNECTING",
    "WS_READY_OPEN",
]
