"""Connection state machine states."""

from __future__ import annotations

from enum import Enum

from domsync.config.websocket import WS_READY_OPEN, WS_READY_CLOSED, WS_READY_CONNECTING


class ConnectionState(str, Enum):
    """IDLE -> CONNECTING -> OPEN -> CLOSED, with RECONNECT_SCHEDULED entered only from CLOSED."""

    IDLE = "idle"
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"
    RECONNECT_SCHEDULED = "reconnect_scheduled"

    @property
    def ready_state(self) -> int:
        if self is ConnectionState.OPEN:
            return WS_READY_OPEN
        if self in {ConnectionState.IDLE, ConnectionState.CONNECTING}:
            return WS_READY_CONNECTING
        return WS_READY_CLOSED


__all__ = ["ConnectionState"]
