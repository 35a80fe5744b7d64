from .echo import EchoEntry
from .reconnect import ReconnectPolicy
from .callbacks import SubscriptionCallbacks
from .connection_state import ConnectionState
from .update import Method, Update, ApplyAction, ApplyResult, DecodeFailure
from .settings import EchoSettings, SyncSettings, ReconnectSettings, WebSocketSettings

__all__ = [
    "ApplyAction",
    "ApplyResult",
    "ConnectionState",
    "DecodeFailure",
    "EchoEntry",
    "EchoSettings",
    "Method",
    "ReconnectPolicy",
    "ReconnectSettings",
    "SubscriptionCallbacks",
    "SyncSettings",
    "Update",
    "WebSocketSettings",
]
