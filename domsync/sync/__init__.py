from .echo import EchoTracker
from .client import SyncClient
from .connection import Connection
from .manager import ConnectionManager
from .subscription import Subscription
from .frames import FrameStats, process_frame

__all__ = [
    "Connection",
    "ConnectionManager",
    "EchoTracker",
    "FrameStats",
    "Subscription",
    "SyncClient",
    "process_frame",
]
