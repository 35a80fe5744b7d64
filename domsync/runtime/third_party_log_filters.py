"""Log noise filters for third-party libraries."""

from __future__ import annotations

import logging

from domsync.config.logging import SHOW_WEBSOCKETS_LOGS


def configure() -> None:
    # websockets traces every frame and keepalive at DEBUG.
    if not SHOW_WEBSOCKETS_LOGS:
        logging.getLogger("websockets").setLevel(logging.WARNING)
        logging.getLogger("websockets.client").setLevel(logging.WARNING)


__all__ = ["configure"]
