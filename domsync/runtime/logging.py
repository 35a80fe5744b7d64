"""Logging initialization."""

from __future__ import annotations

import logging

from domsync.config.logging import LOG_LEVEL, LOG_FORMAT

from .third_party_log_filters import configure as configure_third_party_logs


def configure_logging(level: str | None = None) -> None:
    configure_third_party_logs()
    logging.basicConfig(level=(level or LOG_LEVEL).upper(), format=LOG_FORMAT)


__all__ = ["configure_logging"]
