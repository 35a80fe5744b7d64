"""Configuration module exports (env var names and defaults only)."""

from .sync import (
    DEFAULT_ECHO_TTL_MS,
    DEFAULT_RECONNECT_MAX_DELAY_MS,
    DEFAULT_RECONNECT_INITIAL_DELAY_MS,
)

__all__ = [
    "DEFAULT_ECHO_TTL_MS",
    "DEFAULT_RECONNECT_INITIAL_DELAY_MS",
    "DEFAULT_RECONNECT_MAX_DELAY_MS",
]
