"""Environment parsing for runtime settings.

Names and defaults live in ``domsync/config/*``; this is the only place the
environment is read. Callers may override the subscribe-time knobs per client.
"""

from __future__ import annotations

import os

from domsync.state.settings import SyncSettings, EchoSettings, ReconnectSettings, WebSocketSettings
from domsync.config.sync import (
    ENV_RECONNECT,
    ENV_ECHO_TTL_MS,
    DEFAULT_RECONNECT,
    DEFAULT_ECHO_TTL_MS,
    ENV_ECHO_SWEEP_INTERVAL_MS,
    ENV_RECONNECT_MAX_DELAY_MS,
    DEFAULT_RECONNECT_MAX_DELAY_MS,
    ENV_RECONNECT_INITIAL_DELAY_MS,
    DEFAULT_RECONNECT_INITIAL_DELAY_MS,
)
from domsync.config.websocket import (
    ENV_WS_OPEN_TIMEOUT_S,
    ENV_WS_PING_TIMEOUT_S,
    ENV_WS_PING_INTERVAL_S,
    ENV_WS_MAX_MESSAGE_BYTES,
    DEFAULT_WS_OPEN_TIMEOUT_S,
    DEFAULT_WS_PING_TIMEOUT_S,
    DEFAULT_WS_PING_INTERVAL_S,
    DEFAULT_WS_MAX_MESSAGE_BYTES,
)


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except Exception:
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except Exception:
        return default


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _load_reconnect_settings(
    *,
    reconnect: bool | None,
    initial_delay_ms: int | None,
    max_delay_ms: int | None,
) -> ReconnectSettings:
    enabled = _bool_env(ENV_RECONNECT, DEFAULT_RECONNECT) if reconnect is None else bool(reconnect)
    initial = (
        _int_env(ENV_RECONNECT_INITIAL_DELAY_MS, DEFAULT_RECONNECT_INITIAL_DELAY_MS)
        if initial_delay_ms is None
        else int(initial_delay_ms)
    )
    initial = max(0, initial)
    ceiling = _int_env(ENV_RECONNECT_MAX_DELAY_MS, DEFAULT_RECONNECT_MAX_DELAY_MS) if max_delay_ms is None else int(max_delay_ms)
    return ReconnectSettings(enabled=enabled, initial_delay_ms=initial, max_delay_ms=max(initial, ceiling))


def _load_echo_settings(*, echo_ttl_ms: int | None) -> EchoSettings:
    ttl = _int_env(ENV_ECHO_TTL_MS, DEFAULT_ECHO_TTL_MS) if echo_ttl_ms is None else int(echo_ttl_ms)
    ttl = max(0, ttl)
    sweep = _int_env(ENV_ECHO_SWEEP_INTERVAL_MS, ttl)
    if echo_ttl_ms is not None or sweep <= 0:
        # An explicit TTL keeps the sweep on the same cadence.
        sweep = ttl
    return EchoSettings(ttl_ms=ttl, sweep_interval_ms=max(0, sweep))


def _load_websocket_settings() -> WebSocketSettings:
    return WebSocketSettings(
        ping_interval_s=max(0.0, _float_env(ENV_WS_PING_INTERVAL_S, DEFAULT_WS_PING_INTERVAL_S)),
        ping_timeout_s=max(0.0, _float_env(ENV_WS_PING_TIMEOUT_S, DEFAULT_WS_PING_TIMEOUT_S)),
        open_timeout_s=max(0.0, _float_env(ENV_WS_OPEN_TIMEOUT_S, DEFAULT_WS_OPEN_TIMEOUT_S)),
        max_message_bytes=max(1, _int_env(ENV_WS_MAX_MESSAGE_BYTES, DEFAULT_WS_MAX_MESSAGE_BYTES)),
    )


def load_settings(
    *,
    reconnect: bool | None = None,
    initial_delay_ms: int | None = None,
    max_delay_ms: int | None = None,
    echo_ttl_ms: int | None = None,
) -> SyncSettings:
    return SyncSettings(
        reconnect=_load_reconnect_settings(
            reconnect=reconnect,
            initial_delay_ms=initial_delay_ms,
            max_delay_ms=max_delay_ms,
        ),
        echo=_load_echo_settings(echo_ttl_ms=echo_ttl_ms),
        websocket=_load_websocket_settings(),
    )


__all__ = ["load_settings"]
