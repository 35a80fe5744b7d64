"""Runtime settings (dataclasses only)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ReconnectSettings:
    enabled: bool
    initial_delay_ms: int
    max_delay_ms: int


@dataclass(frozen=True, slots=True)
class EchoSettings:
    ttl_ms: int
    sweep_interval_ms: int


@dataclass(frozen=True, slots=True)
class WebSocketSettings:
    ping_interval_s: float
    ping_timeout_s: float
    open_timeout_s: float
    max_message_bytes: int


@dataclass(frozen=True, slots=True)
class SyncSettings:
    reconnect: ReconnectSettings
    echo: EchoSettings
    websocket: WebSocketSettings


__all__ = [
    "EchoSettings",
    "ReconnectSettings",
    "SyncSettings",
    "WebSocketSettings",
]
