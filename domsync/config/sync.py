"""Reconnect and echo-suppression settings: env var names and defaults.

Values are parsed once, by ``domsync.runtime.settings_loader``.
"""

from __future__ import annotations

ENV_RECONNECT = "DOMSYNC_RECONNECT"
ENV_RECONNECT_INITIAL_DELAY_MS = "DOMSYNC_RECONNECT_INITIAL_DELAY_MS"
ENV_RECONNECT_MAX_DELAY_MS = "DOMSYNC_RECONNECT_MAX_DELAY_MS"
ENV_ECHO_TTL_MS = "DOMSYNC_ECHO_TTL_MS"
# Sweep runs on the TTL cadence unless this is set.
ENV_ECHO_SWEEP_INTERVAL_MS = "DOMSYNC_ECHO_SWEEP_INTERVAL_MS"

DEFAULT_RECONNECT = True
DEFAULT_RECONNECT_INITIAL_DELAY_MS = 1000
# Backoff doubles up to this ceiling and stays there; attempts are unbounded.
DEFAULT_RECONNECT_MAX_DELAY_MS = 30000
DEFAULT_ECHO_TTL_MS = 5000

__all__ = [
    "DEFAULT_ECHO_TTL_MS",
    "DEFAULT_RECONNECT",
    "DEFAULT_RECONNECT_INITIAL_DELAY_MS",
    "DEFAULT_RECONNECT_MAX_DELAY_MS",
    "ENV_ECHO_SWEEP_INTERVAL_MS",
    "ENV_ECHO_TTL_MS",
    "ENV_RECONNECT",
    "ENV_RECONNECT_INITIAL_DELAY_MS",
    "ENV_RECONNECT_MAX_DELAY_MS",
]
