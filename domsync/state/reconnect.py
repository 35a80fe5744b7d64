"""Exponential reconnect backoff state."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class ReconnectPolicy:
    """Delay bookkeeping for involuntary reconnects.

    ``current_delay_ms`` resets to ``initial_delay_ms`` on every successful
    open and doubles, capped at ``max_delay_ms``, each time a retry is
    scheduled.
    """

    initial_delay_ms: int
    max_delay_ms: int
    current_delay_ms: int = -1
    attempts: int = 0

    def __post_init__(self) -> None:
        self.initial_delay_ms = max(0, int(self.initial_delay_ms))
        self.max_delay_ms = max(self.initial_delay_ms, int(self.max_delay_ms))
        if self.current_delay_ms < 0:
            self.current_delay_ms = self.initial_delay_ms

    def reset(self) -> None:
        self.current_delay_ms = self.initial_delay_ms
        self.attempts = 0

    def advance(self) -> int:
        """Return the delay for the retry being scheduled and grow the next one."""
        delay = self.current_delay_ms
        self.current_delay_ms = min(self.current_delay_ms * 2, self.max_delay_ms)
        self.attempts += 1
        return delay


__all__ = ["ReconnectPolicy"]
