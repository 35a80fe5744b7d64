"""Suppress inbound updates that merely echo this client's own mutations."""

from __future__ import annotations

import time
import asyncio
import logging
import contextlib
import collections
from collections.abc import Callable

from domsync.state.echo import EchoEntry

logger = logging.getLogger(__name__)

TimeFn = Callable[[], float]


class EchoTracker:
    """Remember recently acknowledged local mutations for a fixed TTL.

    Entries are keyed by exact ``(address, METHOD)``. A matching inbound
    update consumes one entry, so each local mutation suppresses at most one
    echo. Expired entries are dropped by ``sweep``, which the background task
    runs every ``sweep_interval_ms``. A TTL of 0 disables suppression.
    """

    def __init__(
        self,
        *,
        ttl_ms: int,
        sweep_interval_ms: int | None = None,
        now_fn: TimeFn | None = None,
    ) -> None:
        self.ttl_ms = max(0, int(ttl_ms))
        self.sweep_interval_ms = max(0, int(self.ttl_ms if sweep_interval_ms is None else sweep_interval_ms))
        self._now = now_fn or time.monotonic
        self._entries: dict[tuple[str, str], collections.deque[EchoEntry]] = {}
        self._task: asyncio.Task | None = None

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._entries.values())

    def _expired(self, entry: EchoEntry, now: float) -> bool:
        return (now - entry.recorded_at) * 1000.0 >= self.ttl_ms

    def record(self, address: str, method: str, content: str | None = None) -> EchoEntry:
        entry = EchoEntry(address=address, method=method.upper(), recorded_at=self._now(), content=content)
        self._entries.setdefault((entry.address, entry.method), collections.deque()).append(entry)
        logger.debug("tracked local change %s %s", entry.method, address)
        return entry

    def is_echo(self, address: str, method: str) -> bool:
        key = (address, method.upper())
        entries = self._entries.get(key)
        if not entries:
            return False

        now = self._now()
        while entries and self._expired(entries[0], now):
            entries.popleft()
        if not entries:
            del self._entries[key]
            return False

        entries.popleft()
        if not entries:
            del self._entries[key]
        return True

    def sweep(self) -> int:
        now = self._now()
        evicted = 0
        for key in list(self._entries):
            entries = self._entries[key]
            while entries and self._expired(entries[0], now):
                entries.popleft()
                evicted += 1
            if not entries:
                del self._entries[key]
        if evicted:
            logger.debug("echo sweep evicted %d entries", evicted)
        return evicted

    def configure(self, *, ttl_ms: int) -> None:
        self.ttl_ms = max(0, int(ttl_ms))
        self.sweep_interval_ms = self.ttl_ms

    def start(self) -> asyncio.Task | None:
        if (self._task is None or self._task.done()) and self.sweep_interval_ms > 0:
            self._task = asyncio.create_task(self._sweep_loop())
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    async def _sweep_loop(self) -> None:
        try:
            while self.sweep_interval_ms > 0:
                await asyncio.sleep(self.sweep_interval_ms / 1000.0)
                self.sweep()
        except asyncio.CancelledError:
            return


__all__ = ["EchoTracker"]
