"""Caller-facing handle for one subscription to a resource's update stream."""

from __future__ import annotations

import logging
from typing import Any
from collections.abc import Mapping, Callable, Awaitable

from domsync.errors import SubscriptionClosedError
from domsync.state.callbacks import SubscriptionCallbacks
from domsync.state.connection_state import ConnectionState
from domsync.state.update import Update, ApplyResult, DecodeFailure

from .connection import Connection

logger = logging.getLogger(__name__)


class Subscription:
    """Filter plus callbacks attached to a shared Connection.

    A document-scoped subscription (``address is None``) sees every update on
    its channel. A node-scoped one only sees updates whose address is exactly
    its own. Callbacks run synchronously on the event loop; an exception from
    one is logged and never reaches the frame loop.
    """

    def __init__(
        self,
        connection: Connection,
        *,
        callbacks: SubscriptionCallbacks | None = None,
        address: str | None = None,
        release_fn: Callable[[Subscription], Awaitable[None]] | None = None,
    ) -> None:
        self.connection = connection
        self.callbacks = callbacks or SubscriptionCallbacks()
        self.address = address
        self._release_fn = release_fn
        self._closed = False

    def __repr__(self) -> str:
        scope = self.address or "document"
        return f"Subscription(resource={self.resource!r}, scope={scope!r}, state={self.state.value})"

    @property
    def resource(self) -> str:
        return self.connection.resource

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def state(self) -> ConnectionState:
        if self._closed:
            return ConnectionState.CLOSED
        return self.connection.state

    @property
    def ready_state(self) -> int:
        return self.state.ready_state

    def accepts(self, address: str | None) -> bool:
        if self._closed:
            return False
        if self.address is None:
            return True
        return address == self.address

    def _require_open(self) -> None:
        if self._closed:
            raise SubscriptionClosedError(resource=self.resource)

    async def close(self) -> None:
        """Stop receiving notifications; the channel closes with its last subscription."""
        if self._closed:
            return
        if self._release_fn is not None:
            await self._release_fn(self)
        self._closed = True

    async def reconnect(self) -> None:
        """Force the shared channel to reconnect now."""
        self._require_open()
        await self.connection.reconnect()

    async def send(self, data: str | bytes | Mapping[str, Any]) -> None:
        self._require_open()
        await self.connection.send(data)

    def _invoke(self, name: str, *args: Any) -> None:
        callback = getattr(self.callbacks, name)
        if callback is None:
            return
        try:
            callback(*args)
        except Exception:
            logger.exception("%s callback failed for %s", name, self.resource)

    def notify_connected(self) -> None:
        self._invoke("on_connect", self)

    def notify_disconnected(self) -> None:
        self._invoke("on_disconnect", self)

    def notify_reconnect_scheduled(self, delay_ms: int, attempt: int) -> None:
        self._invoke("on_reconnect_scheduled", delay_ms, attempt)

    def notify_decode_error(self, failure: DecodeFailure) -> None:
        self._invoke("on_decode_error", failure)

    def notify_update(self, update: Update, result: ApplyResult) -> None:
        if result.ok:
            self._invoke("on_update", update, result)
        else:
            self._invoke("on_apply_error", update, result.failed)


__all__ = ["Subscription"]
