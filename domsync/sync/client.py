"""Top-level entry point: bind a local Document to server update streams."""

from __future__ import annotations

import logging
import dataclasses
from typing import Any
from collections.abc import Callable, Iterable

from domsync.document.tree import Document
from domsync.protocol.decoder import decode_frame
from domsync.runtime.settings_loader import load_settings
from domsync.document.addressing import address_of
from domsync.state.callbacks import SubscriptionCallbacks
from domsync.document.applicator import UpdateApplicator
from domsync.state.settings import SyncSettings, ReconnectSettings

from .echo import EchoTracker, TimeFn
from .connection import ConnectFn
from .manager import ConnectionManager
from .subscription import Subscription
from .frames import Decoder, FrameStats, process_frame

logger = logging.getLogger(__name__)


class SyncClient:
    """Keep ``document`` in step with one or more server-side resources.

    Every resource gets at most one channel no matter how many subscriptions
    point at it. The echo tracker is shared by all of them, so a mutation
    recorded with ``record_local_mutation`` is recognised on whichever
    channel echoes it back.

    ``secure`` upgrades bare ``host:port/path`` and ``http`` resources to ``wss``.

    Use as ``async with SyncClient(doc) as client:`` or call ``aclose()``.
    """

    def __init__(
        self,
        document: Document | None = None,
        *,
        settings: SyncSettings | None = None,
        decoder: Decoder = decode_frame,
        resolver: Any | None = None,
        connect_fn: ConnectFn | None = None,
        now_fn: TimeFn | None = None,
        secure: bool = False,
    ) -> None:
        self.document = document if document is not None else Document.empty()
        self.settings = settings or load_settings()
        self._decoder = decoder
        self._applicator = UpdateApplicator(self.document, resolver)
        self._echo = EchoTracker(
            ttl_ms=self.settings.echo.ttl_ms,
            sweep_interval_ms=self.settings.echo.sweep_interval_ms,
            now_fn=now_fn,
        )
        self._connections = ConnectionManager(
            websocket=self.settings.websocket,
            connect_fn=connect_fn,
            secure=secure,
        )
        self._subscriptions: dict[str, list[Subscription]] = {}

    async def __aenter__(self) -> SyncClient:
        return self

    async def __aexit__(self, *_exc: Any) -> None:
        await self.aclose()

    @property
    def echo_tracker(self) -> EchoTracker:
        return self._echo

    @property
    def applicator(self) -> UpdateApplicator:
        return self._applicator

    @property
    def connections(self) -> ConnectionManager:
        return self._connections

    def subscriptions(self, resource: str) -> tuple[Subscription, ...]:
        return tuple(self._subscriptions.get(resource, ()))

    def _reconnect_settings(
        self,
        reconnect: bool | None,
        initial_delay_ms: int | None,
        max_delay_ms: int | None,
    ) -> ReconnectSettings:
        base = self.settings.reconnect
        enabled = base.enabled if reconnect is None else bool(reconnect)
        initial = base.initial_delay_ms if initial_delay_ms is None else max(0, int(initial_delay_ms))
        ceiling = base.max_delay_ms if max_delay_ms is None else int(max_delay_ms)
        return ReconnectSettings(enabled=enabled, initial_delay_ms=initial, max_delay_ms=max(initial, ceiling))

    def subscribe(
        self,
        resource: str,
        callbacks: SubscriptionCallbacks | None = None,
        *,
        address: str | None = None,
        reconnect: bool | None = None,
        initial_delay_ms: int | None = None,
        max_delay_ms: int | None = None,
        echo_ttl_ms: int | None = None,
        **handlers: Callable[..., None],
    ) -> Subscription:
        """Subscribe to ``resource``'s update stream.

        With ``address`` set the subscription is node-scoped and only hears
        about updates aimed at exactly that address; every update on the
        channel is still applied to the document. Callbacks may be passed as a
        ``SubscriptionCallbacks`` or as ``on_update=...`` style keywords.
        Reconnect options only apply when this call opens the channel.
        ``echo_ttl_ms`` changes the TTL for the whole client.
        """
        if callbacks is None:
            callbacks = SubscriptionCallbacks(**handlers)
        elif handlers:
            callbacks = dataclasses.replace(callbacks, **handlers)
        if echo_ttl_ms is not None:
            self._echo.configure(ttl_ms=echo_ttl_ms)

        connection = self._connections.open(
            resource,
            reconnect=self._reconnect_settings(reconnect, initial_delay_ms, max_delay_ms),
            on_frame=lambda raw: self._handle_frame(resource, raw),
            on_open=lambda: self._fan_out(resource, "notify_connected"),
            on_close=lambda: self._fan_out(resource, "notify_disconnected"),
            on_reconnect_scheduled=lambda delay, attempt: self._fan_out(
                resource, "notify_reconnect_scheduled", delay, attempt
            ),
        )
        subscription = Subscription(
            connection,
            callbacks=callbacks,
            address=address,
            release_fn=self._release,
        )
        self._subscriptions.setdefault(resource, []).append(subscription)
        self._echo.start()
        logger.info("subscribed to %s (%s)", resource, address or "document")
        return subscription

    def subscribe_node(
        self,
        resource: str,
        node: Any,
        callbacks: SubscriptionCallbacks | None = None,
        **options: Any,
    ) -> Subscription:
        """Node-scoped subscribe; the node's address is generated from its position."""
        return self.subscribe(resource, callbacks, address=address_of(node), **options)

    def record_local_mutation(self, address: str, method: str, content: str | None = None) -> None:
        self._echo.record(address, method, content)

    def address_of(self, node: Any) -> str:
        return address_of(node)

    def process_frame(self, resource: str, raw: str | bytes) -> FrameStats:
        return process_frame(
            raw,
            decoder=self._decoder,
            echo_tracker=self._echo,
            applicator=self._applicator,
            subscriptions=lambda: tuple(self._subscriptions.get(resource, ())),
        )

    def _handle_frame(self, resource: str, raw: str | bytes) -> None:
        try:
            self.process_frame(resource, raw)
        except Exception:
            logger.exception("failed to process frame from %s", resource)

    def _fan_out(self, resource: str, method: str, *args: Any) -> None:
        for subscription in tuple(self._subscriptions.get(resource, ())):
            getattr(subscription, method)(*args)

    async def _release(self, subscription: Subscription) -> None:
        resource = subscription.resource
        remaining = self._subscriptions.get(resource, [])
        if len(remaining) <= 1:
            # The last subscriber still hears the disconnect.
            await self._connections.release(resource)
            self._subscriptions.pop(resource, None)
        else:
            remaining.remove(subscription)
            await self._connections.release(resource)
        logger.info("unsubscribed from %s (%s)", resource, subscription.address or "document")

    async def aclose(self) -> None:
        for resource in list(self._subscriptions):
            for subscription in list(self._subscriptions.get(resource, ())):
                await subscription.close()
        await self._connections.close_all()
        await self._echo.stop()


__all__ = ["SyncClient"]
