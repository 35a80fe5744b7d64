"""Shared per-resource channel registry."""

from __future__ import annotations

import logging
from typing import Any
from collections.abc import Mapping, Callable

from domsync.state.settings import ReconnectSettings, WebSocketSettings

from .connection import Connection, ConnectFn

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Hand out one Connection per target resource and close it with its last user."""

    def __init__(
        self,
        *,
        websocket: WebSocketSettings,
        connect_fn: ConnectFn | None = None,
        secure: bool = False,
    ) -> None:
        self._websocket = websocket
        self._connect_fn = connect_fn
        self._secure = secure
        self._connections: dict[str, Connection] = {}
        self._users: dict[str, int] = {}

    def get(self, resource: str) -> Connection | None:
        return self._connections.get(resource)

    def open(
        self,
        resource: str,
        *,
        reconnect: ReconnectSettings,
        on_frame: Callable[[str | bytes], None],
        on_open: Callable[[], None] | None = None,
        on_close: Callable[[], None] | None = None,
        on_reconnect_scheduled: Callable[[int, int], None] | None = None,
    ) -> Connection:
        """Return the live Connection for ``resource``, creating and opening it on first use.

        Reconnect settings only take effect for the subscriber that creates the
        connection; later subscribers share whatever is already running.
        """
        connection = self._connections.get(resource)
        if connection is None:
            connection = Connection(
                resource,
                reconnect=reconnect,
                websocket=self._websocket,
                on_frame=on_frame,
                on_open=on_open,
                on_close=on_close,
                on_reconnect_scheduled=on_reconnect_scheduled,
                connect_fn=self._connect_fn,
                secure=self._secure,
            )
            self._connections[resource] = connection
            self._users[resource] = 0
            connection.open()
        self._users[resource] += 1
        return connection

    async def release(self, resource: str) -> bool:
        """Drop one user of ``resource``; close the channel when none remain."""
        if resource not in self._users:
            return False
        self._users[resource] -= 1
        if self._users[resource] > 0:
            return False
        connection = self._connections.get(resource)
        if connection is not None:
            await self.close(connection, intentional=True)
        return True

    async def close(self, connection: Connection, *, intentional: bool = True) -> None:
        await connection.close(intentional=intentional)
        if intentional and self._connections.get(connection.resource) is connection:
            del self._connections[connection.resource]
            self._users.pop(connection.resource, None)

    async def send(self, connection: Connection, data: str | bytes | Mapping[str, Any]) -> None:
        await connection.send(data)

    async def close_all(self) -> None:
        for connection in list(self._connections.values()):
            await self.close(connection, intentional=True)

    def get_connection_count(self) -> int:
        return len(self._connections)


__all__ = ["ConnectionManager"]
