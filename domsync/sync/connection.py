"""One reconnecting WebSocket channel per target resource."""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import Any
from collections.abc import Mapping, Callable, Awaitable

import orjson
import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from domsync.errors import NotConnectedError
from domsync.protocol.endpoint import channel_url
from domsync.state.reconnect import ReconnectPolicy
from domsync.state.connection_state import ConnectionState
from domsync.state.settings import ReconnectSettings, WebSocketSettings
from domsync.config.websocket import (
    WS_CLOSE_RECONNECT_REASON,
    WS_CLOSE_CLIENT_REQUEST_CODE,
    WS_CLOSE_CLIENT_REQUEST_REASON,
)

logger = logging.getLogger(__name__)

ConnectFn = Callable[..., Awaitable[Any]]
_TRANSPORT_ERRORS = (OSError, TimeoutError, asyncio.TimeoutError, WebSocketException)


def _noop(*_args: Any) -> None:
    return None


class Connection:
    """Reconnecting channel with an explicit IDLE/CONNECTING/OPEN/CLOSED/RECONNECT_SCHEDULED machine.

    A single supervisor task owns the socket: it connects, hands every frame
    to ``on_frame`` synchronously before reading the next one, and after an
    involuntary close sleeps for the current backoff delay before retrying.
    An intentional close cancels that task, so no further connect attempt
    happens and no CONNECTING state follows.
    """

    def __init__(
        self,
        resource: str,
        *,
        reconnect: ReconnectSettings,
        websocket: WebSocketSettings,
        on_frame: Callable[[str | bytes], None],
        on_open: Callable[[], None] | None = None,
        on_close: Callable[[], None] | None = None,
        on_reconnect_scheduled: Callable[[int, int], None] | None = None,
        connect_fn: ConnectFn | None = None,
        secure: bool = False,
    ) -> None:
        self.resource = resource
        self.url = channel_url(resource, secure=secure)
        self.reconnect_enabled = bool(reconnect.enabled)
        self._policy = ReconnectPolicy(reconnect.initial_delay_ms, reconnect.max_delay_ms)
        self._ws_settings = websocket
        self._on_frame = on_frame
        self._on_open = on_open or _noop
        self._on_close = on_close or _noop
        self._on_reconnect_scheduled = on_reconnect_scheduled or _noop
        self._connect_fn = connect_fn or websockets.connect
        self._state = ConnectionState.IDLE
        self._intentional_close = False
        self._ws: Any | None = None
        self._task: asyncio.Task | None = None
        self._changed = asyncio.Event()

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def ready_state(self) -> int:
        return self._state.ready_state

    @property
    def policy(self) -> ReconnectPolicy:
        return self._policy

    def _set_state(self, state: ConnectionState) -> None:
        if state is self._state:
            return
        logger.debug("%s: %s -> %s", self.url, self._state.value, state.value)
        self._state = state
        self._changed.set()
        self._changed = asyncio.Event()

    def _should_reconnect(self) -> bool:
        return self.reconnect_enabled and not self._intentional_close

    def _ws_options(self) -> dict[str, Any]:
        settings = self._ws_settings
        return {
            "ping_interval": settings.ping_interval_s or None,
            "ping_timeout": settings.ping_timeout_s or None,
            "open_timeout": settings.open_timeout_s or None,
            "max_size": settings.max_message_bytes or None,
        }

    def open(self) -> None:
        """Start the supervisor task unless one is already running."""
        if self._task is not None and not self._task.done():
            return
        self._intentional_close = False
        self._task = asyncio.create_task(self._run())

    async def wait_state(self, state: ConnectionState, timeout: float | None = None) -> bool:
        """Wait until the connection reaches *state*; False on timeout."""
        loop = asyncio.get_running_loop()
        deadline = None if timeout is None else loop.time() + timeout
        while self._state is not state:
            remaining = None if deadline is None else deadline - loop.time()
            if remaining is not None and remaining <= 0:
                return False
            try:
                await asyncio.wait_for(self._changed.wait(), remaining)
            except asyncio.TimeoutError:
                return False
        return True

    async def wait_open(self, timeout: float | None = None) -> bool:
        return await self.wait_state(ConnectionState.OPEN, timeout)

    async def close(self, *, intentional: bool = True) -> None:
        """Close the channel.

        An intentional close suppresses every later reconnect, including one
        already scheduled. A non-intentional close only drops the socket, so
        the backoff cycle proceeds as if the server had gone away.
        """
        if not intentional:
            ws = self._ws
            if ws is not None:
                with contextlib.suppress(Exception):
                    await ws.close()
            return
        await self._shutdown(WS_CLOSE_CLIENT_REQUEST_REASON)
        logger.info("%s: closed by client", self.url)

    async def reconnect(self) -> None:
        """Drop the current socket and open a new one now, skipping any pending backoff."""
        logger.info("%s: manual reconnect", self.url)
        await self._shutdown(WS_CLOSE_RECONNECT_REASON)
        self.open()

    async def _shutdown(self, reason: str) -> None:
        self._intentional_close = True
        if self._state is ConnectionState.RECONNECT_SCHEDULED:
            logger.info("%s: pending reconnect cancelled", self.url)
        ws = self._ws
        task = self._task
        self._task = None
        if ws is not None:
            with contextlib.suppress(Exception):
                await ws.close(code=WS_CLOSE_CLIENT_REQUEST_CODE, reason=reason)
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._set_state(ConnectionState.CLOSED)

    async def send(self, data: str | bytes | Mapping[str, Any]) -> None:
        ws = self._ws
        if self._state is not ConnectionState.OPEN or ws is None:
            raise NotConnectedError(resource=self.resource, state=self._state.value)
        if isinstance(data, Mapping):
            data = orjson.dumps(data).decode("utf-8")
        try:
            await ws.send(data)
        except ConnectionClosed as exc:
            raise NotConnectedError(resource=self.resource, state=ConnectionState.CLOSED.value) from exc

    async def _run(self) -> None:
        try:
            while True:
                await self._connect_and_listen()
                if not self._should_reconnect():
                    return
                delay_ms = self._policy.advance()
                self._set_state(ConnectionState.RECONNECT_SCHEDULED)
                logger.info(
                    "%s: reconnecting in %d ms (attempt %d)",
                    self.url,
                    delay_ms,
                    self._policy.attempts,
                )
                self._on_reconnect_scheduled(delay_ms, self._policy.attempts)
                await asyncio.sleep(delay_ms / 1000.0)
        except asyncio.CancelledError:
            return

    async def _connect_and_listen(self) -> None:
        self._set_state(ConnectionState.CONNECTING)
        logger.info("%s: connecting", self.url)
        try:
            ws = await self._connect_fn(self.url, **self._ws_options())
        except _TRANSPORT_ERRORS as exc:
            logger.warning("%s: connect failed: %s", self.url, exc)
            self._set_state(ConnectionState.CLOSED)
            self._on_close()
            return
        except Exception:
            logger.exception("%s: connect failed unexpectedly", self.url)
            self._set_state(ConnectionState.CLOSED)
            self._on_close()
            return

        self._ws = ws
        self._policy.reset()
        self._set_state(ConnectionState.OPEN)
        logger.info("%s: connected", self.url)
        self._on_open()
        try:
            while True:
                raw = await ws.recv()
                self._on_frame(raw)
        except ConnectionClosed as exc:
            logger.info("%s: connection closed: %s", self.url, exc)
        except _TRANSPORT_ERRORS as exc:
            logger.warning("%s: connection lost: %s", self.url, exc)
        except Exception:
            logger.exception("%s: receive loop failed", self.url)
        finally:
            self._ws = None
            self._set_state(ConnectionState.CLOSED)
            self._on_close()


__all__ = ["Connection"]
