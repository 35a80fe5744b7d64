from __future__ import annotations

import sys
import asyncio
from pathlib import Path
from collections.abc import Callable

import pytest

# Keep `import domsync...` and `import linting...` working when running `pytest` from the repo root.
_REPO_ROOT = str(Path(__file__).resolve().parents[1])
if _REPO_ROOT not in sys.path:
    sys.path.insert(0, _REPO_ROOT)

from websockets.exceptions import ConnectionClosedOK  # noqa: E402

from domsync.state.settings import SyncSettings, EchoSettings, ReconnectSettings, WebSocketSettings  # noqa: E402


class FakeWebSocket:
    """Scripted client socket: tests push frames in, ``close`` ends ``recv``."""

    def __init__(self) -> None:
        self.incoming: asyncio.Queue = asyncio.Queue()
        self.sent: list[str | bytes] = []
        self.close_code: int | None = None
        self.close_reason: str | None = None

    def push(self, frame: str | bytes) -> None:
        self.incoming.put_nowait(frame)

    def drop(self) -> None:
        self.incoming.put_nowait(ConnectionClosedOK(None, None))

    async def recv(self) -> str | bytes:
        item = await self.incoming.get()
        if isinstance(item, Exception):
            raise item
        return item

    async def send(self, data: str | bytes) -> None:
        if self.close_code is not None:
            raise ConnectionClosedOK(None, None)
        self.sent.append(data)

    async def close(self, code: int = 1000, reason: str = "") -> None:
        if self.close_code is None:
            self.close_code = code
            self.close_reason = reason
            self.drop()


class FakeServer:
    """Stands in for ``websockets.connect``; ``refuse`` connects fail with OSError."""

    def __init__(self, refuse: int = 0) -> None:
        self.refuse = refuse
        self.attempts = 0
        self.urls: list[str] = []
        self.options: dict = {}
        self.sockets: list[FakeWebSocket] = []

    @property
    def latest(self) -> FakeWebSocket:
        return self.sockets[-1]

    async def connect(self, url: str, **options) -> FakeWebSocket:
        self.attempts += 1
        self.urls.append(url)
        self.options = options
        if self.refuse:
            self.refuse -= 1
            raise OSError("connection refused")
        ws = FakeWebSocket()
        self.sockets.append(ws)
        return ws


@pytest.fixture
def fake_server() -> FakeServer:
    return FakeServer()


@pytest.fixture
def make_settings() -> Callable[..., SyncSettings]:
    def _make(
        *,
        reconnect: bool = True,
        initial_delay_ms: int = 10,
        max_delay_ms: int = 80,
        echo_ttl_ms: int = 5000,
    ) -> SyncSettings:
        return SyncSettings(
            reconnect=ReconnectSettings(
                enabled=reconnect,
                initial_delay_ms=initial_delay_ms,
                max_delay_ms=max_delay_ms,
            ),
            echo=EchoSettings(ttl_ms=echo_ttl_ms, sweep_interval_ms=echo_ttl_ms),
            websocket=WebSocketSettings(
                ping_interval_s=20.0,
                ping_timeout_s=20.0,
                open_timeout_s=10.0,
                max_message_bytes=1024,
            ),
        )

    return _make


@pytest.fixture
def eventually() -> Callable[..., object]:
    async def _wait(predicate: Callable[[], bool], timeout: float = 1.0) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while not predicate():
            if loop.time() >= deadline:
                raise AssertionError("condition not met in time")
            await asyncio.sleep(0.005)

    return _wait


def stream_item(method: str, selector: str, content: str | None = None, url: str | None = None) -> str:
    parts = [
        '<div itemscope itemtype="http://rustybeam.net/StreamItem">',
        f'<span itemprop="method">{method}</span>',
        f'<span itemprop="selector">{selector}</span>',
    ]
    if url is not None:
        parts.append(f'<a itemprop="url" href="{url}">source</a>')
    if content is not None:
        parts.append(f'<div itemprop="content">{content}</div>')
    parts.append("</div>")
    return "".join(parts)


@pytest.fixture
def frame() -> Callable[..., str]:
    def _frame(*items: tuple) -> str:
        return "".join(stream_item(*item) for item in items)

    return _frame
