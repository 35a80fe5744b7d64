from __future__ import annotations

import asyncio

import orjson
import pytest

from domsync.errors import NotConnectedError
from domsync.sync.connection import Connection
from domsync.state.connection_state import ConnectionState


class _Recorder:
    def __init__(self) -> None:
        self.events: list[tuple] = []
        self.frames: list[str | bytes] = []

    def frame(self, raw: str | bytes) -> None:
        self.frames.append(raw)

    def opened(self) -> None:
        self.events.append(("open",))

    def closed(self) -> None:
        self.events.append(("close",))

    def scheduled(self, delay_ms: int, attempt: int) -> None:
        self.events.append(("scheduled", delay_ms, attempt))

    def scheduled_delays(self) -> list[int]:
        return [event[1] for event in self.events if event[0] == "scheduled"]


def _connection(server, settings, recorder: _Recorder, resource: str = "http://example.com/doc") -> Connection:
    return Connection(
        resource,
        reconnect=settings.reconnect,
        websocket=settings.websocket,
        on_frame=recorder.frame,
        on_open=recorder.opened,
        on_close=recorder.closed,
        on_reconnect_scheduled=recorder.scheduled,
        connect_fn=server.connect,
    )


@pytest.mark.asyncio
async def test_open_connects_and_delivers_frames_in_order(fake_server, make_settings, eventually) -> None:
    recorder = _Recorder()
    conn = _connection(fake_server, make_settings(), recorder)
    assert conn.state is ConnectionState.IDLE

    conn.open()
    assert await conn.wait_open(timeout=1.0)
    assert conn.ready_state == 1
    assert fake_server.urls == ["ws://example.com/doc"]
    assert fake_server.options["max_size"] == 1024

    fake_server.latest.push("one")
    fake_server.latest.push(b"two")
    await eventually(lambda: len(recorder.frames) == 2)
    assert recorder.frames == ["one", b"two"]

    await conn.close()
    assert conn.state is ConnectionState.CLOSED
    assert recorder.events == [("open",), ("close",)]


@pytest.mark.asyncio
async def test_server_close_schedules_reconnect(fake_server, make_settings, eventually) -> None:
    recorder = _Recorder()
    conn = _connection(fake_server, make_settings(initial_delay_ms=10), recorder)
    conn.open()
    await conn.wait_open(timeout=1.0)

    fake_server.latest.drop()
    await eventually(lambda: len(fake_server.sockets) == 2 and conn.state is ConnectionState.OPEN)

    assert recorder.events == [("open",), ("close",), ("scheduled", 10, 1), ("open",)]
    assert conn.policy.current_delay_ms == 10
    await conn.close()


@pytest.mark.asyncio
async def test_failed_attempts_back_off_exponentially(fake_server, make_settings, eventually) -> None:
    fake_server.refuse = 5
    recorder = _Recorder()
    conn = _connection(fake_server, make_settings(initial_delay_ms=5, max_delay_ms=20), recorder)
    conn.open()

    await eventually(lambda: conn.state is ConnectionState.OPEN, timeout=2.0)
    assert recorder.scheduled_delays() == [5, 10, 20, 20, 20]
    assert fake_server.attempts == 6
    await conn.close()


@pytest.mark.asyncio
async def test_close_while_reconnect_scheduled_cancels_attempt(fake_server, make_settings, eventually) -> None:
    fake_server.refuse = 100
    recorder = _Recorder()
    conn = _connection(fake_server, make_settings(initial_delay_ms=50, max_delay_ms=50), recorder)
    conn.open()

    await eventually(lambda: conn.state is ConnectionState.RECONNECT_SCHEDULED)
    attempts = fake_server.attempts
    await conn.close()
    assert conn.state is ConnectionState.CLOSED

    await asyncio.sleep(0.15)
    assert fake_server.attempts == attempts
    assert conn.state is ConnectionState.CLOSED


@pytest.mark.asyncio
async def test_intentional_close_does_not_reconnect(fake_server, make_settings) -> None:
    recorder = _Recorder()
    conn = _connection(fake_server, make_settings(initial_delay_ms=5), recorder)
    conn.open()
    await conn.wait_open(timeout=1.0)

    await conn.close()
    await asyncio.sleep(0.05)

    assert fake_server.attempts == 1
    assert fake_server.latest.close_code == 1000
    assert recorder.scheduled_delays() == []


@pytest.mark.asyncio
async def test_reconnect_disabled_stays_closed(fake_server, make_settings, eventually) -> None:
    recorder = _Recorder()
    conn = _connection(fake_server, make_settings(reconnect=False, initial_delay_ms=5), recorder)
    conn.open()
    await conn.wait_open(timeout=1.0)

    fake_server.latest.drop()
    await eventually(lambda: conn.state is ConnectionState.CLOSED)
    await asyncio.sleep(0.05)
    assert fake_server.attempts == 1
    await conn.close()


@pytest.mark.asyncio
async def test_non_intentional_close_keeps_reconnecting(fake_server, make_settings, eventually) -> None:
    recorder = _Recorder()
    conn = _connection(fake_server, make_settings(initial_delay_ms=5), recorder)
    conn.open()
    await conn.wait_open(timeout=1.0)

    await conn.close(intentional=False)
    await eventually(lambda: len(fake_server.sockets) == 2 and conn.state is ConnectionState.OPEN)
    await conn.close()


@pytest.mark.asyncio
async def test_manual_reconnect_skips_backoff(fake_server, make_settings, eventually) -> None:
    recorder = _Recorder()
    conn = _connection(fake_server, make_settings(initial_delay_ms=60000, max_delay_ms=60000), recorder)
    conn.open()
    await conn.wait_open(timeout=1.0)

    await conn.reconnect()
    await eventually(lambda: len(fake_server.sockets) == 2 and conn.state is ConnectionState.OPEN)
    assert fake_server.sockets[0].close_reason == "client reconnect"
    assert recorder.scheduled_delays() == []
    await conn.close()


@pytest.mark.asyncio
async def test_send_requires_open_channel(fake_server, make_settings) -> None:
    recorder = _Recorder()
    conn = _connection(fake_server, make_settings(), recorder)

    with pytest.raises(NotConnectedError) as exc:
        await conn.send("hello")
    assert exc.value.state == "idle"

    conn.open()
    await conn.wait_open(timeout=1.0)
    await conn.send("hello")
    await conn.send({"op": "ping", "n": 1})
    assert fake_server.latest.sent[0] == "hello"
    assert orjson.loads(fake_server.latest.sent[1]) == {"op": "ping", "n": 1}

    await conn.close()
    with pytest.raises(NotConnectedError):
        await conn.send("late")


@pytest.mark.asyncio
async def test_wait_state_times_out_when_state_never_reached(fake_server, make_settings) -> None:
    conn = _connection(fake_server, make_settings(), _Recorder())
    assert await conn.wait_state(ConnectionState.OPEN, timeout=0.02) is False

    conn.open()
    assert await conn.wait_state(ConnectionState.OPEN, timeout=1.0) is True
    await conn.close()
    assert await conn.wait_state(ConnectionState.CLOSED, timeout=0.02) is True


@pytest.mark.asyncio
async def test_unexpected_connect_error_still_schedules_retry(fake_server, make_settings, eventually) -> None:
    calls = {"n": 0}

    async def flaky_connect(url: str, **options):
        calls["n"] += 1
        if calls["n"] == 1:
            raise RuntimeError("weird")
        return await fake_server.connect(url, **options)

    recorder = _Recorder()
    conn = Connection(
        "http://example.com/doc",
        reconnect=make_settings(initial_delay_ms=5).reconnect,
        websocket=make_settings().websocket,
        on_frame=recorder.frame,
        on_open=recorder.opened,
        on_close=recorder.closed,
        on_reconnect_scheduled=recorder.scheduled,
        connect_fn=flaky_connect,
    )
    conn.open()

    await eventually(lambda: conn.state is ConnectionState.OPEN)
    assert calls["n"] == 2
    assert recorder.events == [("close",), ("scheduled", 5, 1), ("open",)]
    await conn.close()


@pytest.mark.asyncio
async def test_unexpected_receive_error_still_schedules_retry(fake_server, make_settings, eventually) -> None:
    recorder = _Recorder()
    conn = _connection(fake_server, make_settings(initial_delay_ms=5), recorder)
    conn.open()
    await conn.wait_open(timeout=1.0)

    fake_server.latest.incoming.put_nowait(RuntimeError("bad frame source"))
    await eventually(lambda: len(fake_server.sockets) == 2 and conn.state is ConnectionState.OPEN)
    assert recorder.scheduled_delays() == [5]
    await conn.close()
