from __future__ import annotations

import asyncio

import pytest

from domsync.sync.echo import EchoTracker


class _Clock:
    def __init__(self) -> None:
        self.t = 0.0

    def __call__(self) -> float:
        return self.t


def test_echo_within_ttl_is_suppressed_once() -> None:
    clock = _Clock()
    tracker = EchoTracker(ttl_ms=5000, now_fn=clock)
    tracker.record("#list", "post")

    clock.t = 1.0
    assert tracker.is_echo("#list", "POST") is True
    assert tracker.is_echo("#list", "POST") is False


def test_each_record_suppresses_one_echo() -> None:
    clock = _Clock()
    tracker = EchoTracker(ttl_ms=5000, now_fn=clock)
    tracker.record("#list", "POST")
    tracker.record("#list", "POST")

    assert tracker.is_echo("#list", "POST") is True
    assert tracker.is_echo("#list", "POST") is True
    assert tracker.is_echo("#list", "POST") is False


def test_echo_after_ttl_is_not_suppressed() -> None:
    clock = _Clock()
    tracker = EchoTracker(ttl_ms=5000, now_fn=clock)
    tracker.record("#a", "PUT")

    clock.t = 6.0
    assert tracker.is_echo("#a", "PUT") is False
    assert len(tracker) == 0


def test_match_is_exact_on_address_and_method() -> None:
    tracker = EchoTracker(ttl_ms=5000, now_fn=_Clock())
    tracker.record("#a", "PUT")

    assert tracker.is_echo("#a", "POST") is False
    assert tracker.is_echo("#A", "PUT") is False
    assert tracker.is_echo("#a ", "PUT") is False
    assert tracker.is_echo("#a", "PUT") is True


def test_zero_ttl_never_suppresses() -> None:
    tracker = EchoTracker(ttl_ms=0, now_fn=_Clock())
    tracker.record("#a", "DELETE")
    assert tracker.is_echo("#a", "DELETE") is False


def test_sweep_evicts_only_expired_entries() -> None:
    clock = _Clock()
    tracker = EchoTracker(ttl_ms=5000, now_fn=clock)
    tracker.record("#old", "PUT")
    clock.t = 4.0
    tracker.record("#new", "PUT", "<p>x</p>")

    clock.t = 5.5
    assert tracker.sweep() == 1
    assert len(tracker) == 1
    assert tracker.is_echo("#new", "PUT") is True


def test_record_normalises_method_case() -> None:
    tracker = EchoTracker(ttl_ms=5000, now_fn=_Clock())
    entry = tracker.record("#a", "delete")
    assert entry.method == "DELETE"
    assert entry.recorded_at == 0.0


@pytest.mark.asyncio
async def test_background_sweep_runs_and_stops() -> None:
    tracker = EchoTracker(ttl_ms=20)
    tracker.record("#a", "PUT")
    task = tracker.start()
    assert task is not None

    await asyncio.sleep(0.1)
    assert len(tracker) == 0

    await tracker.stop()
    assert task.done()


@pytest.mark.asyncio
async def test_sweep_restarts_after_ttl_is_reenabled() -> None:
    tracker = EchoTracker(ttl_ms=20)
    first = tracker.start()
    tracker.configure(ttl_ms=0)
    await asyncio.sleep(0.05)
    assert first.done()

    tracker.configure(ttl_ms=20)
    second = tracker.start()
    assert second is not first
    assert not second.done()

    tracker.record("#a", "PUT")
    await asyncio.sleep(0.1)
    assert len(tracker) == 0
    await tracker.stop()
