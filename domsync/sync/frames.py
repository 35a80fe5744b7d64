"""Per-frame pipeline: decode, drop echoes, apply, notify."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from collections.abc import Callable, Iterable, Sequence

from domsync.state.update import Update, DecodeFailure
from domsync.document.applicator import UpdateApplicator

from .echo import EchoTracker
from .subscription import Subscription

logger = logging.getLogger(__name__)

Decoder = Callable[[str | bytes], Sequence[Update | DecodeFailure]]


@dataclass(slots=True)
class FrameStats:
    applied: int = 0
    failed: int = 0
    suppressed: int = 0
    undecodable: int = 0


def _matching(subscriptions: Callable[[], Iterable[Subscription]], address: str | None) -> list[Subscription]:
    return [sub for sub in subscriptions() if sub.accepts(address)]


def _report_failure(failure: DecodeFailure, subscriptions: Callable[[], Iterable[Subscription]]) -> None:
    if failure.address is None:
        targets = [sub for sub in subscriptions() if sub.address is None and sub.accepts(None)]
    else:
        targets = _matching(subscriptions, failure.address)
    for sub in targets:
        sub.notify_decode_error(failure)


def process_frame(
    raw: str | bytes,
    *,
    decoder: Decoder,
    echo_tracker: EchoTracker,
    applicator: UpdateApplicator,
    subscriptions: Callable[[], Iterable[Subscription]],
) -> FrameStats:
    """Run one inbound frame through the pipeline, in section order.

    Runs without suspending, so no other frame or local mutation can
    interleave with a partially applied frame. ``subscriptions`` is called per
    update so a callback that closes a subscription takes effect immediately.
    """
    stats = FrameStats()
    for item in decoder(raw):
        if isinstance(item, DecodeFailure):
            stats.undecodable += 1
            _report_failure(item, subscriptions)
            continue

        if echo_tracker.is_echo(item.address, item.method):
            stats.suppressed += 1
            logger.debug("suppressed echo %s %s", item.method, item.address)
            continue

        result = applicator.apply(item)
        if result.ok:
            stats.applied += 1
        else:
            stats.failed += 1
            logger.info("could not apply %s %s: %s", item.method, item.address, result.failed)

        for sub in _matching(subscriptions, item.address):
            sub.notify_update(item, result)
    return stats


__all__ = ["Decoder", "FrameStats", "process_frame"]
