"""Per-subscription notification callbacks (dataclasses only)."""

from __future__ import annotations

from typing import Any
from dataclasses import dataclass
from collections.abc import Callable

from .update import Update, ApplyResult, DecodeFailure


@dataclass(frozen=True, slots=True)
class SubscriptionCallbacks:
    on_connect: Callable[[Any], None] | None = None
    on_disconnect: Callable[[Any], None] | None = None
    on_update: Callable[[Update, ApplyResult], None] | None = None
    on_decode_error: Callable[[DecodeFailure], None] | None = None
    on_apply_error: Callable[[Update, str], None] | None = None
    on_reconnect_scheduled: Callable[[int, int], None] | None = None


__all__ = ["SubscriptionCallbacks"]
