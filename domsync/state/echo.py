"""Locally originated mutation records (dataclasses only)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class EchoEntry:
    address: str
    method: str
    recorded_at: float
    content: str | None = None


__all__ = ["EchoEntry"]
