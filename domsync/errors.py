"""Shared error types for the document sync client."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class NotConnectedError(Exception):
    """Raised by ``send`` when the channel is not OPEN. Sends are never queued."""

    resource: str
    state: str

    def __str__(self) -> str:
        return f"channel for {self.resource} is not connected (state={self.state})"


@dataclass(frozen=True, slots=True)
class SubscriptionClosedError(Exception):
    """Raised when a closed subscription's control surface is used."""

    resource: str

    def __str__(self) -> str:
        return f"subscription to {self.resource} is closed"


@dataclass(frozen=True, slots=True)
class SectionDecodeError(Exception):
    """Raised when one stream-item section cannot become an Update."""

    reason: str
    message: str
    address: str | None = None

    def __str__(self) -> str:
        return f"{self.reason}: {self.message}"


__all__ = ["NotConnectedError", "SectionDecodeError", "SubscriptionClosedError"]
