"""Decoded update records and their outcomes (dataclasses only)."""

from __future__ import annotations

from typing import Any, Literal
from dataclasses import dataclass

Method = Literal["PUT", "POST", "DELETE"]
ApplyAction = Literal["replaced", "appended", "deleted"]


@dataclass(frozen=True, slots=True)
class Update:
    """One instruction pushed by the server.

    ``content`` is the raw inner markup of the section's content block. It is
    always present for PUT and POST and ``None`` for DELETE.
    """

    method: Method
    address: str
    source_url: str | None = None
    content: str | None = None


@dataclass(frozen=True, slots=True)
class DecodeFailure:
    """A section of a frame that could not be turned into an Update."""

    index: int
    reason: str
    message: str = ""
    address: str | None = None
    section: str | None = None


@dataclass(frozen=True, slots=True)
class ApplyResult:
    """Outcome of applying one Update to the local tree.

    Successful results carry ``action`` and ``node``: the new node for
    ``replaced``, the parent that received children for ``appended`` and the
    detached node for ``deleted``. Failed results carry only ``failed``.
    """

    action: ApplyAction | None = None
    node: Any = None
    inserted: tuple[Any, ...] = ()
    failed: str | None = None

    @property
    def ok(self) -> bool:
        return self.failed is None

    @classmethod
    def failure(cls, reason: str) -> ApplyResult:
        return cls(failed=reason)


__all__ = ["ApplyAction", "ApplyResult", "DecodeFailure", "Method", "Update"]
