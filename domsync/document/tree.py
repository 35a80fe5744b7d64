"""Local hierarchical document model backed by lxml."""

from __future__ import annotations

from typing import Any

import lxml.html


class Document:
    """Owns the lxml tree that pushed updates are applied to.

    ``generation`` counts the mutations made through this package.
    """

    def __init__(self, root: Any) -> None:
        self._root = root
        self.generation = 0

    @classmethod
    def from_html(cls, markup: str) -> Document:
        return cls(lxml.html.document_fromstring(markup))

    @classmethod
    def empty(cls) -> Document:
        return cls.from_html("<html><head></head><body></body></html>")

    @property
    def root(self) -> Any:
        return self._root

    def mark_mutated(self) -> None:
        self.generation += 1

    def to_html(self) -> str:
        return lxml.html.tostring(self._root, encoding="unicode")


__all__ = ["Document"]
