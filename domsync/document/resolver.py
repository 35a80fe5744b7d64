"""CSS address resolution over the local tree."""

from __future__ import annotations

import logging
from typing import Any

from cssselect import SelectorError, ExpressionError
from lxml.cssselect import CSSSelector

from .tree import Document

logger = logging.getLogger(__name__)


class CssAddressResolver:
    """Resolve an address to the first matching node.

    Compiled selectors are cached per address. Matching always runs against
    the live tree, since other code may rewrite ids or insert earlier matches
    between two updates.
    """

    def __init__(self, document: Document) -> None:
        self._document = document
        self._selectors: dict[str, CSSSelector] = {}

    def _compile(self, address: str) -> CSSSelector:
        selector = self._selectors.get(address)
        if selector is None:
            try:
                selector = CSSSelector(address, translator="html")
            except (SelectorError, ExpressionError) as exc:
                raise ValueError(f"invalid address {address!r}: {exc}") from exc
            self._selectors[address] = selector
            logger.debug("compiled address %s", address)
        return selector

    def resolve(self, address: str) -> Any | None:
        matches = self._compile(address)(self._document.root)
        if not matches:
            return None
        return matches[0]

    def clear(self) -> None:
        self._selectors.clear()


__all__ = ["CssAddressResolver"]
