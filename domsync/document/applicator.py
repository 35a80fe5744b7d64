"""Apply decoded Updates to the local tree.

Never raises for expected failures: an unmatched address, wrong node count
for PUT or an unparseable address all come back as ``ApplyResult.failure``.
"""

from __future__ import annotations

import logging
from typing import Any

from domsync.state.update import Update, ApplyResult
from domsync.config.protocol import (
    METHOD_PUT,
    METHOD_POST,
    METHOD_DELETE,
    APPLY_INVALID_ADDRESS,
    APPLY_INVALID_CONTENT,
    APPLY_ADDRESS_NOT_FOUND,
    APPLY_UNSUPPORTED_TARGET,
)

from .tree import Document
from .fragments import parse_fragment
from .resolver import CssAddressResolver

logger = logging.getLogger(__name__)


class UpdateApplicator:
    def __init__(self, document: Document, resolver: Any | None = None) -> None:
        self._document = document
        self._resolver = resolver or CssAddressResolver(document)

    @property
    def document(self) -> Document:
        return self._document

    @property
    def resolver(self) -> Any:
        return self._resolver

    def apply(self, update: Update) -> ApplyResult:
        try:
            target = self._resolver.resolve(update.address)
        except ValueError:
            logger.info("cannot resolve address %r", update.address, exc_info=True)
            return ApplyResult.failure(APPLY_INVALID_ADDRESS)
        if target is None:
            return ApplyResult.failure(APPLY_ADDRESS_NOT_FOUND)

        if update.method == METHOD_PUT:
            return self._replace(update, target)
        if update.method == METHOD_POST:
            return self._append(update, target)
        if update.method == METHOD_DELETE:
            return self._delete(update, target)
        raise ValueError(f"unsupported method {update.method!r}")

    def _replace(self, update: Update, target: Any) -> ApplyResult:
        fragment = parse_fragment(update.content)
        if fragment.node_count != 1 or len(fragment.elements) != 1:
            return ApplyResult.failure(APPLY_INVALID_CONTENT)
        parent = target.getparent()
        if parent is None:
            return ApplyResult.failure(APPLY_UNSUPPORTED_TARGET)

        node = fragment.elements[0]
        node.tail = target.tail
        parent.replace(target, node)
        self._document.mark_mutated()
        return ApplyResult(action="replaced", node=node, inserted=(node,))

    def _append(self, update: Update, target: Any) -> ApplyResult:
        fragment = parse_fragment(update.content)
        if fragment.text:
            if len(target):
                last = target[-1]
                last.tail = (last.tail or "") + fragment.text
            else:
                target.text = (target.text or "") + fragment.text
        for element in fragment.elements:
            target.append(element)
        self._document.mark_mutated()
        return ApplyResult(action="appended", node=target, inserted=tuple(fragment.elements))

    def _delete(self, update: Update, target: Any) -> ApplyResult:
        if target.getparent() is None:
            return ApplyResult.failure(APPLY_UNSUPPORTED_TARGET)
        target.drop_tree()
        self._document.mark_mutated()
        return ApplyResult(action="deleted", node=target)


__all__ = ["UpdateApplicator"]
