"""Parse content blocks into top-level nodes."""

from __future__ import annotations

from typing import Any
from dataclasses import field, dataclass

import lxml.html
from lxml import etree


@dataclass(slots=True)
class ParsedFragment:
    """Top-level nodes of a content block.

    ``text`` is leading character data before the first element. Character
    data between and after elements travels as each element's ``tail``.
    Whitespace-only text does not count as a node.
    """

    text: str = ""
    elements: list[Any] = field(default_factory=list)

    @property
    def node_count(self) -> int:
        count = 1 if self.text.strip() else 0
        for element in self.elements:
            count += 1
            if element.tail and element.tail.strip():
                count += 1
        return count


def parse_fragment(content: str | None) -> ParsedFragment:
    markup = (content or "").strip()
    if not markup:
        return ParsedFragment()

    try:
        parts = lxml.html.fragments_fromstring(markup)
    except etree.ParserError:
        return ParsedFragment()
    parsed = ParsedFragment()
    for part in parts:
        if isinstance(part, str):
            parsed.text += part
        else:
            parsed.elements.append(part)
    return parsed


__all__ = ["ParsedFragment", "parse_fragment"]
