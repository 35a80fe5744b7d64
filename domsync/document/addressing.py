"""Generate addressing strings (CSS selectors) for tree nodes.

An element with an id is addressed as ``#id``. Anything else gets a
``tag:nth-child(n)`` path, joined with `` > ``, rooted at the nearest
ancestor that has an id or at the top of the tree.
"""

from __future__ import annotations

import re
from typing import Any

_IDENT_SAFE = re.compile(r"[A-Za-z0-9_\-\u0080-\U0010ffff]")


def css_escape(value: str) -> str:
    out: list[str] = []
    for i, ch in enumerate(value):
        if ch == "\0":
            out.append("\ufffd")
        elif i == 0 and ch in "0123456789":
            out.append(f"\\{ord(ch):x} ")
        elif i == 1 and ch in "0123456789" and value[0] == "-":
            out.append(f"\\{ord(ch):x} ")
        elif _IDENT_SAFE.match(ch):
            out.append(ch)
        else:
            out.append("\\" + ch)
    if value == "-":
        return "\\-"
    return "".join(out)


def _element_children(parent: Any) -> list[Any]:
    # Comments and processing instructions are not counted by :nth-child.
    return [child for child in parent if isinstance(child.tag, str)]


def _step(node: Any, parent: Any) -> str:
    index = _element_children(parent).index(node) + 1
    return f"{str(node.tag).lower()}:nth-child({index})"


def address_of(node: Any) -> str:
    node_id = node.get("id")
    if node_id:
        return f"#{css_escape(node_id)}"

    path: list[str] = []
    current = node
    while True:
        parent = current.getparent()
        if parent is None:
            path.insert(0, str(current.tag).lower())
            return " > ".join(path)
        path.insert(0, _step(current, parent))
        parent_id = parent.get("id")
        if parent_id:
            path.insert(0, f"#{css_escape(parent_id)}")
            return " > ".join(path)
        current = parent


__all__ = ["address_of", "css_escape"]
