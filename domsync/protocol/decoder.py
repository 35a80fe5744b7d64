"""Decode pushed frames into ordered Update records.

A frame is HTML carrying zero or more microdata sections typed as stream
items. Each section declares its own ``method``, ``selector`` (the address),
optional ``url`` (source locator) and optional ``content`` block::

    <div itemscope itemtype="http://rustybeam.net/StreamItem">
      <span itemprop="method">POST</span>
      <span itemprop="selector">#list</span>
      <div itemprop="content"><li>x</li></div>
    </div>

Sections are returned in document order. A bad section becomes a
``DecodeFailure`` in its slot; it never aborts the rest of the frame.
"""

from __future__ import annotations

import html
import logging
from typing import Any

import lxml.html
from lxml import etree

from domsync.errors import SectionDecodeError
from domsync.state.update import Update, DecodeFailure
from domsync.config.protocol import (
    PROP_METHOD,
    PROP_ADDRESS,
    PROP_CONTENT,
    CONTENT_METHODS,
    PROP_SOURCE_URL,
    STREAM_ITEM_TYPE,
    SUPPORTED_METHODS,
    DECODE_MALFORMED_FRAME,
    DECODE_MISSING_METHOD,
    DECODE_MISSING_ADDRESS,
    DECODE_MISSING_CONTENT,
    DECODE_UNSUPPORTED_METHOD,
)

logger = logging.getLogger(__name__)

_URL_TAGS = {"a", "area", "link"}


def _is_stream_item(element: Any) -> bool:
    return STREAM_ITEM_TYPE in (element.get("itemtype") or "").split()


def _starts_scope(element: Any) -> bool:
    return element.get("itemscope") is not None or bool(element.get("itemtype"))


def _item_props(item: Any) -> dict[str, Any]:
    """Collect the item's own properties, first occurrence wins.

    Nested item scopes and the inside of a ``content`` block are not searched,
    so markup carried as content can never be mistaken for section fields.
    """
    props: dict[str, Any] = {}
    stack = [child for child in reversed(item) if isinstance(child.tag, str)]
    while stack:
        element = stack.pop()
        names = (element.get("itemprop") or "").split()
        for name in names:
            props.setdefault(name, element)
        if PROP_CONTENT in names or _starts_scope(element):
            continue
        stack.extend(child for child in reversed(element) if isinstance(child.tag, str))
    return props


def _prop_value(element: Any | None) -> str | None:
    if element is None:
        return None
    if element.tag == "meta":
        value = element.get("content")
    elif element.tag in _URL_TAGS and element.get("href"):
        value = element.get("href")
    else:
        value = element.text_content()
    value = (value or "").strip()
    return value or None


def _inner_html(element: Any) -> str:
    parts = [html.escape(element.text, quote=False)] if element.text else []
    parts.extend(lxml.html.tostring(child, encoding="unicode") for child in element)
    return "".join(parts)


def parse_stream_item(item: Any) -> Update:
    props = _item_props(item)

    address = _prop_value(props.get(PROP_ADDRESS))
    raw_method = _prop_value(props.get(PROP_METHOD))
    if raw_method is None:
        raise SectionDecodeError(DECODE_MISSING_METHOD, "section has no method", address)
    if address is None:
        raise SectionDecodeError(DECODE_MISSING_ADDRESS, "section has no selector", None)

    method = raw_method.upper()
    if method not in SUPPORTED_METHODS:
        raise SectionDecodeError(DECODE_UNSUPPORTED_METHOD, f"method {raw_method!r} is not supported", address)

    content: str | None = None
    if method in CONTENT_METHODS:
        content_element = props.get(PROP_CONTENT)
        if content_element is None:
            raise SectionDecodeError(DECODE_MISSING_CONTENT, f"{method} section has no content", address)
        content = _inner_html(content_element)

    return Update(
        method=method,  # type: ignore[arg-type]
        address=address,
        source_url=_prop_value(props.get(PROP_SOURCE_URL)),
        content=content,
    )


def _top_level_items(container: Any) -> list[Any]:
    items: list[Any] = []
    for element in container.iter():
        if not isinstance(element.tag, str) or not _is_stream_item(element):
            continue
        if any(_is_stream_item(ancestor) for ancestor in element.iterancestors()):
            continue
        items.append(element)
    return items


def decode_frame(raw: str | bytes) -> list[Update | DecodeFailure]:
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            return [DecodeFailure(index=0, reason=DECODE_MALFORMED_FRAME, message=str(exc))]

    text = raw.strip()
    if not text:
        return []

    try:
        container = lxml.html.fragment_fromstring(text, create_parent="div")
    except (etree.ParserError, ValueError) as exc:
        return [DecodeFailure(index=0, reason=DECODE_MALFORMED_FRAME, message=str(exc))]

    decoded: list[Update | DecodeFailure] = []
    for index, item in enumerate(_top_level_items(container)):
        try:
            decoded.append(parse_stream_item(item))
        except SectionDecodeError as exc:
            logger.warning("dropping stream item %d: %s", index, exc)
            decoded.append(
                DecodeFailure(
                    index=index,
                    reason=exc.reason,
                    message=exc.message,
                    address=exc.address,
                    section=lxml.html.tostring(item, encoding="unicode", with_tail=False),
                )
            )
    return decoded


__all__ = ["decode_frame", "parse_stream_item"]
