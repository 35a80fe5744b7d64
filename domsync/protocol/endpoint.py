"""Derive the push channel endpoint from a resource address."""

from __future__ import annotations

from urllib.parse import urlparse, urlunparse


def channel_url(resource: str, secure: bool = False) -> str:
    """Swap the scheme for its WebSocket counterpart, keeping host, path and query.

    ``http`` maps to ``ws`` and ``https`` to ``wss``. Bare ``host[:port]/path``
    values get ``ws`` (or ``wss`` when *secure*). Fragments are dropped since
    WebSocket URIs cannot carry them.
    """
    resource = (resource or "").strip()
    if not resource:
        raise ValueError("resource address is empty")

    if resource.startswith(("ws://", "wss://", "http://", "https://")):
        parsed = urlparse(resource)
        if parsed.scheme in {"ws", "wss"}:
            scheme = parsed.scheme
        else:
            scheme = "wss" if (parsed.scheme == "https" or secure) else "ws"
        return urlunparse((scheme, parsed.netloc, parsed.path or "/", parsed.params, parsed.query, ""))

    parsed = urlparse(("wss://" if secure else "ws://") + resource)
    return urlunparse((parsed.scheme, parsed.netloc, parsed.path or "/", parsed.params, parsed.query, ""))


__all__ = ["channel_url"]
