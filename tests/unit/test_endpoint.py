from __future__ import annotations

import pytest

from domsync.protocol.endpoint import channel_url


@pytest.mark.parametrize(
    ("resource", "expected"),
    [
        ("http://example.com/todos", "ws://example.com/todos"),
        ("https://example.com/todos?x=1", "wss://example.com/todos?x=1"),
        ("ws://example.com:8080/a", "ws://example.com:8080/a"),
        ("http://example.com", "ws://example.com/"),
        ("http://example.com/page#section", "ws://example.com/page"),
        ("localhost:3000/doc", "ws://localhost:3000/doc"),
    ],
)
def test_channel_url(resource: str, expected: str) -> None:
    assert channel_url(resource) == expected


def test_secure_flag_applies_to_bare_and_http_resources() -> None:
    assert channel_url("localhost:3000/doc", secure=True) == "wss://localhost:3000/doc"
    assert channel_url("http://example.com/doc", secure=True) == "wss://example.com/doc"


def test_empty_resource_is_rejected() -> None:
    with pytest.raises(ValueError):
        channel_url("  ")
