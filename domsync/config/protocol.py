"""Stream-item wire vocabulary and failure reason codes."""

from __future__ import annotations

# Microdata item type marking one update section in a pushed frame.
STREAM_ITEM_TYPE = "http://rustybeam.net/StreamItem"

PROP_METHOD = "method"
PROP_ADDRESS = "selector"
PROP_SOURCE_URL = "url"
PROP_CONTENT = "content"

METHOD_PUT = "PUT"
METHOD_POST = "POST"
METHOD_DELETE = "DELETE"

SUPPORTED_METHODS = frozenset({METHOD_PUT, METHOD_POST, METHOD_DELETE})
CONTENT_METHODS = frozenset({METHOD_PUT, METHOD_POST})

# Decode failures (one section dropped, rest of the frame continues)
DECODE_MISSING_METHOD = "missing_method"
DECODE_MISSING_ADDRESS = "missing_address"
DECODE_MISSING_CONTENT = "missing_content"
DECODE_UNSUPPORTED_METHOD = "unsupported_method"
DECODE_MALFORMED_FRAME = "malformed_frame"

# Apply failures (no tree mutation, stream continues)
APPLY_ADDRESS_NOT_FOUND = "AddressNotFound"
APPLY_INVALID_CONTENT = "InvalidContent"
APPLY_INVALID_ADDRESS = "InvalidAddress"
APPLY_UNSUPPORTED_TARGET = "UnsupportedTarget"

__all__ = [
    "APPLY_ADDRESS_NOT_FOUND",
    "APPLY_INVALID_ADDRESS",
    "APPLY_INVALID_CONTENT",
    "APPLY_UNSUPPORTED_TARGET",
    "CONTENT_METHODS",
    "DECODE_MALFORMED_FRAME",
    "DECODE_MISSING_ADDRESS",
    "DECODE_MISSING_CONTENT",
    "DECODE_MISSING_METHOD",
    "DECODE_UNSUPPORTED_METHOD",
    "METHOD_DELETE",
    "METHOD_POST",
    "METHOD_PUT",
    "PROP_ADDRESS",
    "PROP_CONTENT",
    "PROP_METHOD",
    "PROP_SOURCE_URL",
    "STREAM_ITEM_TYPE",
    "SUPPORTED_METHODS",
]
