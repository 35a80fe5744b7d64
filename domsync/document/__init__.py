from .tree import Document
from .resolver import CssAddressResolver
from .applicator import UpdateApplicator
from .addressing import address_of, css_escape
from .fragments import ParsedFragment, parse_fragment

__all__ = [
    "CssAddressResolver",
    "Document",
    "ParsedFragment",
    "UpdateApplicator",
    "address_of",
    "css_escape",
    "parse_fragment",
]
