"""
domlens: structured document models from parsed HTML.

Extracts a DOM into an engine independent node tree with metadata,
semantic regions, images, links and stats; validates it; caches it by
content fingerprint; and renders it as JSON, text, HTML or XML.
"""

__version__ = "0.1.0"

from domlens.parser import DocumentParser
from domlens.config import Settings, get_settings, load_config
from domlens.core.exceptions import DomLensError, ErrorCode, UnsupportedFormatError
from domlens.dom import DomAdapter, NodeKind, SoupAdapter, parse_html
from domlens.model import (
    Comment,
    Document,
    Element,
    Node,
    ParseResult,
    Text,
    node_from_dict,
)
from domlens.cache import FingerprintCache
from domlens.formatting import Formatter
from domlens.validation import ValidationReport, Validator

__all__ = [
    "__version__",
    "DocumentParser",
    "Settings",
    "get_settings",
    "load_config",
    "DomLensError",
    "ErrorCode",
    "UnsupportedFormatError",
    "DomAdapter",
    "NodeKind",
    "SoupAdapter",
    "parse_html",
    "Comment",
    "Document",
    "Element",
    "Node",
    "ParseResult",
    "Text",
    "node_from_dict",
    "FingerprintCache",
    "Formatter",
    "ValidationReport",
    "Validator",
]
