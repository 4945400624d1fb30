"""
Formatting module for domlens.

Renders parse output as JSON, plain text, HTML or XML.
"""

from domlens.formatting.escape import (
    escape_html,
    escape_xml,
    sanitize_xml_name,
)
from domlens.formatting.formatter import (
    Formatter,
    XML_DECLARATION,
    remove_empty,
    resolve_root,
    to_plain,
)

__all__ = [
    "Formatter",
    "XML_DECLARATION",
    "remove_empty",
    "resolve_root",
    "to_plain",
    "escape_html",
    "escape_xml",
    "sanitize_xml_name",
]
