"""
Character escaping for HTML and XML output.

The two tables differ only in the apostrophe: HTML output uses the
numeric reference ``&#039;``, XML output the named ``&apos;``.
"""

import re

_SPECIAL_CHARS = re.compile(r"[&<>\"']")

HTML_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#039;",
}

XML_ESCAPES = {**HTML_ESCAPES, "'": "&apos;"}

# Characters not allowed in an XML attribute name produced by to_xml().
_INVALID_XML_NAME_CHARS = re.compile(r"[^a-zA-Z0-9_-]")


def escape_html(value: object) -> str:
    """Escape ``& < > " '`` for HTML text and attribute values."""
    text = value if isinstance(value, str) else str(value)
    return _SPECIAL_CHARS.sub(lambda m: HTML_ESCAPES[m.group(0)], text)


def escape_xml(value: object) -> str:
    """Escape ``& < > " '`` for XML text and attribute values."""
    text = value if isinstance(value, str) else str(value)
    return _SPECIAL_CHARS.sub(lambda m: XML_ESCAPES[m.group(0)], text)


def sanitize_xml_name(name: str) -> str:
    """Replace every character outside ``[A-Za-z0-9_-]`` with ``_``."""
    return _INVALID_XML_NAME_CHARS.sub("_", name)
