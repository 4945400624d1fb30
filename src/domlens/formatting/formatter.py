"""
Output rendering.

Renders documents, parse results and node trees as JSON, indented
plain text, reconstructed HTML or reconstructed XML. Formats live in a
registry so callers can add their own.

Example:
    >>> formatter = Formatter()
    >>> formatter.render({"type": "element", "tag": "br", "attributes": {}, "children": []}, "html")
    '<br />'
"""

import json
from collections.abc import Mapping
from typing import Any, Callable

from domlens.config.settings import FormatterSettings
from domlens.core.exceptions import UnsupportedFormatError
from domlens.formatting.escape import escape_html, escape_xml, sanitize_xml_name
from domlens.model.nodes import SELF_CLOSING_TAGS, NodeType
from domlens.utils.logging import get_logger

logger = get_logger(__name__)

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

Renderer = Callable[..., str]

# Sentinel for renderer options the caller left out.
_DEFAULT: Any = object()


def to_plain(data: Any) -> Any:
    """Serialize model objects through their to_dict(), pass anything else through."""
    to_dict = getattr(data, "to_dict", None)
    return to_dict() if callable(to_dict) else data


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or value == [] or value == {}


def remove_empty(value: Any) -> Any:
    """
    Recursively drop None, "", [] and {} from mappings and lists.

    Containers are cleaned before they are tested, so a mapping holding
    only empty values disappears too. 0 and False are kept.
    """
    if isinstance(value, Mapping):
        cleaned = {key: remove_empty(item) for key, item in value.items()}
        return {key: item for key, item in cleaned.items() if not _is_empty(item)}
    if isinstance(value, (list, tuple)):
        cleaned_items = [remove_empty(item) for item in value]
        return [item for item in cleaned_items if not _is_empty(item)]
    return value


def resolve_root(data: Any) -> Mapping[str, Any] | None:
    """
    Find the node tree to render.

    Accepts a node, a Document, a ParseResult or their serialized
    mappings. Looks for a node mapping itself, then ``root``, then
    ``structure.root``, then inside ``data``.
    """
    plain = to_plain(data)
    while isinstance(plain, Mapping):
        if "type" in plain:
            return plain
        if "root" in plain:
            root = plain["root"]
            return root if isinstance(root, Mapping) else None
        if isinstance(plain.get("structure"), Mapping):
            root = plain["structure"].get("root")
            return root if isinstance(root, Mapping) else None
        if "data" in plain:
            plain = plain["data"]
            continue
        return None
    return None


class Formatter:
    """
    Renders parse output in a named format.

    Built-in formats are json, text, html and xml. Unknown names raise
    UnsupportedFormatError.
    """

    def __init__(self, settings: FormatterSettings | None = None) -> None:
        self.settings = settings or FormatterSettings()
        self._renderers: dict[str, Renderer] = {
            "json": self.to_json,
            "text": self.to_text,
            "html": self.to_html,
            "xml": self.to_xml,
        }

    @property
    def formats(self) -> list[str]:
        return list(self._renderers)

    def register(self, name: str, renderer: Renderer) -> None:
        """Add or replace a format. renderer(data, **options) -> str."""
        self._renderers[name.lower()] = renderer
        logger.debug(f"Registered output format: {name}")

    def render(self, data: Any, format_name: str | None = None, **options: Any) -> str:
        """
        Render data in the named format.

        Args:
            data: Document, ParseResult, node or mapping
            format_name: Registered format name. Defaults to settings.default_format.
            **options: Passed through to the renderer

        Returns:
            Rendered string

        Raises:
            UnsupportedFormatError: If no renderer is registered under format_name
        """
        name = (format_name or self.settings.default_format).lower()
        renderer = self._renderers.get(name)
        if renderer is None:
            raise UnsupportedFormatError(format_name or name, supported=self.formats)
        return renderer(data, **options)

    # =========================================================================
    # JSON
    # =========================================================================

    def to_json(
        self,
        data: Any,
        indent: int | None = _DEFAULT,
        sort_keys: bool = _DEFAULT,
        exclude_empty: bool = _DEFAULT,
    ) -> str:
        """
        Serialize to JSON, keeping non-ASCII characters as is.

        Options left out fall back to the formatter settings. An explicit
        ``indent=None`` produces single-line output.
        """
        plain = to_plain(data)
        if self.settings.exclude_empty if exclude_empty is _DEFAULT else exclude_empty:
            plain = remove_empty(plain)

        return json.dumps(
            plain,
            indent=self.settings.indent if indent is _DEFAULT else indent,
            sort_keys=self.settings.sort_keys if sort_keys is _DEFAULT else sort_keys,
            ensure_ascii=False,
            default=str,
        )

    # =========================================================================
    # Text
    # =========================================================================

    def to_text(self, data: Any) -> str:
        """One line per non-blank text node, indented two spaces per depth."""
        root = resolve_root(data)
        if root is None:
            return ""

        lines = []
        stack: list[tuple[Any, int]] = [(root, 0)]
        while stack:
            node, depth = stack.pop()
            if not isinstance(node, Mapping):
                continue
            if node.get("type") == NodeType.TEXT.value:
                text = str(node.get("text") or "").strip()
                if text:
                    lines.append("  " * depth + text)
            children = node.get("children") or []
            stack.extend((child, depth + 1) for child in reversed(children))

        return "\n".join(lines)

    # =========================================================================
    # HTML
    # =========================================================================

    def to_html(self, data: Any) -> str:
        """Reconstruct HTML. Empty string when there is no tree."""
        root = resolve_root(data)
        return self._html_node(root) if root is not None else ""

    def _html_node(self, node: Mapping[str, Any]) -> str:
        node_type = node.get("type")

        if node_type == NodeType.TEXT.value:
            return escape_html(node.get("text", ""))

        if node_type == NodeType.COMMENT.value:
            return f"<!-- {escape_html(node.get('text') or '')} -->"

        children = "".join(
            self._html_node(child)
            for child in node.get("children") or []
            if isinstance(child, Mapping)
        )

        if node_type == NodeType.DOCUMENT.value:
            return children

        if node_type != NodeType.ELEMENT.value:
            return ""

        tag = node.get("tag", "")
        attributes = "".join(
            f" {name}" if value is None else f' {name}="{escape_html(value)}"'
            for name, value in (node.get("attributes") or {}).items()
        )

        if tag in SELF_CLOSING_TAGS:
            return f"<{tag}{attributes} />"
        return f"<{tag}{attributes}>{children}</{tag}>"

    # =========================================================================
    # XML
    # =========================================================================

    def to_xml(self, data: Any) -> str:
        """
        Reconstruct XML with two-space pretty printing.

        Attribute names are reduced to ``[A-Za-z0-9_-]`` and None values
        become empty strings.
        """
        root = resolve_root(data)
        if root is None:
            return f"{XML_DECLARATION}<root></root>"
        return f"{XML_DECLARATION}\n{self._xml_node(root, 0)}"

    def _xml_node(self, node: Mapping[str, Any], depth: int) -> str:
        indent = "  " * depth
        node_type = node.get("type")

        if node_type == NodeType.TEXT.value:
            return indent + escape_xml(node.get("text", ""))

        if node_type == NodeType.COMMENT.value:
            return f"{indent}<!-- {escape_xml(node.get('text') or '')} -->"

        rendered = [
            self._xml_node(child, depth + 1)
            for child in node.get("children") or []
            if isinstance(child, Mapping)
        ]
        rendered = [child for child in rendered if child.strip()]

        if node_type == NodeType.DOCUMENT.value:
            return "\n".join(rendered)

        if node_type != NodeType.ELEMENT.value:
            return ""

        tag = node.get("tag", "")
        attributes = "".join(
            f' {sanitize_xml_name(name)}="{escape_xml("" if value is None else value)}"'
            for name, value in (node.get("attributes") or {}).items()
        )

        if not rendered:
            return f"{indent}<{tag}{attributes} />"
        body = "\n".join(rendered)
        return f"{indent}<{tag}{attributes}>\n{body}\n{indent}</{tag}>"
