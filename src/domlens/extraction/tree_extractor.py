"""
Node tree extraction.

Walks a DOM through a DomAdapter and builds the engine independent
node model, plus the image and link side collections and tree stats.
"""

import re
from typing import Any

from domlens.config.settings import ParserSettings
from domlens.dom.adapter import (
    DomAdapter,
    NodeKind,
    document_element,
    find_body,
    get_attribute,
    iter_elements,
)
from domlens.model.document import DocumentStats, ImageInfo, LinkInfo
from domlens.model.nodes import Comment, Element, Node, Text, tree_depth, walk
from domlens.utils.logging import get_logger

logger = get_logger(__name__)

# Leading integer, the way browsers read a width="300px" attribute.
_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")

# Attributes copied into the map even when the adapter reports them
# under a different case.
_NORMALIZED_ATTRIBUTES = ("id", "class")


def parse_dimension(value: str | None) -> int | None:
    """
    Parse an image dimension like parseInt would.

    >>> parse_dimension("300px")
    300
    >>> parse_dimension("auto") is None
    True
    """
    if not value:
        return None
    match = _INT_PREFIX.match(value)
    return int(match.group(1)) if match else None


class TreeExtractor:
    """
    Converts a DOM tree into Element/Text/Comment nodes.

    The root element sits at depth 0. An element at ``max_depth`` is
    emitted with ``children=None`` and its subtree is skipped. Elements
    above the limit always get a child list, possibly empty.

    Example:
        >>> extractor = TreeExtractor(SoupAdapter(), ParserSettings(max_depth=5))
        >>> root = extractor.extract(parse_html("<p>Hi</p>"))
        >>> root.to_dict()
        {'type': 'element', 'tag': 'p', 'attributes': {}, 'children': [{'type': 'text', 'text': 'Hi'}]}
    """

    def __init__(self, adapter: DomAdapter, settings: ParserSettings | None = None) -> None:
        self.adapter = adapter
        self.settings = settings or ParserSettings()

    def extract(self, dom_root: Any) -> Node | None:
        """
        Build the node tree for dom_root.

        Args:
            dom_root: An element or document node

        Returns:
            The root node, or None when nothing extractable was found
        """
        root = document_element(self.adapter, dom_root)
        if root is None:
            return None

        if self.settings.text_only:
            return self._extract_text_only(dom_root, root)

        return self._extract_tree(root)

    def _extract_text_only(self, dom_root: Any, root: Any) -> Node | None:
        body = find_body(self.adapter, dom_root)
        if body is None:
            body = root
        text = self.adapter.text_content(body).strip()
        return Text(text) if text else None

    def _extract_tree(self, root: Any) -> Node | None:
        top = self._convert(root, 0)
        if not isinstance(top, Element) or top.children is None:
            return top

        # Iterative pre-order walk: each converted node is appended to the
        # child list of its parent, which is already in the output tree.
        stack = [
            (child, 1, top.children)
            for child in reversed(self.adapter.child_nodes(root))
        ]
        while stack:
            dom_node, depth, siblings = stack.pop()
            node = self._convert(dom_node, depth)
            if node is None:
                continue
            siblings.append(node)
            if isinstance(node, Element) and node.children is not None:
                stack.extend(
                    (child, depth + 1, node.children)
                    for child in reversed(self.adapter.child_nodes(dom_node))
                )

        return top

    def _convert(self, dom_node: Any, depth: int) -> Node | None:
        kind = self.adapter.node_kind(dom_node)

        if kind is NodeKind.ELEMENT:
            tag = self.adapter.tag_name(dom_node)
            if tag == "script" and not self.settings.include_scripts:
                return None
            if tag == "style" and not self.settings.include_styles:
                return None
            return Element(
                tag=tag,
                attributes=self._attributes(dom_node),
                children=[] if depth < self.settings.max_depth else None,
            )

        if kind is NodeKind.TEXT:
            raw = self.adapter.text_content(dom_node)
            stripped = raw.strip()
            if not stripped:
                return None
            return Text(raw if self.settings.preserve_whitespace else stripped)

        if kind is NodeKind.COMMENT:
            return Comment(self.adapter.text_content(dom_node))

        return None

    def _attributes(self, dom_node: Any) -> dict[str, str | None]:
        attributes: dict[str, str | None] = {}
        for name, value in self.adapter.attributes(dom_node):
            attributes.setdefault(name, value)

        for name in _NORMALIZED_ATTRIBUTES:
            if name not in attributes:
                value = get_attribute(self.adapter, dom_node, name)
                if value:
                    attributes[name] = value

        return attributes

    # =========================================================================
    # Side collections
    # =========================================================================

    def collect_images(self, dom_root: Any) -> list[ImageInfo]:
        """
        Every img with a usable source, anywhere under dom_root.

        ``src`` falls back to ``data-src`` for lazy-loaded images.
        Not bounded by max_depth.
        """
        images = []
        for element in iter_elements(self.adapter, dom_root, include_self=True):
            if self.adapter.tag_name(element) != "img":
                continue

            src = self._attr(element, "src") or self._attr(element, "data-src")
            if not src:
                continue

            images.append(ImageInfo(
                src=src,
                alt=self._attr(element, "alt"),
                width=parse_dimension(self._attr(element, "width")),
                height=parse_dimension(self._attr(element, "height")),
                title=self._attr(element, "title"),
            ))

        logger.debug(f"Collected {len(images)} images")
        return images

    def collect_links(self, dom_root: Any) -> list[LinkInfo]:
        """Every anchor with a non-empty href, anywhere under dom_root."""
        links = []
        for element in iter_elements(self.adapter, dom_root, include_self=True):
            if self.adapter.tag_name(element) != "a":
                continue
            href = self._attr(element, "href")
            if href:
                links.append(link_info(self.adapter, element))

        logger.debug(f"Collected {len(links)} links")
        return links

    def _attr(self, element: Any, name: str) -> str:
        return get_attribute(self.adapter, element, name) or ""


def link_info(adapter: DomAdapter, element: Any) -> LinkInfo:
    """Build a LinkInfo for an anchor element."""

    def attr(name: str) -> str:
        return get_attribute(adapter, element, name) or ""

    return LinkInfo(
        href=attr("href"),
        text=adapter.text_content(element).strip(),
        target=attr("target"),
        rel=attr("rel"),
        title=attr("title"),
    )


def compute_stats(root: Node | None) -> DocumentStats:
    """
    Count elements and text length over a full walk of root.

    Comment text does not count towards ``total_text_length``.
    """
    if root is None:
        return DocumentStats()

    total_elements = 0
    total_text_length = 0
    for node, _ in walk(root):
        if isinstance(node, Element):
            total_elements += 1
        elif isinstance(node, Text):
            total_text_length += len(node.text)

    return DocumentStats(
        total_elements=total_elements,
        total_text_length=total_text_length,
        depth=tree_depth(root),
    )
