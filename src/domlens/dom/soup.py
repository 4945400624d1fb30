"""
BeautifulSoup binding for the DOM adapter interface.

Example:
    >>> soup = parse_html("<p class='a b'>Hi</p>")
    >>> adapter = SoupAdapter()
    >>> p = adapter.document_element(soup)
    >>> adapter.attributes(p)
    [('class', 'a b')]
"""

from typing import Any, Iterator, Sequence

from bs4 import BeautifulSoup
from bs4.element import Comment, NavigableString, PreformattedString, Tag

from domlens.dom.adapter import BaseDomAdapter, NodeKind

DEFAULT_PARSER = "html.parser"


def parse_html(html: str, parser: str = DEFAULT_PARSER) -> BeautifulSoup:
    """
    Parse an HTML string into a soup.

    Multi-valued attribute splitting is disabled so that ``class`` and
    ``rel`` come back exactly as written.

    Args:
        html: Markup to parse
        parser: Tree builder name passed to BeautifulSoup

    Returns:
        The parsed document
    """
    return BeautifulSoup(html, parser, multi_valued_attributes=None)


class SoupAdapter(BaseDomAdapter):
    """DomAdapter over bs4 trees."""

    def node_kind(self, node: Any) -> NodeKind:
        # BeautifulSoup subclasses Tag, Comment subclasses PreformattedString.
        if isinstance(node, BeautifulSoup):
            return NodeKind.DOCUMENT
        if isinstance(node, Tag):
            return NodeKind.ELEMENT
        if isinstance(node, Comment):
            return NodeKind.COMMENT
        if isinstance(node, PreformattedString):
            return NodeKind.OTHER
        if isinstance(node, NavigableString):
            return NodeKind.TEXT
        return NodeKind.OTHER

    def tag_name(self, node: Any) -> str:
        return node.name.lower()

    def attributes(self, node: Any) -> Sequence[tuple[str, str]]:
        if not isinstance(node, Tag):
            return []
        pairs = []
        for name, value in node.attrs.items():
            if isinstance(value, (list, tuple)):
                value = " ".join(value)
            pairs.append((name, value))
        return pairs

    def child_nodes(self, node: Any) -> Sequence[Any]:
        if isinstance(node, Tag):
            return list(node.contents)
        return []

    def text_content(self, node: Any) -> str:
        kind = self.node_kind(node)
        if kind in (NodeKind.TEXT, NodeKind.COMMENT):
            return str(node)
        if kind in (NodeKind.ELEMENT, NodeKind.DOCUMENT):
            # Tag.get_text() skips script/style strings, textContent does not.
            return "".join(
                str(descendant)
                for descendant in self.iter_descendants(node)
                if self.node_kind(descendant) is NodeKind.TEXT
            )
        return ""

    def inner_html(self, node: Any) -> str:
        if isinstance(node, Tag):
            return node.decode_contents()
        return ""

    def select(self, node: Any, selector: str) -> Iterator[Any]:
        """Elements below node matching a CSS selector, via soupsieve."""
        if not isinstance(node, Tag):
            return iter(())
        return node.css.iselect(selector)
