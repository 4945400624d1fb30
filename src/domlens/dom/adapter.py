"""
DOM adapter interface.

The extractors never touch a concrete DOM library. They are written
against the small capability set below, supplied by the caller:

- node_kind(node): ELEMENT, TEXT, COMMENT, DOCUMENT or OTHER
- tag_name(node): element tag, lowercased
- attributes(node): ordered (name, value) pairs
- child_nodes(node): ordered children
- text_content(node): payload of a text/comment node, or the
  concatenated descendant text of an element/document
- inner_html(node): serialized children of an element/document

BaseDomAdapter implements the derived predicates and a generic
inner_html, so a binding only has to provide the five primitives.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Iterator, Protocol, Sequence, runtime_checkable

from domlens.formatting.escape import escape_html
from domlens.model.nodes import SELF_CLOSING_TAGS


class NodeKind(str, Enum):
    """Discriminant of a DOM node as seen by the extractors."""

    ELEMENT = "element"
    TEXT = "text"
    COMMENT = "comment"
    DOCUMENT = "document"
    OTHER = "other"


@runtime_checkable
class DomAdapter(Protocol):
    """Capabilities a DOM binding must provide."""

    def node_kind(self, node: Any) -> NodeKind: ...

    def is_element(self, node: Any) -> bool: ...

    def is_text(self, node: Any) -> bool: ...

    def is_comment(self, node: Any) -> bool: ...

    def tag_name(self, node: Any) -> str: ...

    def attributes(self, node: Any) -> Sequence[tuple[str, str]]: ...

    def child_nodes(self, node: Any) -> Sequence[Any]: ...

    def text_content(self, node: Any) -> str: ...

    def inner_html(self, node: Any) -> str: ...

    def get_attribute(self, node: Any, name: str) -> str | None: ...


class BaseDomAdapter(ABC):
    """Partial DomAdapter implementing everything derivable from the primitives."""

    @abstractmethod
    def node_kind(self, node: Any) -> NodeKind:
        """Classify a node."""

    @abstractmethod
    def tag_name(self, node: Any) -> str:
        """Lowercased tag name of an element."""

    @abstractmethod
    def attributes(self, node: Any) -> Sequence[tuple[str, str]]:
        """Attributes of an element in document order."""

    @abstractmethod
    def child_nodes(self, node: Any) -> Sequence[Any]:
        """Children of an element or document, empty for leaves."""

    @abstractmethod
    def text_content(self, node: Any) -> str:
        """Text payload (text/comment) or descendant text (element/document)."""

    def is_element(self, node: Any) -> bool:
        return self.node_kind(node) is NodeKind.ELEMENT

    def is_text(self, node: Any) -> bool:
        return self.node_kind(node) is NodeKind.TEXT

    def is_comment(self, node: Any) -> bool:
        return self.node_kind(node) is NodeKind.COMMENT

    def is_document(self, node: Any) -> bool:
        return self.node_kind(node) is NodeKind.DOCUMENT

    def get_attribute(self, node: Any, name: str) -> str | None:
        return get_attribute(self, node, name)

    def iter_descendants(self, node: Any, include_self: bool = False) -> Iterator[Any]:
        return iter_descendants(self, node, include_self)

    def iter_elements(self, node: Any, include_self: bool = False) -> Iterator[Any]:
        return iter_elements(self, node, include_self)

    def document_element(self, root: Any) -> Any | None:
        return document_element(self, root)

    def body(self, root: Any) -> Any | None:
        return find_body(self, root)

    def inner_html(self, node: Any) -> str:
        """Serialize the children of node as HTML."""
        return "".join(self._outer_html(child) for child in self.child_nodes(node))

    def _outer_html(self, node: Any) -> str:
        kind = self.node_kind(node)

        if kind is NodeKind.TEXT:
            return escape_html(self.text_content(node))

        if kind is NodeKind.COMMENT:
            return f"<!--{self.text_content(node)}-->"

        if kind is not NodeKind.ELEMENT:
            return ""

        tag = self.tag_name(node)
        attrs = "".join(
            f' {name}="{escape_html(value)}"' for name, value in self.attributes(node)
        )
        if tag in SELF_CLOSING_TAGS:
            return f"<{tag}{attrs}>"
        return f"<{tag}{attrs}>{self.inner_html(node)}</{tag}>"


# =============================================================================
# Traversal helpers usable with any DomAdapter
# =============================================================================


def get_attribute(adapter: DomAdapter, node: Any, name: str) -> str | None:
    """Value of the first attribute called name (case-insensitive), or None."""
    wanted = name.lower()
    for attr_name, value in adapter.attributes(node):
        if attr_name.lower() == wanted:
            return value
    return None


def iter_descendants(
    adapter: DomAdapter,
    node: Any,
    include_self: bool = False,
) -> Iterator[Any]:
    """Yield the nodes below node in document (pre-)order."""
    if include_self:
        yield node

    stack = list(reversed(adapter.child_nodes(node)))
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(adapter.child_nodes(current)))


def iter_elements(
    adapter: DomAdapter,
    node: Any,
    include_self: bool = False,
) -> Iterator[Any]:
    """Like iter_descendants, restricted to element nodes."""
    for current in iter_descendants(adapter, node, include_self):
        if adapter.node_kind(current) is NodeKind.ELEMENT:
            yield current


def find_first_by_tag(adapter: DomAdapter, root: Any, tag: str) -> Any | None:
    """First element with the given tag at or below root."""
    for element in iter_elements(adapter, root, include_self=True):
        if adapter.tag_name(element) == tag:
            return element
    return None


def document_element(adapter: DomAdapter, root: Any) -> Any | None:
    """
    Resolve the element extraction starts from.

    An element root is returned as is. For a document root this is the
    first element child (normally ``html``).
    """
    kind = adapter.node_kind(root)
    if kind is NodeKind.ELEMENT:
        return root
    if kind is NodeKind.DOCUMENT:
        for child in adapter.child_nodes(root):
            if adapter.node_kind(child) is NodeKind.ELEMENT:
                return child
    return None


def find_body(adapter: DomAdapter, root: Any) -> Any | None:
    """The first ``body`` element at or below root, if any."""
    if root is None:
        return None
    return find_first_by_tag(adapter, root, "body")
