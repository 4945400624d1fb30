"""
Node model: the DOM-engine independent tree produced by extraction.

A node is one of three frozen dataclasses:

- Element: lowercased tag, ordered attributes, ordered children
- Text: trimmed text content (never empty once extracted)
- Comment: raw comment payload

An Element whose ``children`` is None was not descended into because the
extractor hit its depth limit. Its serialized form has no "children" key,
which keeps it distinguishable from an element that genuinely has no
children (``children == []``).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Mapping, Union


# Element kinds that never carry children in HTML serialization.
SELF_CLOSING_TAGS = frozenset({
    "img", "br", "hr", "input", "meta", "link", "area",
    "base", "col", "embed", "source", "track", "wbr",
})


class NodeType(str, Enum):
    """Discriminant values used in the serialized node form."""

    ELEMENT = "element"
    TEXT = "text"
    COMMENT = "comment"
    DOCUMENT = "document"


@dataclass(frozen=True)
class Element:
    """An element node."""

    tag: str
    attributes: dict[str, str | None] = field(default_factory=dict)
    children: list["Node"] | None = field(default_factory=list)

    node_type = NodeType.ELEMENT

    def __post_init__(self) -> None:
        if not self.tag:
            raise ValueError("Element tag must be a non-empty string")

    @property
    def descended(self) -> bool:
        """False when extraction stopped at this element's depth."""
        return self.children is not None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": self.node_type.value,
            "tag": self.tag,
            "attributes": dict(self.attributes),
        }
        if self.children is not None:
            data["children"] = [child.to_dict() for child in self.children]
        return data


@dataclass(frozen=True)
class Text:
    """A text node."""

    text: str

    node_type = NodeType.TEXT

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.node_type.value, "text": self.text}


@dataclass(frozen=True)
class Comment:
    """A comment node. Text is kept exactly as the DOM reported it."""

    text: str

    node_type = NodeType.COMMENT

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.node_type.value, "text": self.text}


Node = Union[Element, Text, Comment]


def node_from_dict(data: Mapping[str, Any]) -> Node:
    """
    Rebuild a node tree from its serialized form.

    Args:
        data: Mapping produced by ``Node.to_dict()``

    Returns:
        The equivalent node tree

    Raises:
        ValueError: If a node has an unknown type or a missing field
    """
    node_type = data.get("type")

    if node_type == NodeType.ELEMENT.value:
        children = data.get("children")
        return Element(
            tag=data.get("tag") or "",
            attributes=dict(data.get("attributes") or {}),
            children=None if children is None else [
                node_from_dict(child) for child in children
            ],
        )

    if node_type == NodeType.TEXT.value:
        return Text(text=_require_text(data))

    if node_type == NodeType.COMMENT.value:
        return Comment(text=_require_text(data))

    raise ValueError(f"Invalid node type: {node_type}")


def _require_text(data: Mapping[str, Any]) -> str:
    text = data.get("text")
    if not isinstance(text, str):
        raise ValueError(f"{data.get('type')} node missing text field")
    return text


def walk(node: Node, depth: int = 0) -> Iterator[tuple[Node, int]]:
    """
    Yield ``(node, depth)`` pairs in document order.

    The starting node has depth 0.
    """
    stack: list[tuple[Node, int]] = [(node, depth)]
    while stack:
        current, level = stack.pop()
        yield current, level
        if isinstance(current, Element) and current.children:
            stack.extend(
                (child, level + 1) for child in reversed(current.children)
            )


def tree_depth(node: Node) -> int:
    """
    Number of edges from node to its deepest descendant.

    Leaves (including elements with an empty or missing child list)
    have depth 0.
    """
    return max(level for _, level in walk(node))
