"""
Node model and document types.
"""

from domlens.model.nodes import (
    NodeType,
    Node,
    Element,
    Text,
    Comment,
    node_from_dict,
    walk,
    tree_depth,
)
from domlens.model.document import (
    ImageInfo,
    LinkInfo,
    Region,
    NavigationRegion,
    ArticleMetadata,
    ArticleRegion,
    DocumentMetadata,
    DocumentStructure,
    DocumentStats,
    Document,
    ParseResult,
)

__all__ = [
    # Nodes
    "NodeType",
    "Node",
    "Element",
    "Text",
    "Comment",
    "node_from_dict",
    "walk",
    "tree_depth",
    # Document
    "ImageInfo",
    "LinkInfo",
    "Region",
    "NavigationRegion",
    "ArticleMetadata",
    "ArticleRegion",
    "DocumentMetadata",
    "DocumentStructure",
    "DocumentStats",
    "Document",
    "ParseResult",
]
