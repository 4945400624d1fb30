"""
Tests for the node model and document types.
"""

import pytest

from domlens.model import (
    Comment,
    Document,
    DocumentStats,
    DocumentStructure,
    Element,
    ImageInfo,
    ParseResult,
    Region,
    Text,
    node_from_dict,
    tree_depth,
    walk,
)
from domlens.validation import ValidationReport


@pytest.fixture
def small_tree() -> Element:
    return Element(
        tag="div",
        attributes={"id": "main"},
        children=[
            Text("one"),
            Element(tag="p", children=[Text("two")]),
            Comment(" c "),
        ],
    )


class TestNodes:
    """Tests for node construction and serialization."""

    def test_element_requires_tag(self):
        with pytest.raises(ValueError):
            Element(tag="")

    def test_element_to_dict(self, small_tree):
        data = small_tree.to_dict()

        assert data["type"] == "element"
        assert data["attributes"] == {"id": "main"}
        assert data["children"][0] == {"type": "text", "text": "one"}
        assert data["children"][2] == {"type": "comment", "text": " c "}

    def test_non_descended_element_has_no_children_key(self):
        """An element cut off by the depth limit serializes without children."""
        cut = Element(tag="div", children=None)

        assert "children" not in cut.to_dict()
        assert cut.descended is False
        assert Element(tag="div").to_dict()["children"] == []

    def test_node_from_dict_round_trip(self, small_tree):
        assert node_from_dict(small_tree.to_dict()) == small_tree

    def test_node_from_dict_keeps_missing_children(self):
        node = node_from_dict({"type": "element", "tag": "b", "attributes": {}})

        assert node.children is None

    def test_node_from_dict_invalid_type(self):
        with pytest.raises(ValueError, match="Invalid node type: bogus"):
            node_from_dict({"type": "bogus"})


class TestTraversal:
    """Tests for walk and tree_depth."""

    def test_walk_document_order(self, small_tree):
        visited = [(type(node).__name__, depth) for node, depth in walk(small_tree)]

        assert visited == [
            ("Element", 0),
            ("Text", 1),
            ("Element", 1),
            ("Text", 2),
            ("Comment", 1),
        ]

    def test_tree_depth(self, small_tree):
        assert tree_depth(small_tree) == 2
        assert tree_depth(Text("leaf")) == 0


class TestDocument:
    """Tests for the document aggregate's wire format."""

    def test_camel_case_keys(self):
        document = Document(
            structure=DocumentStructure(
                root=Element(tag="body"),
                main_content=Region(html="<p>x</p>", text="x"),
            ),
            images=[ImageInfo(src="a.png")],
            stats=DocumentStats(total_elements=1, total_text_length=0, depth=0),
        )
        data = document.to_dict()

        assert data["structure"]["mainContent"] == {"html": "<p>x</p>", "text": "x"}
        assert data["stats"] == {"totalElements": 1, "totalTextLength": 0, "depth": 0}
        assert "openGraph" in data["metadata"]
        assert "twitterCard" in data["metadata"]
        assert data["metadata"]["charset"] == "utf-8"
        assert data["images"][0] == {
            "src": "a.png", "alt": "", "width": None, "height": None, "title": "",
        }
        assert document.root == Element(tag="body")


class TestParseResult:
    """Tests for parse result helpers."""

    def test_failure_to_dict_omits_missing_fields(self):
        result = ParseResult.failure("bad input", "INVALID_INPUT", duration=1.5)

        assert result.to_dict() == {
            "success": False,
            "error": "bad input",
            "errorCode": "INVALID_INPUT",
            "duration": 1.5,
        }

    def test_with_duration_copies(self):
        result = ParseResult.ok(Document(), duration=1.0)
        copy = result.with_duration(2.0)

        assert copy is not result
        assert copy.duration == 2.0
        assert result.duration == 1.0
        assert copy.data is result.data

    def test_validation_serialized(self):
        result = ParseResult(
            success=True,
            data=Document(),
            validation=ValidationReport(valid=True),
        )

        assert result.to_dict()["validation"] == {"valid": True, "errors": [], "warnings": []}
