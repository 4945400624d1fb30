"""
Tests for output rendering.
"""

import json

import pytest

from domlens.config import FormatterSettings
from domlens.core.exceptions import UnsupportedFormatError
from domlens.dom import parse_html
from domlens.extraction import TreeExtractor
from domlens.formatting import Formatter, XML_DECLARATION, escape_html, escape_xml, remove_empty
from domlens.model import Comment, Element, Text

BR = {"type": "element", "tag": "br", "attributes": {}, "children": []}


@pytest.fixture
def formatter() -> Formatter:
    return Formatter()


@pytest.fixture
def tree() -> Element:
    return Element(
        tag="div",
        attributes={"class": "box", "hidden": None},
        children=[
            Element(tag="h1", children=[Text("Title & <more>")]),
            Element(tag="img", attributes={"src": "a.png", "alt": "it's"}),
            Comment("note"),
            Element(tag="p", children=[Text("Body"), Element(tag="b", children=[Text("bold")])]),
        ],
    )


class TestRegistry:
    """Tests for format lookup."""

    def test_unknown_format(self, formatter):
        with pytest.raises(UnsupportedFormatError) as exc_info:
            formatter.render(BR, "yaml")

        assert exc_info.value.format_name == "yaml"
        assert exc_info.value.details["supported"] == ["json", "text", "html", "xml"]

    def test_default_format_from_settings(self):
        formatter = Formatter(FormatterSettings(default_format="html"))

        assert formatter.render(BR) == "<br />"

    def test_format_name_case_insensitive(self, formatter):
        assert formatter.render(BR, "HTML") == "<br />"

    def test_register_custom_format(self, formatter):
        formatter.register("tags", lambda data, **options: data["tag"])

        assert formatter.render(BR, "tags") == "br"
        assert "tags" in formatter.formats


class TestJson:
    """Tests for JSON output."""

    def test_default_indent(self, formatter):
        assert formatter.to_json({"a": 1}) == '{\n  "a": 1\n}'

    def test_options(self, formatter):
        output = formatter.render({"b": 1, "a": 2}, "json", indent=None, sort_keys=True)

        assert output == '{"a": 2, "b": 1}'

    def test_explicit_none_indent_is_compact(self):
        formatter = Formatter(FormatterSettings(indent=4))

        assert formatter.to_json({"a": [1, 2]}, indent=None) == '{"a": [1, 2]}'
        assert formatter.to_json({"a": 1}) == '{\n    "a": 1\n}'

    def test_non_ascii_preserved(self, formatter):
        assert "©" in formatter.to_json({"text": "©"})

    def test_exclude_empty(self, formatter):
        data = {"a": None, "b": "", "c": [], "d": {}, "e": 0, "f": False, "g": {"h": [None, ""]}, "i": [1, {}]}

        assert json.loads(formatter.to_json(data, exclude_empty=True)) == {"e": 0, "f": False, "i": [1]}

    def test_remove_empty_keeps_input(self):
        data = {"a": {"b": None}}

        assert remove_empty(data) == {}
        assert data == {"a": {"b": None}}

    def test_model_objects_serialized(self, formatter, tree):
        assert json.loads(formatter.to_json(tree)) == tree.to_dict()


class TestText:
    """Tests for indented text output."""

    def test_indentation_by_depth(self, formatter, tree):
        assert formatter.to_text(tree) == "    Title & <more>\n    Body\n      bold"

    def test_no_root(self, formatter):
        assert formatter.to_text({"structure": {"root": None}}) == ""


class TestHtml:
    """Tests for reconstructed HTML."""

    def test_br(self, formatter):
        assert formatter.to_html(BR) == "<br />"

    def test_tree(self, formatter, tree):
        assert formatter.to_html(tree) == (
            '<div class="box" hidden>'
            "<h1>Title &amp; &lt;more&gt;</h1>"
            '<img src="a.png" alt="it&#039;s" />'
            "<!-- note -->"
            "<p>Body<b>bold</b></p>"
            "</div>"
        )

    def test_root_resolution(self, formatter):
        """Nodes are found directly, under root, under structure.root and under data."""
        expected = "<br />"

        assert formatter.to_html({"root": BR}) == expected
        assert formatter.to_html({"structure": {"root": BR}}) == expected
        assert formatter.to_html({"success": True, "data": {"structure": {"root": BR}}}) == expected

    def test_no_root(self, formatter):
        assert formatter.to_html({}) == ""

    def test_comment_cannot_close_early(self, formatter):
        node = {"type": "comment", "text": "a --> <b>"}

        assert formatter.to_html(node) == "<!-- a --&gt; &lt;b&gt; -->"

    def test_escape_html(self):
        assert escape_html("<a href=\"x\">'&'</a>") == "&lt;a href=&quot;x&quot;&gt;&#039;&amp;&#039;&lt;/a&gt;"


class TestXml:
    """Tests for reconstructed XML."""

    def test_br(self, formatter):
        output = formatter.to_xml(BR)

        assert output.startswith(XML_DECLARATION)
        assert output.endswith("<br />")

    def test_empty_root(self, formatter):
        assert formatter.to_xml({}) == '<?xml version="1.0" encoding="UTF-8"?><root></root>'

    def test_tree(self, formatter, tree):
        assert formatter.to_xml(tree) == "\n".join([
            XML_DECLARATION,
            '<div class="box" hidden="">',
            "  <h1>",
            "    Title &amp; &lt;more&gt;",
            "  </h1>",
            '  <img src="a.png" alt="it&apos;s" />',
            "  <!-- note -->",
            "  <p>",
            "    Body",
            "    <b>",
            "      bold",
            "    </b>",
            "  </p>",
            "</div>",
        ])

    def test_attribute_names_sanitized(self, formatter):
        node = {"type": "element", "tag": "a", "attributes": {"xml:lang": "en", "@click": "go"}}

        assert formatter.to_xml(node).endswith('<a xml_lang="en" _click="go" />')

    def test_comment_cannot_close_early(self, formatter):
        node = {"type": "element", "tag": "div", "children": [{"type": "comment", "text": "x-->y"}]}

        assert formatter.to_xml(node).endswith("<div>\n  <!-- x--&gt;y -->\n</div>")

    def test_escape_xml(self):
        assert escape_xml("'") == "&apos;"


class TestRoundTrip:
    """Rendering then re-extracting yields the same tree."""

    HTML = (
        "<html><body>"
        '<div class="a b" title="it\'s &quot;x&quot;">'
        "<h1>Fish &amp; chips</h1>"
        '<p>Hello <b>world</b> <a href="/x?a=1&amp;b=2">link</a></p>'
        '<img src="p.png" alt="">'
        "<br>"
        "</div>"
        "</body></html>"
    )

    def _extract(self, adapter, html):
        return TreeExtractor(adapter).extract(parse_html(html))

    @pytest.mark.parametrize("format_name", ["html", "xml"])
    def test_round_trip(self, adapter, formatter, format_name):
        original = self._extract(adapter, self.HTML)
        rendered = formatter.render(original, format_name)

        assert self._extract(adapter, rendered) == original
