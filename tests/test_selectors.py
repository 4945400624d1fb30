"""
Tests for the DOM adapter and selector engine.
"""

import pytest

from domlens.core.exceptions import SelectorError
from domlens.dom import (
    NodeKind,
    SelectorChain,
    compile_selector,
    SoupAdapter,
    parse_html,
    select_all,
    select_one,
)


def _ids(adapter, elements):
    return [adapter.get_attribute(element, "id") for element in elements]


class GenericSoupAdapter(SoupAdapter):
    """SoupAdapter without native selection, so the generic matcher runs."""

    select = None


class TestSoupAdapter:
    """Tests for the BeautifulSoup binding."""

    def test_node_kinds(self, adapter):
        soup = parse_html("<!DOCTYPE html><p>Hi<!-- c --></p>")
        doctype, paragraph = adapter.child_nodes(soup)
        text, comment = adapter.child_nodes(paragraph)

        assert adapter.node_kind(soup) is NodeKind.DOCUMENT
        assert adapter.node_kind(doctype) is NodeKind.OTHER
        assert adapter.node_kind(paragraph) is NodeKind.ELEMENT
        assert adapter.node_kind(text) is NodeKind.TEXT
        assert adapter.node_kind(comment) is NodeKind.COMMENT
        assert adapter.text_content(comment) == " c "

    def test_multi_valued_attributes_kept_as_written(self, adapter):
        soup = parse_html('<a class="x  y" rel="nofollow noopener" href="/">L</a>')
        anchor = adapter.document_element(soup)

        assert adapter.attributes(anchor) == [
            ("class", "x  y"),
            ("rel", "nofollow noopener"),
            ("href", "/"),
        ]

    def test_text_content_includes_script_text(self, adapter):
        soup = parse_html("<div>a<script>b</script><!-- c -->d</div>")
        div = adapter.document_element(soup)

        assert adapter.text_content(div) == "abd"

    def test_inner_html(self, adapter):
        soup = parse_html("<div><b>x</b> &amp; y</div>")

        assert adapter.inner_html(adapter.document_element(soup)) == "<b>x</b> &amp; y"

    def test_body_lookup(self, adapter):
        soup = parse_html("<html><head></head><body><p>x</p></body></html>")

        assert adapter.tag_name(adapter.body(soup)) == "body"
        assert adapter.body(parse_html("<p>x</p>")) is None


class TestCompileSelector:
    """Tests for selector compilation."""

    @pytest.mark.parametrize(
        "selector",
        ["div p", "div > p", "h1 + p", "h1 ~ p", "a:hover", "", "div,", "[unclosed"],
    )
    def test_unsupported_syntax_rejected(self, selector):
        with pytest.raises(SelectorError):
            compile_selector(selector)

    def test_selector_list(self):
        compiled = compile_selector('h1, .title, [class*="title"]')

        assert len(compiled.selectors) == 3
        assert compiled.selectors[0].tag == "h1"
        assert compiled.selectors[1].classes == ("title",)
        assert compiled.selectors[2].attributes[0].operator == "*="

    def test_quoted_comma_not_split(self):
        compiled = compile_selector('[data-x="a,b"]')

        assert len(compiled.selectors) == 1
        assert compiled.selectors[0].attributes[0].value == "a,b"


class TestSelectMatching:
    """Tests for matching against a parsed document."""

    @pytest.fixture(params=[SoupAdapter, GenericSoupAdapter], ids=["soupsieve", "generic"])
    def adapter(self, request):
        return request.param()

    HTML = """
    <div id="d1" class="nav main" role="navigation" lang="en-US"></div>
    <section id="d2" data-src="/img/photo.png"></section>
    <p id="d3" class="content-wrapper"></p>
    <p id="d4" class="Nav"></p>
    """

    @pytest.fixture
    def soup(self):
        return parse_html(self.HTML)

    @pytest.mark.parametrize(
        "selector, expected",
        [
            ("p", ["d3", "d4"]),
            ("*", ["d1", "d2", "d3", "d4"]),
            (".nav", ["d1"]),
            (".nav.main", ["d1"]),
            ("div.main#d1", ["d1"]),
            ("#d2", ["d2"]),
            ("[data-src]", ["d2"]),
            ('[role="navigation"]', ["d1"]),
            ("[role=navigation]", ["d1"]),
            ("[class~='main']", ["d1"]),
            ('[data-src^="/img"]', ["d2"]),
            ('[data-src$=".png"]', ["d2"]),
            ('[class*="content"]', ["d3"]),
            ('[lang|="en"]', ["d1"]),
            ('[data-src^=""]', []),
            ("p, div", ["d1", "d3", "d4"]),
        ],
    )
    def test_select_all(self, adapter, soup, selector, expected):
        assert _ids(adapter, select_all(adapter, soup, selector)) == expected

    def test_select_one_returns_first_in_document_order(self, adapter, soup):
        found = select_one(adapter, soup, "p, [data-src]")

        assert adapter.get_attribute(found, "id") == "d2"

    def test_select_one_no_match(self, adapter, soup):
        assert select_one(adapter, soup, "article") is None

    def test_class_match_is_case_sensitive(self, adapter, soup):
        assert _ids(adapter, select_all(adapter, soup, ".Nav")) == ["d4"]


class TestSelectorChain:
    """Tests for ordered fallback chains."""

    def test_first_prefers_chain_order_over_document_order(self, adapter):
        soup = parse_html('<nav id="a"></nav><div class="nav" id="b"></div>')
        chain = SelectorChain((".nav", "nav"))

        assert adapter.get_attribute(chain.first(adapter, soup), "id") == "b"

    def test_all_reports_each_element_once(self, adapter):
        soup = parse_html(
            '<div role="article" id="c"></div>'
            '<article class="article" id="a"></article>'
            '<div class="article" id="b"></div>'
        )
        chain = SelectorChain(("article", ".article", '[role="article"]'))

        assert _ids(adapter, chain.all(adapter, soup)) == ["a", "b", "c"]

    def test_invalid_chain_rejected_at_construction(self):
        with pytest.raises(SelectorError):
            SelectorChain(("nav a",))


class TestNativeSelection:
    """Tests for the soupsieve-backed selection path."""

    def test_soup_adapter_selects_natively(self, adapter):
        soup = parse_html('<div><p class="x">a</p><p>b</p></div>')

        assert [adapter.text_content(p) for p in adapter.select(soup, "p.x")] == ["a"]

    def test_non_tag_selects_nothing(self, adapter):
        text = parse_html("<p>x</p>").p.string

        assert list(adapter.select(text, "p")) == []

    def test_unsupported_syntax_rejected_before_native_select(self, adapter):
        soup = parse_html("<div><p>x</p></div>")

        with pytest.raises(SelectorError):
            select_all(adapter, soup, "div p")

    def test_paths_agree_on_regions(self, sample_html):
        soup = parse_html(sample_html)
        native, generic = SoupAdapter(), GenericSoupAdapter()

        for selector in ("nav, header", "a", '[class*="author"]', 'link[rel~="canonical"]', "time, [datetime]"):
            assert select_all(native, soup, selector) == select_all(generic, soup, selector)
