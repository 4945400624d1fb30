"""
Region and metadata extraction.

Regions (navigation, header, footer, sidebar, main content, articles)
are located through a table of ordered selector chains. Head metadata
comes from ``<title>``, ``<meta>`` and the canonical ``<link>``.
"""

import re
from dataclasses import dataclass
from typing import Any

from domlens.config.settings import ParserSettings
from domlens.dom.adapter import DomAdapter, document_element, find_body, get_attribute
from domlens.dom.selectors import (
    SelectorChain,
    SelectorList,
    compile_selector,
    select_all,
    select_one,
)
from domlens.extraction.tree_extractor import link_info
from domlens.model.document import (
    ArticleMetadata,
    ArticleRegion,
    DocumentMetadata,
    NavigationRegion,
    Region,
)
from domlens.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class RegionRule:
    """A named region, the parser setting toggling it and its selector chain."""

    name: str
    setting: str
    chain: SelectorChain


REGION_RULES: tuple[RegionRule, ...] = (
    RegionRule(
        "navigation",
        "extract_navigation",
        SelectorChain((".nav", ".navigation", "nav", '[role="navigation"]')),
    ),
    RegionRule(
        "header",
        "extract_headers",
        SelectorChain(("header", ".header", '[role="banner"]')),
    ),
    RegionRule(
        "footer",
        "extract_footers",
        SelectorChain(("footer", ".footer", '[role="contentinfo"]')),
    ),
    RegionRule(
        "sidebar",
        "extract_sidebars",
        SelectorChain((".sidebar", "aside", '[role="complementary"]')),
    ),
)

# Tried in order before falling back to body, then the document element.
MAIN_CONTENT_CHAINS: tuple[SelectorChain, ...] = (
    SelectorChain(("main", ".main", '[role="main"]')),
    SelectorChain((".content-wrapper", "#content", '[class*="content"]')),
)

ARTICLE_CHAIN = SelectorChain(("article", ".article", '[role="article"]'))

ARTICLE_TITLE = compile_selector('h1, h2, h3, .title, [class*="title"]')
ARTICLE_AUTHOR = compile_selector('[class*="author"], [rel="author"]')
ARTICLE_DATE = compile_selector('time, [class*="date"], [datetime]')
ARTICLE_CATEGORY = compile_selector('[class*="category"], [class*="tag"]')

_CONTENT_TYPE_CHARSET = re.compile(r"charset\s*=\s*[\"']?([^\s;\"']+)", re.I)


class RegionExtractor:
    """
    Locates semantic regions and head metadata in a DOM.

    Example:
        >>> regions = RegionExtractor(SoupAdapter())
        >>> found = regions.extract_regions(soup)
        >>> found["main_content"].text
        'Body text'
    """

    def __init__(self, adapter: DomAdapter, settings: ParserSettings | None = None) -> None:
        self.adapter = adapter
        self.settings = settings or ParserSettings()

    def extract_regions(self, dom_root: Any) -> dict[str, Any]:
        """
        Locate every enabled region.

        Returns:
            Keyword arguments for DocumentStructure (everything but root)
        """
        regions: dict[str, Any] = {}

        for rule in REGION_RULES:
            element = None
            if getattr(self.settings, rule.setting):
                element = rule.chain.first(self.adapter, dom_root)

            if element is None:
                regions[rule.name] = None
            elif rule.name == "navigation":
                regions[rule.name] = self._navigation(element)
            else:
                regions[rule.name] = self._region(element)

        regions["articles"] = (
            self.extract_articles(dom_root) if self.settings.extract_articles else []
        )

        main = self.find_main_content(dom_root)
        regions["main_content"] = self._region(main) if main is not None else None

        logger.debug(
            "Regions found: "
            + ", ".join(name for name, value in regions.items() if value)
        )
        return regions

    def find_main_content(self, dom_root: Any) -> Any | None:
        """Main content element, falling back to body and then the document element."""
        for chain in MAIN_CONTENT_CHAINS:
            element = chain.first(self.adapter, dom_root)
            if element is not None:
                return element

        body = find_body(self.adapter, dom_root)
        if body is not None:
            return body
        return document_element(self.adapter, dom_root)

    def extract_articles(self, dom_root: Any) -> list[ArticleRegion]:
        articles = []
        for element in ARTICLE_CHAIN.all(self.adapter, dom_root):
            region = self._region(element)
            articles.append(ArticleRegion(
                html=region.html,
                text=region.text,
                title=self._probe_text(element, ARTICLE_TITLE),
                metadata=ArticleMetadata(
                    author=self._probe_text(element, ARTICLE_AUTHOR),
                    date=self._probe_date(element),
                    category=self._probe_text(element, ARTICLE_CATEGORY),
                ),
            ))
        return articles

    def _region(self, element: Any) -> Region:
        return Region(
            html=self.adapter.inner_html(element),
            text=self.adapter.text_content(element).strip(),
        )

    def _navigation(self, element: Any) -> NavigationRegion:
        anchors = select_all(self.adapter, element, "a")
        return NavigationRegion(
            links=[link_info(self.adapter, anchor) for anchor in anchors],
            html=self.adapter.inner_html(element),
        )

    def _probe_text(self, element: Any, selector: SelectorList) -> str:
        found = select_one(self.adapter, element, selector)
        if found is None:
            return ""
        return self.adapter.text_content(found).strip()

    def _probe_date(self, element: Any) -> str:
        found = select_one(self.adapter, element, ARTICLE_DATE)
        if found is None:
            return ""
        return (
            get_attribute(self.adapter, found, "datetime")
            or self.adapter.text_content(found).strip()
        )

    # =========================================================================
    # Metadata
    # =========================================================================

    def extract_metadata(self, dom_root: Any) -> DocumentMetadata:
        """
        Read head metadata.

        For named values, ``meta[name=x]`` is preferred over
        ``meta[property=x]``. Keywords are split on commas with blanks
        dropped. Open Graph and Twitter Card entries without content are
        skipped.
        """
        metas = select_all(self.adapter, dom_root, "meta")

        title_element = select_one(self.adapter, dom_root, "title")
        title = (
            self.adapter.text_content(title_element).strip()
            if title_element is not None else ""
        )

        keywords = [
            keyword.strip()
            for keyword in self._meta_content(metas, "keywords").split(",")
            if keyword.strip()
        ]

        canonical = select_one(self.adapter, dom_root, 'link[rel~="canonical"]')

        return DocumentMetadata(
            title=title,
            description=self._meta_content(metas, "description"),
            keywords=keywords,
            author=self._meta_content(metas, "author"),
            viewport=self._meta_content(metas, "viewport"),
            charset=self._charset(metas),
            url=(get_attribute(self.adapter, canonical, "href") or "") if canonical is not None else "",
            open_graph=self._prefixed(metas, "property", "og:"),
            twitter_card=self._prefixed(metas, "name", "twitter:"),
        )

    def _meta_content(self, metas: list[Any], key: str) -> str:
        for attribute in ("name", "property"):
            for meta in metas:
                if get_attribute(self.adapter, meta, attribute) == key:
                    return get_attribute(self.adapter, meta, "content") or ""
        return ""

    def _charset(self, metas: list[Any]) -> str:
        for meta in metas:
            charset = get_attribute(self.adapter, meta, "charset")
            if charset:
                return charset.strip()

        for meta in metas:
            http_equiv = get_attribute(self.adapter, meta, "http-equiv") or ""
            if http_equiv.lower() != "content-type":
                continue
            match = _CONTENT_TYPE_CHARSET.search(
                get_attribute(self.adapter, meta, "content") or ""
            )
            if match:
                return match.group(1)

        return "utf-8"

    def _prefixed(self, metas: list[Any], attribute: str, prefix: str) -> dict[str, str]:
        values: dict[str, str] = {}
        for meta in metas:
            key = get_attribute(self.adapter, meta, attribute) or ""
            if not key.startswith(prefix):
                continue
            content = get_attribute(self.adapter, meta, "content")
            if content:
                values[key[len(prefix):]] = content
        return values
