"""
DOM access layer.

Provides:
- The DomAdapter capability interface the extractors are written against
- A BeautifulSoup binding and HTML string parsing
- A small CSS selector engine for region lookup
"""

from domlens.dom.adapter import (
    NodeKind,
    DomAdapter,
    BaseDomAdapter,
    get_attribute,
    iter_descendants,
    iter_elements,
    document_element,
    find_body,
)
from domlens.dom.soup import SoupAdapter, parse_html
from domlens.dom.selectors import (
    SelectorList,
    SelectorChain,
    compile_selector,
    select_one,
    select_all,
)

__all__ = [
    # Adapter
    "NodeKind",
    "DomAdapter",
    "BaseDomAdapter",
    "get_attribute",
    "iter_descendants",
    "iter_elements",
    "document_element",
    "find_body",
    # BeautifulSoup
    "SoupAdapter",
    "parse_html",
    # Selectors
    "SelectorList",
    "SelectorChain",
    "compile_selector",
    "select_one",
    "select_all",
]
