"""
Minimal CSS selector engine over the DOM adapter.

Supports comma separated lists of compound selectors built from a tag
(or ``*``), ``.class``, ``#id`` and attribute tests::

    [a]  [a=v]  [a~=v]  [a^=v]  [a$=v]  [a*=v]  [a|=v]

Attribute values may be double quoted, single quoted or bare. Anything
else (descendant or child combinators, pseudo-classes) raises
SelectorError at compile time.

Example:
    >>> nav = select_one(adapter, soup, '.nav, [role="navigation"]')
    >>> links = select_all(adapter, nav, "a")
"""

import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Callable, Iterator

from domlens.core.exceptions import SelectorError
from domlens.dom.adapter import DomAdapter, get_attribute, iter_elements

_SIMPLE_TOKEN = re.compile(
    r"""
    (?P<tag>\*|[a-zA-Z][a-zA-Z0-9-]*)
    | \.(?P<cls>[\w-]+)
    | \#(?P<id>[\w-]+)
    | \[\s*(?P<attr>[\w:.-]+)\s*
        (?:
            (?P<op>[~^$*|]?=)\s*
            (?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|(?P<bare>[^\]\s"']+))
            \s*
        )?
      \]
    """,
    re.VERBOSE,
)


def _op_equals(actual: str, expected: str) -> bool:
    return actual == expected


def _op_word(actual: str, expected: str) -> bool:
    return bool(expected) and expected in actual.split()


def _op_prefix(actual: str, expected: str) -> bool:
    return bool(expected) and actual.startswith(expected)


def _op_suffix(actual: str, expected: str) -> bool:
    return bool(expected) and actual.endswith(expected)


def _op_contains(actual: str, expected: str) -> bool:
    return bool(expected) and expected in actual


def _op_dash(actual: str, expected: str) -> bool:
    return actual == expected or actual.startswith(expected + "-")


ATTRIBUTE_OPERATORS: dict[str, Callable[[str, str], bool]] = {
    "=": _op_equals,
    "~=": _op_word,
    "^=": _op_prefix,
    "$=": _op_suffix,
    "*=": _op_contains,
    "|=": _op_dash,
}


@dataclass(frozen=True)
class AttributeTest:
    """One bracketed attribute condition."""

    name: str
    operator: str | None = None
    value: str = ""

    def matches(self, actual: str | None) -> bool:
        if actual is None:
            return False
        if self.operator is None:
            return True
        return ATTRIBUTE_OPERATORS[self.operator](actual, self.value)


@dataclass(frozen=True)
class CompoundSelector:
    """A tag plus class, id and attribute conditions, all of which must hold."""

    tag: str | None = None
    ids: tuple[str, ...] = ()
    classes: tuple[str, ...] = ()
    attributes: tuple[AttributeTest, ...] = ()

    def matches(self, adapter: DomAdapter, node: Any) -> bool:
        if not adapter.is_element(node):
            return False

        if self.tag is not None and adapter.tag_name(node) != self.tag:
            return False

        if self.ids and any(get_attribute(adapter, node, "id") != i for i in self.ids):
            return False

        if self.classes:
            present = (get_attribute(adapter, node, "class") or "").split()
            if any(cls not in present for cls in self.classes):
                return False

        return all(
            test.matches(get_attribute(adapter, node, test.name))
            for test in self.attributes
        )


@dataclass(frozen=True)
class SelectorList:
    """Comma separated alternatives. Matches when any entry matches."""

    source: str
    selectors: tuple[CompoundSelector, ...] = field(default_factory=tuple)

    def matches(self, adapter: DomAdapter, node: Any) -> bool:
        return any(selector.matches(adapter, node) for selector in self.selectors)


def _compile_compound(text: str, source: str) -> CompoundSelector:
    tag = None
    ids: list[str] = []
    classes: list[str] = []
    tests: list[AttributeTest] = []

    pos = 0
    while pos < len(text):
        match = _SIMPLE_TOKEN.match(text, pos)
        if match is None:
            raise SelectorError(
                f"Unsupported selector syntax at {text[pos:]!r}",
                selector=source,
            )

        if match.group("tag") is not None:
            if pos != 0:
                raise SelectorError("Tag name must start a compound selector", selector=source)
            tag = None if match.group("tag") == "*" else match.group("tag").lower()
        elif match.group("cls") is not None:
            classes.append(match.group("cls"))
        elif match.group("id") is not None:
            ids.append(match.group("id"))
        else:
            value = next(
                (v for v in match.group("dq", "sq", "bare") if v is not None), ""
            )
            tests.append(AttributeTest(
                name=match.group("attr").lower(),
                operator=match.group("op"),
                value=value,
            ))

        pos = match.end()

    return CompoundSelector(
        tag=tag,
        ids=tuple(ids),
        classes=tuple(classes),
        attributes=tuple(tests),
    )


def _split_list(source: str) -> list[str]:
    """Split on commas that are outside brackets and quotes."""
    parts: list[str] = []
    current: list[str] = []
    quote = None
    depth = 0

    for char in source:
        if quote:
            if char == quote:
                quote = None
        elif char in "\"'":
            quote = char
        elif char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
        elif char == "," and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)

    parts.append("".join(current))
    return parts


@lru_cache(maxsize=256)
def compile_selector(source: str) -> SelectorList:
    """
    Compile a selector list.

    Args:
        source: Comma separated compound selectors

    Returns:
        Compiled SelectorList

    Raises:
        SelectorError: For empty entries, combinators or other unsupported syntax
    """
    compounds = []
    for part in _split_list(source):
        part = part.strip()
        if not part:
            raise SelectorError("Empty selector", selector=source)
        compounds.append(_compile_compound(part, source))
    return SelectorList(source=source, selectors=tuple(compounds))


def _as_compiled(selector: "str | SelectorList") -> SelectorList:
    return compile_selector(selector) if isinstance(selector, str) else selector


def iter_matches(
    adapter: DomAdapter,
    root: Any,
    selector: "str | SelectorList",
) -> Iterator[Any]:
    """
    Yield elements below root matching selector, in document order.

    Adapters with a native ``select(root, css)`` capability run the
    selector themselves; the rest are matched element by element.
    """
    compiled = _as_compiled(selector)
    native_select = getattr(adapter, "select", None)
    if callable(native_select):
        yield from native_select(root, compiled.source)
        return

    for element in iter_elements(adapter, root):
        if compiled.matches(adapter, element):
            yield element


def select_one(adapter: DomAdapter, root: Any, selector: "str | SelectorList") -> Any | None:
    """First element below root matching selector, or None."""
    return next(iter_matches(adapter, root, selector), None)


def select_all(adapter: DomAdapter, root: Any, selector: "str | SelectorList") -> list[Any]:
    """Every element below root matching selector."""
    return list(iter_matches(adapter, root, selector))


@dataclass(frozen=True)
class SelectorChain:
    """
    Ordered fallback of selectors.

    Unlike a selector list, the chain is tried one selector at a time:
    the earliest selector with any match wins, regardless of where in
    the document the matches of later selectors sit.
    """

    selectors: tuple[str, ...]

    def __post_init__(self) -> None:
        for selector in self.selectors:
            compile_selector(selector)

    def first(self, adapter: DomAdapter, root: Any) -> Any | None:
        for selector in self.selectors:
            found = select_one(adapter, root, selector)
            if found is not None:
                return found
        return None

    def all(self, adapter: DomAdapter, root: Any) -> list[Any]:
        """Matches of every selector in chain order, each element once."""
        seen: set[int] = set()
        found = []
        for selector in self.selectors:
            for element in iter_matches(adapter, root, selector):
                if id(element) not in seen:
                    seen.add(id(element))
                    found.append(element)
        return found
