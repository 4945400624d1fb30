"""
Document aggregate and parse result types.

A Document is built once per extraction and treated as an immutable
value afterwards. ``to_dict()`` produces the wire format consumed by
the excluded HTTP layer, whose keys are camelCase (``mainContent``,
``totalElements``, ``openGraph``...).
"""

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from domlens.model.nodes import Node

if TYPE_CHECKING:
    from domlens.validation.report import ValidationReport


@dataclass(frozen=True)
class ImageInfo:
    """An img element found anywhere in the document."""

    src: str
    alt: str = ""
    width: int | None = None
    height: int | None = None
    title: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "src": self.src,
            "alt": self.alt,
            "width": self.width,
            "height": self.height,
            "title": self.title,
        }


@dataclass(frozen=True)
class LinkInfo:
    """An anchor element found anywhere in the document."""

    href: str
    text: str = ""
    target: str = ""
    rel: str = ""
    title: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "href": self.href,
            "text": self.text,
            "target": self.target,
            "rel": self.rel,
            "title": self.title,
        }


@dataclass(frozen=True)
class Region:
    """A located region: inner HTML plus trimmed text content."""

    html: str
    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"html": self.html, "text": self.text}


@dataclass(frozen=True)
class NavigationRegion:
    """The navigation region with every anchor it contains."""

    links: list[LinkInfo]
    html: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "links": [link.to_dict() for link in self.links],
            "html": self.html,
        }


@dataclass(frozen=True)
class ArticleMetadata:
    """Best-effort byline data for an article. Missing values are ''."""

    author: str = ""
    date: str = ""
    category: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"author": self.author, "date": self.date, "category": self.category}


@dataclass(frozen=True)
class ArticleRegion:
    """One article match with its title and byline probes."""

    html: str
    text: str
    title: str = ""
    metadata: ArticleMetadata = field(default_factory=ArticleMetadata)

    def to_dict(self) -> dict[str, Any]:
        return {
            "html": self.html,
            "text": self.text,
            "title": self.title,
            "metadata": self.metadata.to_dict(),
        }


@dataclass(frozen=True)
class DocumentMetadata:
    """Head metadata: title, meta tags, Open Graph and Twitter Card maps."""

    title: str = ""
    description: str = ""
    keywords: list[str] = field(default_factory=list)
    author: str = ""
    viewport: str = ""
    charset: str = "utf-8"
    url: str = ""
    open_graph: dict[str, str] = field(default_factory=dict)
    twitter_card: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "keywords": list(self.keywords),
            "author": self.author,
            "viewport": self.viewport,
            "charset": self.charset,
            "url": self.url,
            "openGraph": dict(self.open_graph),
            "twitterCard": dict(self.twitter_card),
        }


@dataclass(frozen=True)
class DocumentStructure:
    """The node tree plus the named regions located in the DOM."""

    root: Node | None = None
    header: Region | None = None
    footer: Region | None = None
    navigation: NavigationRegion | None = None
    sidebar: Region | None = None
    articles: list[ArticleRegion] = field(default_factory=list)
    main_content: Region | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "root": self.root.to_dict() if self.root is not None else None,
            "header": _optional(self.header),
            "footer": _optional(self.footer),
            "navigation": _optional(self.navigation),
            "sidebar": _optional(self.sidebar),
            "articles": [article.to_dict() for article in self.articles],
            "mainContent": _optional(self.main_content),
        }


@dataclass(frozen=True)
class DocumentStats:
    """Counts from a full walk of the node tree."""

    total_elements: int = 0
    total_text_length: int = 0
    depth: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalElements": self.total_elements,
            "totalTextLength": self.total_text_length,
            "depth": self.depth,
        }


@dataclass(frozen=True)
class Document:
    """Root aggregate returned by a successful parse."""

    metadata: DocumentMetadata = field(default_factory=DocumentMetadata)
    structure: DocumentStructure = field(default_factory=DocumentStructure)
    images: list[ImageInfo] = field(default_factory=list)
    links: list[LinkInfo] = field(default_factory=list)
    stats: DocumentStats = field(default_factory=DocumentStats)

    @property
    def root(self) -> Node | None:
        return self.structure.root

    def to_dict(self) -> dict[str, Any]:
        return {
            "metadata": self.metadata.to_dict(),
            "structure": self.structure.to_dict(),
            "images": [image.to_dict() for image in self.images],
            "links": [link.to_dict() for link in self.links],
            "stats": self.stats.to_dict(),
        }


@dataclass(frozen=True)
class ParseResult:
    """
    Outcome of one parse call.

    Successful results carry ``data``; failed ones carry ``error`` and
    ``error_code``. ``duration`` is wall-clock milliseconds and is the
    only field a cached result is re-issued with a new value for,
    besides ``cached`` being set on a cache hit.
    """

    success: bool
    data: Document | None = None
    error: str | None = None
    error_code: str | None = None
    duration: float | None = None
    validation: "ValidationReport | None" = None
    cached: bool = False

    @classmethod
    def ok(cls, data: Document, duration: float | None = None) -> "ParseResult":
        return cls(success=True, data=data, duration=duration)

    @classmethod
    def failure(
        cls,
        error: str,
        error_code: str,
        duration: float | None = None,
    ) -> "ParseResult":
        return cls(success=False, error=error, error_code=error_code, duration=duration)

    def with_duration(self, duration: float) -> "ParseResult":
        """Copy of this result carrying a different duration."""
        return replace(self, duration=duration)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"success": self.success}
        if self.data is not None:
            result["data"] = self.data.to_dict()
        if self.error is not None:
            result["error"] = self.error
        if self.error_code is not None:
            result["errorCode"] = self.error_code
        if self.duration is not None:
            result["duration"] = self.duration
        if self.validation is not None:
            result["validation"] = self.validation.to_dict()
        if self.cached:
            result["cached"] = True
        return result


def _optional(region: Any) -> dict[str, Any] | None:
    return region.to_dict() if region is not None else None
