"""
Document parser: the entry point composing extraction, validation,
caching and formatting.

Example:
    >>> parser = DocumentParser()
    >>> result = parser.parse_html("<html><body><p>Hi</p></body></html>")
    >>> result.success, result.data.stats.total_elements
    (True, 3)
    >>> parser.format(result.data, "text")
    '      Hi'
"""

import time
from dataclasses import replace
from typing import Any, Callable, Iterable

from pydantic import ValidationError

from domlens.cache.fingerprint_cache import FingerprintCache
from domlens.config.loader import get_settings
from domlens.config.settings import ParserSettings, Settings
from domlens.core.exceptions import (
    ConfigurationError,
    DomLensError,
    ErrorCode,
    InvalidDocumentError,
    InvalidInputError,
    UnsupportedFormatError,
    error_code_for,
)
from domlens.dom.adapter import DomAdapter, NodeKind
from domlens.dom.soup import SoupAdapter, parse_html as parse_soup
from domlens.extraction.region_extractor import RegionExtractor
from domlens.extraction.tree_extractor import TreeExtractor, compute_stats
from domlens.formatting.formatter import Formatter
from domlens.model.document import Document, DocumentStructure, ParseResult
from domlens.utils.logging import get_logger
from domlens.utils.metrics import record_parse
from domlens.validation.report import ValidationReport
from domlens.validation.validator import Validator

logger = get_logger(__name__)


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 3)


class DocumentParser:
    """
    Turns DOM trees and HTML strings into Documents.

    Every parse call returns a ParseResult; errors never escape. Per-call
    keyword overrides are applied on top of ``settings.parser``, e.g.
    ``parser.parse_html(html, max_depth=10, strict_mode=True)``.

    HTML string results are cached by a fingerprint of the markup and
    the effective options. Only successful results are stored. A cache
    hit is returned as a copy marked ``cached`` and carrying the
    duration of the current call.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        adapter: DomAdapter | None = None,
        cache: FingerprintCache | None = None,
    ) -> None:
        """
        Initialize the parser.

        Args:
            settings: Configuration. Uses get_settings() when omitted.
            adapter: DOM binding for parse(). Defaults to BeautifulSoup.
            cache: Result cache. Built from settings.cache when omitted.
        """
        self.settings = settings or get_settings()
        self.adapter = adapter or SoupAdapter()
        self.cache = cache if cache is not None else FingerprintCache.from_settings(self.settings.cache)
        self.formatter = Formatter(self.settings.formatter)
        self.validator = Validator.from_settings(self.settings.validator)
        self._soup_adapter = self.adapter if isinstance(self.adapter, SoupAdapter) else SoupAdapter()

    # =========================================================================
    # Parsing
    # =========================================================================

    def parse(self, dom_root: Any, adapter: DomAdapter | None = None, **overrides: Any) -> ParseResult:
        """
        Extract a Document from an already parsed DOM.

        Args:
            dom_root: Element or document node understood by the adapter
            adapter: DOM binding for this call. Defaults to the parser's.
            **overrides: ParserSettings fields for this call

        Returns:
            ParseResult. Never raises.
        """
        adapter = adapter or self.adapter
        return self._run(lambda: self._build(dom_root, adapter, self._options(overrides)))

    def parse_html(self, html: Any, **overrides: Any) -> ParseResult:
        """
        Parse an HTML string with BeautifulSoup and extract a Document.

        Args:
            html: Markup. Non-strings and blank strings fail with INVALID_INPUT.
            **overrides: ParserSettings fields for this call

        Returns:
            ParseResult. Never raises.
        """
        return self._run(lambda: self._parse_string(html, overrides))

    def parse_batch(self, htmls: Iterable[Any], **overrides: Any) -> list[ParseResult]:
        """Parse each input in turn. One result per input, in order."""
        results = [self.parse_html(html, **overrides) for html in htmls]
        failed = sum(1 for result in results if not result.success)
        logger.info(f"Parsed batch of {len(results)} documents ({failed} failed)")
        return results

    def _parse_string(self, html: Any, overrides: dict[str, Any]) -> ParseResult:
        if not isinstance(html, str):
            raise InvalidInputError("HTML input must be a string", input_type=type(html).__name__)
        if not html.strip():
            raise InvalidInputError("HTML input is empty", input_type="str")

        options = self._options(overrides)

        computed = []

        def compute() -> ParseResult:
            computed.append(True)
            return self._build(parse_soup(html), self._soup_adapter, options)

        if not self.cache.enabled:
            return compute()

        key = self.cache.generate_key(html, options.model_dump())
        result = self.cache.get_or_compute(
            key, compute, should_store=lambda value: value.success
        )
        return result if computed else replace(result, cached=True)

    def _run(self, operation: Callable[[], ParseResult]) -> ParseResult:
        start = time.perf_counter()

        try:
            result = operation()
        except DomLensError as e:
            logger.warning(f"Parse failed: {e}")
            result = ParseResult.failure(e.message, e.error_code.value)
        except Exception as e:
            logger.exception("Unexpected error while parsing")
            result = ParseResult.failure(f"Parse failed: {e}", error_code_for(e).value)

        duration = _elapsed_ms(start)
        record_parse(result.success, duration)
        return result.with_duration(duration)

    def _options(self, overrides: dict[str, Any]) -> ParserSettings:
        if not overrides:
            return self.settings.parser

        overrides = dict(overrides)
        if "validate" in overrides:
            overrides["validate_result"] = overrides.pop("validate")

        known = set(ParserSettings.model_fields)
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ConfigurationError("Unknown parser options", details={"options": unknown})

        try:
            return ParserSettings.model_validate({**self.settings.parser.model_dump(), **overrides})
        except ValidationError as e:
            raise ConfigurationError(
                "Invalid parser options",
                details={"errors": e.error_count(), "first": e.errors()[0]["msg"]},
            ) from e

    def _build(self, dom_root: Any, adapter: DomAdapter, options: ParserSettings) -> ParseResult:
        if dom_root is None:
            raise InvalidDocumentError("Document root is missing")

        kind = adapter.node_kind(dom_root)
        if kind not in (NodeKind.ELEMENT, NodeKind.DOCUMENT):
            raise InvalidDocumentError(
                "Document root must be an element or document node",
                details={"kind": kind.value},
            )

        tree = TreeExtractor(adapter, options)
        regions = RegionExtractor(adapter, options)

        root = tree.extract(dom_root)
        document = Document(
            metadata=regions.extract_metadata(dom_root),
            structure=DocumentStructure(root=root, **regions.extract_regions(dom_root)),
            images=tree.collect_images(dom_root) if options.include_images else [],
            links=tree.collect_links(dom_root),
            stats=compute_stats(root),
        )
        result = ParseResult.ok(document)

        if not options.validate_result:
            return result

        validator = Validator.from_settings(
            self.settings.validator,
            strict=options.strict_mode or self.settings.validator.strict,
        )
        report = validator.validate(result)
        result = replace(result, validation=report)

        if options.strict_mode and not report.valid:
            logger.warning(f"Strict validation failed: {len(report.errors)} errors")
            return replace(
                result,
                success=False,
                error="Validation failed: " + ", ".join(report.errors),
                error_code=ErrorCode.VALIDATION_ERROR.value,
            )

        return result

    # =========================================================================
    # Formatting, validation, cache
    # =========================================================================

    def format(self, document: Any, format_name: str | None = None, **options: Any) -> str:
        """
        Render a Document, ParseResult, node or mapping.

        Raises:
            UnsupportedFormatError: For an unknown format name
        """
        return self.formatter.render(document, format_name, **options)

    def format_result(self, document: Any, format_name: str | None = None, **options: Any) -> dict[str, Any]:
        """Like format(), but reports an unknown format as data instead of raising."""
        name = format_name or self.settings.formatter.default_format
        try:
            content = self.format(document, name, **options)
        except UnsupportedFormatError as e:
            return {
                "success": False,
                "error": e.message,
                "errorCode": e.error_code.value,
            }
        return {"success": True, "format": name, "content": content}

    def validate(self, result: Any) -> ValidationReport:
        return self.validator.validate(result)

    def cache_stats(self) -> dict[str, Any]:
        return self.cache.get_stats().to_dict()

    def clear_cache(self) -> None:
        self.cache.clear()
