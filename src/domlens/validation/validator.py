"""
Structural validation of parse results, documents and node trees.

The validator never raises and never mutates its input. Every problem
found is accumulated into a ValidationReport; errors make the report
invalid, warnings do not.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from domlens.config.settings import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_TEXT_LENGTH,
    ValidatorSettings,
)
from domlens.model.document import Document, ParseResult
from domlens.model.nodes import Comment, Element, NodeType, Text
from domlens.utils.logging import get_logger
from domlens.validation.report import ValidationReport

logger = get_logger(__name__)

VALID_NODE_TYPES = frozenset(node_type.value for node_type in NodeType)

# Region keys holding a plain {html, text} region.
_PLAIN_REGIONS = ("header", "footer", "sidebar", "mainContent")

_STATS_FIELDS = ("totalElements", "totalTextLength", "depth", "duration")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_array(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _to_plain(value: Any) -> Any:
    to_dict = getattr(value, "to_dict", None)
    return to_dict() if callable(to_dict) else value


class _Messages:
    """Error and warning accumulator."""

    def __init__(self) -> None:
        self.errors: list[str] = []
        self.warnings: list[str] = []

    def error(self, message: str, prefix: str = "") -> None:
        self.errors.append(prefix + message)

    def warning(self, message: str, prefix: str = "") -> None:
        self.warnings.append(prefix + message)

    def report(self) -> ValidationReport:
        return ValidationReport.from_messages(self.errors, self.warnings)


class Validator:
    """
    Checks parse results and node trees against structural invariants.

    ``strict`` only adds the "missing root" warning; it is the document
    parser that turns an invalid report into a failure in strict mode.

    Example:
        >>> validator = Validator(max_depth=50)
        >>> report = validator.validate(parser.parse_html(html))
        >>> report.valid, report.errors
        (True, [])
    """

    def __init__(
        self,
        strict: bool = False,
        max_depth: int = DEFAULT_MAX_DEPTH,
        max_text_length: int = DEFAULT_MAX_TEXT_LENGTH,
    ) -> None:
        self.strict = strict
        self.max_depth = max_depth
        self.max_text_length = max_text_length

    @classmethod
    def from_settings(cls, settings: ValidatorSettings, strict: bool | None = None) -> "Validator":
        return cls(
            strict=settings.strict if strict is None else strict,
            max_depth=settings.max_depth,
            max_text_length=settings.max_text_length,
        )

    # =========================================================================
    # Public API
    # =========================================================================

    def validate(self, result: Any) -> ValidationReport:
        """
        Validate a parse result.

        Args:
            result: ParseResult, Document, node or their serialized mappings.
                A Document is checked as the data of a successful result.

        Returns:
            ValidationReport with every problem found
        """
        if isinstance(result, (Element, Text, Comment)):
            return self.validate_node(result)

        if isinstance(result, Document):
            result = {"success": True, "data": result.to_dict()}
        elif isinstance(result, ParseResult):
            result = result.to_dict()

        messages = _Messages()
        self._check_result(result, messages)

        report = messages.report()
        if not report.valid:
            logger.debug(f"Validation failed with {len(report.errors)} errors")
        return report

    def validate_node(self, node: Any) -> ValidationReport:
        """Validate a bare node tree (model object or mapping)."""
        messages = _Messages()
        self._check_node(_to_plain(node), messages)
        return messages.report()

    def quick_validate(self, result: Any) -> bool:
        """
        Check only the top-level shape of a result.

        True when ``success`` is a bool and a successful result carries
        data, a failed one an error message.
        """
        result = _to_plain(result)
        if not isinstance(result, Mapping):
            return False
        success = result.get("success")
        if not isinstance(success, bool):
            return False
        if success:
            return result.get("data") is not None
        return bool(result.get("error"))

    # =========================================================================
    # Result and document
    # =========================================================================

    def _check_result(self, result: Any, messages: _Messages) -> None:
        if result is None:
            messages.error("Result is null or undefined")
            return

        if not isinstance(result, Mapping):
            messages.error("Result must be an object")
            return

        if "success" not in result:
            messages.error("Missing success field")

        success = result.get("success")
        if success is True:
            if result.get("data") is None:
                messages.error("Successful result missing data field")
            else:
                self._check_document(result["data"], messages)
        elif success is False and not result.get("error"):
            messages.warning("Error result missing error message")

    def _check_document(self, data: Any, messages: _Messages) -> None:
        if not isinstance(data, Mapping):
            messages.error("Data must be an object")
            return

        if "metadata" in data:
            self._check_metadata(data["metadata"], messages)

        if "structure" in data:
            self._check_structure(data["structure"], messages)

        if "stats" in data:
            self._check_stats(data["stats"], messages)

        if "images" in data:
            self._check_entries(data["images"], "Image", "Images", self._check_image, messages)

        if "links" in data:
            self._check_entries(data["links"], "Link", "Links", self._check_link, messages)

    def _check_metadata(self, metadata: Any, messages: _Messages) -> None:
        if not isinstance(metadata, Mapping):
            messages.error("Metadata must be an object")
            return

        for key in ("title", "description", "url"):
            if key in metadata and not isinstance(metadata[key], str):
                messages.error(f"Metadata {key} must be a string")

        if "keywords" in metadata:
            keywords = metadata["keywords"]
            if not _is_array(keywords):
                messages.error("Metadata keywords must be an array")
            else:
                for index, keyword in enumerate(keywords):
                    if not isinstance(keyword, str):
                        messages.error(f"Metadata keywords[{index}] must be a string")

    def _check_structure(self, structure: Any, messages: _Messages) -> None:
        if not isinstance(structure, Mapping):
            messages.error("Structure must be an object")
            return

        root = structure.get("root")
        if root is None:
            if self.strict:
                messages.warning("Structure missing root node")
        else:
            self._check_node(root, messages)

        for name in _PLAIN_REGIONS:
            region = structure.get(name)
            if region is not None:
                self._check_region(region, name, messages)

        navigation = structure.get("navigation")
        if navigation is not None:
            if not isinstance(navigation, Mapping):
                messages.error("Structure navigation must be an object")
            elif not _is_array(navigation.get("links", [])):
                messages.error("Structure navigation links must be an array")

        if "articles" in structure:
            articles = structure["articles"]
            if not _is_array(articles):
                messages.error("Structure articles must be an array")
            else:
                for index, article in enumerate(articles):
                    self._check_region(article, "article", messages, prefix=f"Article[{index}]: ")

    def _check_region(
        self,
        region: Any,
        name: str,
        messages: _Messages,
        prefix: str = "",
    ) -> None:
        if not isinstance(region, Mapping):
            messages.error(f"Structure {name} must be an object", prefix)
            return
        for key in ("html", "text"):
            if key in region and not isinstance(region[key], str):
                messages.error(f"Structure {name} {key} must be a string", prefix)

    def _check_stats(self, stats: Any, messages: _Messages) -> None:
        if not isinstance(stats, Mapping):
            messages.error("Stats must be an object")
            return
        for key in _STATS_FIELDS:
            if key in stats and not _is_number(stats[key]):
                messages.error(f"Stats {key} must be a number")

    def _check_entries(
        self,
        entries: Any,
        label: str,
        plural: str,
        check: Any,
        messages: _Messages,
    ) -> None:
        if not _is_array(entries):
            messages.error(f"{plural} must be an array")
            return
        for index, entry in enumerate(entries):
            check(entry, messages, f"{label}[{index}]: ")

    def _check_image(self, image: Any, messages: _Messages, prefix: str) -> None:
        if not isinstance(image, Mapping):
            messages.error("Image must be an object", prefix)
            return

        src = image.get("src")
        if not isinstance(src, str) or not src:
            messages.error("Image missing or invalid src field", prefix)

        for key in ("width", "height"):
            value = image.get(key)
            if value is not None and (not _is_number(value) or value < 0):
                messages.error(f"Image {key} must be a non-negative number", prefix)

    def _check_link(self, link: Any, messages: _Messages, prefix: str) -> None:
        if not isinstance(link, Mapping):
            messages.error("Link must be an object", prefix)
            return

        href = link.get("href")
        if not isinstance(href, str) or not href:
            messages.error("Link missing or invalid href field", prefix)

        if "text" in link and not isinstance(link["text"], str):
            messages.error("Link text must be a string", prefix)

    # =========================================================================
    # Nodes
    # =========================================================================

    def _check_node(self, root: Any, messages: _Messages) -> None:
        # Explicit stack so deep trees cannot hit the recursion limit.
        stack: list[tuple[Any, int, str]] = [(root, 0, "")]

        while stack:
            node, depth, prefix = stack.pop()

            if not isinstance(node, Mapping):
                messages.error("Node must be an object", prefix)
                continue

            if depth > self.max_depth:
                messages.error(
                    f"Node depth exceeds maximum depth of {self.max_depth}", prefix
                )
                continue

            node_type = node.get("type")
            if node_type is None:
                messages.error("Node missing type field", prefix)
                continue

            if not isinstance(node_type, str) or node_type not in VALID_NODE_TYPES:
                messages.error(f"Invalid node type: {node_type}", prefix)
                continue

            if node_type == NodeType.ELEMENT.value:
                tag = node.get("tag")
                if not isinstance(tag, str) or not tag:
                    messages.error("Element node missing or invalid tag", prefix)
                if "attributes" in node and not isinstance(node["attributes"], Mapping):
                    messages.error("Element node attributes must be an object", prefix)

            elif node_type == NodeType.TEXT.value:
                if "text" not in node:
                    messages.error("Text node missing text field", prefix)
                elif not isinstance(node["text"], str):
                    messages.error("Text node text must be a string", prefix)
                elif len(node["text"]) > self.max_text_length:
                    messages.warning(
                        "Text node text length exceeds recommended maximum of "
                        f"{self.max_text_length}",
                        prefix,
                    )

            elif node_type == NodeType.COMMENT.value:
                if "text" in node and not isinstance(node["text"], str):
                    messages.error("Comment node text must be a string", prefix)

            children = node.get("children")
            if children is None:
                continue
            if not _is_array(children):
                messages.error("Node children must be an array", prefix)
                continue

            stack.extend(
                (child, depth + 1, f"{prefix}Child[{index}]: ")
                for index, child in reversed(list(enumerate(children)))
            )
