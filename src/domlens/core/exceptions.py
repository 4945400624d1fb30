"""
Custom exceptions for domlens.

Provides a hierarchy of exceptions for precise error handling across
all subsystems. All exceptions inherit from DomLensError and carry a
stable error code that the document parser surfaces to callers.

Exception Hierarchy:
    DomLensError (base)
    ├── ConfigurationError
    ├── ExtractionError
    │   ├── InvalidInputError
    │   └── InvalidDocumentError
    ├── SelectorError
    ├── FormatError
    │   └── UnsupportedFormatError
    └── CacheError
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Stable error codes reported in failed parse results."""

    PARSE_FAILED = "PARSE_FAILED"
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_HTML = "INVALID_HTML"
    UNSUPPORTED_FORMAT = "UNSUPPORTED_FORMAT"
    VALIDATION_ERROR = "VALIDATION_ERROR"


class DomLensError(Exception):
    """
    Base exception for all domlens errors.

    All custom exceptions inherit from this class, allowing for
    catch-all handling when needed.

    Attributes:
        message: Human-readable error description
        details: Optional dictionary with additional context
        error_code: Code reported when the error ends a parse
    """

    error_code: ErrorCode = ErrorCode.PARSE_FAILED

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(
                f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, details={self.details!r})"


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(DomLensError):
    """
    Error in configuration loading or validation.

    Raised when:
    - Configuration file is missing or malformed
    - Setting values fail validation
    """

    pass


# =============================================================================
# Extraction Errors
# =============================================================================


class ExtractionError(DomLensError):
    """
    Base error for DOM extraction operations.

    Raised for general extraction failures not covered by
    more specific subclasses.
    """

    pass


class InvalidInputError(ExtractionError):
    """
    Error raised when the parse input is unusable.

    Raised when:
    - Input is not a string
    - Input is empty or whitespace only
    """

    error_code = ErrorCode.INVALID_INPUT

    def __init__(
        self,
        message: str,
        input_type: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if input_type:
            details["input_type"] = input_type
        super().__init__(message, details)
        self.input_type = input_type


class InvalidDocumentError(ExtractionError):
    """
    Error raised when a DOM tree has no usable root.

    Raised when:
    - The root node is None
    - The root node is neither an element nor a document
    """

    error_code = ErrorCode.INVALID_HTML


# =============================================================================
# Selector Errors
# =============================================================================


class SelectorError(DomLensError):
    """
    Error compiling a CSS selector.

    Only simple compound selectors are supported; combinators and
    pseudo-classes are rejected.
    """

    def __init__(
        self,
        message: str,
        selector: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if selector:
            details["selector"] = selector
        super().__init__(message, details)
        self.selector = selector


# =============================================================================
# Format Errors
# =============================================================================


class FormatError(DomLensError):
    """
    Base error for rendering operations.
    """

    pass


class UnsupportedFormatError(FormatError):
    """
    Error raised for an unknown output format name.

    The caller is expected to surface it as UNSUPPORTED_FORMAT.
    """

    error_code = ErrorCode.UNSUPPORTED_FORMAT

    def __init__(
        self,
        format_name: str,
        supported: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if supported:
            details["supported"] = supported
        super().__init__(f"Unsupported format: {format_name}", details)
        self.format_name = format_name


# =============================================================================
# Cache Errors
# =============================================================================


class CacheError(DomLensError):
    """
    Error in fingerprint cache operations.

    Raised when:
    - Cache data cannot be serialized for key derivation
    - An unknown hash algorithm is configured
    """

    pass


# =============================================================================
# Utility Functions
# =============================================================================


def error_code_for(error: Exception) -> ErrorCode:
    """
    Get the error code reported for an exception.

    Args:
        error: The exception to classify

    Returns:
        The error's own code for domlens errors, PARSE_FAILED otherwise
    """
    if isinstance(error, DomLensError):
        return error.error_code
    return ErrorCode.PARSE_FAILED
