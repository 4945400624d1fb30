"""
Core module for domlens.

Contains foundational types and exceptions used throughout the package.
"""

from domlens.core.exceptions import (
    DomLensError,
    ErrorCode,
    ConfigurationError,
    ExtractionError,
    InvalidInputError,
    InvalidDocumentError,
    SelectorError,
    FormatError,
    UnsupportedFormatError,
    CacheError,
    error_code_for,
)

__all__ = [
    # Base
    "DomLensError",
    "ErrorCode",
    "ConfigurationError",
    # Extraction
    "ExtractionError",
    "InvalidInputError",
    "InvalidDocumentError",
    "SelectorError",
    # Formatting
    "FormatError",
    "UnsupportedFormatError",
    # Cache
    "CacheError",
    # Helpers
    "error_code_for",
]
