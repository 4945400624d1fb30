"""
Validation module for domlens.

Structural checks over parse results, documents and node trees.
"""

from domlens.validation.report import ValidationReport
from domlens.validation.validator import Validator, VALID_NODE_TYPES

__all__ = [
    "ValidationReport",
    "Validator",
    "VALID_NODE_TYPES",
]
