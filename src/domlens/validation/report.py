"""
Validation report type.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ValidationReport:
    """
    Outcome of a structural validation pass.

    Messages are path qualified, e.g. ``Child[2]: Child[0]: Node missing
    type field`` or ``Image[1]: Image missing or invalid src field``.
    """

    valid: bool = True
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @classmethod
    def from_messages(cls, errors: list[str], warnings: list[str]) -> "ValidationReport":
        return cls(valid=not errors, errors=list(errors), warnings=list(warnings))

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }
