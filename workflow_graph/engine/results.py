"""Validation result types shared by the shape and graph validators."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class ValidationIssue:
    """A single validation problem.

    Attributes:
        message: Human-readable description with enough context
            (node, port, slot, target) to locate the problem
        path: JSON-pointer location; only set for schema issues
    """

    message: str
    path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format, omitting an unset path."""
        data: Dict[str, Any] = {"message": self.message}
        if self.path is not None:
            data["path"] = self.path
        return data


@dataclass
class ValidationResult:
    """Outcome of a validation pass.

    ``valid`` is derived from ``errors`` so the two can never disagree.
    """

    errors: List[ValidationIssue] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(errors=[])

    @classmethod
    def merge(cls, *results: "ValidationResult") -> "ValidationResult":
        """Concatenate the errors of several results, keeping their order."""
        errors: List[ValidationIssue] = []
        for result in results:
            errors.extend(result.errors)
        return cls(errors=errors)

    def messages(self) -> List[str]:
        return [e.message for e in self.errors]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format."""
        return {
            "valid": self.valid,
            "errors": [e.to_dict() for e in self.errors],
        }
