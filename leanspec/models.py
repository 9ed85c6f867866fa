"""Data models for LeanSpec validation.

This module contains the core data structures shared by the validators,
the workspace and the MCP server: headings, validation issues and results,
and the spec descriptor supplied by callers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol


@dataclass(slots=True, frozen=True)
class Heading:
    """A markdown ATX heading found outside fenced code."""

    level: int
    text: str
    line_number: int


@dataclass(slots=True)
class ValidationIssue:
    """A single finding reported by a validator."""

    message: str
    suggestion: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        """Convert to dictionary representation."""
        return {"message": self.message, "suggestion": self.suggestion}


@dataclass(slots=True)
class ValidationResult:
    """Outcome of one validation pass.

    Errors block a spec from being considered compliant, warnings are
    advisory. ``passed`` is derived from ``errors`` so the two can never
    disagree.
    """

    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.errors

    def add_error(self, message: str, suggestion: Optional[str] = None) -> None:
        self.errors.append(ValidationIssue(message, suggestion))

    def add_warning(self, message: str, suggestion: Optional[str] = None) -> None:
        self.warnings.append(ValidationIssue(message, suggestion))

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        """Return a new result holding the issues of both results."""
        return ValidationResult(
            errors=[*self.errors, *other.errors],
            warnings=[*self.warnings, *other.warnings],
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "passed": self.passed,
            "errors": [issue.to_dict() for issue in self.errors],
            "warnings": [issue.to_dict() for issue in self.warnings],
        }


@dataclass(slots=True)
class SpecInfo:
    """Identifies a spec directory and its primary document.

    Owned by the caller; validators only read it.
    """

    path: str  # relative to the specs directory, e.g. "20251101/003-dashboard"
    full_path: str  # absolute spec directory
    file_path: str  # absolute path of the primary document
    name: str  # directory name, e.g. "003-dashboard"
    date: str = ""  # group directory, empty when the spec is not grouped
    frontmatter: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "path": self.path,
            "full_path": self.full_path,
            "file_path": self.file_path,
            "name": self.name,
            "date": self.date,
            "frontmatter": dict(self.frontmatter),
        }


class ValidationRule(Protocol):
    """Interface shared by every validator."""

    name: str
    description: str

    def validate(self, spec: SpecInfo, content: str) -> ValidationResult:
        ...
