"""Frontmatter validator for spec documents.

Checks the metadata block of a spec's primary document:
- status and created are present and well formed
- priority, tags and depends_on have valid values when present
- configured required fields exist
- optionally, no unknown fields
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .frontmatter import FrontmatterError, split_frontmatter
from .models import SpecInfo, ValidationResult

VALID_STATUSES = ("planned", "in-progress", "complete", "archived")
STATUS_ALIASES = {
    "planned": "planned",
    "in-progress": "in-progress",
    "in_progress": "in-progress",
    "inprogress": "in-progress",
    "complete": "complete",
    "completed": "complete",
    "archived": "archived",
}

VALID_PRIORITIES = ("low", "medium", "high", "critical")
PRIORITY_ALIASES = {
    "low": "low",
    "medium": "medium",
    "med": "medium",
    "high": "high",
    "critical": "critical",
    "urgent": "critical",
}

KNOWN_FIELDS = (
    "status",
    "created",
    "priority",
    "tags",
    "depends_on",
    "parent",
    "assignee",
    "reviewer",
    "issue",
    "pr",
    "epic",
    "breaking",
    "due",
    "updated",
    "completed",
    "created_at",
    "updated_at",
    "completed_at",
    "transitions",
)

DATE_FORMAT = "%Y-%m-%d"

logger = logging.getLogger("leanspec.frontmatter")


@dataclass(slots=True)
class FrontmatterOptions:
    """Options for ``FrontmatterValidator``."""

    # Required in addition to status and created
    required_fields: List[str] = field(default_factory=list)
    allowed_custom_fields: List[str] = field(default_factory=list)
    warn_on_unknown: bool = False


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, (str, list, dict)) and not value)


class FrontmatterValidator:
    """Validate spec frontmatter fields."""

    name = "frontmatter"
    description = "Validate spec frontmatter fields"

    def __init__(self, options: Optional[FrontmatterOptions] = None):
        self.options = options or FrontmatterOptions()

    def validate(self, spec: SpecInfo, content: str) -> ValidationResult:
        result = ValidationResult()

        try:
            frontmatter, _ = split_frontmatter(content)
        except FrontmatterError:
            # Reported by the structure validator
            return result

        self._check_status(frontmatter, result)
        self._check_created(frontmatter, result)
        self._check_priority(frontmatter, result)
        self._check_tags(frontmatter, result)
        self._check_depends_on(spec, frontmatter, result)
        self._check_required_fields(frontmatter, result)
        if self.options.warn_on_unknown:
            self._check_unknown_fields(frontmatter, result)

        logger.debug(
            f"Frontmatter check of {spec.path}: {len(result.errors)} errors, {len(result.warnings)} warnings"
        )
        return result

    def _check_status(self, frontmatter: Dict[str, Any], result: ValidationResult) -> None:
        status = frontmatter.get("status")
        if _is_blank(status):
            result.add_error("Missing required field: status", "Add status: planned to the frontmatter")
            return
        if str(status).lower() not in STATUS_ALIASES:
            result.add_error(
                f"Invalid status: {status}. Valid values: {', '.join(VALID_STATUSES)}",
                "Use one of the valid status values",
            )

    def _check_created(self, frontmatter: Dict[str, Any], result: ValidationResult) -> None:
        created = frontmatter.get("created")
        if _is_blank(created):
            result.add_error("Missing required field: created", "Add created: 'YYYY-MM-DD' to the frontmatter")
            return

        created = str(created)
        if len(created) != 10:
            result.add_error(f"Invalid created date format: '{created}'. Expected YYYY-MM-DD")
            return
        try:
            datetime.strptime(created, DATE_FORMAT)
        except ValueError:
            result.add_error(f"Invalid created date: '{created}'. Expected YYYY-MM-DD")

    def _check_priority(self, frontmatter: Dict[str, Any], result: ValidationResult) -> None:
        priority = frontmatter.get("priority")
        if priority is None:
            return
        if str(priority).lower() not in PRIORITY_ALIASES:
            result.add_error(
                f"Invalid priority: {priority}. Valid values: {', '.join(VALID_PRIORITIES)}",
                "Use one of the valid priority values",
            )

    def _check_tags(self, frontmatter: Dict[str, Any], result: ValidationResult) -> None:
        tags = frontmatter.get("tags")
        if tags is None:
            return
        if not isinstance(tags, list):
            result.add_error("Field 'tags' must be a list", "Write tags as a list of '- tag' entries")
            return

        for tag in tags:
            text = "" if tag is None else str(tag)
            if not text.strip():
                result.add_warning("Empty tag found in tags array")
            elif " " in text:
                result.add_warning(f"Tag '{text}' contains spaces. Consider using kebab-case.")

    def _check_depends_on(self, spec: SpecInfo, frontmatter: Dict[str, Any], result: ValidationResult) -> None:
        depends_on = frontmatter.get("depends_on")
        if depends_on is None:
            return

        entries = depends_on if isinstance(depends_on, list) else [depends_on]
        for entry in entries:
            if isinstance(entry, (dict, list)):
                result.add_error("Dependency references in depends_on must be spec names or numbers")
                continue
            text = "" if entry is None else str(entry).strip()
            if not text:
                result.add_error("Empty dependency reference in depends_on")
            elif text in (spec.path, spec.name):
                result.add_error("Spec cannot depend on itself", f"Remove {text} from depends_on")

    def _check_required_fields(self, frontmatter: Dict[str, Any], result: ValidationResult) -> None:
        for name in self.options.required_fields:
            if _is_blank(frontmatter.get(name)):
                result.add_error(f"Missing required field: {name}", f"Add {name} to the frontmatter")

    def _check_unknown_fields(self, frontmatter: Dict[str, Any], result: ValidationResult) -> None:
        for name in frontmatter:
            if name not in KNOWN_FIELDS and name not in self.options.allowed_custom_fields:
                result.add_warning(f"Unknown custom field: {name}")
