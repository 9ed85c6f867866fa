"""Dependency alignment validator.

Detects spec bodies that talk about depending on another spec ("depends
on 045", "blocked by 045", ...) while the frontmatter ``depends_on`` field
does not list it.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, List, Optional, Set

from .frontmatter import FrontmatterError, split_frontmatter
from .models import SpecInfo, ValidationResult

_SPEC_NUMBER_RE = re.compile(r"[0-9]{3}")
_NAME_NUMBER_RE = re.compile(r"^([0-9]{3})")

DEPENDS_ON_PATTERNS = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"depends on[:\s]+.*?\b([0-9]{3})\b",
        r"blocked by[:\s]+.*?\b([0-9]{3})\b",
        r"requires[:\s]+.*?spec[:\s]*([0-9]{3})\b",
        r"prerequisite[:\s]+.*?\b([0-9]{3})\b",
        r"after[:\s]+.*?spec[:\s]*([0-9]{3})\b",
        r"builds on[:\s]+.*?\b([0-9]{3})\b",
        r"extends[:\s]+.*?\b([0-9]{3})\b",
    )
)

logger = logging.getLogger("leanspec.dependencies")


@dataclass(slots=True)
class DependencyAlignmentOptions:
    """Options for ``DependencyAlignmentValidator``."""

    # Misalignment is an error instead of a warning
    strict: bool = False
    # Only references to these spec numbers are reported; None reports all
    existing_spec_numbers: Optional[Set[str]] = None


def spec_number(name: str) -> Optional[str]:
    """Leading three-digit number of a spec directory name."""
    match = _NAME_NUMBER_RE.match(name)
    return match.group(1) if match else None


def normalize_dependencies(value: Any) -> List[str]:
    """Spec numbers listed in a ``depends_on`` value."""
    if value is None or value == "":
        return []

    numbers = []
    for entry in value if isinstance(value, list) else [value]:
        if isinstance(entry, bool) or entry is None:
            continue
        if isinstance(entry, int):
            numbers.append(f"{entry:03d}")
            continue
        text = str(entry)
        # grouped paths such as 20251101/045-auth carry the number in the last segment
        match = _NAME_NUMBER_RE.match(text.rstrip("/").rsplit("/", 1)[-1]) or _SPEC_NUMBER_RE.search(text)
        numbers.append(match.group(0) if match else text)
    return numbers


def detect_dependency_references(body: str, self_number: Optional[str] = None) -> List[str]:
    """Spec numbers the body declares a dependency on, in first-seen order."""
    found: List[str] = []
    for pattern in DEPENDS_ON_PATTERNS:
        for match in pattern.finditer(body):
            number = match.group(1)
            if number != self_number and number not in found:
                found.append(number)
    return found


class DependencyAlignmentValidator:
    """Detect content references to specs not linked in frontmatter."""

    name = "dependency-alignment"
    description = "Detect content references to specs not linked in frontmatter"

    def __init__(self, options: Optional[DependencyAlignmentOptions] = None):
        self.options = options or DependencyAlignmentOptions()

    def validate(self, spec: SpecInfo, content: str) -> ValidationResult:
        result = ValidationResult()

        try:
            frontmatter, body = split_frontmatter(content)
        except FrontmatterError:
            return result

        linked = set(normalize_dependencies(frontmatter.get("depends_on")))
        existing = self.options.existing_spec_numbers

        missing = [
            number
            for number in detect_dependency_references(body, spec_number(spec.name))
            if number not in linked and (existing is None or number in existing)
        ]
        if not missing:
            return result

        message = f"Content references dependencies not in frontmatter: {', '.join(missing)}"
        suggestion = f"Add {', '.join(missing)} to depends_on in the frontmatter of {spec.name}"
        if self.options.strict:
            result.add_error(message, suggestion)
        else:
            result.add_warning(message, suggestion)

        logger.debug(f"Dependency check of {spec.path}: unlinked {missing}")
        return result
