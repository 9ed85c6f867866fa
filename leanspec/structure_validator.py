"""Structure validator for spec documents.

Checks that a spec has:
- an H1 title
- the required H2 sections, each with some content
- no duplicate headings at the same level
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from .frontmatter import FrontmatterError, split_frontmatter
from .markdown import extract_headings, find_duplicate_headings, find_empty_sections, find_title
from .models import SpecInfo, ValidationResult

DEFAULT_REQUIRED_SECTIONS = ("Overview", "Design")

logger = logging.getLogger("leanspec.structure")


@dataclass(slots=True)
class StructureOptions:
    """Options for ``StructureValidator``."""

    required_sections: List[str] = field(default_factory=lambda: list(DEFAULT_REQUIRED_SECTIONS))
    # Missing required sections are errors instead of warnings
    strict: bool = False


class StructureValidator:
    """Validate spec structure and required sections."""

    name = "structure"
    description = "Validate spec structure and required sections"

    def __init__(self, options: StructureOptions | None = None):
        self.options = options or StructureOptions()

    @property
    def required_sections(self) -> List[str]:
        return self.options.required_sections

    def _is_required(self, section: str) -> bool:
        return any(section.lower() == required.lower() for required in self.required_sections)

    def validate(self, spec: SpecInfo, content: str) -> ValidationResult:
        result = ValidationResult()

        try:
            _, body = split_frontmatter(content)
        except FrontmatterError as exc:
            logger.warning(f"Frontmatter of {spec.path} could not be parsed: {exc}")
            result.add_error("Failed to parse frontmatter", "Check YAML frontmatter syntax")
            return result

        if find_title(body) is None:
            result.add_error(
                "Missing H1 title (# Heading)",
                "Add a title as the first heading in the spec",
            )

        headings = extract_headings(body)
        h2_titles = {heading.text.lower() for heading in headings if heading.level == 2}

        for section in self.required_sections:
            if section.lower() in h2_titles:
                continue
            if self.options.strict:
                result.add_error(
                    f"Missing required section: ## {section}",
                    f"Add ## {section} section to the spec",
                )
            else:
                result.add_warning(
                    f"Recommended section missing: ## {section}",
                    f"Consider adding ## {section} section",
                )

        for heading in find_empty_sections(body, headings):
            if self._is_required(heading.text):
                result.add_warning(
                    f"Empty required section: ## {heading.text}",
                    "Add content to this section or remove it",
                )

        for heading in find_duplicate_headings(headings):
            result.add_error(
                f"Duplicate section header: {'#' * heading.level} {heading.text} (line {heading.line_number})",
                "Remove or rename duplicate section headers",
            )

        logger.debug(
            f"Structure check of {spec.path}: {len(result.errors)} errors, {len(result.warnings)} warnings"
        )
        return result
