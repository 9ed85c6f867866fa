"""Sub-spec validator.

Sub-specs are the companion markdown files that live beside a spec's
primary document (DESIGN.md, TESTING.md, ...). This validator checks:
- naming convention (uppercase file stems)
- token budget per sub-spec
- orphaned sub-specs never linked from the primary document
- broken links between sub-specs

Only an oversized sub-spec is an error; everything else is a warning.
Storage failures are logged and treated as "nothing to check".
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from .leanspec_logging import log_error_with_context
from .markdown import extract_markdown_links
from .models import SpecInfo, ValidationResult
from .storage import FileSystemStorage, SpecStorage
from .tokens import (
    DEFAULT_ERROR_THRESHOLD,
    DEFAULT_GOOD_THRESHOLD,
    DEFAULT_WARNING_THRESHOLD,
    TokenEstimator,
    TokenStatus,
    classify_tokens,
    estimate_tokens,
)

MARKDOWN_SUFFIX = ".md"

logger = logging.getLogger("leanspec.sub_spec")


@dataclass(slots=True)
class SubSpecOptions:
    """Options for ``SubSpecValidator``."""

    good_threshold: int = DEFAULT_GOOD_THRESHOLD
    warning_threshold: int = DEFAULT_WARNING_THRESHOLD
    error_threshold: int = DEFAULT_ERROR_THRESHOLD
    check_cross_references: bool = True
    token_estimator: TokenEstimator = field(default=estimate_tokens)

    def __post_init__(self) -> None:
        if not 0 < self.good_threshold < self.warning_threshold < self.error_threshold:
            raise ValueError(
                "Token thresholds must be positive and ascending: "
                f"good={self.good_threshold}, warning={self.warning_threshold}, error={self.error_threshold}"
            )


def is_uppercase_name(filename: str) -> bool:
    stem, _ = os.path.splitext(filename)
    return not any(char.islower() for char in stem)


def uppercase_name(filename: str) -> str:
    stem, suffix = os.path.splitext(filename)
    return f"{stem.upper()}{suffix}"


class SubSpecValidator:
    """Validate the companion documents of a spec."""

    name = "sub-specs"
    description = "Validate sub-spec naming, size and cross-references"

    def __init__(self, options: Optional[SubSpecOptions] = None, storage: Optional[SpecStorage] = None):
        self.options = options or SubSpecOptions()
        self.storage = storage or FileSystemStorage()

    def discover(self, spec: SpecInfo) -> List[str]:
        """File names of the spec's sub-specs; empty when the directory cannot be listed."""
        primary = Path(spec.file_path).name.lower()
        try:
            files = self.storage.list_files(spec.full_path)
        except OSError as e:
            log_error_with_context(e, {"operation": "discover_sub_specs", "spec": spec.path})
            return []

        return [
            name for name in files
            if name.lower().endswith(MARKDOWN_SUFFIX) and name.lower() != primary
        ]

    def validate(self, spec: SpecInfo, content: str) -> ValidationResult:
        result = ValidationResult()

        sub_specs = self.discover(spec)
        if not sub_specs:
            return result

        primary_name = Path(spec.file_path).name
        contents = self._read_sub_specs(spec, sub_specs)

        self._check_naming(sub_specs, result)
        for filename, text in contents.items():
            self._check_tokens(filename, text, result)
        self._check_orphans(sub_specs, primary_name, content, result)
        if self.options.check_cross_references:
            self._check_cross_references(spec, contents, primary_name, result)

        logger.debug(
            f"Sub-spec check of {spec.path}: {len(sub_specs)} sub-specs, "
            f"{len(result.errors)} errors, {len(result.warnings)} warnings"
        )
        return result

    def _read_sub_specs(self, spec: SpecInfo, sub_specs: List[str]) -> Dict[str, str]:
        contents: Dict[str, str] = {}
        for filename in sub_specs:
            path = os.path.join(spec.full_path, filename)
            try:
                contents[filename] = self.storage.read_file(path)
            except (OSError, UnicodeDecodeError) as e:
                log_error_with_context(e, {"operation": "read_sub_spec", "spec": spec.path, "file": filename})
        return contents

    def _check_naming(self, sub_specs: List[str], result: ValidationResult) -> None:
        for filename in sub_specs:
            if not is_uppercase_name(filename):
                result.add_warning(
                    f"Sub-spec filename should be uppercase: {filename}",
                    f"Rename to {uppercase_name(filename)}",
                )

    def _check_tokens(self, filename: str, text: str, result: ValidationResult) -> None:
        options = self.options
        count = options.token_estimator(text)
        status = classify_tokens(count, options.good_threshold, options.warning_threshold, options.error_threshold)

        if status is TokenStatus.OPTIMAL:
            return
        if status is TokenStatus.EXCESSIVE:
            result.add_error(
                f"Sub-spec {filename} has ~{count:,} tokens, exceeding the {options.error_threshold:,} token threshold",
                "Split this sub-spec into smaller focused documents",
            )
        elif status is TokenStatus.WARNING:
            result.add_warning(
                f"Sub-spec {filename} has ~{count:,} tokens, approaching the {options.error_threshold:,} limit",
                "Consider splitting this sub-spec",
            )
        else:
            result.add_warning(
                f"Sub-spec {filename} has ~{count:,} tokens, above the {options.good_threshold:,} target",
                "Keep this sub-spec focused on a single topic",
            )

    def _check_orphans(self, sub_specs: List[str], primary_name: str, content: str, result: ValidationResult) -> None:
        linked = set(extract_markdown_links(content))
        for filename in sub_specs:
            if filename not in linked:
                result.add_warning(
                    f"Orphaned sub-spec: {filename} (not linked from {primary_name})",
                    f"Add a link to {filename} in {primary_name}",
                )

    def _check_cross_references(
        self,
        spec: SpecInfo,
        contents: Dict[str, str],
        primary_name: str,
        result: ValidationResult,
    ) -> None:
        try:
            existing = set(self.storage.list_files(spec.full_path))
        except OSError as e:
            log_error_with_context(e, {"operation": "check_cross_references", "spec": spec.path})
            return

        for filename, text in contents.items():
            # dict.fromkeys keeps order while dropping repeated targets
            for target in dict.fromkeys(extract_markdown_links(text)):
                if target in existing or target.lower() == primary_name.lower():
                    continue
                result.add_warning(
                    f"Broken reference in {filename}: {target} does not exist",
                    f"Create {target} or fix the link",
                )
