"""Spec compliance checking across a workspace.

``SpecChecker`` wires the validators to a ``Workspace`` and turns their
results into plain dictionaries for CLI and MCP callers.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional, Set

from .dependency_validator import DependencyAlignmentOptions, DependencyAlignmentValidator, spec_number
from .frontmatter_validator import FrontmatterValidator
from .leanspec_logging import log_operation, log_performance, log_validation_completed
from .models import SpecInfo, ValidationResult, ValidationRule
from .storage import FileSystemStorage, SpecStorage
from .structure_validator import StructureValidator
from .sub_spec_validator import SubSpecValidator
from .token_count_validator import TokenCountValidator
from .tokens import classify_tokens
from .workspace import Workspace

logger = logging.getLogger("leanspec.checker")


class SpecChecker:
    """Run every validator over the specs of a workspace."""

    def __init__(self, workspace: Workspace, storage: Optional[SpecStorage] = None):
        self.workspace = workspace
        self.storage = storage or FileSystemStorage()
        config = workspace.config
        self.sub_spec_options = config.sub_spec_options()
        dependency_options = DependencyAlignmentOptions(
            strict=config.strict,
            existing_spec_numbers=self._spec_numbers(),
        )
        self.validators: List[ValidationRule] = [
            FrontmatterValidator(config.frontmatter_options()),
            StructureValidator(config.structure_options()),
            TokenCountValidator(config.token_count_options()),
            SubSpecValidator(self.sub_spec_options, storage=self.storage),
            DependencyAlignmentValidator(dependency_options),
        ]

    def _spec_numbers(self) -> Set[str]:
        numbers = (spec_number(spec.name) for spec in self.workspace.list_specs(include_archived=True))
        return {number for number in numbers if number}

    def _resolve(self, spec_path: str) -> SpecInfo:
        spec = self.workspace.get_spec(spec_path)
        if spec is None:
            raise ValueError(f"Spec not found: {spec_path}")
        return spec

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def check_spec(self, spec: SpecInfo) -> Dict[str, Any]:
        """Validate one spec with every validator."""
        try:
            content = self.storage.read_file(spec.file_path)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Cannot read primary document of {spec.path}: {e}")
            failed = ValidationResult()
            failed.add_error(f"Cannot read {os.path.basename(spec.file_path)}: {e}")
            return {
                "spec": spec.path,
                "passed": False,
                "error_count": 1,
                "warning_count": 0,
                "results": {"read": failed.to_dict()},
            }

        combined = ValidationResult()
        results: Dict[str, Dict[str, Any]] = {}
        for validator in self.validators:
            result = validator.validate(spec, content)
            log_validation_completed(
                spec.path,
                validator.name,
                result.passed,
                len(result.errors),
                len(result.warnings),
            )
            results[validator.name] = result.to_dict()
            combined = combined.merge(result)

        return {
            "spec": spec.path,
            "passed": combined.passed,
            "error_count": len(combined.errors),
            "warning_count": len(combined.warnings),
            "results": results,
        }

    def check_path(self, spec_path: str) -> Dict[str, Any]:
        return self.check_spec(self._resolve(spec_path))

    @log_performance("check_all")
    def check_all(self, include_archived: bool = False) -> Dict[str, Any]:
        """Validate every spec in the workspace and summarize."""
        with log_operation("check_all", root=str(self.workspace.root)):
            reports = [self.check_spec(spec) for spec in self.workspace.list_specs(include_archived)]

        error_count = sum(report["error_count"] for report in reports)
        warning_count = sum(report["warning_count"] for report in reports)
        passed = sum(1 for report in reports if report["passed"])

        return {
            "total": len(reports),
            "passed": passed,
            "failed": len(reports) - passed,
            "error_count": error_count,
            "warning_count": warning_count,
            "specs": reports,
        }

    # ------------------------------------------------------------------
    # Token budget
    # ------------------------------------------------------------------

    def _token_entry(self, path: str) -> Dict[str, Any]:
        options = self.sub_spec_options
        count = options.token_estimator(self.storage.read_file(path))
        status = classify_tokens(count, options.good_threshold, options.warning_threshold, options.error_threshold)
        return {"file": os.path.basename(path), "tokens": count, "status": status.value}

    def _spec_tokens(self, spec: SpecInfo) -> Dict[str, Any]:
        primary = self._token_entry(spec.file_path)
        sub_validator = SubSpecValidator(self.sub_spec_options, storage=self.storage)
        sub_specs = [
            self._token_entry(os.path.join(spec.full_path, name))
            for name in sub_validator.discover(spec)
        ]
        return {
            "spec": spec.path,
            "primary": primary,
            "sub_specs": sub_specs,
            "total": primary["tokens"] + sum(entry["tokens"] for entry in sub_specs),
        }

    @log_performance("token_report")
    def token_report(self, spec_path: Optional[str] = None) -> Dict[str, Any]:
        """Estimated tokens for one spec, or a summary over all specs."""
        if spec_path:
            return self._spec_tokens(self._resolve(spec_path))

        entries = []
        for spec in self.workspace.list_specs():
            try:
                entries.append(self._spec_tokens(spec))
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Skipping token count for {spec.path}: {e}")

        total_tokens = sum(entry["total"] for entry in entries)
        return {
            "count": len(entries),
            "total_tokens": total_tokens,
            "average_tokens": total_tokens // len(entries) if entries else 0,
            "specs": entries,
        }
