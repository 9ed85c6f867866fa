"""Unit tests for DependencyAlignmentValidator."""

import pytest

from leanspec.dependency_validator import (
    DependencyAlignmentOptions,
    DependencyAlignmentValidator,
    detect_dependency_references,
    normalize_dependencies,
    spec_number,
)
from leanspec.models import SpecInfo

SPEC = SpecInfo(
    path="050-billing",
    full_path="/p/specs/050-billing",
    file_path="/p/specs/050-billing/README.md",
    name="050-billing",
)


def document(body, depends_on=None):
    frontmatter = "status: planned\ncreated: 2025-11-01\n"
    if depends_on:
        frontmatter += "depends_on:\n" + "".join(f"  - {entry}\n" for entry in depends_on)
    return f"---\n{frontmatter}---\n\n# Billing\n\n{body}\n"


class TestHelpers:
    """Test cases for number extraction helpers."""

    @pytest.mark.parametrize(
        "name, expected",
        [("045-auth", "045"), ("1234-big", "123"), ("auth", None), ("45-short", None)],
    )
    def test_spec_number(self, name, expected):
        assert spec_number(name) == expected

    def test_normalize_dependencies(self):
        value = ["045-auth", 46, "20251101/047-api", "", None, True, "misc"]

        assert normalize_dependencies(value) == ["045", "046", "047", "", "misc"]

    def test_single_value_and_missing(self):
        assert normalize_dependencies("012-storage") == ["012"]
        assert normalize_dependencies(7) == ["007"]
        assert normalize_dependencies(None) == []


class TestDetection:
    """Test cases for dependency phrases in spec bodies."""

    @pytest.mark.parametrize(
        "body",
        [
            "This depends on 045.",
            "Depends on: spec 045",
            "Blocked by 045 until it ships.",
            "Requires the spec 045 to land first.",
            "Prerequisite: 045",
            "Start after spec 045 is done.",
            "Builds on 045-auth.",
            "Extends 045.",
        ],
    )
    def test_phrases(self, body):
        assert detect_dependency_references(body) == ["045"]

    def test_plain_mentions_are_not_dependencies(self):
        assert detect_dependency_references("See 045 for background. Related to 046.") == []

    def test_own_number_is_ignored(self):
        assert detect_dependency_references("Extends 050. Depends on 045.", "050") == ["045"]

    def test_references_are_unique(self):
        body = "Blocked by 046.\nDepends on 045.\nAlso depends on 046."

        assert detect_dependency_references(body) == ["045", "046"]


class TestDependencyAlignmentValidator:
    """Test cases for frontmatter alignment."""

    def test_aligned_spec_passes(self):
        content = document("Depends on 045.", depends_on=["045-auth"])

        result = DependencyAlignmentValidator().validate(SPEC, content)

        assert result.passed
        assert result.warnings == []

    def test_unlinked_reference_warns(self):
        content = document("Depends on 045.\nBlocked by 046.")

        result = DependencyAlignmentValidator().validate(SPEC, content)

        assert result.passed
        assert [issue.message for issue in result.warnings] == [
            "Content references dependencies not in frontmatter: 045, 046"
        ]
        assert result.warnings[0].suggestion == "Add 045, 046 to depends_on in the frontmatter of 050-billing"

    def test_numeric_depends_on_entries_count_as_linked(self):
        content = document("Depends on 045.", depends_on=[45])

        assert DependencyAlignmentValidator().validate(SPEC, content).warnings == []

    def test_strict_mode_reports_errors(self):
        options = DependencyAlignmentOptions(strict=True)

        result = DependencyAlignmentValidator(options).validate(SPEC, document("Depends on 045."))

        assert not result.passed
        assert result.warnings == []
        assert result.errors[0].message == "Content references dependencies not in frontmatter: 045"

    def test_only_existing_specs_are_reported(self):
        options = DependencyAlignmentOptions(existing_spec_numbers={"045"})

        result = DependencyAlignmentValidator(options).validate(SPEC, document("Depends on 045. Blocked by 099."))

        assert [issue.message for issue in result.warnings] == [
            "Content references dependencies not in frontmatter: 045"
        ]

    def test_no_existing_specs_reports_nothing(self):
        options = DependencyAlignmentOptions(existing_spec_numbers=set())

        assert DependencyAlignmentValidator(options).validate(SPEC, document("Depends on 045.")).warnings == []

    def test_frontmatter_is_not_scanned(self):
        content = "---\nstatus: planned\nnote: depends on 045\n---\n\n# Billing\n"

        assert DependencyAlignmentValidator().validate(SPEC, content).warnings == []

    def test_unparseable_frontmatter_is_skipped(self):
        result = DependencyAlignmentValidator().validate(SPEC, "---\nstatus: planned\nDepends on 045.\n")

        assert result.passed
        assert result.warnings == []
