"""Shared fixtures for the LeanSpec test suite."""

import pytest

from leanspec.leanspec_logging import observability_hooks, performance_monitor
from leanspec.models import SpecInfo

README_TEMPLATE = """---
status: in-progress
created: '2025-11-01'
---

# Test Spec

{body}
"""

# 10 words, no punctuation: 13 estimated tokens per line
TOKEN_LINE = "alpha beta gamma delta epsilon zeta eta theta iota kappa\n"


@pytest.fixture(autouse=True)
def reset_observability():
    """Keep global metrics and hooks from leaking between tests."""
    performance_monitor.clear()
    saved = {event: list(hooks) for event, hooks in observability_hooks.hooks.items()}
    yield
    performance_monitor.clear()
    observability_hooks.hooks = saved


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    monkeypatch.delenv("LEANSPEC_PROJECT_ROOT", raising=False)
    monkeypatch.delenv("LEANSPEC_SPECS_DIR", raising=False)


@pytest.fixture
def make_spec(tmp_path):
    """Create a spec directory with a README.md and optional sub-spec files."""

    def _make(readme_body="", files=None, name="test-spec"):
        spec_dir = tmp_path / name
        spec_dir.mkdir(parents=True, exist_ok=True)
        readme = README_TEMPLATE.format(body=readme_body)
        (spec_dir / "README.md").write_text(readme, encoding="utf-8")
        for filename, content in (files or {}).items():
            (spec_dir / filename).write_text(content, encoding="utf-8")

        spec = SpecInfo(
            path=name,
            full_path=str(spec_dir),
            file_path=str(spec_dir / "README.md"),
            name=name,
            date="20251105",
            frontmatter={"status": "in-progress", "created": "2025-11-01"},
        )
        return spec, readme

    return _make


@pytest.fixture
def sized_document():
    """Build a sub-spec body of roughly ``13 * lines`` estimated tokens."""

    def _build(lines, title="Design"):
        return f"# {title}\n\n" + TOKEN_LINE * lines

    return _build
