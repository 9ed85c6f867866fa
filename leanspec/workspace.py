"""Workspace management for LeanSpec projects.

This module locates a project root, loads its configuration file with the
built-in config parser and discovers the specs stored under it.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config_parser import ConfigValue, parse
from .frontmatter import FrontmatterError, split_frontmatter
from .frontmatter_validator import FrontmatterOptions
from .leanspec_logging import log_error_with_context, log_spec_discovered
from .models import SpecInfo
from .structure_validator import DEFAULT_REQUIRED_SECTIONS, StructureOptions
from .sub_spec_validator import SubSpecOptions
from .token_count_validator import TokenCountOptions
from .tokens import DEFAULT_ERROR_THRESHOLD, DEFAULT_GOOD_THRESHOLD, DEFAULT_WARNING_THRESHOLD

PROJECT_ROOT_ENV = "LEANSPEC_PROJECT_ROOT"
SPECS_DIR_ENV = "LEANSPEC_SPECS_DIR"
PROJECT_MARKERS = (".lean-spec", "leanspec.yaml")
CONFIG_CANDIDATES = (".lean-spec/config.yaml", ".lean-spec/config.yml", "leanspec.yaml")
ARCHIVED_DIR = "archived"

logger = logging.getLogger("leanspec.workspace")


def _expect(value: ConfigValue, expected: type | tuple, key: str) -> Any:
    # bool is an int subclass; thresholds must not accept true/false
    if isinstance(value, bool) and expected is int:
        raise ValueError(f"Config key '{key}' must be int, got bool")
    if not isinstance(value, expected):
        name = expected.__name__ if isinstance(expected, type) else "/".join(t.__name__ for t in expected)
        raise ValueError(f"Config key '{key}' must be {name}, got {type(value).__name__}")
    return value


def _section(data: Dict[str, ConfigValue], key: str, path: str) -> Dict[str, ConfigValue]:
    value = data.get(key)
    if value is None:
        return {}
    return _expect(value, dict, f"{path}{key}")


@dataclass(slots=True)
class ProjectConfig:
    """Project settings read from the LeanSpec config file."""

    name: Optional[str] = None
    description: Optional[str] = None
    specs_dir: str = "specs"
    default_file: str = "README.md"
    strict: bool = False
    required_sections: List[str] = field(default_factory=lambda: list(DEFAULT_REQUIRED_SECTIONS))
    good_threshold: int = DEFAULT_GOOD_THRESHOLD
    warning_threshold: int = DEFAULT_WARNING_THRESHOLD
    error_threshold: int = DEFAULT_ERROR_THRESHOLD
    check_cross_references: bool = True
    required_fields: List[str] = field(default_factory=list)
    allowed_custom_fields: List[str] = field(default_factory=list)
    warn_on_unknown: bool = False

    @classmethod
    def from_value(cls, data: ConfigValue) -> "ProjectConfig":
        """Build a config from a parsed document, validating value types."""
        data = _expect(data, dict, "<root>")
        config = cls()

        if data.get("name") is not None:
            config.name = str(data["name"])
        if data.get("description") is not None:
            config.description = str(data["description"])
        if data.get("specsDir") is not None:
            config.specs_dir = _expect(data["specsDir"], str, "specsDir")

        structure = _section(data, "structure", "")
        if structure.get("defaultFile") is not None:
            config.default_file = _expect(structure["defaultFile"], str, "structure.defaultFile")

        validation = _section(data, "validation", "")
        if validation.get("strict") is not None:
            config.strict = _expect(validation["strict"], bool, "validation.strict")
        if validation.get("requiredSections") is not None:
            sections = _expect(validation["requiredSections"], list, "validation.requiredSections")
            config.required_sections = [str(item) for item in sections]

        sub_specs = _section(validation, "subSpecs", "validation.")
        for key, attr in (
            ("goodThreshold", "good_threshold"),
            ("warningThreshold", "warning_threshold"),
            ("errorThreshold", "error_threshold"),
        ):
            if sub_specs.get(key) is not None:
                setattr(config, attr, _expect(sub_specs[key], int, f"validation.subSpecs.{key}"))
        if sub_specs.get("checkCrossReferences") is not None:
            config.check_cross_references = _expect(
                sub_specs["checkCrossReferences"], bool, "validation.subSpecs.checkCrossReferences"
            )

        frontmatter = _section(validation, "frontmatter", "validation.")
        for key, attr in (
            ("requiredFields", "required_fields"),
            ("allowedCustomFields", "allowed_custom_fields"),
        ):
            if frontmatter.get(key) is not None:
                names = _expect(frontmatter[key], list, f"validation.frontmatter.{key}")
                setattr(config, attr, [str(item) for item in names])
        if frontmatter.get("warnOnUnknown") is not None:
            config.warn_on_unknown = _expect(
                frontmatter["warnOnUnknown"], bool, "validation.frontmatter.warnOnUnknown"
            )

        return config

    def structure_options(self) -> StructureOptions:
        return StructureOptions(required_sections=list(self.required_sections), strict=self.strict)

    def sub_spec_options(self) -> SubSpecOptions:
        return SubSpecOptions(
            good_threshold=self.good_threshold,
            warning_threshold=self.warning_threshold,
            error_threshold=self.error_threshold,
            check_cross_references=self.check_cross_references,
        )

    def token_count_options(self) -> TokenCountOptions:
        return TokenCountOptions(warning_threshold=self.warning_threshold, error_threshold=self.error_threshold)

    def frontmatter_options(self) -> FrontmatterOptions:
        return FrontmatterOptions(
            required_fields=list(self.required_fields),
            allowed_custom_fields=list(self.allowed_custom_fields),
            warn_on_unknown=self.warn_on_unknown,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "specs_dir": self.specs_dir,
            "default_file": self.default_file,
            "strict": self.strict,
            "required_sections": list(self.required_sections),
            "good_threshold": self.good_threshold,
            "warning_threshold": self.warning_threshold,
            "error_threshold": self.error_threshold,
            "check_cross_references": self.check_cross_references,
            "required_fields": list(self.required_fields),
            "allowed_custom_fields": list(self.allowed_custom_fields),
            "warn_on_unknown": self.warn_on_unknown,
        }


def _candidate_bases(start: Path) -> List[Path]:
    return [start, *start.parents]


def locate_project_root(start: Optional[Path] = None) -> Optional[Path]:
    """Nearest directory at or above ``start`` that carries a project marker."""
    for base in _candidate_bases((start or Path.cwd()).resolve()):
        for marker in PROJECT_MARKERS:
            if (base / marker).exists():
                return base
    return None


def resolve_root(root: Optional[str] = None) -> Path:
    """Resolve the project root from an argument, the environment or the cwd."""
    if root:
        resolved = Path(root).expanduser().resolve()
        if not resolved.exists():
            raise ValueError(f"Provided root '{root}' does not exist.")
        return resolved

    env_root = os.getenv(PROJECT_ROOT_ENV)
    if env_root:
        env_path = Path(env_root).expanduser().resolve()
        if not env_path.exists():
            raise ValueError(
                f"Environment variable {PROJECT_ROOT_ENV} points to '{env_root}', which does not exist."
            )
        return env_path

    detected_root = locate_project_root()
    if detected_root:
        return detected_root

    raise ValueError(
        "Unable to determine project root automatically. Provide the 'root' argument "
        f"or set the {PROJECT_ROOT_ENV} environment variable."
    )


class Workspace:
    """A LeanSpec project tree: configuration plus the specs below it."""

    def __init__(self, root: Path | str, config: Optional[ProjectConfig] = None):
        self.root = Path(root).resolve()
        self.config = config if config is not None else self.load_config()

        specs_dir = os.getenv(SPECS_DIR_ENV) or self.config.specs_dir
        self.specs_dir = (self.root / specs_dir).resolve()
        logger.info(f"Workspace initialized at {self.root} (specs in {self.specs_dir})")

    @property
    def config_path(self) -> Optional[Path]:
        for candidate in CONFIG_CANDIDATES:
            path = self.root / candidate
            if path.is_file():
                return path
        return None

    def load_config(self) -> ProjectConfig:
        """Read the project config; defaults when no config file exists."""
        path = self.config_path
        if path is None:
            logger.debug(f"No config file under {self.root}, using defaults")
            return ProjectConfig()

        return ProjectConfig.from_value(parse(path.read_text(encoding="utf-8")))

    # ------------------------------------------------------------------
    # Spec discovery
    # ------------------------------------------------------------------

    def _primary_file(self, directory: Path) -> Optional[Path]:
        path = directory / self.config.default_file
        return path if path.is_file() else None

    def _spec_info(self, directory: Path, group: str) -> SpecInfo:
        file_path = directory / self.config.default_file
        frontmatter: Dict[str, Any] = {}
        try:
            frontmatter, _ = split_frontmatter(file_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, FrontmatterError) as e:
            log_error_with_context(e, {"operation": "read_frontmatter", "path": str(file_path)})

        return SpecInfo(
            path=directory.relative_to(self.specs_dir).as_posix(),
            full_path=str(directory),
            file_path=str(file_path),
            name=directory.name,
            date=group,
            frontmatter=frontmatter,
        )

    def list_specs(self, include_archived: bool = False) -> List[SpecInfo]:
        """Every spec under the specs directory, sorted by relative path.

        A directory holding the primary document is a spec; any other
        directory is a group (a date folder, ``archived``) searched one level
        deeper.
        """
        if not self.specs_dir.is_dir():
            return []

        specs: List[SpecInfo] = []
        for directory in sorted(path for path in self.specs_dir.iterdir() if path.is_dir()):
            if self._primary_file(directory):
                specs.append(self._spec_info(directory, ""))
                continue
            if directory.name == ARCHIVED_DIR and not include_archived:
                continue
            specs.extend(self._list_group(directory, include_archived))

        for spec in specs:
            log_spec_discovered(spec.path, name=spec.name)
        return sorted(specs, key=lambda spec: spec.path)

    def _list_group(self, group_dir: Path, include_archived: bool) -> List[SpecInfo]:
        found: List[SpecInfo] = []
        for directory in sorted(path for path in group_dir.iterdir() if path.is_dir()):
            if self._primary_file(directory):
                found.append(self._spec_info(directory, group_dir.name))
            elif group_dir.name == ARCHIVED_DIR and include_archived:
                # archived/<date>/<spec>
                found.extend(
                    self._spec_info(child, directory.name)
                    for child in sorted(p for p in directory.iterdir() if p.is_dir())
                    if self._primary_file(child)
                )
        return found

    def get_spec(self, spec_path: str) -> Optional[SpecInfo]:
        """Resolve a relative path, spec name or number prefix to a spec."""
        specs = self.list_specs(include_archived=True)
        normalized = spec_path.strip().strip("/")

        for spec in specs:
            if normalized in (spec.path, spec.name):
                return spec

        if re.fullmatch(r"\d+", normalized):
            for spec in specs:
                match = re.match(r"(\d+)-", spec.name)
                if match and int(match.group(1)) == int(normalized):
                    return spec

        logger.debug(f"No spec matches '{spec_path}'")
        return None
