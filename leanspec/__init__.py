"""LeanSpec - spec compliance engine."""

from .config_parser import ConfigSyntaxError, parse, parse_scalar
from .dependency_validator import DependencyAlignmentOptions, DependencyAlignmentValidator
from .frontmatter import FrontmatterError, split_frontmatter
from .frontmatter_validator import FrontmatterOptions, FrontmatterValidator
from .markdown import extract_headings
from .models import Heading, SpecInfo, ValidationIssue, ValidationResult
from .structure_validator import StructureOptions, StructureValidator
from .sub_spec_validator import SubSpecOptions, SubSpecValidator
from .token_count_validator import TokenCountOptions, TokenCountValidator
from .tokens import TokenStatus, estimate_tokens

__all__ = [
    "ConfigSyntaxError",
    "parse",
    "parse_scalar",
    "DependencyAlignmentOptions",
    "DependencyAlignmentValidator",
    "FrontmatterError",
    "split_frontmatter",
    "FrontmatterOptions",
    "FrontmatterValidator",
    "extract_headings",
    "Heading",
    "SpecInfo",
    "ValidationIssue",
    "ValidationResult",
    "StructureOptions",
    "StructureValidator",
    "SubSpecOptions",
    "SubSpecValidator",
    "TokenCountOptions",
    "TokenCountValidator",
    "TokenStatus",
    "estimate_tokens",
]
