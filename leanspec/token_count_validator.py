"""Token budget for a spec's primary document."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from .frontmatter import FrontmatterError, split_frontmatter
from .models import SpecInfo, ValidationResult
from .tokens import (
    DEFAULT_ERROR_THRESHOLD,
    DEFAULT_WARNING_THRESHOLD,
    TokenEstimator,
    TokenStatus,
    classify_tokens,
    estimate_tokens,
)

logger = logging.getLogger("leanspec.tokens")


@dataclass(slots=True)
class TokenCountOptions:
    """Options for ``TokenCountValidator``."""

    warning_threshold: int = DEFAULT_WARNING_THRESHOLD
    error_threshold: int = DEFAULT_ERROR_THRESHOLD
    token_estimator: TokenEstimator = field(default=estimate_tokens)

    def __post_init__(self) -> None:
        if not 0 < self.warning_threshold < self.error_threshold:
            raise ValueError(
                "Token thresholds must be positive and ascending: "
                f"warning={self.warning_threshold}, error={self.error_threshold}"
            )


class TokenCountValidator:
    """Validate the size of the primary document."""

    name = "tokens"
    description = "Validate the estimated token count of the primary document"

    def __init__(self, options: Optional[TokenCountOptions] = None):
        self.options = options or TokenCountOptions()

    def validate(self, spec: SpecInfo, content: str) -> ValidationResult:
        result = ValidationResult()
        options = self.options

        try:
            _, body = split_frontmatter(content)
        except FrontmatterError:
            body = content

        count = options.token_estimator(body)
        # Only the warning and error tiers matter for the primary document
        status = classify_tokens(count, options.warning_threshold, options.warning_threshold, options.error_threshold)

        if status is TokenStatus.EXCESSIVE:
            result.add_error(
                f"Spec has ~{count:,} tokens, exceeding the {options.error_threshold:,} token threshold",
                "Split this spec into sub-specs or smaller specs",
            )
        elif status is TokenStatus.WARNING:
            result.add_warning(
                f"Spec has ~{count:,} tokens, approaching the {options.error_threshold:,} limit",
                "Consider moving detail into sub-specs",
            )

        logger.debug(f"Primary document of {spec.path}: ~{count} tokens ({status.value})")
        return result
