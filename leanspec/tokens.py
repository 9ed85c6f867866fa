"""Token estimation for context-window budgeting.

The estimate is a heuristic calibrated against the sub-spec thresholds,
not an exact BPE count. Any ``Callable[[str], int]`` can be used instead.
"""

from __future__ import annotations

import math
import re
from enum import Enum
from typing import Callable

TokenEstimator = Callable[[str], int]

TOKENS_PER_WORD = 1.3
TOKENS_PER_SPECIAL_CHAR = 0.5

DEFAULT_GOOD_THRESHOLD = 2000
DEFAULT_WARNING_THRESHOLD = 3500
DEFAULT_ERROR_THRESHOLD = 5000

_SPECIAL_CHAR_RE = re.compile(r"[^a-zA-Z0-9\s]")


class TokenStatus(Enum):
    """Where a token count sits relative to the budget thresholds."""

    OPTIMAL = "optimal"  # below the good threshold
    GOOD = "good"
    WARNING = "warning"  # consider splitting
    EXCESSIVE = "excessive"  # must split


def estimate_tokens(text: str) -> int:
    """Approximate the token count of ``text``.

    Words count roughly 1.3 tokens each and punctuation or other symbols
    about half a token.
    """
    words = len(text.split())
    special_chars = len(_SPECIAL_CHAR_RE.findall(text))
    return math.ceil(words * TOKENS_PER_WORD + special_chars * TOKENS_PER_SPECIAL_CHAR)


def classify_tokens(
    count: int,
    good_threshold: int = DEFAULT_GOOD_THRESHOLD,
    warning_threshold: int = DEFAULT_WARNING_THRESHOLD,
    error_threshold: int = DEFAULT_ERROR_THRESHOLD,
) -> TokenStatus:
    if count < good_threshold:
        return TokenStatus.OPTIMAL
    if count < warning_threshold:
        return TokenStatus.GOOD
    if count < error_threshold:
        return TokenStatus.WARNING
    return TokenStatus.EXCESSIVE
