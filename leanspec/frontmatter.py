"""Frontmatter splitting for spec documents."""

from __future__ import annotations

from typing import Any, Dict, Tuple

from .config_parser import ConfigSyntaxError, parse

FRONTMATTER_DELIMITER = "---"
FRONTMATTER_END_MARKERS = ("---", "...")


class FrontmatterError(ValueError):
    """Raised when a document's frontmatter block is malformed."""


def split_frontmatter(raw: str) -> Tuple[Dict[str, Any], str]:
    """Split ``raw`` into its frontmatter mapping and markdown body.

    A document that does not open with a ``---`` line has no frontmatter and
    its whole text is the body.
    """
    text = raw.lstrip("\ufeff")
    lines = text.split("\n")
    if not lines or lines[0].rstrip() != FRONTMATTER_DELIMITER:
        return {}, text

    for index in range(1, len(lines)):
        if lines[index].rstrip() in FRONTMATTER_END_MARKERS:
            block = "\n".join(lines[1:index])
            body = "\n".join(lines[index + 1:])
            break
    else:
        raise FrontmatterError("Frontmatter block is not closed with '---'")

    try:
        data = parse(block)
    except ConfigSyntaxError as exc:
        raise FrontmatterError(f"Invalid frontmatter: {exc}") from exc

    if not isinstance(data, dict):
        raise FrontmatterError("Frontmatter must be a mapping")

    return data, body
