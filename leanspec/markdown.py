"""Markdown scanning helpers used by the validators.

Everything here is a pure function over strings or heading lists. Only the
small slice of markdown that spec documents use is recognised: ATX
headings, triple-backtick code fences and inline links to sibling files.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence, Tuple

from .models import Heading

CODE_FENCE = "```"

_HEADING_RE = re.compile(r"^(#{1,6})\s+(.+)$")
_TITLE_RE = re.compile(r"^#\s+(.+)$", re.MULTILINE)
# [label](NAME.md), [label](./NAME.md) or [label](<NAME.md>), optionally with
# an #anchor and a quoted title
_SIBLING_LINK_RE = re.compile(
    r"\[[^\]]*\]\(\s*<?(?:\./)?([^)\s/#<>]+\.md)(?:#[^)\s>]*)?>?"
    r"""(?:\s+(?:"[^"]*"|'[^']*'))?\s*\)"""
)

COMMENT_PREFIXES = ("<!--", "//")


def extract_headings(body: str) -> List[Heading]:
    """Return the headings of ``body`` in document order, skipping fenced code."""
    headings: List[Heading] = []
    in_code_block = False

    for index, line in enumerate(body.split("\n")):
        if line.strip().startswith(CODE_FENCE):
            in_code_block = not in_code_block
            continue
        if in_code_block:
            continue

        match = _HEADING_RE.match(line.rstrip("\r"))
        if match:
            headings.append(
                Heading(level=len(match.group(1)), text=match.group(2).strip(), line_number=index + 1)
            )

    return headings


def find_title(body: str) -> Optional[str]:
    """Return the text of the first H1 line, if any."""
    match = _TITLE_RE.search(body)
    return match.group(1).strip() if match else None


def find_section_end(headings: Sequence[Heading], index: int) -> int:
    """Index of the first heading after ``index`` at the same or a higher level.

    Returns ``len(headings)`` when the section runs to the end of the document.
    """
    level = headings[index].level
    end = index + 1
    while end < len(headings) and headings[end].level > level:
        end += 1
    return end


def has_subsections(headings: Sequence[Heading], index: int) -> bool:
    return find_section_end(headings, index) > index + 1


def _is_content_line(line: str) -> bool:
    trimmed = line.strip()
    return bool(trimmed) and not trimmed.startswith(COMMENT_PREFIXES)


def find_empty_sections(body: str, headings: Sequence[Heading], level: int = 2) -> List[Heading]:
    """Headings at ``level`` whose section holds no content.

    A section with deeper headings inside it is never empty. Blank lines and
    lines that only open an HTML comment or a ``//`` comment do not count as
    content.
    """
    lines = body.split("\n")
    empty: List[Heading] = []

    for index, heading in enumerate(headings):
        if heading.level != level:
            continue
        if has_subsections(headings, index):
            continue

        end = find_section_end(headings, index)
        end_line = headings[end].line_number - 1 if end < len(headings) else len(lines)
        section_lines = lines[heading.line_number:end_line]

        if not any(_is_content_line(line) for line in section_lines):
            empty.append(heading)

    return empty


def find_duplicate_headings(headings: Iterable[Heading]) -> List[Heading]:
    """Every repeat of a (level, case-insensitive text) pair after its first occurrence."""
    seen: set[Tuple[int, str]] = set()
    duplicates: List[Heading] = []

    for heading in headings:
        key = (heading.level, heading.text.lower())
        if key in seen:
            duplicates.append(heading)
        else:
            seen.add(key)

    return duplicates


def extract_markdown_links(text: str) -> List[str]:
    """Target filenames of links to sibling markdown files, in order of appearance."""
    return _SIBLING_LINK_RE.findall(text)
