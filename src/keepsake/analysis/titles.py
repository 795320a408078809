"""Title and preview extraction."""

from __future__ import annotations

import re
from typing import Callable, Iterable, Optional, Sequence

from keepsake.utils.text import clean_markdown_lead, collapse_whitespace, prettify_title, truncate

ORDINAL_LEAD_RE = re.compile(r"^\d+[.)、\s-]+")


def clean_title_line(line: str) -> str:
    """Strip heading markers, bullets and leading ordinal numbering."""
    cleaned = re.sub(r"^#+\s*", "", line)
    cleaned = clean_markdown_lead(cleaned)
    return ORDINAL_LEAD_RE.sub("", cleaned).strip()


def pick_title(
    lines: Iterable[str],
    base_title: str,
    *,
    accept: Callable[[str], bool],
    default: str,
) -> str:
    """Pick the first acceptable line, falling back to the file name."""
    for line in lines:
        if not accept(line):
            continue
        cleaned = clean_title_line(line)
        if cleaned:
            return cleaned
    return prettify_title(base_title) or base_title or default


def build_preview(
    title: str,
    lines: Sequence[str],
    body: str,
    *,
    limit: int,
    marker: str,
    placeholder: str,
    lead: Optional[str] = None,
) -> str:
    """Short teaser text: ``lead`` if given, else the first line that is not the title."""
    text = collapse_whitespace(lead or "")
    if not text:
        text = next((line for line in lines if clean_title_line(line) != title), "")
    if not text:
        text = collapse_whitespace(body)
    if not text:
        return placeholder
    return truncate(text, limit, marker)
