"""Text helpers shared by every corpus heuristic."""

from __future__ import annotations

import re
from typing import Iterable, List

SUPPORTED_SUFFIX_RE = re.compile(r"\.(?:docx?|txt|md|csv)$", re.IGNORECASE)
ZERO_WIDTH_RE = re.compile("[\u200b\u200c\u200d\ufeff]")
WHITESPACE_RE = re.compile(r"\s+")
BLANK_RUN_RE = re.compile(r"\n{3,}")
CONTROL_CHARS_RE = re.compile("[\x00-\x08\x0b-\x1f\x7f]")
HEADING_LEAD_RE = re.compile(r"^#{1,6}\s*")
BULLET_LEAD_RE = re.compile(r"^[-*]\s+")


def normalize_text(text: str) -> str:
    """Canonicalize spaces and newlines of a whole document body."""
    text = text.replace("\u00a0", " ")
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = BLANK_RUN_RE.sub("\n\n", text)
    return text.strip()


def normalize_line(line: str) -> str:
    line = ZERO_WIDTH_RE.sub("", line)
    return WHITESPACE_RE.sub(" ", line).strip()


def split_meaningful_lines(text: str) -> List[str]:
    """Split text into non-empty, whitespace-collapsed lines."""
    lines = (normalize_line(line) for line in re.split(r"\n+", text))
    return [line for line in lines if line]


def clean_markdown_lead(line: str) -> str:
    """Drop a leading markdown heading marker or list bullet."""
    line = HEADING_LEAD_RE.sub("", line)
    return BULLET_LEAD_RE.sub("", line).strip()


def collapse_whitespace(text: str) -> str:
    return WHITESPACE_RE.sub(" ", text).strip()


def strip_extension(name: str) -> str:
    return SUPPORTED_SUFFIX_RE.sub("", name).strip()


def prettify_title(raw: str) -> str:
    """Turn a file stem like ``03_my__note`` into ``my note``."""
    pretty = re.sub(r"^[\d\s_-]+", "", raw)
    pretty = re.sub(r"_+", " ", pretty)
    return re.sub(r"\s{2,}", " ", pretty).strip()


def truncate(text: str, limit: int, marker: str = "...") -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + marker


def clean_search_text(parts: Iterable[str], *, max_chars: int, collapse: bool = False) -> str:
    """Join search fields, strip control characters and cap the length."""
    joined = CONTROL_CHARS_RE.sub("", "\n".join(parts))
    if collapse:
        joined = collapse_whitespace(joined)
    return joined.strip()[:max_chars]


def utf16_length(text: str) -> int:
    """Length in UTF-16 code units, as reported by the web client."""
    return len(text.encode("utf-16-le")) // 2
