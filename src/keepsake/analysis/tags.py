"""Keyword classification tags for questionnaire documents."""

from __future__ import annotations

import re
from typing import List, Sequence, Tuple

TAG_RULES: Sequence[Tuple[str, re.Pattern[str]]] = (
    ("DAILY", re.compile(r"每日")),
    ("LOVE", re.compile(r"戀人|Anni|妳|你")),
    ("SELF", re.compile(r"自我|原點|確認|反思|identity|self", re.IGNORECASE)),
    ("STABLE", re.compile(r"穩定")),
)
DEFAULT_TAG = "QA"
MAX_TAGS = 2


def build_tags(title: str, source_file: str) -> List[str]:
    text = f"{title} {source_file}"
    tags = [tag for tag, pattern in TAG_RULES if pattern.search(text)]
    return (tags or [DEFAULT_TAG])[:MAX_TAGS]
