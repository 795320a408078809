"""Question/answer segmentation for questionnaire documents.

A single pass over the meaningful lines keeps the open question and the answer
lines collected so far. Question lines flush the pending pair, answer and
append prefixes feed the accumulator, and plain lines are treated as answer
continuation once the first question has been seen.
"""

from __future__ import annotations

import re
from typing import List

from keepsake.models import QAPair
from keepsake.utils.text import clean_markdown_lead, normalize_line, normalize_text, split_meaningful_lines

ANSWER_PREFIX_RE = re.compile(r"^(?:回答|答覆|回覆|答案|a)\s*[:：]", re.IGNORECASE)
APPEND_PREFIX_RE = re.compile(r"^(?:想說的話|m想說|給妳的一句話|給你的一句話|補充|說明)\s*[:：]", re.IGNORECASE)
QUESTION_PREFIX_RE = re.compile(
    r"^(?:[0-9]+\ufe0f?\u20e3"
    r"|[①-⑳]"
    r"|\(?[0-9]{1,2}\)?[.)、．]"
    r"|[【\[][0-9]{1,2}[】\]]"
    r"|q\.?\s*[0-9]+[:：.)、-]?"
    r"|[一二三四五六七八九十]{1,3}[、.．])\s*",
    re.IGNORECASE,
)
QUESTION_CUE_RE = re.compile(
    r"(?:是什麼|如何|哪|有沒有|會不會|是否|如果|為什麼|怎麼|何時|多少|哪裡"
    r"|\b(?:what|how|whether|why|when|where)\b)",
    re.IGNORECASE,
)
BARE_QUESTION_RE = re.compile(r"^[^：:]{2,84}[？?]$")
INLINE_ANSWER_RE = re.compile(r"^(.*?)(?:回答|答覆|回覆|答案|a)\s*[:：]\s*(.+)$", re.IGNORECASE)
BRACKET_SEGMENT_RE = re.compile(r"【\s*([0-9]{1,2})\s*】\s*([^【]+)")

SHORT_QUESTION_CHARS = 48
FALLBACK_QUESTION_CHARS = 44
MIN_BRACKET_SEGMENTS = 3


def is_answer_line(line: str) -> bool:
    return bool(ANSWER_PREFIX_RE.match(line) or APPEND_PREFIX_RE.match(line))


def looks_like_question(line: str) -> bool:
    value = clean_markdown_lead(line.strip())
    if not value or is_answer_line(value):
        return False

    if QUESTION_PREFIX_RE.match(value):
        if "？" in value or "?" in value:
            return True
        if QUESTION_CUE_RE.search(value):
            return True
        return len(value) <= SHORT_QUESTION_CHARS

    return bool(BARE_QUESTION_RE.match(value))


def normalize_question(line: str) -> str:
    value = QUESTION_PREFIX_RE.sub("", clean_markdown_lead(line), count=1)
    return normalize_line(value)


def _placeholder(index: int) -> str:
    return f"問題 {index}"


def parse_bracket_segments(text: str) -> List[QAPair]:
    """Split ``【1】answer【2】answer...`` style documents."""
    matches = list(BRACKET_SEGMENT_RE.finditer(text))
    if len(matches) < MIN_BRACKET_SEGMENTS:
        return []
    pairs = [QAPair(_placeholder(int(match.group(1))), normalize_text(match.group(2))) for match in matches]
    return [pair for pair in pairs if pair.answer]


class _Segmenter:
    def __init__(self) -> None:
        self.pairs: List[QAPair] = []
        self.question = ""
        self.answer_lines: List[str] = []

    def flush(self) -> None:
        if not self.question and not self.answer_lines:
            return
        question = self.question or _placeholder(len(self.pairs) + 1)
        answer = normalize_text("\n".join(self.answer_lines))
        if answer:
            self.pairs.append(QAPair(question, answer))
        self.question = ""
        self.answer_lines = []

    def open_question(self, text: str) -> None:
        self.question = text or _placeholder(len(self.pairs) + 1)

    def add_answer(self, text: str) -> None:
        if not self.question:
            self.open_question("")
        if text:
            self.answer_lines.append(text)

    def feed(self, raw_line: str) -> None:
        line = clean_markdown_lead(raw_line)

        if looks_like_question(line):
            self.flush()
            inline = INLINE_ANSWER_RE.match(line)
            if inline:
                self.open_question(normalize_question(inline.group(1)))
                answer = normalize_line(inline.group(2))
                if answer:
                    self.answer_lines.append(answer)
                return
            self.open_question(normalize_question(line))
            return

        for prefix in (ANSWER_PREFIX_RE, APPEND_PREFIX_RE):
            if prefix.match(line):
                self.add_answer(prefix.sub("", line, count=1).strip())
                return

        # Preamble before the first question is not part of any answer.
        if not self.question and not self.pairs:
            return
        self.add_answer(line)


def parse_qa_pairs(text: str) -> List[QAPair]:
    """Segment a questionnaire body into ordered question/answer pairs."""
    lines = split_meaningful_lines(text)
    segmenter = _Segmenter()
    for line in lines:
        segmenter.feed(line)
    segmenter.flush()
    pairs = segmenter.pairs

    if len(pairs) < 2:
        bracket_pairs = parse_bracket_segments(text)
        if len(bracket_pairs) > len(pairs):
            return bracket_pairs

    if not pairs and lines:
        first = lines[0]
        if len(first) <= FALLBACK_QUESTION_CHARS:
            answer = normalize_text("\n".join(lines[1:])) or first
            return [QAPair(first, answer)]
        return [QAPair("內容", normalize_text("\n".join(lines)))]

    return pairs
