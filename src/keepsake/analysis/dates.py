"""Best-effort calendar date inference from file names and loose text.

Candidates are tried in priority order (file name, base title, head lines,
tail lines) and the first one that yields a valid date wins. Within one
candidate an ordered pattern cascade is tried; every syntactic match is
validated against the calendar before it is accepted.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional, Sequence

LOGGER = logging.getLogger(__name__)

_SEP = r"[\s_./-]"
_YEAR = r"((?:19|20)[0-9]{2})"

# Year-month-day, optional separators and CJK date words.
YMD_RE = re.compile(
    r"(?:^|[^0-9])" + _YEAR
    + _SEP + r"*年?" + _SEP + r"*(1[0-2]|0?[1-9])"
    + _SEP + r"*月?" + _SEP + r"*(3[01]|[12][0-9]|0?[1-9])\s*日?(?=$|[^0-9])"
)
COMPACT_RE = re.compile(r"(?:^|[^0-9])" + _YEAR + r"(1[0-2]|0[1-9])(3[01]|[12][0-9]|0[1-9])(?=$|[^0-9])")
# One stray digit between the year and the month, e.g. "20231 05 10".
EXTRA_DIGIT_RE = re.compile(
    r"(?:^|[^0-9])" + _YEAR + r"[0-9]" + _SEP + r"*(1[0-2]|0[1-9])"
    + _SEP + r"*(3[01]|[12][0-9]|0[1-9])(?=$|[^0-9])"
)
MDY_RE = re.compile(r"(?:^|[^0-9])(1[0-2]|0?[1-9])[/._-](3[01]|[12][0-9]|0?[1-9])[/._-]" + _YEAR + r"(?=$|[^0-9])")

DATE_LINE_NOISE_RE = re.compile(
    r"(?:星期|禮拜"
    r"|(?<![a-z])(?:(?:mon|tues|wednes|thurs|fri|satur|sun)day|mon|tues?|wed|thu(?:rs?)?|fri|sat|sun)(?![a-z])"
    r"|[\s0-9/._\-:：()（）,，年月日號週周一二三四五六天])",
    re.IGNORECASE,
)


def build_date(year: int, month: int, day: int) -> date | None:
    """Return the calendar date, or ``None`` when it does not exist."""
    try:
        return date(year, month, day)
    except ValueError:
        return None


def to_epoch_ms(value: date | None) -> int | None:
    """Local-midnight timestamp in milliseconds."""
    if value is None:
        return None
    midnight = datetime(value.year, value.month, value.day)
    return int(midnight.timestamp() * 1000)


@dataclass(slots=True, frozen=True)
class DateInferrer:
    """Pattern cascade plus the candidate policy of one corpus."""

    head_lines: int = 3
    tail_lines: int = 2
    allow_extra_digit: bool = False

    def parse(self, source: str) -> Optional[date]:
        text = source.strip()
        if not text:
            return None

        for pattern in (YMD_RE, COMPACT_RE):
            found = self._match_ymd(pattern, text)
            if found:
                return found

        if self.allow_extra_digit:
            found = self._match_ymd(EXTRA_DIGIT_RE, text)
            if found:
                return found

        matched = MDY_RE.search(text)
        if matched:
            month, day, year = (int(group) for group in matched.groups())
            return build_date(year, month, day)
        return None

    @staticmethod
    def _match_ymd(pattern: re.Pattern[str], text: str) -> Optional[date]:
        matched = pattern.search(text)
        if not matched:
            return None
        year, month, day = (int(group) for group in matched.groups())
        return build_date(year, month, day)

    def candidates(self, file_name: str, base_title: str, lines: Sequence[str]) -> Iterable[str]:
        yield file_name
        yield base_title
        yield from lines[: self.head_lines]
        if self.tail_lines:
            yield from lines[-self.tail_lines :]

    def infer(self, file_name: str, base_title: str, lines: Sequence[str]) -> Optional[date]:
        """Return the date from the first candidate that parses, if any."""
        for candidate in self.candidates(file_name, base_title, lines):
            found = self.parse(candidate)
            if found:
                LOGGER.debug("Inferred %s from %r", found.isoformat(), candidate)
                return found
        return None

    def looks_like_date_line(self, line: str) -> bool:
        """True when ``line`` is a date and little else."""
        if self.parse(line) is None:
            return False
        return len(DATE_LINE_NOISE_RE.sub("", line)) <= 2
