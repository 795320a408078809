"""Tests for date inference."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from keepsake.analysis.dates import DateInferrer, build_date, to_epoch_ms


@pytest.fixture
def inferrer() -> DateInferrer:
    return DateInferrer()


class TestParse:
    """Pattern cascade on a single candidate string."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("2023年5月10日", date(2023, 5, 10)),
            ("2023年05月10日 晴", date(2023, 5, 10)),
            ("2023 年 5 月 1 日", date(2023, 5, 1)),
            ("2023-05-10-想你.txt", date(2023, 5, 10)),
            ("2023/5/9", date(2023, 5, 9)),
            ("1999.12.31", date(1999, 12, 31)),
            ("2023_11_05", date(2023, 11, 5)),
            ("寫於2020-0229", date(2020, 2, 29)),
            ("20230510", date(2023, 5, 10)),
            ("diary_20191231_night", date(2019, 12, 31)),
            ("5/10/2023", date(2023, 5, 10)),
            ("12-25-2022 聖誕", date(2022, 12, 25)),
            ("07.04.2021", date(2021, 7, 4)),
        ],
    )
    def test_valid_dates(self, inferrer: DateInferrer, text: str, expected: date) -> None:
        assert inferrer.parse(text) == expected

    @pytest.mark.parametrize(
        "text",
        [
            "2024-02-30",
            "2023-02-29",
            "2023年4月31日",
            "20230631",
            "2/30/2024",
            "",
            "   ",
            "今天很想你",
            "1850-01-01",
            "2023-00-10",
            "123202305101",
        ],
    )
    def test_rejects_invalid_dates(self, inferrer: DateInferrer, text: str) -> None:
        assert inferrer.parse(text) is None

    def test_leap_day(self, inferrer: DateInferrer) -> None:
        assert inferrer.parse("2024-02-29") == date(2024, 2, 29)

    @pytest.mark.parametrize("year", [1900, 1987, 2000, 2024, 2099])
    @pytest.mark.parametrize("month", range(1, 13))
    def test_cjk_round_trip_for_every_month_end(self, inferrer: DateInferrer, year: int, month: int) -> None:
        """The last valid day of every month parses back to the same components."""
        day = 31
        while build_date(year, month, day) is None:
            day -= 1
        assert inferrer.parse(f"{year}年{month:02d}月{day:02d}日") == date(year, month, day)
        assert inferrer.parse(f"{year}-{month}-{day}") == date(year, month, day)


class TestExtraDigitRule:
    """The stray-digit pattern only applies when enabled."""

    def test_disabled_by_default(self) -> None:
        assert DateInferrer().parse("202350510") is None

    def test_enabled(self) -> None:
        assert DateInferrer(allow_extra_digit=True).parse("202350510") == date(2023, 5, 10)

    def test_does_not_override_regular_match(self) -> None:
        assert DateInferrer(allow_extra_digit=True).parse("2023-05-10") == date(2023, 5, 10)


class TestInfer:
    """Candidate priority across file name, title and lines."""

    def test_file_name_wins_over_body(self, inferrer: DateInferrer) -> None:
        found = inferrer.infer("2023-05-10.txt", "2023-05-10", ["2020年1月1日", "內容"])
        assert found == date(2023, 5, 10)

    def test_head_lines(self, inferrer: DateInferrer) -> None:
        found = inferrer.infer("note.txt", "note", ["標題", "2021/3/4", "內容"])
        assert found == date(2021, 3, 4)

    def test_head_line_limit(self) -> None:
        lines = ["a", "b", "c", "2021/3/4", "d", "e", "f"]
        assert DateInferrer(head_lines=3).infer("x.txt", "x", lines) is None
        assert DateInferrer(head_lines=6).infer("x.txt", "x", lines) == date(2021, 3, 4)

    def test_tail_lines(self, inferrer: DateInferrer) -> None:
        lines = ["a", "b", "c", "d", "e", "寫於 2022.8.15", "署名"]
        assert inferrer.infer("x.txt", "x", lines) == date(2022, 8, 15)

    def test_invalid_candidate_falls_through(self, inferrer: DateInferrer) -> None:
        found = inferrer.infer("2024-02-30.txt", "2024-02-30", ["2024-03-01"])
        assert found == date(2024, 3, 1)

    def test_nothing_found(self, inferrer: DateInferrer) -> None:
        assert inferrer.infer("x.txt", "x", ["沒有日期"]) is None


class TestLooksLikeDateLine:
    """Pure date line predicate."""

    @pytest.mark.parametrize(
        "line",
        [
            "2023-05-10",
            "2023年5月10日 星期三",
            "2023/05/10 (三)",
            "2023.5.10 禮拜天",
            "20230510",
            "2023-05-10 Wed",
            "Monday, 2023/5/10",
            "2023.05.10 (Thu)",
        ],
    )
    def test_pure_date_lines(self, inferrer: DateInferrer, line: str) -> None:
        assert inferrer.looks_like_date_line(line)

    @pytest.mark.parametrize("line", ["2023-05-10 今天去了海邊", "今天很想你", "第 3 封信", "2023-05-10 sunny day"])
    def test_content_lines(self, inferrer: DateInferrer, line: str) -> None:
        assert not inferrer.looks_like_date_line(line)


def test_to_epoch_ms_is_local_midnight() -> None:
    expected = int(datetime(2023, 5, 10).timestamp() * 1000)
    assert to_epoch_ms(date(2023, 5, 10)) == expected
    assert to_epoch_ms(None) is None
