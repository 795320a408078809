"""Tests for title and preview extraction."""

from __future__ import annotations

from keepsake.analysis.dates import DateInferrer
from keepsake.analysis.titles import build_preview, clean_title_line, pick_title

DATES = DateInferrer()


def _not_date(line: str) -> bool:
    return not DATES.looks_like_date_line(line)


class TestCleanTitleLine:
    """Test clean_title_line function."""

    def test_heading_marker(self) -> None:
        assert clean_title_line("### 第一封信") == "第一封信"

    def test_ordinal_numbering(self) -> None:
        assert clean_title_line("1. 開始") == "開始"
        assert clean_title_line("12、想念") == "想念"
        assert clean_title_line("3) 晚安") == "晚安"

    def test_bullet(self) -> None:
        assert clean_title_line("- 清單") == "清單"

    def test_plain_line(self) -> None:
        assert clean_title_line("今天很想你") == "今天很想你"


class TestPickTitle:
    """Test pick_title function."""

    def test_skips_date_lines(self) -> None:
        title = pick_title(["2023年5月10日 星期三", "# 海邊"], "x", accept=_not_date, default="未命名")
        assert title == "海邊"

    def test_falls_back_to_pretty_file_name(self) -> None:
        title = pick_title(["2023-05-10"], "2023-05-10-想你", accept=_not_date, default="未命名")
        assert title == "想你"

    def test_falls_back_to_raw_file_name(self) -> None:
        title = pick_title([], "2023-05-10", accept=_not_date, default="未命名")
        assert title == "2023-05-10"

    def test_falls_back_to_default(self) -> None:
        assert pick_title([], "", accept=_not_date, default="未命名") == "未命名"

    def test_line_that_cleans_to_nothing_is_skipped(self) -> None:
        assert pick_title(["###", "內容"], "x", accept=_not_date, default="d") == "內容"


class TestBuildPreview:
    """Test build_preview function."""

    def _preview(self, title: str, lines: list[str], body: str, **kwargs: object) -> str:
        options = {"limit": 10, "marker": "...", "placeholder": "（空白）"}
        options.update(kwargs)
        return build_preview(title, lines, body, **options)  # type: ignore[arg-type]

    def test_first_line_other_than_title(self) -> None:
        assert self._preview("今天很想你", ["今天很想你", "也很開心"], "今天很想你\n也很開心") == "也很開心"

    def test_title_comparison_uses_cleaned_line(self) -> None:
        assert self._preview("標題", ["# 標題", "內文"], "# 標題\n內文") == "內文"

    def test_truncates_with_marker(self) -> None:
        assert self._preview("t", ["t", "一二三四五六七八九十十一"], "") == "一二三四五六七八九十..."

    def test_single_line_document_uses_body(self) -> None:
        assert self._preview("只有一行", ["只有一行"], "只有一行") == "只有一行"

    def test_empty_document_gets_placeholder(self) -> None:
        assert self._preview("未命名", [], "") == "（空白）"

    def test_lead_wins(self) -> None:
        assert self._preview("t", ["t", "x"], "t\nx", lead="第一題  問題？") == "第一題 問題？"
