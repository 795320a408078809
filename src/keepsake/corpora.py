"""Per-corpus extraction strategies.

The indexing pipeline is shared; each corpus only decides which files it
accepts, how titles, previews and ids are chosen, which extra fields are
extracted, and how an entry is shaped in ``index.json``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Sequence, Type
from urllib.parse import unquote

from keepsake.analysis.dates import DateInferrer, to_epoch_ms
from keepsake.analysis.qa import ANSWER_PREFIX_RE, looks_like_question, parse_qa_pairs
from keepsake.analysis.tags import build_tags
from keepsake.analysis.titles import build_preview, clean_title_line, pick_title
from keepsake.index.identifiers import make_document_id
from keepsake.models import DocumentRecord, SourceDocument
from keepsake.utils.text import clean_search_text, split_meaningful_lines, strip_extension, utf16_length

DEFAULT_SOURCE_ROOT = "重要-參考資料-勿刪"


@dataclass(slots=True)
class DocumentContext:
    """Everything the heuristics need to know about one extracted document."""

    document: SourceDocument
    file_name: str
    base_title: str
    body: str
    lines: List[str]

    @property
    def first_line(self) -> str:
        return self.lines[0] if self.lines else ""


class CorpusStrategy:
    """Defaults shared by every corpus; subclasses override the hooks."""

    name = ""
    description = ""
    id_prefix = ""
    output_name = ""
    env_var = ""
    default_source = ""
    extensions: frozenset[str] = frozenset({".txt", ".md", ".doc", ".docx"})
    recursive = True
    skip_empty = False

    default_title = ""
    empty_preview = ""
    preview_limit = 88
    preview_marker = "..."
    search_text_limit = 20000
    collapse_search_text = False

    head_lines = 3
    tail_lines = 2
    allow_extra_digit = False

    def __init__(self, *, allow_extra_digit: Optional[bool] = None) -> None:
        if allow_extra_digit is None:
            allow_extra_digit = self.allow_extra_digit
        self.dates = DateInferrer(
            head_lines=self.head_lines,
            tail_lines=self.tail_lines,
            allow_extra_digit=allow_extra_digit,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"

    # -- document analysis -------------------------------------------------

    def context_for(self, document: SourceDocument, body: str) -> DocumentContext:
        file_name = self.display_name(document)
        return DocumentContext(
            document=document,
            file_name=file_name,
            base_title=strip_extension(file_name),
            body=body,
            lines=split_meaningful_lines(body),
        )

    def display_name(self, document: SourceDocument) -> str:
        return document.file_name

    def accept_title_line(self, line: str) -> bool:
        return not self.dates.looks_like_date_line(line)

    def title_lines(self, lines: Sequence[str]) -> Sequence[str]:
        return lines

    def extract_extra(self, ctx: DocumentContext, title: str, written_on: date | None) -> Dict[str, Any]:
        return {}

    def preview_lead(self, extra: Dict[str, Any]) -> Optional[str]:
        return None

    def identity_fields(self, ctx: DocumentContext, title: str, preview: str) -> Iterable[str]:
        return (ctx.document.rel_path, title, ctx.first_line)

    def search_fields(
        self, ctx: DocumentContext, title: str, preview: str, extra: Dict[str, Any]
    ) -> List[str]:
        return [title, preview, ctx.body, ctx.file_name, ctx.document.rel_path]

    def analyze(self, document: SourceDocument, body: str) -> Optional[DocumentRecord]:
        """Run every heuristic over one body; ``None`` means skip the document."""
        if not body and self.skip_empty:
            return None

        ctx = self.context_for(document, body)
        title = pick_title(
            self.title_lines(ctx.lines),
            ctx.base_title,
            accept=self.accept_title_line,
            default=self.default_title,
        )
        written_on = self.dates.infer(ctx.file_name, ctx.base_title, ctx.lines)
        extra = self.extract_extra(ctx, title, written_on)
        preview = build_preview(
            title,
            ctx.lines,
            body,
            limit=self.preview_limit,
            marker=self.preview_marker,
            placeholder=self.empty_preview,
            lead=self.preview_lead(extra),
        )
        search_text = clean_search_text(
            self.search_fields(ctx, title, preview, extra),
            max_chars=self.search_text_limit,
            collapse=self.collapse_search_text,
        )
        extra["displayName"] = ctx.file_name
        return DocumentRecord(
            id=make_document_id(self.id_prefix, self.identity_fields(ctx, title, preview)),
            title=title,
            source_file=document.file_name,
            source_rel_path=document.rel_path,
            body=body,
            written_on=written_on,
            preview=preview,
            search_text=search_text,
            extra=extra,
        )

    # -- output shaping ----------------------------------------------------

    @staticmethod
    def content_path(record: DocumentRecord) -> str:
        return f"content/{record.id}.txt"

    def base_entry(self, record: DocumentRecord, source_label: str) -> Dict[str, Any]:
        return {
            "id": record.id,
            "title": record.title,
            "sourceFile": record.source_file,
            "sourceRelPath": record.source_rel_path,
            "sourcePath": f"{source_label}/{record.source_rel_path}",
            "contentPath": self.content_path(record),
            "writtenAt": to_epoch_ms(record.written_on),
            "preview": record.preview,
        }

    def shape_entry(self, record: DocumentRecord, source_label: str) -> Dict[str, Any]:
        entry = self.base_entry(record, source_label)
        entry["searchText"] = record.search_text
        return entry

    def summary(self, records: Sequence[DocumentRecord]) -> Dict[str, Any]:
        """Extra top-level index fields."""
        return {}

    def extra_outputs(self, records: Sequence[DocumentRecord], generated_at: str) -> Dict[str, Dict[str, Any]]:
        """Additional JSON files to write next to ``index.json``, keyed by file name."""
        return {}


class DiaryCorpus(CorpusStrategy):
    name = "diary"
    description = "Diary entries"
    id_prefix = "m-diary-"
    output_name = "m-diary"
    env_var = "M_DIARY_SOURCE_DIR"
    default_source = f"{DEFAULT_SOURCE_ROOT}/日記來源"
    default_title = "未命名日記"
    empty_preview = "（這篇日記暫時留白）"
    allow_extra_digit = True

    def shape_entry(self, record: DocumentRecord, source_label: str) -> Dict[str, Any]:
        entry = self.base_entry(record, source_label)
        entry = {"id": entry.pop("id"), "title": entry.pop("title"), "routes": ["diary"], **entry}
        entry["searchText"] = record.search_text
        return entry


class QuestionnaireCorpus(CorpusStrategy):
    name = "questionnaire"
    description = "Questionnaire answers"
    id_prefix = "questionnaire-"
    output_name = "questionnaire"
    env_var = "QUESTIONNAIRE_SOURCE_DIR"
    default_source = f"{DEFAULT_SOURCE_ROOT}/問卷"
    extensions = frozenset({".txt", ".md", ".csv", ".doc", ".docx"})
    skip_empty = True
    default_title = "未命名問卷"
    empty_preview = "（沒有內容）"
    preview_limit = 70
    preview_marker = "…"
    search_text_limit = 6000
    collapse_search_text = True
    head_lines = 6
    max_title_chars = 52
    undated_label = "想妳的時候"

    def title_lines(self, lines: Sequence[str]) -> Sequence[str]:
        # Everything after the first question belongs to the answers.
        for index, line in enumerate(lines):
            if looks_like_question(line):
                return lines[:index]
        return lines

    def accept_title_line(self, line: str) -> bool:
        cleaned = clean_title_line(line)
        if ANSWER_PREFIX_RE.match(cleaned) or len(cleaned) > self.max_title_chars:
            return False
        return super().accept_title_line(line)

    def date_label(self, written_on: date | None) -> str:
        if written_on is None:
            return self.undated_label
        return f"{written_on.year:04d}/{written_on.month:02d}/{written_on.day:02d}"

    def extract_extra(self, ctx: DocumentContext, title: str, written_on: date | None) -> Dict[str, Any]:
        pairs = parse_qa_pairs(ctx.body)
        return {
            "qaPairs": pairs,
            "dateLabel": self.date_label(written_on),
            "tags": build_tags(title, ctx.file_name),
        }

    def preview_lead(self, extra: Dict[str, Any]) -> Optional[str]:
        pairs = extra.get("qaPairs") or []
        return pairs[0].question.strip() if pairs else None

    def identity_fields(self, ctx: DocumentContext, title: str, preview: str) -> Iterable[str]:
        return (ctx.document.rel_path, title, preview)

    def search_fields(
        self, ctx: DocumentContext, title: str, preview: str, extra: Dict[str, Any]
    ) -> List[str]:
        return super().search_fields(ctx, title, preview, extra) + [extra["dateLabel"]]

    def shape_entry(self, record: DocumentRecord, source_label: str) -> Dict[str, Any]:
        entry = self.base_entry(record, source_label)
        entry["dateLabel"] = record.extra["dateLabel"]
        entry["preview"] = entry.pop("preview")
        entry["questionCount"] = len(record.extra["qaPairs"])
        entry["tags"] = list(record.extra["tags"])
        entry["searchText"] = record.search_text
        return entry


class LettersCorpus(CorpusStrategy):
    name = "letters"
    description = "Letters, with a review list of undated ones"
    id_prefix = "letter-"
    output_name = "letters-local"
    env_var = "LETTERS_SOURCE_DIR"
    default_source = f"{DEFAULT_SOURCE_ROOT}/情書來源"
    recursive = False
    default_title = "未命名情書"
    empty_preview = "（這封信暫時留白）"
    review_file = "review.json"
    review_suggestion = "檔名或正文前段補 YYYY-MM-DD / YYYY年MM月DD日 可提高辨識率"

    def display_name(self, document: SourceDocument) -> str:
        return unquote(document.file_name)

    def shape_entry(self, record: DocumentRecord, source_label: str) -> Dict[str, Any]:
        entry = self.base_entry(record, source_label)
        entry = {"id": entry.pop("id"), "name": record.extra["displayName"], **entry}
        entry["contentLength"] = utf16_length(record.body)
        entry["searchText"] = record.search_text
        return entry

    def summary(self, records: Sequence[DocumentRecord]) -> Dict[str, Any]:
        dated = sum(1 for record in records if record.written_on is not None)
        return {"summary": {"datedCount": dated, "undatedCount": len(records) - dated}}

    def extra_outputs(self, records: Sequence[DocumentRecord], generated_at: str) -> Dict[str, Dict[str, Any]]:
        unresolved = [
            {
                "sourceFile": record.extra["displayName"],
                "title": record.title,
                "suggestion": self.review_suggestion,
            }
            for record in records
            if record.written_on is None
        ]
        return {
            self.review_file: {
                "version": 1,
                "generatedAt": generated_at,
                "unresolvedCount": len(unresolved),
                "unresolved": unresolved,
            }
        }


CORPORA: Dict[str, Type[CorpusStrategy]] = {
    corpus.name: corpus for corpus in (DiaryCorpus, QuestionnaireCorpus, LettersCorpus)
}


def get_corpus(name: str, *, allow_extra_digit: Optional[bool] = None) -> CorpusStrategy:
    """Instantiate the strategy registered under ``name``."""
    try:
        corpus_cls = CORPORA[name.strip().lower()]
    except KeyError:
        known = ", ".join(sorted(CORPORA))
        raise KeyError(f"Unknown corpus {name!r} (expected one of: {known})") from None
    return corpus_cls(allow_extra_digit=allow_extra_digit)
