"""Corpus indexing pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from pyuca import Collator

from keepsake.analysis.dates import to_epoch_ms
from keepsake.config import ensure_source_dir
from keepsake.corpora import CorpusStrategy
from keepsake.index.storage import IndexWriter, now_iso
from keepsake.ingestion.extractors import ExtractionError, extract_text
from keepsake.models import DocumentRecord, SourceDocument
from keepsake.utils.files import iter_source_documents

LOGGER = logging.getLogger(__name__)

INDEX_VERSION = 1


@lru_cache(maxsize=1)
def _collator() -> Collator:
    return Collator()


def sort_records(records: Sequence[DocumentRecord]) -> List[DocumentRecord]:
    """Newest first, undated last, then by collated title and path."""
    collator = _collator()

    def key(record: DocumentRecord) -> tuple:
        # Undated entries go last, even after dates before 1970.
        written_at = to_epoch_ms(record.written_on)
        return (written_at is None, -(written_at or 0), collator.sort_key(record.title), record.source_rel_path)

    return sorted(records, key=key)


@dataclass(slots=True)
class IndexStats:
    indexed: int = 0
    skipped: int = 0
    failed: int = 0
    undated: int = 0
    processed_files: list[str] = field(default_factory=list)
    index_path: Optional[Path] = None

    def increment(self, status: str, rel_path: str) -> None:
        if status == "indexed":
            self.indexed += 1
        elif status == "skipped":
            self.skipped += 1
        else:
            self.failed += 1
        self.processed_files.append(rel_path)


class Indexer:
    """Walks one corpus source root and writes its index and content snapshots."""

    def __init__(self, corpus: CorpusStrategy, writer: IndexWriter) -> None:
        self.corpus = corpus
        self.writer = writer

    def build(
        self,
        source_dir: Path,
        *,
        source_label: Optional[str] = None,
        generated_at: Optional[str] = None,
    ) -> IndexStats:
        """Index every supported document under ``source_dir``.

        Raises:
            SourceDirectoryError: ``source_dir`` is missing or not a directory.
        """
        source_dir = ensure_source_dir(Path(source_dir))
        label = source_label if source_label is not None else source_dir.as_posix()
        generated_at = generated_at or now_iso()

        self.writer.prepare()
        stats = IndexStats()
        records: List[DocumentRecord] = []

        documents = iter_source_documents(
            source_dir, self.corpus.extensions, recursive=self.corpus.recursive
        )
        for document in documents:
            try:
                LOGGER.debug("Processing: %s", document.rel_path)
                record = self._index_single(document)
            except ExtractionError as exc:
                LOGGER.warning("[%s] Failed to read, skipping %s", self.corpus.name, exc)
                stats.increment("failed", document.rel_path)
                continue
            except Exception as exc:
                LOGGER.error("[%s] Failed to process %s: %s", self.corpus.name, document.rel_path, exc)
                stats.increment("failed", document.rel_path)
                continue

            if record is None:
                LOGGER.info("[%s] No text extracted from %s", self.corpus.name, document.rel_path)
                stats.increment("skipped", document.rel_path)
                continue

            records.append(record)
            stats.increment("indexed", document.rel_path)
            if record.written_on is None:
                stats.undated += 1

        ordered = sort_records(records)
        payload: Dict[str, Any] = {
            "version": INDEX_VERSION,
            "generatedAt": generated_at,
            "sourceDir": label,
            "total": len(ordered),
            **self.corpus.summary(ordered),
            "entries": [self.corpus.shape_entry(record, label) for record in ordered],
        }
        stats.index_path = self.writer.write_index(payload)
        for name, extra_payload in self.corpus.extra_outputs(ordered, generated_at).items():
            self.writer.write_json(name, extra_payload)

        LOGGER.info("[%s] Indexed %d documents from %s", self.corpus.name, len(ordered), label)
        return stats

    def _index_single(self, document: SourceDocument) -> Optional[DocumentRecord]:
        body = extract_text(document)
        record = self.corpus.analyze(document, body)
        if record is not None:
            self.writer.write_content(record)
        return record
