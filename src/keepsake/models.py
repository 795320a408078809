"""Core keepsake data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Dict


@dataclass(slots=True, frozen=True)
class SourceDocument:
    """One file found under a corpus source root."""

    path: Path
    rel_path: str
    extension: str

    @property
    def file_name(self) -> str:
        return self.path.name

    def read_bytes(self) -> bytes:
        return self.path.read_bytes()


@dataclass(slots=True)
class QAPair:
    """Question paired with its answer text."""

    question: str
    answer: str


@dataclass(slots=True)
class DocumentRecord:
    """Fully analysed document, ready to be shaped into an index entry."""

    id: str
    title: str
    source_file: str
    source_rel_path: str
    body: str
    written_on: date | None
    preview: str
    search_text: str
    extra: Dict[str, Any] = field(default_factory=dict)
