"""Raw text extraction, dispatched by file extension.

Plain-text formats are decoded directly; Word documents are handed to
python-docx. Every failure surfaces as :class:`ExtractionError` so the caller
can skip the document and keep going.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

from docx import Document

from keepsake.models import SourceDocument
from keepsake.utils.text import normalize_text

LOGGER = logging.getLogger(__name__)

PLAIN_TEXT_EXTENSIONS = frozenset({".txt", ".md", ".csv"})
WORD_EXTENSIONS = frozenset({".doc", ".docx"})


class ExtractionError(RuntimeError):
    """Raised when a single document cannot be turned into text."""


def iter_docx_parts(path: Path) -> Iterator[str]:
    """Yield paragraph texts, then table cell texts, of a Word document."""
    document = Document(str(path))
    for paragraph in document.paragraphs:
        yield paragraph.text
    for table in document.tables:
        for row in table.rows:
            for cell in row.cells:
                yield cell.text


def read_plain_text(document: SourceDocument) -> str:
    # Stray bytes become U+FFFD instead of dropping the whole document.
    return document.read_bytes().decode("utf-8", errors="replace")


def read_word_document(path: Path) -> str:
    return "\n".join(iter_docx_parts(path))


def extract_text(document: SourceDocument) -> str:
    """Return the normalized body of ``document``.

    Raises:
        ExtractionError: the file could not be read or parsed.
    """
    try:
        if document.extension in PLAIN_TEXT_EXTENSIONS:
            raw = read_plain_text(document)
        elif document.extension in WORD_EXTENSIONS:
            raw = read_word_document(document.path)
        else:
            raise ExtractionError(f"Unsupported extension {document.extension!r}")
    except ExtractionError:
        raise
    except Exception as exc:
        raise ExtractionError(f"{document.rel_path}: {exc}") from exc

    LOGGER.debug("Extracted %d characters from %s", len(raw), document.rel_path)
    return normalize_text(raw)
