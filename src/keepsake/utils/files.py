"""Utility helpers for working with files."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator

from keepsake.models import SourceDocument


def iter_source_documents(
    root: Path, extensions: Iterable[str], *, recursive: bool = True
) -> Iterator[SourceDocument]:
    """Yield supported documents under ``root``, ordered by relative path.

    Files whose extension is not in ``extensions`` are skipped entirely.
    """
    allowed = {ext.lower() for ext in extensions}
    candidates = root.rglob("*") if recursive else root.iterdir()
    documents = []
    for item in candidates:
        if not item.is_file():
            continue
        suffix = item.suffix.lower()
        if suffix not in allowed:
            continue
        rel_path = item.relative_to(root).as_posix()
        documents.append(SourceDocument(path=item.resolve(), rel_path=rel_path, extension=suffix))
    yield from sorted(documents, key=lambda doc: doc.rel_path)


def relative_label(path: Path, base_dir: Path) -> str:
    """Render ``path`` relative to ``base_dir`` with forward slashes when possible."""
    try:
        return path.resolve().relative_to(base_dir.resolve()).as_posix()
    except ValueError:
        return path.resolve().as_posix()
