"""Filesystem persistence for corpus indexes and content snapshots."""

from __future__ import annotations

import json
import logging
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

from keepsake.models import DocumentRecord

LOGGER = logging.getLogger(__name__)

INDEX_FILE = "index.json"
CONTENT_DIR = "content"


def now_iso() -> str:
    """UTC timestamp with millisecond precision and a ``Z`` suffix."""
    stamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


class IndexWriter:
    """Owns one corpus output directory for the duration of a run.

    Not safe to share between concurrent runs: :meth:`prepare` wipes the
    content directory.
    """

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = Path(output_dir)

    @property
    def content_dir(self) -> Path:
        return self.output_dir / CONTENT_DIR

    @property
    def index_path(self) -> Path:
        return self.output_dir / INDEX_FILE

    def prepare(self) -> None:
        """Create the output directory and start from an empty content directory."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        if self.content_dir.exists():
            LOGGER.debug("Removing stale content in %s", self.content_dir)
            shutil.rmtree(self.content_dir)
        self.content_dir.mkdir(parents=True)

    def write_content(self, record: DocumentRecord) -> Path:
        target = self.content_dir / f"{record.id}.txt"
        target.write_text(f"{record.body}\n", encoding="utf-8")
        return target

    def write_json(self, name: str, payload: Mapping[str, Any]) -> Path:
        target = self.output_dir / name
        target.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2) + "\n",
            encoding="utf-8",
        )
        LOGGER.debug("Wrote %s", target)
        return target

    def write_index(self, payload: Mapping[str, Any]) -> Path:
        return self.write_json(INDEX_FILE, payload)
