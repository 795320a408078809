"""Application configuration and source/output resolution."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Mapping

from keepsake.utils.files import relative_label

if TYPE_CHECKING:
    from keepsake.corpora import CorpusStrategy

DEFAULT_OUTPUT_ROOT = Path("public") / "data"


class SourceDirectoryError(RuntimeError):
    """The configured source root is missing or not a directory."""


@dataclass(slots=True)
class AppConfig:
    root: Path = field(default_factory=Path.cwd)
    source: Path | None = None
    output: Path | None = None

    def resolve_source_dir(
        self, corpus: "CorpusStrategy", environ: Mapping[str, str] | None = None
    ) -> Path:
        """Source root: explicit flag, then the corpus env var, then the corpus default."""
        environ = os.environ if environ is None else environ
        candidates = (
            str(self.source) if self.source is not None else "",
            environ.get(corpus.env_var, ""),
            corpus.default_source,
        )
        chosen = next(value.strip() for value in candidates if value and value.strip())
        return (Path(self.root) / chosen).resolve()

    def resolve_output_dir(self, corpus: "CorpusStrategy") -> Path:
        if self.output is not None:
            return (Path(self.root) / self.output).resolve()
        return (Path(self.root) / DEFAULT_OUTPUT_ROOT / corpus.output_name).resolve()

    def source_label(self, source_dir: Path) -> str:
        return relative_label(source_dir, Path(self.root))


def ensure_source_dir(path: Path) -> Path:
    """Return ``path`` if it is an existing directory, otherwise fail the run."""
    if not path.exists():
        raise SourceDirectoryError(f"Source directory not found: {path}")
    if not path.is_dir():
        raise SourceDirectoryError(f"Source path is not a directory: {path}")
    return path
