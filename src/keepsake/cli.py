"""Command line interface for keepsake."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from keepsake.config import AppConfig, SourceDirectoryError
from keepsake.corpora import CORPORA, get_corpus
from keepsake.index.indexer import Indexer
from keepsake.index.storage import IndexWriter


console = Console()
app = typer.Typer(help="keepsake - build searchable indexes of personal document corpora")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


@app.command()
def build(
    corpus_name: str = typer.Argument(..., metavar="CORPUS", help="Corpus to build: diary, questionnaire or letters"),
    source: Optional[Path] = typer.Option(
        None, "--source", help="Source directory (overrides the corpus environment variable)"
    ),
    root: Path = typer.Option(Path("."), "--root", help="Project root used to resolve relative paths"),
    output: Optional[Path] = typer.Option(None, "--output", help="Output directory for index.json and content/"),
    extra_digit: Optional[bool] = typer.Option(
        None,
        "--extra-digit/--no-extra-digit",
        help="Tolerate one stray digit after the year when inferring dates (corpus default if omitted)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Build index.json and content snapshots for one corpus."""
    _setup_logging(verbose)
    try:
        corpus = get_corpus(corpus_name, allow_extra_digit=extra_digit)
    except KeyError as exc:
        raise typer.BadParameter(exc.args[0], param_hint="CORPUS") from exc

    config = AppConfig(root=root.resolve(), source=source, output=output)
    source_dir = config.resolve_source_dir(corpus)
    output_dir = config.resolve_output_dir(corpus)
    indexer = Indexer(corpus, IndexWriter(output_dir))

    console.print(f"Indexing [bold]{corpus.name}[/bold] from [bold]{source_dir}[/bold]...")
    try:
        stats = indexer.build(source_dir, source_label=config.source_label(source_dir))
    except SourceDirectoryError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc

    console.print(
        f"Indexed: {stats.indexed}, skipped: {stats.skipped}, "
        f"failed: {stats.failed}, undated: {stats.undated}"
    )
    console.print(f"Wrote [bold]{stats.index_path}[/bold]")


@app.command()
def corpora() -> None:
    """List the known corpora and where their sources are looked up."""
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Corpus", no_wrap=True)
    table.add_column("Description")
    table.add_column("Env var")
    table.add_column("Default source")
    table.add_column("Extensions")

    for name, corpus_cls in CORPORA.items():
        table.add_row(
            name,
            corpus_cls.description,
            corpus_cls.env_var,
            corpus_cls.default_source,
            " ".join(sorted(corpus_cls.extensions)),
        )

    console.print(table)
