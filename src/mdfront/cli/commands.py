"""CLI command implementations"""

import json
import logging
import sys
from pathlib import Path
from typing import Annotated, Optional

import typer
import yaml

from mdfront.config import Settings, load_config
from mdfront.core.emit import write_normalized
from mdfront.core.ingest import identity, load_corpus, load_file, precedence, resolve_duplicates
from mdfront.core.models import IngestResult
from mdfront.core.report import build_report, format_result


logger = logging.getLogger(__name__)


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _setup_logging(settings: Settings, verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _load(path: Optional[str], settings: Settings) -> list[IngestResult]:
    """Load a single file or a directory tree; exits 1 if the path is missing."""
    p = Path(path or settings.content_dir)
    if not p.exists():
        _fail(f"Path not found: {p}")
    schema = settings.metadata_schema()
    if p.is_file():
        return [load_file(p, schema, source=p.name)]
    return load_corpus(p, schema, settings.max_workers)


def _by_source(results: list[IngestResult]) -> list[IngestResult]:
    return sorted(results, key=lambda r: r.source or "")


def check_cmd(
    path: Annotated[Optional[str], typer.Argument(help="File or directory to check (default: content_dir)")] = None,
    strict: Annotated[bool, typer.Option("--strict", help="Fail on warnings as well as errors")] = False,
    drafts: Annotated[bool, typer.Option("--include-drafts", help="Count drafts as publishable")] = False,
    fmt: Annotated[Optional[str], typer.Option("--format", help="Output format: text or json")] = None,
    workers: Annotated[Optional[int], typer.Option("--workers", help="Threads used to load a directory")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
    ):
    """Load documents, validate front matter, and report every violation."""
    settings = _settings(overrides={
        "strict": strict or None, "include_drafts": drafts or None,
        "output_format": fmt, "max_workers": workers,
    })
    _setup_logging(settings, verbose)

    results = _load(path, settings)
    if not results:
        typer.echo("No markdown documents found.")
        raise typer.Exit(0)

    kept, shadowed = resolve_duplicates(results)
    documents = _by_source(kept + shadowed)
    failed = [r for r in documents if not r.ok]
    warned = [r for r in documents if r.ok and r.violations]
    summary = {
        "total": len(documents),
        "ok": len(documents) - len(failed),
        "failed": len(failed),
        "warnings": len(warned),
        "shadowed": len(shadowed),
        "publishable": sum(1 for r in kept if r.publishable(settings.include_drafts)),
    }

    if settings.output_format == "json":
        typer.echo(json.dumps({
            "documents": [build_report(r, settings.include_drafts) for r in documents],
            "summary": summary,
        }, indent=2, ensure_ascii=False))
    else:
        for r in documents:
            for line in format_result(r):
                typer.echo(line)
        typer.echo(
            f"Checked {summary['total']} document(s) - "
            f"{summary['ok']} ok, "
            f"{summary['failed']} failed, "
            f"{summary['warnings']} with warnings, "
            f"{summary['shadowed']} shadowed"
        )

    if failed or (settings.strict and warned):
        raise typer.Exit(1)


def list_cmd(
    path: Annotated[Optional[str], typer.Argument(help="File or directory to list (default: content_dir)")] = None,
    drafts: Annotated[bool, typer.Option("--include-drafts", help="Include draft documents")] = False,
    ):
    """List publishable documents, newest first: identity, date, title."""
    settings = _settings(overrides={"include_drafts": drafts or None})
    _setup_logging(settings)

    kept, _ = resolve_duplicates(_load(path, settings))
    docs = [r for r in kept if r.publishable(settings.include_drafts)]
    if not docs:
        typer.echo("No publishable documents found.")
        raise typer.Exit(1)

    docs.sort(key=precedence, reverse=True)
    for r in docs:
        typer.echo(f"{identity(r)}\t{r.metadata.date:%Y-%m-%d}\t{r.metadata.title}")


def normalize_cmd(
    path: Annotated[Optional[str], typer.Argument(help="File or directory to normalize (default: content_dir)")] = None,
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    ):
    """Rewrite documents with a YAML '---' header into the output directory."""
    settings = _settings(overrides={"output_dir": out})
    _setup_logging(settings)
    output_dir = Path(settings.output_dir)

    written = 0
    failed = 0
    for r in _by_source(_load(path, settings)):
        if r.document is None:
            typer.echo(f"  skipped {r.source}: {r.error}", err=True)
            failed += 1
            continue
        dest = output_dir / r.source
        try:
            write_normalized(r.document, dest)
        except (yaml.YAMLError, OSError) as e:
            logger.warning("Could not normalize %s: %s", r.source, e)
            typer.echo(f"  skipped {r.source}: {e}", err=True)
            failed += 1
            continue
        typer.echo(f"  {r.source} -> {dest}")
        written += 1

    typer.echo(f"Normalized {written} document(s) to {output_dir}/")
    if failed:
        raise typer.Exit(1)
