"""Document loading: parse + validate per document, corpus discovery, duplicate resolution"""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import timezone
from pathlib import Path

from mdfront.core.errors import MalformedHeader
from mdfront.core.frontmatter import parse
from mdfront.core.models import IngestResult, Violation, ViolationKind
from mdfront.core.utils.slug import path_identity, slugify
from mdfront.core.validate import DEFAULT_SCHEMA, Schema, validate_metadata


logger = logging.getLogger(__name__)

MD_EXTENSIONS = {'.md', '.mdx', '.markdown'}


def load_document(raw_text: str, source: str = None, schema: Schema = DEFAULT_SCHEMA) -> IngestResult:
    """Parse and validate one document. A malformed header yields a failed result, never an exception."""
    try:
        document, fields = parse(raw_text)
    except MalformedHeader as e:
        logger.warning("Skipping %s: %s", source or "<text>", e)
        return IngestResult(source=source, error=str(e))

    validated = validate_metadata(fields, schema)
    for v in validated.errors:
        logger.info("%s: %s", source or "<text>", v.message)
    return IngestResult(
        source=source,
        document=document,
        raw_fields=fields,
        metadata=validated.metadata,
        violations=validated.violations,
    )


def load_file(path: Path, schema: Schema = DEFAULT_SCHEMA, source: str = None) -> IngestResult:
    """Read a UTF-8 file and load it. Unreadable files yield a failed result."""
    source = source or str(path)
    try:
        raw = path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read %s: %s", source, e)
        return IngestResult(source=source, error=f"Could not read file: {e}")
    return load_document(raw, source=source, schema=schema)


def discover_files(path: Path) -> list[Path]:
    """Return sorted markdown files under path, or [path] if a single markdown file."""
    if path.is_file():
        return [path] if path.suffix.lower() in MD_EXTENSIONS else []
    return sorted(p for p in path.rglob('*') if p.is_file() and p.suffix.lower() in MD_EXTENSIONS)


def load_corpus(root: Path, schema: Schema = DEFAULT_SCHEMA, max_workers: int = 1) -> list[IngestResult]:
    """Load every markdown file under root, in discovery order.

    Sources are recorded relative to root (posix separators). With max_workers > 1
    files are loaded on a thread pool; documents share no state so no further
    coordination is needed.
    """
    files = discover_files(root)
    base = root if root.is_dir() else root.parent

    def _load(p: Path) -> IngestResult:
        return load_file(p, schema, source=p.relative_to(base).as_posix())

    if max_workers > 1 and len(files) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            results = list(pool.map(_load, files))
    else:
        results = [_load(p) for p in files]

    failed = sum(1 for r in results if not r.ok)
    logger.info("Loaded %d document(s) from %s: %d ok, %d failed", len(results), root, len(results) - failed, failed)
    return results


def identity(result: IngestResult) -> str:
    """Page identity: front-matter slug when set, else the source path identity."""
    slug = result.metadata.extra.get('slug') if result.metadata else None
    if isinstance(slug, str) and slugify(slug):
        return slugify(slug)
    return path_identity(result.source or "")


def precedence(result: IngestResult) -> tuple:
    """Sort key: dated beats undated, later date beats earlier, then greater source path."""
    date = result.metadata.date if result.metadata else None
    if date is None:
        return (0, 0.0, result.source or "")
    if date.tzinfo is None:
        date = date.replace(tzinfo=timezone.utc)
    return (1, date.timestamp(), result.source or "")


def resolve_duplicates(results: list[IngestResult]) -> tuple[list[IngestResult], list[IngestResult]]:
    """Pick one document per identity; return (kept, shadowed).

    The winner of each group is the one with the latest date, ties broken by the
    lexicographically greater source path. Shadowed documents carry a
    duplicate_document warning naming the winner. Documents whose header failed
    to load are kept as-is and never compete.
    """
    groups: dict[str, list[IngestResult]] = {}
    for r in results:
        if r.error is None:
            groups.setdefault(identity(r), []).append(r)

    winners = {key: max(group, key=precedence) for key, group in groups.items()}
    kept, shadowed = [], []
    for r in results:
        if r.error is not None:
            kept.append(r)
            continue
        key = identity(r)
        winner = winners[key]
        if r is winner:
            kept.append(r)
            continue
        logger.warning("%s shadowed by %s (identity '%s')", r.source, winner.source, key)
        warning = Violation(
            kind=ViolationKind.duplicate_document,
            message=f"duplicate of '{key}', shadowed by {winner.source}",
        )
        shadowed.append(r.model_copy(update={"violations": [*r.violations, warning]}))
    return kept, shadowed
