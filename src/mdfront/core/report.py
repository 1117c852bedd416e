"""Per-document report building for text and JSON output"""

from typing import Any

from mdfront.core.models import IngestResult, Violation


def format_violation(v: Violation) -> str:
    """One-line human form, e.g. 'error [invalid_field_type] date: ...'."""
    level = "error" if v.fatal else "warning"
    where = f" {v.field}" if v.field else ""
    return f"{level} [{v.kind.value}]{where}: {v.message}"


def format_result(result: IngestResult) -> list[str]:
    """Lines describing a result's problems; empty when there is nothing to report."""
    source = result.source or "<text>"
    if result.error:
        return [f"{source}: error: {result.error}"]
    return [f"{source}: {format_violation(v)}" for v in result.violations]


def build_report(result: IngestResult, include_drafts: bool = False) -> dict[str, Any]:
    """JSON-ready summary of one loaded document."""
    return {
        "source": result.source,
        "ok": result.ok,
        "publishable": result.publishable(include_drafts),
        "delimiter": result.document.delimiter.value if result.document and result.document.delimiter else None,
        "error": result.error,
        "metadata": result.metadata.model_dump(mode="json") if result.metadata else None,
        "violations": [v.model_dump(mode="json") for v in result.violations],
    }
