"""Re-emit documents with a normalized YAML front-matter header"""

from pathlib import Path

import yaml

from mdfront.core.frontmatter import decode_fields
from mdfront.core.models import Delimiter, Document


def to_yaml_front_matter(document: Document) -> str:
    """Return the document text with its header rewritten as a '---' YAML block.

    Keys keep their input order and the body is left untouched. Headerless
    documents are returned unchanged.
    """
    if not document.has_header:
        return document.raw_text
    fields = decode_fields(document)
    header = yaml.safe_dump(fields, default_flow_style=False, allow_unicode=True, sort_keys=False) if fields else ""
    marker = Delimiter.yaml.value
    return f"{marker}\n{header}{marker}\n{document.body}"


def write_normalized(document: Document, dest: Path) -> None:
    """Write the normalized text to dest, creating parent directories."""
    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_text(to_yaml_front_matter(document), encoding='utf-8')
