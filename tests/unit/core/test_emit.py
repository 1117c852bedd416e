"""Unit tests for core/emit.py"""

from mdfront.core.emit import to_yaml_front_matter, write_normalized
from mdfront.core.frontmatter import parse, split_document
from mdfront.core.models import Delimiter
from mdfront.core.validate import validate_metadata


def test_toml_header_rewritten_as_yaml(toml_post):
    text = to_yaml_front_matter(split_document(toml_post))
    assert text.startswith("---\ntitle: Hello Unreal\n")
    assert text.endswith("---\n\n# Hello\n\nBody text.\n")


def test_normalized_metadata_is_unchanged(toml_post):
    """Rewriting +++ as --- keeps every key, value, and the body."""
    original, original_fields = parse(toml_post)
    normalized, normalized_fields = parse(to_yaml_front_matter(original))
    assert normalized.delimiter is Delimiter.yaml
    assert list(normalized_fields) == list(original_fields)
    assert validate_metadata(normalized_fields) == validate_metadata(original_fields)
    assert normalized.body == original.body


def test_headerless_document_unchanged(headerless):
    assert to_yaml_front_matter(split_document(headerless)) == headerless


def test_empty_header_stays_empty():
    assert to_yaml_front_matter(split_document("+++\n+++\nbody\n")) == "---\n---\nbody\n"


def test_write_normalized_creates_parents(tmp_path, yaml_post):
    dest = tmp_path / "dist" / "posts" / "hello.md"
    write_normalized(split_document(yaml_post), dest)
    assert dest.read_text(encoding="utf-8").startswith("---\ntitle: Hello Unreal\n")
