"""Unit tests for core/validate.py"""

from datetime import date, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from mdfront.core.frontmatter import parse
from mdfront.core.models import Metadata, ViolationKind
from mdfront.core.validate import DEFAULT_SCHEMA, FieldSpec, Schema, validate_metadata


VALID = {"title": "Hello", "date": "2024-08-16T10:28:54-05:00"}


def _kinds(result) -> list[ViolationKind]:
    return [v.kind for v in result.violations]


def test_valid_minimal_metadata_uses_defaults():
    result = validate_metadata(VALID)
    assert result.ok
    assert result.violations == []
    md = result.metadata
    assert md.title == "Hello"
    assert md.draft is False
    assert md.tags == []
    assert md.comments is False
    assert md.featured is False
    assert md.extra == {}


def test_offset_timestamp_string_parses():
    """An RFC 3339 date string is a valid timestamp."""
    result = validate_metadata(VALID)
    assert result.violations == []
    assert result.metadata.date == datetime(2024, 8, 16, 10, 28, 54, tzinfo=timezone(timedelta(hours=-5)))


def test_unparseable_date_is_one_invalid_field_type():
    result = validate_metadata({"title": "Hello", "date": "not-a-date"})
    assert len(result.violations) == 1
    v = result.violations[0]
    assert v.kind is ViolationKind.invalid_field_type
    assert v.field == "date"
    assert v.expected == "timestamp"
    assert v.value == "not-a-date"
    assert v.fatal
    assert not result.ok
    assert result.metadata.date is None
    assert result.metadata.title == "Hello"


def test_missing_title_and_date_are_both_reported():
    """Both required fields are reported regardless of other fields present."""
    result = validate_metadata({"draft": True, "tags": ["cpp"], "subtitle": "x"})
    missing = [v for v in result.violations if v.kind is ViolationKind.missing_field]
    assert len(missing) == 2
    assert {v.field for v in missing} == {"title", "date"}
    assert result.metadata.draft is True
    assert result.metadata.tags == ["cpp"]


def test_empty_metadata_reports_missing_required_fields():
    result = validate_metadata({})
    assert _kinds(result) == [ViolationKind.missing_field, ViolationKind.missing_field]


def test_unknown_field_is_a_passthrough_warning():
    result = validate_metadata({**VALID, "subtitle": "foo"})
    assert result.ok
    assert result.errors == []
    assert len(result.warnings) == 1
    assert result.warnings[0].kind is ViolationKind.unknown_field
    assert result.warnings[0].field == "subtitle"
    assert result.metadata.extra == {"subtitle": "foo"}


def test_all_violations_are_collected():
    """Every bad field is reported; validation never stops at the first failure."""
    fields = {
        "title": 5,
        "date": "not-a-date",
        "draft": "maybe",
        "tags": "cpp",
        "comments": True,
        "layout": "post",
    }
    result = validate_metadata(fields)
    invalid = {v.field for v in result.violations if v.kind is ViolationKind.invalid_field_type}
    assert invalid == {"title", "date", "draft", "tags"}
    assert [v.field for v in result.warnings] == ["layout"]
    assert len(result.violations) == 5


def test_best_effort_metadata_keeps_valid_fields():
    result = validate_metadata({**VALID, "draft": "maybe", "tags": ["a", "b"], "featured": True})
    md = result.metadata
    assert md.draft is False          # invalid optional falls back to default
    assert md.tags == ["a", "b"]
    assert md.featured is True
    assert md.title == "Hello"


def test_native_date_becomes_midnight_timestamp():
    result = validate_metadata({"title": "t", "date": date(2024, 8, 16)})
    assert result.ok
    assert result.metadata.date == datetime(2024, 8, 16)


@pytest.mark.parametrize("value", [2024, 1.5, True, "1723822134", " 1.5 "])
def test_numbers_are_not_timestamps(value):
    result = validate_metadata({"title": "t", "date": value})
    assert _kinds(result) == [ViolationKind.invalid_field_type]


def test_tags_with_non_text_item_is_invalid():
    result = validate_metadata({**VALID, "tags": ["cpp", 2024]})
    assert _kinds(result) == [ViolationKind.invalid_field_type]
    assert result.metadata.tags == []


def test_boolean_strings_are_coerced():
    result = validate_metadata({**VALID, "draft": "true", "comments": "false"})
    assert result.ok
    assert result.metadata.draft is True
    assert result.metadata.comments is False


def test_non_string_keys_are_unknown_fields():
    result = validate_metadata({**VALID, 1: "one"})
    assert result.warnings[0].field == "1"
    assert result.metadata.extra == {"1": "one"}


def test_non_string_key_colliding_with_text_key_keeps_both():
    """YAML 1: and '1': are different keys; neither value is lost."""
    result = validate_metadata({**VALID, 1: "one", "1": "uno"})
    assert result.metadata.extra == {"1<int>": "one", "1": "uno"}
    assert [v.field for v in result.warnings] == ["1<int>", "1"]


def test_toml_and_yaml_headers_validate_identically(toml_post, yaml_post):
    """Identical key/values under +++ and --- give identical Metadata."""
    _, toml_fields = parse(toml_post)
    _, yaml_fields = parse(yaml_post)
    from_toml = validate_metadata(toml_fields)
    from_yaml = validate_metadata(yaml_fields)
    assert from_toml.metadata == from_yaml.metadata
    assert from_toml.violations == from_yaml.violations
    assert from_toml.metadata.extra == {"subtitle": "foo"}


def test_metadata_is_frozen():
    md = validate_metadata(VALID).metadata
    with pytest.raises(ValidationError):
        md.title = "changed"


# --- Schema ---

def test_schema_require_existing_field():
    schema = DEFAULT_SCHEMA.require("draft")
    result = validate_metadata(VALID, schema)
    assert [(v.kind, v.field) for v in result.violations] == [(ViolationKind.missing_field, "draft")]


def test_schema_require_new_field_lands_in_extra():
    schema = DEFAULT_SCHEMA.require("author")
    missing = validate_metadata(VALID, schema)
    assert [v.field for v in missing.errors] == ["author"]

    present = validate_metadata({**VALID, "author": "me"}, schema)
    assert present.violations == []
    assert present.metadata.extra == {"author": "me"}


def test_custom_schema():
    schema = Schema((FieldSpec("title", str, "text", required=True),))
    result = validate_metadata({"title": "x", "date": "whatever"}, schema)
    assert result.ok
    assert result.metadata.date is None
    assert result.metadata.extra == {"date": "whatever"}
    assert isinstance(result.metadata, Metadata)
