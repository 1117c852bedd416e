"""Metadata schema and total (non-short-circuiting) field validation"""

import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime, time
from functools import lru_cache
from typing import Any, Mapping

from pydantic import TypeAdapter, ValidationError

from mdfront.core.models import Metadata, ValidationResult, Violation, ViolationKind


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldSpec:
    """One recognized metadata key: its type, label for messages, and default."""
    name: str
    type: Any
    label: str
    required: bool = False
    default: Any = None


@dataclass(frozen=True)
class Schema:
    fields: tuple[FieldSpec, ...] = field(default_factory=tuple)

    def get(self, name: str) -> FieldSpec | None:
        for spec in self.fields:
            if spec.name == name:
                return spec
        return None

    def require(self, *names: str) -> "Schema":
        """Return a copy where names are required; unknown names become required fields of any type."""
        specs = [replace(s, required=True) if s.name in names else s for s in self.fields]
        known = {s.name for s in self.fields}
        specs += [FieldSpec(n, Any, "any", required=True) for n in dict.fromkeys(names) if n not in known]
        return Schema(tuple(specs))


DEFAULT_SCHEMA = Schema((
    FieldSpec("title",    str,       "text",         required=True),
    FieldSpec("date",     datetime,  "timestamp",    required=True),
    FieldSpec("draft",    bool,      "boolean",      default=False),
    FieldSpec("tags",     list[str], "list of text", default=()),
    FieldSpec("comments", bool,      "boolean",      default=False),
    FieldSpec("featured", bool,      "boolean",      default=False),
))

_METADATA_FIELDS = set(Metadata.model_fields) - {"extra"}


@lru_cache(maxsize=None)
def _adapter(tp: Any) -> TypeAdapter:
    return TypeAdapter(tp)


def _is_number_text(value: str) -> bool:
    try:
        float(value)
    except ValueError:
        return False
    return True


def coerce(spec: FieldSpec, value: Any) -> Any:
    """Coerce value to spec.type; raises ValueError when it cannot be."""
    if spec.type is Any:
        return value
    if spec.type is datetime:
        # TOML/YAML local dates become midnight; bare numbers are not timestamps
        if isinstance(value, date) and not isinstance(value, datetime):
            return datetime.combine(value, time())
        if isinstance(value, (bool, int, float)):
            raise ValueError(f"expected {spec.label}, got {type(value).__name__}")
        if isinstance(value, str) and _is_number_text(value):
            raise ValueError(f"expected {spec.label}, got numeric text")
    try:
        return _adapter(spec.type).validate_python(value)
    except ValidationError as e:
        raise ValueError(f"expected {spec.label}: {e.errors()[0]['msg']}") from e


def _default(spec: FieldSpec) -> Any:
    if isinstance(spec.default, tuple):
        return list(spec.default)
    return spec.default


def validate_metadata(fields: Mapping[str, Any], schema: Schema = DEFAULT_SCHEMA) -> ValidationResult:
    """Validate a decoded metadata block against schema, collecting every violation.

    Fields that coerce are populated on the returned Metadata; optional fields that
    fail fall back to their defaults and required ones are left as None. Keys
    outside the schema are kept in Metadata.extra with an unknown_field warning.
    """
    violations: list[Violation] = []
    values: dict[str, Any] = {}
    extra: dict[str, Any] = {}

    for spec in schema.fields:
        if spec.name not in fields:
            if spec.required:
                violations.append(Violation(
                    kind=ViolationKind.missing_field,
                    field=spec.name,
                    message=f"missing required field '{spec.name}'",
                ))
            elif spec.name in _METADATA_FIELDS:
                values[spec.name] = _default(spec)
            continue

        raw = fields[spec.name]
        try:
            coerced = coerce(spec, raw)
        except ValueError as e:
            violations.append(Violation(
                kind=ViolationKind.invalid_field_type,
                field=spec.name,
                expected=spec.label,
                value=raw,
                message=f"field '{spec.name}' has invalid value {raw!r}: {e}",
            ))
            coerced = None if spec.required else _default(spec)

        if spec.name in _METADATA_FIELDS:
            values[spec.name] = coerced
        else:
            extra[spec.name] = coerced

    taken = {k for k in fields if isinstance(k, str)} | {s.name for s in schema.fields}
    for key, raw in fields.items():
        if isinstance(key, str) and schema.get(key) is not None:
            continue
        name = str(key)
        if not isinstance(key, str) and (name in taken or name in extra):
            name = f"{name}<{type(key).__name__}>"   # e.g. YAML 1: next to '1':
        violations.append(Violation(
            kind=ViolationKind.unknown_field,
            field=name,
            message=f"unknown field '{name}' kept as passthrough",
        ))
        extra[name] = raw

    logger.debug("Validated %d field(s): %d violation(s)", len(fields), len(violations))
    return ValidationResult(metadata=Metadata(**values, extra=extra), violations=violations)
