"""Data models for loaded documents, validated metadata, and violations"""

import string
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


LEADING_WHITESPACE = string.whitespace + '\ufeff'


class Delimiter(str, Enum):
    """Front-matter marker conventions and the block format each one implies"""
    toml = "+++"
    yaml = "---"

    @classmethod
    def from_line(cls, line: str) -> Optional["Delimiter"]:
        """Return the delimiter a line consists of (trailing whitespace ignored), else None."""
        stripped = line.rstrip()
        for d in cls:
            if stripped == d.value:
                return d
        return None


class Document(BaseModel):
    """One content file split at its front-matter markers.

    raw_text == opening + metadata_block + closing + body always holds;
    opening carries any leading whitespace plus the opening marker line.
    """
    model_config = ConfigDict(frozen=True)

    raw_text: str
    delimiter: Optional[Delimiter] = None
    opening: str = ""
    metadata_block: str = ""
    closing: str = ""
    body: str = ""

    @model_validator(mode="after")
    def _check_reconstructible(self) -> "Document":
        if self.reconstruct() != self.raw_text:
            raise ValueError("document parts do not reconstruct raw_text")
        return self

    @property
    def has_header(self) -> bool:
        return self.delimiter is not None

    @property
    def header_offset(self) -> int:
        """Character offset of the opening marker (0 for headerless documents)."""
        return len(self.opening) - len(self.opening.lstrip(LEADING_WHITESPACE))

    def reconstruct(self) -> str:
        return self.opening + self.metadata_block + self.closing + self.body

    def with_body(self, body: str) -> "Document":
        """Return a new Document with the body replaced."""
        return Document(
            raw_text=self.opening + self.metadata_block + self.closing + body,
            delimiter=self.delimiter,
            opening=self.opening,
            metadata_block=self.metadata_block,
            closing=self.closing,
            body=body,
        )

    def with_metadata_block(self, metadata_block: str) -> "Document":
        """Return a new Document with the metadata block replaced. Requires a header."""
        if not self.has_header:
            raise ValueError("headerless document has no metadata block to replace")
        if metadata_block and not metadata_block.endswith('\n'):
            metadata_block += '\n'
        return Document(
            raw_text=self.opening + metadata_block + self.closing + self.body,
            delimiter=self.delimiter,
            opening=self.opening,
            metadata_block=metadata_block,
            closing=self.closing,
            body=self.body,
        )


class Metadata(BaseModel):
    """Typed view over a document's metadata block; unknown keys land in extra."""
    model_config = ConfigDict(frozen=True, ser_json_bytes="base64")   # YAML !!binary need not be UTF-8

    title:    Optional[str] = None
    date:     Optional[datetime] = None
    draft:    bool = False
    tags:     list[str] = Field(default_factory=list)
    comments: bool = False
    featured: bool = False
    extra:    dict[str, Any] = Field(default_factory=dict, description="Passthrough fields, input order")


class ViolationKind(str, Enum):
    missing_field = "missing_field"
    invalid_field_type = "invalid_field_type"
    unknown_field = "unknown_field"
    duplicate_document = "duplicate_document"


FATAL_KINDS = frozenset({ViolationKind.missing_field, ViolationKind.invalid_field_type})


class Violation(BaseModel):
    """A single validation finding; fatal kinds block publishing, the rest are warnings."""
    model_config = ConfigDict(frozen=True, ser_json_bytes="base64")

    kind: ViolationKind
    field: Optional[str] = None
    expected: Optional[str] = None   # expected type label, invalid_field_type only
    value: Any = None                # offending raw value, invalid_field_type only
    message: str

    @property
    def fatal(self) -> bool:
        return self.kind in FATAL_KINDS


class ValidationResult(BaseModel):
    """Best-effort Metadata plus every violation found while building it."""
    model_config = ConfigDict(frozen=True)

    metadata: Metadata
    violations: list[Violation] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not any(v.fatal for v in self.violations)

    @property
    def errors(self) -> list[Violation]:
        return [v for v in self.violations if v.fatal]

    @property
    def warnings(self) -> list[Violation]:
        return [v for v in self.violations if not v.fatal]


class IngestResult(BaseModel):
    """Outcome of loading one document: parsed parts, metadata, and findings."""
    model_config = ConfigDict(frozen=True)

    source:     Optional[str] = None
    document:   Optional[Document] = None
    raw_fields: dict[Any, Any] = Field(default_factory=dict)   # decoded block, input order
    metadata:   Optional[Metadata] = None
    violations: list[Violation] = Field(default_factory=list)
    error:      Optional[str] = None   # set when the header could not be read

    @property
    def ok(self) -> bool:
        return self.error is None and not any(v.fatal for v in self.violations)

    @property
    def is_draft(self) -> bool:
        return self.metadata is not None and self.metadata.draft

    def publishable(self, include_drafts: bool = False) -> bool:
        return self.ok and (include_drafts or not self.is_draft)
