"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from mdfront.core.validate import DEFAULT_SCHEMA, Schema


CONFIG_FILE = "config.yaml"


class Settings(BaseModel):
    app_name:        str  = "mdfront"
    content_dir:     str  = Field(default="content", description="Default directory to load when no path is given")
    required_fields: list[str] = Field(default_factory=list, description="Extra front-matter keys to require")
    include_drafts:  bool = Field(default=False, description="Treat draft documents as publishable")
    strict:          bool = Field(default=False, description="Fail on warnings as well as errors")
    max_workers:     int  = Field(default=1, ge=1, description="Threads used to load a corpus")
    output_format:   str  = Field(default="text", pattern="^(text|json)$", description="text or json")
    output_dir:      str  = Field(default="dist", description="Directory for normalized documents")
    log_level:       str  = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR)$")

    @field_validator("required_fields", mode="before")
    @classmethod
    def _split_csv(cls, v: Any) -> Any:
        """Accept 'a, b' (env vars) as well as a YAML list."""
        if isinstance(v, str):
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    def metadata_schema(self) -> Schema:
        """Metadata schema with any configured extra required fields."""
        return DEFAULT_SCHEMA.require(*self.required_fields) if self.required_fields else DEFAULT_SCHEMA


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MDFRONT_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e

    for name in Settings.model_fields:
        if val := os.getenv(f"MDFRONT_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
