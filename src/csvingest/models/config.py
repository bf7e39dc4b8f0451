"""Ingestion configuration model."""

import codecs
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

# Default config directory
CONFIG_DIR = Path.home() / ".csvingest"
CONFIG_FILE = CONFIG_DIR / "config.json"


class IngestConfig(BaseModel):
    """Settings for decoding, fetching and summarizing CSV sources."""

    required_mime: str = "csv"
    value_keywords: list[str] = Field(default_factory=lambda: ["sale"])
    label_keywords: list[str] = Field(default_factory=lambda: ["product"])
    default_value_column: int = Field(default=1, ge=0)
    default_label_column: int = Field(default=0, ge=0)
    decimal_places: int = Field(default=2, ge=0, le=10)
    fetch_timeout: float = Field(default=10.0, gt=0)
    fallback_encoding: str = "latin-1"

    @field_validator("fallback_encoding")
    @classmethod
    def _known_codec(cls, value: str) -> str:
        try:
            codecs.lookup(value)
        except LookupError as e:
            raise ValueError(f"unknown encoding: {value}") from e
        return value
