"""
Configuration management for readerview using Pydantic.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import List, Optional, Pattern

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Setup Logging ---
log = logging.getLogger(__name__)

# --- Extraction Options ---


class ReadabilityOptions(BaseModel):
    """Thresholds and switches for one extraction."""

    debug: bool = Field(default=False, description="Log extraction failures and retry-ladder decisions.")
    max_elems_to_parse: int = Field(
        default=0,
        ge=0,
        description="Abort when the document has more elements than this. 0 means unlimited.",
    )
    nb_top_candidates: int = Field(default=5, ge=1, description="Number of top candidates kept while ranking.")
    char_threshold: int = Field(
        default=500,
        ge=0,
        description="Minimum characters an article must have before the retry ladder stops.",
    )
    classes_to_preserve: List[str] = Field(
        default_factory=lambda: ["page"],
        description="Classes kept when stripping class attributes from the output.",
    )
    keep_classes: bool = Field(default=False, description="Keep every class attribute in the output.")
    disable_json_ld: bool = Field(default=False, description="Skip JSON-LD metadata extraction.")
    allowed_video_regex: Optional[Pattern[str]] = Field(
        default=None,
        description="Pattern of embed/iframe sources kept in the output. Defaults to well-known video hosts.",
    )
    link_density_modifier: float = Field(
        default=0.0,
        description="Added to the link-density limits used when cleaning conditionally.",
    )

    @field_validator("classes_to_preserve")
    @classmethod
    def strip_class_names(cls, v: List[str]) -> List[str]:
        return [name.strip() for name in v if name and name.strip()]

    @field_validator("link_density_modifier")
    @classmethod
    def finite_modifier(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("link_density_modifier must be a finite number")
        return v


class ReaderableOptions(BaseModel):
    """Thresholds for the quick readerable check."""

    min_content_length: int = Field(default=140, ge=0, description="Ignore blocks with less text than this.")
    min_score: float = Field(default=20.0, ge=0, description="Score a document must exceed to be readerable.")


class MonitoringConfig(BaseModel):
    """Configuration for logging."""

    log_level: str = Field(default="WARNING", description="Logging level (e.g., DEBUG, INFO, WARNING).")
    log_file: str | None = Field(
        default=None,
        description="Path to log file. If None, logs to console.",
    )

    @field_validator("log_file", mode="before")
    @classmethod
    def create_parent_dir(cls, v: str | Path | None) -> str | None:
        if v is None:
            return None
        path = Path(v)
        path.parent.mkdir(parents=True, exist_ok=True)
        return str(path)


# --- Main Configuration Class ---


class Settings(BaseSettings):
    extraction: ReadabilityOptions = Field(default_factory=ReadabilityOptions)
    readerable: ReaderableOptions = Field(default_factory=ReaderableOptions)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)

    model_config = SettingsConfigDict(env_prefix="READERVIEW_", env_nested_delimiter="__", case_sensitive=False)

    @classmethod
    def from_yaml(cls, path: Path) -> Settings:
        log.debug("Loading configuration from YAML file: %s", path)
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found or is not a file: {path}")
        with open(path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
        if not yaml_data:
            log.warning("Configuration file is empty: %s. Using default settings.", path)
            return cls.model_validate({})
        return cls.model_validate(yaml_data)


def find_config_file() -> Path | None:
    current_dir = Path.cwd()
    paths_to_check = [
        current_dir / "readerview.yaml",
        current_dir / "readerview.yml",
    ]
    for path in paths_to_check:
        if path.exists():
            return path
    return None
