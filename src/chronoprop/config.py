"""Configuration utilities for chronoprop.

This module defines a hierarchical configuration schema using Pydantic models.
The :class:`Settings` container groups the interpolation defaults applied to
new sample tables, timestamp rendering options and logging options.
Instances can be populated from environment variables (``CHRONOPROP_`` prefix,
``__`` between nested keys) or from YAML/JSON files with matching nested keys.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .utils.logging import DEFAULT_FORMAT


class SectionModel(BaseModel):
    """Base model for configuration subsections that ignores unknown fields."""

    model_config = ConfigDict(extra="ignore")


# ---------------------------------------------------------------------------
# Settings schema
# ---------------------------------------------------------------------------


class InterpolationSettings(SectionModel):
    """Defaults for sample tables created without explicit packet settings."""

    algorithm: Literal["LINEAR", "LAGRANGE", "HERMITE"] = "LINEAR"
    degree: int = Field(default=1, ge=1)

    @field_validator("algorithm", mode="before")
    @classmethod
    def _upper_algorithm(cls, value: Any) -> Any:
        return str(getattr(value, "value", value)).upper()


class TimestampSettings(SectionModel):
    """Controls how times are rendered by the CLI."""

    output_format: Literal["iso", "seconds"] = "iso"


class LoggingSettings(SectionModel):
    """Log level and record format for :func:`chronoprop.utils.logging.get_logger`."""

    level: str = "INFO"
    format: str = DEFAULT_FORMAT

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.upper()
        return value


class Settings(BaseSettings):
    """Container for all runtime configuration sections."""

    interpolation: InterpolationSettings = Field(default_factory=InterpolationSettings)
    timestamp: TimestampSettings = Field(default_factory=TimestampSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_prefix="CHRONOPROP_",
        env_nested_delimiter="__",
        extra="ignore",
    )


# ---------------------------------------------------------------------------
# Loading utilities
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def default_settings() -> Settings:
    """Settings read once from the environment and shared by every caller
    that does not pass its own."""

    return Settings()


def load_settings(path: str | Path) -> Settings:
    """Load settings from a JSON or YAML file."""

    p = Path(path)
    text = p.read_text()
    if p.suffix.lower() in {".yaml", ".yml"}:
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise TypeError("Configuration file must define a mapping")
    return Settings.model_validate(data)


__all__ = [
    "InterpolationSettings",
    "TimestampSettings",
    "LoggingSettings",
    "Settings",
    "default_settings",
    "load_settings",
]
