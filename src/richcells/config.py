"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Constructor arguments
  2. Environment variables  (RICHCELLS__CACHE__PRIMARY_TTL_SECONDS=300)
  3. richcells.yaml         (searched in cwd, then ~/.config/richcells/)
  4. Hardcoded defaults

The config file is optional; every field has a default.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

_DEFAULT_DATA_DIR = platformdirs.user_data_dir("richcells")
_DEFAULT_DB_PATH = str(Path(_DEFAULT_DATA_DIR) / "cache.db")

LOGICAL_FIELDS = (
    "date_submitted",
    "title",
    "content",
    "categories",
    "post_by",
    "published",
    "notes",
)


def _find_config_file() -> str | None:
    """Return the path of the first richcells.yaml found, or None."""
    candidates = [
        Path("richcells.yaml"),
        Path.home() / ".config" / "richcells" / "richcells.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


def _default_aliases() -> dict[str, list[str]]:
    return {
        "date_submitted": ["Date Submitted", "Timestamp", "Submitted", "Date"],
        "title": ["Title", "Post Title", "Subject"],
        "content": ["Content", "Post Content", "Body", "Message"],
        "categories": ["Categories", "Category", "Tags"],
        "post_by": ["Post By", "Posted By", "Author", "Name"],
        "published": ["Published", "Publish", "Status"],
        "notes": ["Notes", "Note", "Comments"],
    }


def _default_fallback_index() -> dict[str, int]:
    return {name: i for i, name in enumerate(LOGICAL_FIELDS)}


class CacheSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    db_path: str = _DEFAULT_DB_PATH
    primary_key: str = "richcells:table:primary"
    backup_key: str = "richcells:table:backup"
    primary_ttl_seconds: int = Field(default=600, ge=1)
    backup_ttl_seconds: int = Field(default=21600, ge=1)


class ColumnSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    # logical field → accepted header names, matched case-insensitively in order
    aliases: dict[str, list[str]] = Field(default_factory=_default_aliases)
    # logical field → column index used when no alias matches
    fallback_index: dict[str, int] = Field(default_factory=_default_fallback_index)
    computed_column: str = "Content HTML"

    @field_validator("aliases", "fallback_index")
    @classmethod
    def validate_fields(cls, v: dict[str, Any]) -> dict[str, Any]:
        unknown = set(v) - set(LOGICAL_FIELDS)
        if unknown:
            raise ValueError(f"Unknown logical fields: {sorted(unknown)}")
        return v

    @field_validator("computed_column")
    @classmethod
    def validate_computed_column(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("computed_column must not be empty")
        return v


class PipelineSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    batch_size: int = Field(default=50, ge=1)


class LoggingSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: RICHCELLS__PIPELINE__BATCH_SIZE=100
        env_prefix="RICHCELLS__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    cache: CacheSettings = CacheSettings()
    columns: ColumnSettings = ColumnSettings()
    pipeline: PipelineSettings = PipelineSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )
