"""Settings for chapterkit using pydantic-settings.

Values come from environment variables (``CHAPTERKIT_`` prefix) and may be
overridden by an optional YAML config file.

Usage:
    from chapterkit.settings import get_settings

    settings = get_settings()
    print(settings.chapter_file_max_bytes)

Environment Variables:
    CHAPTERKIT_LOG_LEVEL - Logging level (default: "INFO")
    CHAPTERKIT_LOG_FILE - Optional log file path
    CHAPTERKIT_CHAPTER_FILE_MAX_BYTES - Reject chapter files at or above this size (default: 10240)
    CHAPTERKIT_CHAPTER_FILE_EXTENSION - Chapter file extension (default: ".chap")
    CHAPTERKIT_IGNORED_EXTENSIONS - JSON list of extensions skipped in base media lookup

YAML config (all keys optional):
    log_level: DEBUG
    log_file: logs/chapterkit.log
    chapter_file_max_bytes: 10240
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from chapterkit.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CHAPTER_FILE_MAX_BYTES = 10 * 1024

DEFAULT_IGNORED_EXTENSIONS = [
    ".chap",
    ".srt",
    ".m3u",
    ".m3u8",
    ".ppl",
    ".txt",
    ".inf",
    ".cfg",
    ".exe",
    ".dll",
]


def _normalize_extension(value: str) -> str:
    value = value.strip().lower()
    if not value:
        raise ValueError("Extension must not be empty")
    return value if value.startswith(".") else f".{value}"


class ChapterkitSettings(BaseSettings):
    """chapterkit settings.

    Reads from CHAPTERKIT_* env vars; init kwargs (YAML values) take priority.
    """

    model_config = SettingsConfigDict(
        env_prefix="CHAPTERKIT_",
        extra="ignore",
    )

    log_level: str = Field(default="INFO", description="Logging level")
    log_file: Path | None = Field(default=None, description="Optional log file")
    chapter_file_max_bytes: int = Field(
        default=DEFAULT_CHAPTER_FILE_MAX_BYTES,
        gt=0,
        description="Chapter files at or above this size are rejected",
    )
    chapter_file_extension: str = Field(default=".chap", description="Chapter file extension")
    ignored_extensions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_IGNORED_EXTENSIONS),
        description="Extensions never treated as base media files",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"log_level must be one of {sorted(valid_levels)}, got: {v}")
        return upper

    @field_validator("chapter_file_extension")
    @classmethod
    def validate_extension(cls, v: str) -> str:
        return _normalize_extension(v)

    @field_validator("ignored_extensions")
    @classmethod
    def validate_ignored_extensions(cls, v: list[str]) -> list[str]:
        return [_normalize_extension(ext) for ext in v]


def load_yaml_config(config_path: Path) -> dict[str, Any]:
    """Load configuration from YAML file."""
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ConfigurationError(
            "Config file must contain a mapping at the top level", config_file=config_path
        )
    return data


def load_settings(config_file: Path | None = None) -> ChapterkitSettings:
    """
    Load settings from the environment and an optional YAML file.

    Args:
        config_file: YAML config path; ignored when None or missing

    Returns:
        Populated settings

    Raises:
        ConfigurationError: If the YAML is invalid or values fail validation
    """
    overrides: dict[str, Any] = {}
    if config_file is not None and config_file.exists():
        try:
            overrides = load_yaml_config(config_file)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML: {e}", config_file=config_file) from e
        logger.debug("Loaded config overrides from %s: %s", config_file, sorted(overrides))

    try:
        return ChapterkitSettings(**overrides)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ()))
        raise ConfigurationError(
            f"Invalid setting {field or '<root>'}: {first.get('msg', e)}",
            config_file=config_file,
            field=field or None,
        ) from e


# Lazy-loaded global settings instance
_settings: ChapterkitSettings | None = None


def get_settings() -> ChapterkitSettings:
    """Get the global settings instance (lazy-loaded)."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reload_settings(config_file: Path | None = None) -> ChapterkitSettings:
    """
    Reload settings, optionally from a YAML file.

    Useful for the CLI ``--config`` option and for tests.
    """
    global _settings
    _settings = load_settings(config_file)
    return _settings


def clear_settings() -> None:
    """
    Clear the cached settings instance.

    Useful for testing to ensure a fresh settings load.
    """
    global _settings
    _settings = None
