"""Tests for pydantic-settings based configuration."""

from __future__ import annotations

import os
from pathlib import Path
from unittest import mock

import pytest

from chapterkit.exceptions import ConfigurationError
from chapterkit.settings import (
    DEFAULT_CHAPTER_FILE_MAX_BYTES,
    ChapterkitSettings,
    clear_settings,
    get_settings,
    load_settings,
    load_yaml_config,
    reload_settings,
)


class TestChapterkitSettings:
    """Tests for the settings model."""

    def test_default_values(self) -> None:
        """Defaults apply when no env vars are set."""
        settings = ChapterkitSettings()
        assert settings.log_level == "INFO"
        assert settings.log_file is None
        assert settings.chapter_file_max_bytes == DEFAULT_CHAPTER_FILE_MAX_BYTES == 10240
        assert settings.chapter_file_extension == ".chap"
        assert ".srt" in settings.ignored_extensions

    def test_loads_from_env(self) -> None:
        """CHAPTERKIT_* variables are read."""
        env = {
            "CHAPTERKIT_LOG_LEVEL": "debug",
            "CHAPTERKIT_CHAPTER_FILE_MAX_BYTES": "2048",
            "CHAPTERKIT_IGNORED_EXTENSIONS": '["TXT", "nfo"]',
        }
        with mock.patch.dict(os.environ, env):
            settings = ChapterkitSettings()
        assert settings.log_level == "DEBUG"
        assert settings.chapter_file_max_bytes == 2048
        assert settings.ignored_extensions == [".txt", ".nfo"]

    def test_invalid_log_level(self) -> None:
        """Unknown log levels are rejected."""
        with pytest.raises(ValueError, match="log_level must be one of"):
            ChapterkitSettings(log_level="LOUD")

    def test_max_bytes_positive(self) -> None:
        """The size limit must be positive."""
        with pytest.raises(ValueError):
            ChapterkitSettings(chapter_file_max_bytes=0)

    def test_extension_normalized(self) -> None:
        """Extensions get a leading dot and lower case."""
        assert ChapterkitSettings(chapter_file_extension="CHAP").chapter_file_extension == ".chap"


class TestLoadSettings:
    """Tests for YAML loading."""

    def test_yaml_overrides(self, tmp_path: Path) -> None:
        """YAML values override env and defaults."""
        config = tmp_path / "config.yaml"
        config.write_text("log_level: warning\nchapter_file_max_bytes: 4096\n", encoding="utf-8")
        with mock.patch.dict(os.environ, {"CHAPTERKIT_LOG_LEVEL": "DEBUG"}):
            settings = load_settings(config)
        assert settings.log_level == "WARNING"
        assert settings.chapter_file_max_bytes == 4096

    def test_missing_file_ignored(self, tmp_path: Path) -> None:
        """A missing config file falls back to defaults."""
        assert load_settings(tmp_path / "absent.yaml").log_level == "INFO"

    def test_empty_yaml(self, tmp_path: Path) -> None:
        """An empty file is an empty mapping."""
        config = tmp_path / "config.yaml"
        config.write_text("", encoding="utf-8")
        assert load_yaml_config(config) == {}

    def test_yaml_not_a_mapping(self, tmp_path: Path) -> None:
        """Top-level lists are rejected."""
        config = tmp_path / "config.yaml"
        config.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="mapping"):
            load_settings(config)

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Syntax errors become ConfigurationError."""
        config = tmp_path / "config.yaml"
        config.write_text("log_level: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Invalid YAML") as exc_info:
            load_settings(config)
        assert exc_info.value.config_file == config

    def test_invalid_value(self, tmp_path: Path) -> None:
        """Validation errors name the offending field."""
        config = tmp_path / "config.yaml"
        config.write_text("chapter_file_max_bytes: -1\n", encoding="utf-8")
        with pytest.raises(ConfigurationError) as exc_info:
            load_settings(config)
        assert exc_info.value.field == "chapter_file_max_bytes"

    def test_load_yaml_missing(self, tmp_path: Path) -> None:
        """load_yaml_config requires the file to exist."""
        with pytest.raises(FileNotFoundError):
            load_yaml_config(tmp_path / "absent.yaml")


class TestSettingsCache:
    """Tests for the cached global settings."""

    def test_get_settings_cached(self) -> None:
        """The same instance is returned until cleared."""
        first = get_settings()
        assert get_settings() is first
        clear_settings()
        assert get_settings() is not first

    def test_reload_settings(self, tmp_path: Path) -> None:
        """reload_settings replaces the cached instance."""
        config = tmp_path / "config.yaml"
        config.write_text("chapter_file_max_bytes: 512\n", encoding="utf-8")
        reloaded = reload_settings(config)
        assert get_settings() is reloaded
        assert get_settings().chapter_file_max_bytes == 512
