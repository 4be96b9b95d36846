"""Shared pytest fixtures for chapterkit tests."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator
from pathlib import Path
from unittest import mock

import pytest

from chapterkit.settings import clear_settings


@pytest.fixture(autouse=True)
def fresh_settings() -> Iterator[None]:
    """Run every test against default settings, free of CHAPTERKIT_* env vars."""
    env = {k: v for k, v in os.environ.items() if not k.startswith("CHAPTERKIT_")}
    clear_settings()
    with mock.patch.dict(os.environ, env, clear=True):
        yield
    clear_settings()


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, bytes | str], Path]:
    """Write bytes or text to a file under tmp_path and return its path."""

    def _write(name: str, content: bytes | str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, str):
            path.write_text(content, encoding="utf-8")
        else:
            path.write_bytes(content)
        return path

    return _write
