"""Pytest configuration for shared test fixtures and environment hooks.

Updates:
  v0.1.0 - 2026-10-12 - Temporary SQLite repository and library fixtures.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from core.prompt_library import PromptLibrary
from core.repository import PromptRepository

if TYPE_CHECKING:
    from pathlib import Path

    from pytest import MonkeyPatch

_SETTINGS_ENV = (
    "PROMPT_LIBRARY_DB_PATH",
    "PROMPT_LIBRARY_DATABASE_PATH",
    "PROMPT_LIBRARY_BUSY_TIMEOUT_MS",
    "PROMPT_LIBRARY_DEFAULT_SORT",
    "PROMPT_LIBRARY_SNAPSHOT_INDENT",
    "PROMPT_LIBRARY_CONFIG_JSON",
    "PROMPT_LIBRARY_ENV_FILE",
)


@pytest.fixture(autouse=True)
def _isolated_settings_env(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    """Keep host configuration and stray .env/config files out of every test."""
    for name in _SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "store" / "library.db"


@pytest.fixture()
def repository(db_path: Path) -> PromptRepository:
    return PromptRepository(db_path)


@pytest.fixture()
def library(repository: PromptRepository) -> PromptLibrary:
    return PromptLibrary(repository=repository)
