"""Integration tests for the SQLite prompt repository."""

from __future__ import annotations

import sqlite3
from typing import TYPE_CHECKING

import pytest

from core.repository import (
    INITIAL_VERSION_NOTE,
    UPDATED_VERSION_NOTE,
    PromptRepository,
    RepositoryError,
    RepositoryNotFoundError,
    next_score,
)
from core.repository.base import connect, escape_like

if TYPE_CHECKING:
    from pathlib import Path

    from models.prompt_model import Prompt


def _add(
    repository: PromptRepository,
    title: str,
    content: str = "body",
    *,
    tags: list[str] | None = None,
    is_favorite: bool = False,
) -> Prompt:
    return repository.add(
        title=title,
        content=content,
        tags=tags or [],
        is_favorite=is_favorite,
    )


def test_connect_configures_sqlite_pragmas(tmp_path: Path) -> None:
    db_path = tmp_path / "pragmas.db"
    with connect(db_path, busy_timeout_ms=2000) as conn:
        foreign_keys = conn.execute("PRAGMA foreign_keys;").fetchone()[0]
        journal_mode = conn.execute("PRAGMA journal_mode;").fetchone()[0]
        synchronous = conn.execute("PRAGMA synchronous;").fetchone()[0]
        busy_timeout = conn.execute("PRAGMA busy_timeout;").fetchone()[0]

    assert foreign_keys == 1
    assert journal_mode.lower() == "wal"
    assert synchronous == 1
    assert busy_timeout == 2000


def test_connect_rolls_back_on_error(tmp_path: Path) -> None:
    db_path = tmp_path / "rollback.db"
    with connect(db_path) as conn:
        conn.execute("CREATE TABLE items (value TEXT);")
    with pytest.raises(RuntimeError), connect(db_path) as conn:
        conn.execute("INSERT INTO items VALUES ('lost');")
        raise RuntimeError("boom")
    with connect(db_path) as conn:
        assert conn.execute("SELECT COUNT(*) FROM items;").fetchone()[0] == 0


def test_schema_bootstrap_is_idempotent(db_path: Path) -> None:
    first = PromptRepository(db_path)
    _add(first, "Keep me")
    second = PromptRepository(db_path)

    assert second.count_prompts() == 1
    with connect(db_path) as conn:
        tables = {
            row["name"]
            for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table';")
        }
        indexes = {
            row["name"]
            for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'index';")
        }
    assert {"prompts", "prompt_versions", "usage_logs"} <= tables
    assert {
        "idx_prompts_updated_at",
        "idx_prompt_versions_prompt_id",
        "idx_usage_logs_prompt_id",
    } <= indexes


def test_repository_init_wraps_directory_errors(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")

    with pytest.raises(RepositoryError):
        PromptRepository(blocker / "nested" / "library.db")


def test_add_creates_prompt_with_initial_version(repository: PromptRepository) -> None:
    prompt = _add(repository, "Greeting", "Hello {{ name }}", tags=["a", "b"], is_favorite=True)

    assert prompt.id > 0
    assert prompt.tags == ["a", "b"]
    assert prompt.is_favorite is True
    assert prompt.score_avg == 0.0
    assert prompt.score_count == 0
    assert prompt.created_at == prompt.updated_at
    versions = repository.list_prompt_versions(prompt.id)
    assert [(v.content, v.change_note) for v in versions] == [
        ("Hello {{ name }}", INITIAL_VERSION_NOTE)
    ]


def test_get_returns_none_for_missing_prompt(repository: PromptRepository) -> None:
    assert repository.get(999) is None


def test_update_appends_version_only_when_content_changes_or_note_given(
    repository: PromptRepository,
) -> None:
    prompt = _add(repository, "Draft", "v1")

    repository.update(prompt.id, title="Draft", content="v2", tags=[], is_favorite=False)
    assert len(repository.list_prompt_versions(prompt.id)) == 2

    repository.update(prompt.id, title="Renamed", content="v2", tags=["x"], is_favorite=True)
    versions = repository.list_prompt_versions(prompt.id)
    assert len(versions) == 2

    repository.update(
        prompt.id,
        title="Renamed",
        content="v2",
        tags=["x"],
        is_favorite=True,
        change_note="tone tweak",
    )
    versions = repository.list_prompt_versions(prompt.id)
    assert [v.change_note for v in versions] == [
        "tone tweak",
        UPDATED_VERSION_NOTE,
        INITIAL_VERSION_NOTE,
    ]
    assert [v.content for v in versions] == ["v2", "v2", "v1"]

    stored = repository.get(prompt.id)
    assert stored is not None
    assert stored.title == "Renamed"
    assert stored.tags == ["x"]
    assert stored.is_favorite is True


def test_update_missing_prompt_raises_not_found(repository: PromptRepository) -> None:
    with pytest.raises(RepositoryNotFoundError):
        repository.update(42, title="t", content="c", tags=[], is_favorite=False)


def test_delete_cascades_to_versions_and_usage(repository: PromptRepository) -> None:
    prompt = _add(repository, "Doomed")
    repository.add_usage(prompt.id, {"q": 1}, "out", 5)

    assert repository.delete(prompt.id) is True
    assert repository.get(prompt.id) is None
    with connect(repository.db_path) as conn:
        assert conn.execute("SELECT COUNT(*) FROM prompt_versions;").fetchone()[0] == 0
        assert conn.execute("SELECT COUNT(*) FROM usage_logs;").fetchone()[0] == 0
    assert repository.delete(prompt.id) is False


def test_next_score_incremental_mean() -> None:
    assert next_score(0.0, 0, 4) == (4.0, 1)
    assert next_score(4.0, 1, 2) == (3.0, 2)


def test_add_usage_updates_score_in_same_transaction(repository: PromptRepository) -> None:
    prompt = _add(repository, "Rated")

    repository.add_usage(prompt.id, {"input": "x"}, "first", 4)
    repository.add_usage(prompt.id, None, "second", 2)
    repository.add_usage(prompt.id, [1, 2], "unrated")

    stored = repository.get(prompt.id)
    assert stored is not None
    assert stored.score_count == 2
    assert stored.score_avg == 3.0
    logs = repository.list_usage_logs(prompt.id)
    assert [log.output_text for log in logs] == ["unrated", "second", "first"]
    assert logs[0].input_payload == [1, 2]
    assert logs[0].rating is None
    assert logs[1].input_payload is None
    assert repository.list_usage_logs(prompt.id, limit=1)[0].output_text == "unrated"


def test_add_usage_for_missing_prompt_writes_nothing(repository: PromptRepository) -> None:
    with pytest.raises(RepositoryNotFoundError):
        repository.add_usage(7, {}, "out")
    with connect(repository.db_path) as conn:
        assert conn.execute("SELECT COUNT(*) FROM usage_logs;").fetchone()[0] == 0


def test_reset_all_data_clears_every_table(repository: PromptRepository) -> None:
    prompt = _add(repository, "Temp")
    repository.add_usage(prompt.id, {}, "out", 3)

    repository.reset_all_data()

    assert repository.count_prompts() == 0
    assert repository.list_usage_logs(prompt.id) == []
    assert repository.list_prompt_versions(prompt.id) == []


def test_escape_like_escapes_wildcards() -> None:
    assert escape_like("100%_done\\") == "100\\%\\_done\\\\"


def test_storage_failures_surface_as_repository_errors(repository: PromptRepository) -> None:
    with connect(repository.db_path) as conn:
        conn.execute("DROP TABLE usage_logs;")
    prompt = _add(repository, "Orphan")

    with pytest.raises(RepositoryError) as excinfo:
        repository.add_usage(prompt.id, {}, "out", 3)
    assert isinstance(excinfo.value.__cause__, sqlite3.Error)
