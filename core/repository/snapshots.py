"""Snapshot export reads and transactional batch imports.

Updates:
  v0.1.0 - 2026-10-12 - Extract snapshot persistence into mixin.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from core.tags import encode_tags

from .base import RepositoryError, connect as _connect, logger

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from pathlib import Path

    from models.prompt_model import Prompt, PromptVersion


@dataclass(slots=True, frozen=True)
class SnapshotVersionRecord:
    """Version row ready for insertion during an import."""

    content: str
    change_note: str
    created_at: str


@dataclass(slots=True)
class SnapshotPromptRecord:
    """Validated prompt row (with versions, oldest first) ready for insertion."""

    title: str
    content: str
    tags: list[str]
    is_favorite: bool
    score_avg: float
    score_count: int
    created_at: str
    versions: list[SnapshotVersionRecord] = field(default_factory=list)


class SnapshotStoreMixin:
    """Whole-store reads and all-or-nothing writes used by snapshots."""

    _db_path: Path
    _busy_timeout_ms: int
    _COLUMNS: Sequence[str]
    _row_to_prompt: Callable[[sqlite3.Row], Prompt]
    _fetch_versions: Callable[[sqlite3.Connection, int], list[PromptVersion]]
    _insert_version: Callable[[sqlite3.Connection, int, str, str, str], None]

    def export_records(self) -> list[tuple[Prompt, list[PromptVersion]]]:
        """Return every prompt (most recently updated first) with its history."""
        try:
            with _connect(self._db_path, busy_timeout_ms=self._busy_timeout_ms) as conn:
                rows = conn.execute(
                    f"SELECT {', '.join(self._COLUMNS)} FROM prompts "
                    "ORDER BY updated_at DESC, id DESC;"
                ).fetchall()
                records: list[tuple[Prompt, list[PromptVersion]]] = []
                for row in rows:
                    prompt = self._row_to_prompt(row)
                    records.append((prompt, self._fetch_versions(conn, prompt.id)))
        except sqlite3.Error as exc:
            raise RepositoryError("Failed to read prompts for export") from exc
        return records

    def import_records(self, records: Sequence[SnapshotPromptRecord]) -> int:
        """Insert *records* in a single transaction and return how many were stored.

        Any storage failure rolls back the whole batch.
        """
        imported = 0
        try:
            with _connect(self._db_path, busy_timeout_ms=self._busy_timeout_ms) as conn:
                for record in records:
                    cursor = conn.execute(
                        """
                        INSERT INTO prompts (
                            title, content, tags, is_favorite, score_avg, score_count,
                            created_at, updated_at
                        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?);
                        """,
                        (
                            record.title,
                            record.content,
                            encode_tags(record.tags),
                            int(record.is_favorite),
                            record.score_avg,
                            record.score_count,
                            record.created_at,
                            record.created_at,
                        ),
                    )
                    prompt_id = int(cursor.lastrowid or 0)
                    for version in record.versions:
                        self._insert_version(
                            conn,
                            prompt_id,
                            version.content,
                            version.change_note,
                            version.created_at,
                        )
                    imported += 1
        except sqlite3.Error as exc:
            logger.error(
                "Snapshot import rolled back",
                extra={"batch_size": len(records), "failed_after": imported},
            )
            raise RepositoryError("Failed to import prompt snapshot") from exc
        return imported


__all__ = ["SnapshotPromptRecord", "SnapshotStoreMixin", "SnapshotVersionRecord"]
