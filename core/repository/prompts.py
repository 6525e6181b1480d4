"""Prompt persistence and version history helpers.

Updates:
  v0.2.0 - 2026-10-12 - Append versions only when content changes or a note is given.
  v0.1.0 - 2026-10-10 - Extract prompt CRUD and version helpers into mixin.
"""

from __future__ import annotations

import sqlite3
from typing import TYPE_CHECKING, Any, ClassVar

from core.tags import decode_tags, encode_tags
from models.prompt_model import Prompt, PromptVersion

from .base import (
    RepositoryError,
    RepositoryNotFoundError,
    connect as _connect,
    logger,
    now_iso as _now_iso,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

INITIAL_VERSION_NOTE = "initial version"
UPDATED_VERSION_NOTE = "content updated"


class PromptStoreMixin:
    """Prompt CRUD and versioning persistence helpers."""

    _db_path: Path
    _busy_timeout_ms: int

    _COLUMNS: ClassVar[Sequence[str]] = (
        "id",
        "title",
        "content",
        "tags",
        "is_favorite",
        "score_avg",
        "score_count",
        "created_at",
        "updated_at",
    )

    # Prompt CRUD -------------------------------------------------------- #

    def add(
        self,
        *,
        title: str,
        content: str,
        tags: Sequence[str],
        is_favorite: bool,
        change_note: str = "",
    ) -> Prompt:
        """Insert a new prompt together with its initial version."""
        timestamp = _now_iso()
        note = change_note or INITIAL_VERSION_NOTE
        try:
            with _connect(self._db_path, busy_timeout_ms=self._busy_timeout_ms) as conn:
                cursor = conn.execute(
                    """
                    INSERT INTO prompts (
                        title, content, tags, is_favorite, score_avg, score_count,
                        created_at, updated_at
                    ) VALUES (?, ?, ?, ?, 0, 0, ?, ?);
                    """,
                    (title, content, encode_tags(tags), int(is_favorite), timestamp, timestamp),
                )
                prompt_id = int(cursor.lastrowid or 0)
                self._insert_version(conn, prompt_id, content, note, timestamp)
                prompt = self._fetch_prompt(conn, prompt_id)
        except sqlite3.Error as exc:
            raise RepositoryError(f"Failed to insert prompt {title!r}") from exc
        if prompt is None:  # pragma: no cover - defensive
            raise RepositoryError("Prompt insert succeeded but row missing")
        logger.debug("Prompt created", extra={"prompt_id": prompt.id})
        return prompt

    def get(self, prompt_id: int) -> Prompt | None:
        """Fetch a prompt by id, returning None when it does not exist."""
        try:
            with _connect(self._db_path, busy_timeout_ms=self._busy_timeout_ms) as conn:
                return self._fetch_prompt(conn, prompt_id)
        except sqlite3.Error as exc:
            raise RepositoryError(f"Failed to load prompt {prompt_id}") from exc

    def update(
        self,
        prompt_id: int,
        *,
        title: str,
        content: str,
        tags: Sequence[str],
        is_favorite: bool,
        change_note: str = "",
    ) -> Prompt:
        """Persist new prompt fields and append a version when warranted.

        A version is appended when the content differs from the stored content
        or when a non-empty *change_note* is supplied.
        """
        timestamp = _now_iso()
        try:
            with _connect(self._db_path, busy_timeout_ms=self._busy_timeout_ms) as conn:
                row = conn.execute(
                    "SELECT content FROM prompts WHERE id = ?;",
                    (prompt_id,),
                ).fetchone()
                if row is None:
                    raise RepositoryNotFoundError(f"Prompt {prompt_id} not found")
                previous_content = str(row["content"])
                conn.execute(
                    """
                    UPDATE prompts
                    SET title = ?, content = ?, tags = ?, is_favorite = ?, updated_at = ?
                    WHERE id = ?;
                    """,
                    (title, content, encode_tags(tags), int(is_favorite), timestamp, prompt_id),
                )
                if previous_content != content or change_note:
                    note = change_note or UPDATED_VERSION_NOTE
                    self._insert_version(conn, prompt_id, content, note, timestamp)
                    logger.debug(
                        "Prompt version appended",
                        extra={"prompt_id": prompt_id, "change_note": note},
                    )
                prompt = self._fetch_prompt(conn, prompt_id)
        except RepositoryNotFoundError:
            raise
        except sqlite3.Error as exc:
            raise RepositoryError(f"Failed to update prompt {prompt_id}") from exc
        if prompt is None:  # pragma: no cover - defensive
            raise RepositoryError(f"Prompt {prompt_id} missing after update")
        return prompt

    def delete(self, prompt_id: int) -> bool:
        """Delete a prompt (cascading to history); return whether a row existed."""
        try:
            with _connect(self._db_path, busy_timeout_ms=self._busy_timeout_ms) as conn:
                cursor = conn.execute("DELETE FROM prompts WHERE id = ?;", (prompt_id,))
                deleted = cursor.rowcount > 0
        except sqlite3.Error as exc:
            raise RepositoryError(f"Failed to delete prompt {prompt_id}") from exc
        return deleted

    # Prompt versioning -------------------------------------------------- #

    def list_prompt_versions(self, prompt_id: int) -> list[PromptVersion]:
        """Return stored versions for a prompt ordered newest first."""
        try:
            with _connect(self._db_path, busy_timeout_ms=self._busy_timeout_ms) as conn:
                return self._fetch_versions(conn, prompt_id)
        except sqlite3.Error as exc:
            raise RepositoryError(f"Failed to load versions for prompt {prompt_id}") from exc

    # Connection-scoped helpers ------------------------------------------ #

    def _fetch_prompt(self, conn: sqlite3.Connection, prompt_id: int) -> Prompt | None:
        row = conn.execute(
            f"SELECT {', '.join(self._COLUMNS)} FROM prompts WHERE id = ? LIMIT 1;",
            (prompt_id,),
        ).fetchone()
        if row is None:
            return None
        return self._row_to_prompt(row)

    def _fetch_versions(self, conn: sqlite3.Connection, prompt_id: int) -> list[PromptVersion]:
        rows = conn.execute(
            """
            SELECT id, prompt_id, content, change_note, created_at
            FROM prompt_versions
            WHERE prompt_id = ?
            ORDER BY created_at DESC, id DESC;
            """,
            (prompt_id,),
        ).fetchall()
        return [PromptVersion.from_row(row) for row in rows]

    def _insert_version(
        self,
        conn: sqlite3.Connection,
        prompt_id: int,
        content: str,
        change_note: str,
        created_at: str,
    ) -> None:
        conn.execute(
            """
            INSERT INTO prompt_versions (prompt_id, content, change_note, created_at)
            VALUES (?, ?, ?, ?);
            """,
            (prompt_id, content, change_note, created_at),
        )

    def _row_to_prompt(self, row: sqlite3.Row) -> Prompt:
        """Hydrate Prompt from SQLite row."""
        payload: dict[str, Any] = {
            "id": row["id"],
            "title": row["title"],
            "content": row["content"],
            "tags": decode_tags(row["tags"]),
            "is_favorite": bool(row["is_favorite"]),
            "score_avg": row["score_avg"],
            "score_count": row["score_count"],
            "created_at": row["created_at"],
            "updated_at": row["updated_at"],
        }
        return Prompt.from_record(payload)


__all__ = ["INITIAL_VERSION_NOTE", "UPDATED_VERSION_NOTE", "PromptStoreMixin"]
