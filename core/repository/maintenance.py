"""Schema bootstrap and maintenance helpers for the repository.

Updates:
  v0.2.0 - 2026-10-14 - Add reset and prompt count helpers for the CLI.
  v0.1.0 - 2026-10-10 - Create prompts, prompt_versions, and usage_logs tables.
"""

from __future__ import annotations

import sqlite3
from typing import TYPE_CHECKING

from .base import RepositoryError, connect as _connect, logger

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from pathlib import Path


class RepositoryMaintenanceMixin:
    """Tasks that create and reset repository storage."""

    _db_path: Path
    _busy_timeout_ms: int

    def _ensure_schema(self, conn: sqlite3.Connection) -> None:
        """Create required tables and indexes if they do not exist."""
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS prompts (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                title TEXT NOT NULL,
                content TEXT NOT NULL,
                tags TEXT NOT NULL DEFAULT '[]',
                is_favorite INTEGER NOT NULL DEFAULT 0,
                score_avg REAL NOT NULL DEFAULT 0,
                score_count INTEGER NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            );
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS prompt_versions (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                prompt_id INTEGER NOT NULL,
                content TEXT NOT NULL,
                change_note TEXT NOT NULL DEFAULT '',
                created_at TEXT NOT NULL,
                FOREIGN KEY(prompt_id) REFERENCES prompts(id) ON DELETE CASCADE
            );
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS usage_logs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                prompt_id INTEGER NOT NULL,
                input_payload TEXT NOT NULL DEFAULT '{}',
                output_text TEXT NOT NULL,
                rating INTEGER,
                used_at TEXT NOT NULL,
                FOREIGN KEY(prompt_id) REFERENCES prompts(id) ON DELETE CASCADE
            );
            """
        )
        conn.execute("CREATE INDEX IF NOT EXISTS idx_prompts_updated_at ON prompts(updated_at);")
        conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_prompt_versions_prompt_id "
            "ON prompt_versions(prompt_id);"
        )
        conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_usage_logs_prompt_id ON usage_logs(prompt_id);"
        )
        logger.debug("Schema ensured", extra={"db_path": str(self._db_path)})

    def reset_all_data(self) -> None:
        """Clear all persisted prompts, versions, and usage logs."""
        try:
            with _connect(self._db_path, busy_timeout_ms=self._busy_timeout_ms) as conn:
                conn.execute("DELETE FROM usage_logs;")
                conn.execute("DELETE FROM prompt_versions;")
                conn.execute("DELETE FROM prompts;")
        except sqlite3.Error as exc:
            raise RepositoryError("Failed to reset repository data") from exc

    def count_prompts(self) -> int:
        """Return the number of stored prompts."""
        try:
            with _connect(self._db_path, busy_timeout_ms=self._busy_timeout_ms) as conn:
                row = conn.execute("SELECT COUNT(*) AS total FROM prompts;").fetchone()
        except sqlite3.Error as exc:
            raise RepositoryError("Failed to count prompts") from exc
        return int(row["total"]) if row is not None else 0


__all__ = ["RepositoryMaintenanceMixin"]
