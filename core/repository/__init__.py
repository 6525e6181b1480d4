"""SQLite-backed repository for persistent prompt storage.

Updates:
  v0.3.0 - 2026-10-13 - Add snapshot and query mixins.
  v0.2.0 - 2026-10-11 - Add usage ledger mixin.
  v0.1.0 - 2026-10-10 - Compose prompt store and schema maintenance mixins.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

from .base import (
    DEFAULT_BUSY_TIMEOUT_MS,
    RepositoryError,
    RepositoryNotFoundError,
    connect as _connect,
    ensure_directory as _ensure_directory,
    logger,
    now_iso,
)
from .maintenance import RepositoryMaintenanceMixin
from .prompts import INITIAL_VERSION_NOTE, UPDATED_VERSION_NOTE, PromptStoreMixin
from .search import PromptQueryMixin
from .snapshots import SnapshotPromptRecord, SnapshotStoreMixin, SnapshotVersionRecord
from .usage import UsageLedgerMixin, next_score


class PromptRepository(
    RepositoryMaintenanceMixin,
    PromptStoreMixin,
    UsageLedgerMixin,
    PromptQueryMixin,
    SnapshotStoreMixin,
):
    """Compose repository mixins for SQLite-backed storage."""

    def __init__(
        self,
        db_path: str | Path,
        *,
        busy_timeout_ms: int = DEFAULT_BUSY_TIMEOUT_MS,
    ) -> None:
        """Initialise repository storage and ensure the schema exists."""
        self._db_path = Path(db_path).expanduser()
        self._busy_timeout_ms = busy_timeout_ms
        try:
            _ensure_directory(self._db_path)
        except OSError as exc:
            raise RepositoryError(
                f"Unable to create data directory for {self._db_path}"
            ) from exc
        try:
            with _connect(self._db_path, busy_timeout_ms=busy_timeout_ms) as conn:
                self._ensure_schema(conn)
        except sqlite3.Error as exc:
            raise RepositoryError("Failed to initialise SQLite schema") from exc
        logger.debug("Repository ready", extra={"db_path": str(self._db_path)})

    @property
    def db_path(self) -> Path:
        """Return the database file backing this repository."""
        return self._db_path


__all__ = [
    "INITIAL_VERSION_NOTE",
    "UPDATED_VERSION_NOTE",
    "PromptRepository",
    "RepositoryError",
    "RepositoryNotFoundError",
    "SnapshotPromptRecord",
    "SnapshotVersionRecord",
    "next_score",
    "now_iso",
]
