"""Shared repository helpers, connection management, and error hierarchy.

Updates:
  v0.2.0 - 2026-10-13 - Register the whole-tag SQL function on every connection.
  v0.1.0 - 2026-10-10 - Extract connection, timestamp, and JSON helpers.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from core.tags import decode_tags, has_tag

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

logger = logging.getLogger("prompt_library.repository")

DEFAULT_BUSY_TIMEOUT_MS = 5000


class RepositoryError(Exception):
    """Base exception for repository failures."""


class RepositoryNotFoundError(RepositoryError):
    """Raised when a requested record cannot be located."""


def now_iso() -> str:
    """Return the current UTC timestamp as fixed-width ISO-8601 text."""
    return datetime.now(UTC).isoformat(timespec="microseconds")


def ensure_directory(path: Path) -> None:
    """Ensure the directory for the SQLite database exists."""
    path.parent.mkdir(parents=True, exist_ok=True)


def _sql_has_tag(tags_json: str | None, tag: str | None) -> int:
    if tag is None:
        return 0
    return int(has_tag(decode_tags(tags_json), tag))


@contextmanager
def connect(
    db_path: Path,
    *,
    busy_timeout_ms: int = DEFAULT_BUSY_TIMEOUT_MS,
) -> Iterator[sqlite3.Connection]:
    """Yield a configured SQLite connection wrapped in a single transaction.

    The transaction commits when the block exits normally and rolls back when
    it raises. The connection is always closed.
    """
    conn = sqlite3.connect(str(db_path), timeout=max(busy_timeout_ms, 0) / 1000)
    try:
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON;")
        conn.execute("PRAGMA journal_mode = WAL;")
        conn.execute("PRAGMA synchronous = NORMAL;")
        conn.create_function("has_tag", 2, _sql_has_tag, deterministic=True)
        with conn:
            yield conn
    finally:
        conn.close()


def json_dumps(value: Any) -> str:
    """Serialise arbitrary JSON-compatible values verbatim (``None`` becomes ``null``)."""
    return json.dumps(value, ensure_ascii=False)


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so *term* matches literally with ``ESCAPE '\\'``."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


__all__ = [
    "DEFAULT_BUSY_TIMEOUT_MS",
    "RepositoryError",
    "RepositoryNotFoundError",
    "connect",
    "ensure_directory",
    "escape_like",
    "json_dumps",
    "logger",
    "now_iso",
]
