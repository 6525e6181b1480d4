"""Filtered prompt listings and tag frequency summaries.

Updates:
  v0.2.0 - 2026-10-13 - Match tag filters against decoded tag sets, not the JSON blob.
  v0.1.0 - 2026-10-11 - Extract listing and tag aggregation queries into mixin.
"""

from __future__ import annotations

import sqlite3
from collections import Counter
from typing import TYPE_CHECKING, Any

from core.tags import decode_tags
from models.prompt_model import Prompt, SortMode, TagCount

from .base import RepositoryError, connect as _connect, escape_like as _escape_like

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from pathlib import Path

_ORDER_CLAUSES: dict[SortMode, str] = {
    SortMode.SCORE: "score_avg DESC, updated_at DESC, id DESC",
    SortMode.CREATED: "created_at DESC, id DESC",
    SortMode.UPDATED: "updated_at DESC, id DESC",
}


class PromptQueryMixin:
    """Read-only listing helpers built on top of the prompts table."""

    _db_path: Path
    _busy_timeout_ms: int
    _COLUMNS: Sequence[str]
    _row_to_prompt: Callable[[sqlite3.Row], Prompt]

    def list(
        self,
        *,
        search: str | None = None,
        tag: str | None = None,
        sort_by: str | SortMode | None = None,
    ) -> list[Prompt]:
        """Return prompts matching *search* and *tag*, ordered by *sort_by*.

        ``search`` is simple substring containment (SQLite ``LIKE``, ASCII
        case-insensitive) over title, content, and the encoded tag blob.
        ``tag`` must equal one of the prompt's tags as a whole.
        """
        conditions: list[str] = []
        params: list[Any] = []

        search_term = (search or "").strip()
        if search_term:
            pattern = f"%{_escape_like(search_term)}%"
            conditions.append(
                "(title LIKE ? ESCAPE '\\' OR content LIKE ? ESCAPE '\\' "
                "OR tags LIKE ? ESCAPE '\\')"
            )
            params.extend([pattern, pattern, pattern])

        tag_filter = (tag or "").strip()
        if tag_filter:
            conditions.append("has_tag(tags, ?) = 1")
            params.append(tag_filter)

        query = f"SELECT {', '.join(self._COLUMNS)} FROM prompts"
        if conditions:
            query += " WHERE " + " AND ".join(conditions)
        query += f" ORDER BY {_ORDER_CLAUSES[SortMode.from_value(sort_by)]};"

        try:
            with _connect(self._db_path, busy_timeout_ms=self._busy_timeout_ms) as conn:
                rows = conn.execute(query, params).fetchall()
        except sqlite3.Error as exc:
            raise RepositoryError("Failed to fetch prompt list") from exc
        return [self._row_to_prompt(row) for row in rows]

    def list_tags(self) -> list[TagCount]:
        """Return tag usage counts sorted by count desc, then name asc."""
        counts: Counter[str] = Counter()
        try:
            with _connect(self._db_path, busy_timeout_ms=self._busy_timeout_ms) as conn:
                for row in conn.execute("SELECT tags FROM prompts;"):
                    counts.update(decode_tags(row["tags"]))
        except sqlite3.Error as exc:
            raise RepositoryError("Failed to aggregate prompt tags") from exc
        ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
        return [TagCount(name=name, count=count) for name, count in ordered]


__all__ = ["PromptQueryMixin"]
