"""Usage log persistence and running score aggregation.

Updates:
  v0.1.0 - 2026-10-11 - Extract usage logging and incremental scoring into mixin.
"""

from __future__ import annotations

import sqlite3
from typing import TYPE_CHECKING, Any

from models.prompt_model import UsageLog

from .base import (
    RepositoryError,
    RepositoryNotFoundError,
    connect as _connect,
    json_dumps as _json_dumps,
    logger,
    now_iso as _now_iso,
)

if TYPE_CHECKING:
    from pathlib import Path


def next_score(score_avg: float, score_count: int, rating: int) -> tuple[float, int]:
    """Return the incremental mean after adding *rating* to ``(avg, count)``."""
    count = max(int(score_count), 0)
    current = float(score_avg) if count else 0.0
    next_count = count + 1
    return (current * count + rating) / next_count, next_count


class UsageLedgerMixin:
    """Append-only usage log helpers shared across repository implementations."""

    _db_path: Path
    _busy_timeout_ms: int

    def add_usage(
        self,
        prompt_id: int,
        input_payload: Any,
        output_text: str,
        rating: int | None = None,
    ) -> UsageLog:
        """Record a usage event and fold its rating into the prompt score.

        The log insert and the score update share one transaction; when the
        prompt is missing nothing is committed.
        """
        used_at = _now_iso()
        payload_json = _json_dumps(input_payload)
        try:
            with _connect(self._db_path, busy_timeout_ms=self._busy_timeout_ms) as conn:
                score_row = conn.execute(
                    "SELECT score_avg, score_count FROM prompts WHERE id = ?;",
                    (prompt_id,),
                ).fetchone()
                if score_row is None:
                    raise RepositoryNotFoundError(f"Prompt {prompt_id} not found")
                cursor = conn.execute(
                    """
                    INSERT INTO usage_logs (prompt_id, input_payload, output_text, rating, used_at)
                    VALUES (?, ?, ?, ?, ?);
                    """,
                    (prompt_id, payload_json, output_text, rating, used_at),
                )
                log_id = int(cursor.lastrowid or 0)
                if rating is not None:
                    score_avg, score_count = next_score(
                        score_row["score_avg"],
                        score_row["score_count"],
                        rating,
                    )
                    conn.execute(
                        """
                        UPDATE prompts
                        SET score_avg = ?, score_count = ?, updated_at = ?
                        WHERE id = ?;
                        """,
                        (score_avg, score_count, _now_iso(), prompt_id),
                    )
                    logger.debug(
                        "Prompt score updated",
                        extra={
                            "prompt_id": prompt_id,
                            "score_avg": score_avg,
                            "score_count": score_count,
                        },
                    )
        except RepositoryNotFoundError:
            raise
        except sqlite3.Error as exc:
            raise RepositoryError(f"Failed to log usage for prompt {prompt_id}") from exc
        return UsageLog(
            id=log_id,
            prompt_id=prompt_id,
            input_payload=input_payload,
            output_text=output_text,
            rating=rating,
            used_at=used_at,
        )

    def list_usage_logs(self, prompt_id: int, *, limit: int | None = None) -> list[UsageLog]:
        """Return usage history for a prompt, most recent first."""
        query = (
            "SELECT id, prompt_id, input_payload, output_text, rating, used_at "
            "FROM usage_logs WHERE prompt_id = ? ORDER BY used_at DESC, id DESC"
        )
        params: list[Any] = [prompt_id]
        if limit is not None:
            query += " LIMIT ?"
            params.append(int(limit))
        try:
            with _connect(self._db_path, busy_timeout_ms=self._busy_timeout_ms) as conn:
                rows = conn.execute(query + ";", params).fetchall()
        except sqlite3.Error as exc:
            raise RepositoryError(f"Failed to fetch usage history for {prompt_id}") from exc
        return [UsageLog.from_row(row) for row in rows]


__all__ = ["UsageLedgerMixin", "next_score"]
