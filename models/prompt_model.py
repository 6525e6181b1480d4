"""Prompt data model definitions.

Updates: v0.3.0 - 2026-10-13 - Add tag frequency pairs and sort mode parsing.
Updates: v0.2.0 - 2026-10-11 - Add usage log records with optional ratings.
Updates: v0.1.0 - 2026-10-10 - Initial Prompt and PromptVersion dataclasses.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class SortMode(str, Enum):
    """Enumerate the fixed orderings supported by prompt listings."""

    UPDATED = "updated"
    SCORE = "score"
    CREATED = "created"

    @classmethod
    def from_value(cls, value: str | SortMode | None) -> SortMode:
        """Return the matching mode, falling back to ``UPDATED`` for anything else."""
        if isinstance(value, SortMode):
            return value
        if not value:
            return cls.UPDATED
        lowered = str(value).strip().lower()
        for member in cls:
            if member.value == lowered:
                return member
        return cls.UPDATED


@dataclass(slots=True)
class Prompt:
    """Dataclass representation of a stored prompt."""

    id: int
    title: str
    content: str
    tags: list[str] = field(default_factory=list)
    is_favorite: bool = False
    score_avg: float = 0.0
    score_count: int = 0
    created_at: str = ""
    updated_at: str = ""

    def __post_init__(self) -> None:
        if self.score_count <= 0:
            self.score_count = 0
            self.score_avg = 0.0

    def to_record(self) -> dict[str, Any]:
        """Return a plain dictionary representation (camelCase keys)."""
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "tags": list(self.tags),
            "isFavorite": self.is_favorite,
            "scoreAvg": self.score_avg,
            "scoreCount": self.score_count,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_record(cls, data: Mapping[str, Any]) -> Prompt:
        """Create a Prompt from a mapping whose tags are already decoded."""
        return cls(
            id=int(data["id"]),
            title=str(data["title"]),
            content=str(data["content"]),
            tags=[str(tag) for tag in data.get("tags") or []],
            is_favorite=bool(data.get("is_favorite", False)),
            score_avg=float(data.get("score_avg") or 0.0),
            score_count=int(data.get("score_count") or 0),
            created_at=str(data.get("created_at") or ""),
            updated_at=str(data.get("updated_at") or ""),
        )


@dataclass(slots=True, frozen=True)
class PromptVersion:
    """Immutable snapshot of a prompt's content."""

    id: int
    prompt_id: int
    content: str
    change_note: str
    created_at: str

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "promptId": self.prompt_id,
            "content": self.content,
            "changeNote": self.change_note,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> PromptVersion:
        return cls(
            id=int(row["id"]),
            prompt_id=int(row["prompt_id"]),
            content=str(row["content"]),
            change_note=str(row["change_note"] or ""),
            created_at=str(row["created_at"]),
        )


@dataclass(slots=True, frozen=True)
class UsageLog:
    """Single recorded use of a prompt with optional feedback."""

    id: int
    prompt_id: int
    input_payload: Any
    output_text: str
    rating: int | None
    used_at: str

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "promptId": self.prompt_id,
            "inputPayload": self.input_payload,
            "outputText": self.output_text,
            "rating": self.rating,
            "usedAt": self.used_at,
        }

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> UsageLog:
        raw_payload = row["input_payload"]
        try:
            payload = json.loads(raw_payload) if raw_payload is not None else None
        except json.JSONDecodeError:
            payload = raw_payload
        rating = row["rating"]
        return cls(
            id=int(row["id"]),
            prompt_id=int(row["prompt_id"]),
            input_payload=payload,
            output_text=str(row["output_text"]),
            rating=int(rating) if rating is not None else None,
            used_at=str(row["used_at"]),
        )


@dataclass(slots=True, frozen=True)
class TagCount:
    """Tag name paired with the number of prompts carrying it."""

    name: str
    count: int


__all__ = [
    "Prompt",
    "PromptVersion",
    "SortMode",
    "TagCount",
    "UsageLog",
]
