"""Tag normalisation and (de)serialisation helpers.

Updates:
  v0.2.0 - 2026-10-12 - Add comma-separated tag input parsing for the CLI.
  v0.1.0 - 2026-10-10 - Extract tag normalisation from the prompt store.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any, cast


def normalize_tags(raw_tags: Iterable[Any] | None) -> list[str]:
    """Return trimmed, case-insensitively unique tags in first-seen order.

    The first spelling of a tag wins, so ``["AI", "ai"]`` normalises to
    ``["AI"]``. Applying the function twice yields the same list.
    """
    if raw_tags is None:
        return []
    if isinstance(raw_tags, str):
        raw_tags = [raw_tags]
    tags: list[str] = []
    seen: set[str] = set()
    for raw in raw_tags:
        text = str(raw).strip()
        if not text:
            continue
        key = text.lower()
        if key in seen:
            continue
        seen.add(key)
        tags.append(text)
    return tags


def parse_tag_input(text: str | None) -> list[str]:
    """Split comma-separated user input into normalised tags."""
    if not text:
        return []
    return normalize_tags(text.split(","))


def encode_tags(tags: Iterable[str]) -> str:
    """Serialise tags into the JSON array stored in ``prompts.tags``."""
    return json.dumps(list(tags), ensure_ascii=False)


def decode_tags(value: str | None) -> list[str]:
    """Deserialise the stored tag blob, tolerating empty or corrupt values."""
    if value is None or value in ("", "null"):
        return []
    try:
        parsed: object = json.loads(value)
    except json.JSONDecodeError:
        return []
    if not isinstance(parsed, list):
        return []
    entries = cast("list[object]", parsed)
    return [str(item) for item in entries]


def has_tag(tags: Iterable[str], tag: str) -> bool:
    """Return True when *tag* is one of *tags* as a whole tag (case-insensitive)."""
    needle = tag.strip().lower()
    if not needle:
        return False
    return any(candidate.strip().lower() == needle for candidate in tags)


__all__ = [
    "decode_tags",
    "encode_tags",
    "has_tag",
    "normalize_tags",
    "parse_tag_input",
]
