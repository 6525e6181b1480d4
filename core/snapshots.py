"""Parse, sanitise, and serialise prompt library snapshots.

Updates:
  v0.3.0 - 2026-10-16 - Normalise imported version timestamps to UTC microseconds.
  v0.2.0 - 2026-10-14 - Add YAML snapshot files alongside JSON.
  v0.1.0 - 2026-10-12 - Snapshot export/import reconciliation helpers.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import yaml
from pydantic import ValidationError

from models.snapshot_model import (
    IMPORT_PAYLOAD_ADAPTER,
    ExportPayload,
    ExportPromptItem,
    ExportVersionItem,
    ImportPromptItem,
    unwrap_import_payload,
)

from .exceptions import SnapshotParseError
from .repository import SnapshotPromptRecord, SnapshotVersionRecord, now_iso
from .tags import normalize_tags

if TYPE_CHECKING:  # pragma: no cover - typing only
    from collections.abc import Sequence
    from pathlib import Path

    from models.prompt_model import Prompt, PromptVersion

logger = logging.getLogger("prompt_library.snapshots")

IMPORTED_VERSION_NOTE = "imported version"
SYNTHESIZED_VERSION_NOTE = "imported"
MIN_RATING = 1
MAX_RATING = 5
SNAPSHOT_FORMATS = ("json", "yaml")


@dataclass(slots=True, frozen=True)
class SnapshotPlan:
    """Outcome of sanitising a parsed snapshot before it touches storage."""

    records: list[SnapshotPromptRecord]
    skipped: int

    @property
    def total(self) -> int:
        return len(self.records) + self.skipped


def _format_validation_error(exc: ValidationError) -> str:
    first = exc.errors()[0] if exc.errors() else None
    if first is None:
        return str(exc)
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "invalid value")
    return f"{location}: {message}" if location else str(message)


def parse_snapshot(text: str) -> list[ImportPromptItem]:
    """Parse snapshot JSON (wrapped object or bare list) into prompt items."""
    if not text.strip():
        raise SnapshotParseError("Snapshot is empty")
    try:
        payload = IMPORT_PAYLOAD_ADAPTER.validate_json(text)
    except ValidationError as exc:
        raise SnapshotParseError(
            f"Invalid snapshot: {_format_validation_error(exc)}"
        ) from exc
    return unwrap_import_payload(payload)


def parse_snapshot_data(data: Any) -> list[ImportPromptItem]:
    """Validate an already-decoded snapshot structure (e.g. loaded from YAML)."""
    try:
        payload = IMPORT_PAYLOAD_ADAPTER.validate_python(data)
    except ValidationError as exc:
        raise SnapshotParseError(
            f"Invalid snapshot: {_format_validation_error(exc)}"
        ) from exc
    return unwrap_import_payload(payload)


def _sanitise_score(score_avg: float | None, score_count: int | None) -> tuple[float, int]:
    count = max(int(score_count or 0), 0)
    if count == 0:
        return 0.0, 0
    average = float(score_avg if score_avg is not None else 0.0)
    if not math.isfinite(average):
        return 0.0, 0
    return min(max(average, float(MIN_RATING)), float(MAX_RATING)), count


def normalise_timestamp(value: str | None, fallback: str) -> str:
    """Return *value* in the fixed-width UTC form used for stored timestamps.

    Blank values become *fallback*. Text that is not ISO-8601 is kept verbatim.
    """
    if value is None or not value.strip():
        return fallback
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return value
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC).isoformat(timespec="microseconds")


def plan_import(items: Sequence[ImportPromptItem], *, imported_at: str | None = None) -> SnapshotPlan:
    """Validate each item independently and build insertable records.

    Items with an empty title or content are skipped. Version lists are read
    newest first, which is the order exports use, and returned oldest first.
    """
    timestamp = imported_at or now_iso()
    records: list[SnapshotPromptRecord] = []
    skipped = 0
    for index, item in enumerate(items):
        title = item.title.strip()
        if not title or not item.content.strip():
            skipped += 1
            logger.warning("Skipping snapshot item %d: empty title or content", index)
            continue
        score_avg, score_count = _sanitise_score(item.score_avg, item.score_count)
        versions = [
            SnapshotVersionRecord(
                content=version.content,
                change_note=(
                    version.change_note
                    if version.change_note is not None
                    else IMPORTED_VERSION_NOTE
                ),
                created_at=normalise_timestamp(version.created_at, timestamp),
            )
            for version in reversed(item.versions or [])
            if version.content.strip()
        ]
        if not versions:
            versions = [
                SnapshotVersionRecord(
                    content=item.content,
                    change_note=SYNTHESIZED_VERSION_NOTE,
                    created_at=timestamp,
                )
            ]
        records.append(
            SnapshotPromptRecord(
                title=title,
                content=item.content,
                tags=normalize_tags(item.tags),
                is_favorite=bool(item.is_favorite),
                score_avg=score_avg,
                score_count=score_count,
                created_at=timestamp,
                versions=versions,
            )
        )
    return SnapshotPlan(records=records, skipped=skipped)


def build_export_payload(
    records: Sequence[tuple[Prompt, Sequence[PromptVersion]]],
    *,
    exported_at: str | None = None,
) -> ExportPayload:
    """Return the snapshot document for *records* (prompt with its history)."""
    return ExportPayload(
        exported_at=exported_at or now_iso(),
        prompts=[
            ExportPromptItem(
                title=prompt.title,
                content=prompt.content,
                tags=list(prompt.tags),
                is_favorite=prompt.is_favorite,
                score_avg=prompt.score_avg,
                score_count=prompt.score_count,
                versions=[
                    ExportVersionItem(
                        content=version.content,
                        change_note=version.change_note,
                        created_at=version.created_at,
                    )
                    for version in versions
                ],
            )
            for prompt, versions in records
        ],
    )


def dump_snapshot(payload: ExportPayload, *, fmt: str = "json", indent: int = 2) -> str:
    """Serialise *payload* as human-readable JSON or YAML text."""
    fmt_lower = fmt.lower()
    if fmt_lower not in SNAPSHOT_FORMATS:
        raise ValueError("fmt must be 'json' or 'yaml'")
    data = payload.model_dump(by_alias=True)
    if fmt_lower == "yaml":
        return yaml.safe_dump(data, allow_unicode=True, sort_keys=False)
    return json.dumps(data, ensure_ascii=False, indent=indent or None)


def load_snapshot_text(text: str, *, fmt: str = "json") -> list[ImportPromptItem]:
    """Parse snapshot *text* in the given format."""
    fmt_lower = fmt.lower()
    if fmt_lower not in SNAPSHOT_FORMATS:
        raise ValueError("fmt must be 'json' or 'yaml'")
    if fmt_lower == "json":
        return parse_snapshot(text)
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise SnapshotParseError("Invalid YAML snapshot") from exc
    if data is None:
        raise SnapshotParseError("Snapshot is empty")
    return parse_snapshot_data(data)


def resolve_snapshot_format(path: Path, explicit_format: str | None = None) -> str:
    """Return a snapshot format slug based on *path* or *explicit_format*."""
    if explicit_format:
        return explicit_format.lower()
    if path.suffix.lower() in {".yaml", ".yml"}:
        return "yaml"
    return "json"


__all__ = [
    "IMPORTED_VERSION_NOTE",
    "SNAPSHOT_FORMATS",
    "SYNTHESIZED_VERSION_NOTE",
    "SnapshotPlan",
    "build_export_payload",
    "dump_snapshot",
    "load_snapshot_text",
    "normalise_timestamp",
    "parse_snapshot",
    "parse_snapshot_data",
    "plan_import",
    "resolve_snapshot_format",
]
