"""Snapshot export and import orchestration for Prompt Library.

Updates:
  v0.2.0 - 2026-10-14 - Add file based JSON/YAML export and import.
  v0.1.0 - 2026-10-12 - Extract snapshot APIs into mixin.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from ..exceptions import PromptStorageError, SnapshotParseError
from ..repository import RepositoryError
from ..snapshots import (
    build_export_payload,
    dump_snapshot,
    load_snapshot_text,
    parse_snapshot,
    plan_import,
    resolve_snapshot_format,
)

if TYPE_CHECKING:  # pragma: no cover - typing helpers only
    from collections.abc import Sequence

    from models.snapshot_model import ExportPayload, ImportPromptItem

    from ..repository import PromptRepository

logger = logging.getLogger("prompt_library.snapshots")

__all__ = ["PromptSnapshotMixin"]


class PromptSnapshotMixin:
    """Whole-library backup and restore through snapshot documents."""

    _repository: PromptRepository
    _snapshot_indent: int

    def build_snapshot(self) -> ExportPayload:
        """Return the snapshot document describing every stored prompt."""
        try:
            records = self._repository.export_records()
        except RepositoryError as exc:
            raise PromptStorageError("Unable to load prompts for export") from exc
        return build_export_payload(records)

    def export_snapshot(self) -> str:
        """Return a pretty-printed JSON snapshot of the whole library."""
        payload = self.build_snapshot()
        logger.info("Snapshot exported", extra={"prompt_count": len(payload.prompts)})
        return dump_snapshot(payload, fmt="json", indent=self._snapshot_indent)

    def export_snapshot_to_path(self, output_path: Path, *, fmt: str | None = None) -> Path:
        """Write a JSON or YAML snapshot to *output_path* and return the resolved path."""
        resolved_path = Path(output_path).expanduser()
        fmt_lower = resolve_snapshot_format(resolved_path, fmt)
        payload = self.build_snapshot()
        text = dump_snapshot(payload, fmt=fmt_lower, indent=self._snapshot_indent)
        try:
            resolved_path.parent.mkdir(parents=True, exist_ok=True)
            resolved_path.write_text(text, encoding="utf-8")
        except OSError as exc:
            raise PromptStorageError(f"Unable to write snapshot to {resolved_path}") from exc
        logger.info(
            "Snapshot written",
            extra={"path": str(resolved_path), "prompt_count": len(payload.prompts)},
        )
        return resolved_path

    def import_snapshot(self, text: str) -> int:
        """Import prompts from JSON snapshot *text* and return how many were stored.

        The text is parsed completely before anything is written, and the
        whole batch is stored in one transaction.
        """
        return self._import_items(parse_snapshot(text))

    def import_snapshot_from_path(self, input_path: Path, *, fmt: str | None = None) -> int:
        """Import a JSON or YAML snapshot file."""
        resolved_path = Path(input_path).expanduser()
        fmt_lower = resolve_snapshot_format(resolved_path, fmt)
        try:
            text = resolved_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise SnapshotParseError(f"Unable to read snapshot {resolved_path}") from exc
        return self._import_items(load_snapshot_text(text, fmt=fmt_lower))

    def _import_items(self, items: Sequence[ImportPromptItem]) -> int:
        plan = plan_import(items)
        try:
            imported = self._repository.import_records(plan.records)
        except RepositoryError as exc:
            raise PromptStorageError("Snapshot import failed; no prompts were stored") from exc
        logger.info(
            "Snapshot imported",
            extra={"imported": imported, "skipped": plan.skipped, "total": plan.total},
        )
        return imported
