"""Pydantic models describing the portable snapshot wire format.

Export payloads always use the wrapped shape. Import accepts either the wrapped
object or a bare list of prompt items; :data:`ImportPayload` resolves the two
shapes once at parse time.

Updates: v0.1.0 - 2026-10-12 - Initial export/import snapshot models.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

_WIRE_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExportVersionItem(BaseModel):
    """Version entry written into snapshots (ids are re-assigned on import)."""

    model_config = _WIRE_CONFIG

    content: str
    change_note: str
    created_at: str


class ExportPromptItem(BaseModel):
    """Prompt entry written into snapshots together with its full history."""

    model_config = _WIRE_CONFIG

    title: str
    content: str
    tags: list[str] = Field(default_factory=list)
    is_favorite: bool = False
    score_avg: float = 0.0
    score_count: int = 0
    versions: list[ExportVersionItem] = Field(default_factory=list)


class ExportPayload(BaseModel):
    """Top-level snapshot document."""

    model_config = _WIRE_CONFIG

    exported_at: str
    prompts: list[ExportPromptItem] = Field(default_factory=list)


class ImportVersionItem(BaseModel):
    """Version entry accepted on import; note and timestamp are optional."""

    model_config = _WIRE_CONFIG

    content: str
    change_note: str | None = None
    created_at: str | None = None


class ImportPromptItem(BaseModel):
    """Prompt entry accepted on import; everything but title/content is optional."""

    model_config = _WIRE_CONFIG

    title: str
    content: str
    tags: list[str] | None = None
    is_favorite: bool | None = None
    score_avg: float | None = None
    score_count: int | None = None
    versions: list[ImportVersionItem] | None = None


class WrappedImportPayload(BaseModel):
    """Snapshot object wrapping a ``prompts`` list (other keys are ignored)."""

    model_config = _WIRE_CONFIG

    prompts: list[ImportPromptItem]


ImportPayload = WrappedImportPayload | list[ImportPromptItem]

IMPORT_PAYLOAD_ADAPTER: TypeAdapter[ImportPayload] = TypeAdapter(ImportPayload)


def unwrap_import_payload(payload: ImportPayload) -> list[ImportPromptItem]:
    """Return the prompt items regardless of which snapshot shape was supplied."""
    if isinstance(payload, WrappedImportPayload):
        return list(payload.prompts)
    return list(payload)


__all__ = [
    "IMPORT_PAYLOAD_ADAPTER",
    "ExportPayload",
    "ExportPromptItem",
    "ExportVersionItem",
    "ImportPayload",
    "ImportPromptItem",
    "ImportVersionItem",
    "WrappedImportPayload",
    "unwrap_import_payload",
]
