"""Printable summaries for Prompt Library configuration.

Updates:
  v0.1.0 - 2026-10-12 - Settings summary rendering for --print-settings.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from .utils import describe_path

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from config import PromptLibrarySettings


def print_settings_summary(settings: PromptLibrarySettings) -> None:
    """Emit a readable summary of the resolved configuration."""
    config_json = os.getenv("PROMPT_LIBRARY_CONFIG_JSON") or "config/config.json (if present)"
    lines = [
        "Prompt Library configuration",
        "----------------------------",
        f"Database path: {describe_path(settings.db_path, allow_missing_file=True)}",
        f"Busy timeout: {settings.busy_timeout_ms} ms",
        f"Default sort: {settings.default_sort}",
        f"Snapshot indent: {settings.snapshot_indent}",
        f"Config file: {config_json}",
    ]
    print("\n".join(lines))


__all__ = ["print_settings_summary"]
