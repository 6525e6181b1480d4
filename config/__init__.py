"""Configuration helpers for Prompt Library.

Updates: v0.2.0 - 2026-10-14 - Expose snapshot and sort defaults.
Updates: v0.1.0 - 2026-10-12 - Expose settings loader and configuration error types.
"""

from .settings import (
    DEFAULT_BUSY_TIMEOUT_MS,
    DEFAULT_DB_PATH,
    DEFAULT_SNAPSHOT_INDENT,
    DEFAULT_SORT_MODE,
    PromptLibrarySettings,
    SettingsError,
    load_settings,
)

__all__ = [
    "DEFAULT_BUSY_TIMEOUT_MS",
    "DEFAULT_DB_PATH",
    "DEFAULT_SNAPSHOT_INDENT",
    "DEFAULT_SORT_MODE",
    "PromptLibrarySettings",
    "SettingsError",
    "load_settings",
]
