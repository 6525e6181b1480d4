"""Data models for Prompt Library.

Updates: v0.2.0 - 2026-10-12 - Export snapshot wire models.
Updates: v0.1.0 - 2026-10-10 - Export Prompt, PromptVersion, and UsageLog dataclasses.
"""

from .prompt_model import Prompt, PromptVersion, SortMode, TagCount, UsageLog
from .snapshot_model import ExportPayload, ExportPromptItem, ExportVersionItem, ImportPromptItem

__all__ = [
    "ExportPayload",
    "ExportPromptItem",
    "ExportVersionItem",
    "ImportPromptItem",
    "Prompt",
    "PromptVersion",
    "SortMode",
    "TagCount",
    "UsageLog",
]
