"""Listing and tag summary helpers for Prompt Library.

Updates:
  v0.1.0 - 2026-10-12 - Extract listing and tag frequency APIs into mixin.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..exceptions import PromptStorageError
from ..repository import RepositoryError

if TYPE_CHECKING:
    from models.prompt_model import Prompt, SortMode, TagCount

    from ..repository import PromptRepository

__all__ = ["PromptSearchMixin"]


class PromptSearchMixin:
    """Filtered listings over the prompt store."""

    _repository: PromptRepository

    def list_prompts(
        self,
        search: str | None = None,
        tag: str | None = None,
        sort_by: str | SortMode | None = None,
    ) -> list[Prompt]:
        """Return prompts filtered by substring *search* and whole-tag *tag*."""
        try:
            return self._repository.list(search=search, tag=tag, sort_by=sort_by)
        except RepositoryError as exc:
            raise PromptStorageError("Failed to list prompts") from exc

    def list_tags(self) -> list[TagCount]:
        """Return tag usage counts, most used first."""
        try:
            return self._repository.list_tags()
        except RepositoryError as exc:
            raise PromptStorageError("Failed to list prompt tags") from exc
