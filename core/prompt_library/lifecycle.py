"""Prompt lifecycle and version history helpers for Prompt Library.

Updates:
  v0.2.0 - 2026-10-13 - Add upsert dispatch mirroring the save command.
  v0.1.0 - 2026-10-12 - Extract prompt CRUD and versioning APIs into mixin.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..exceptions import PromptNotFoundError, PromptStorageError, PromptValidationError
from ..repository import RepositoryError, RepositoryNotFoundError
from ..tags import normalize_tags

if TYPE_CHECKING:  # pragma: no cover - typing helpers only
    from collections.abc import Iterable

    from models.prompt_model import Prompt, PromptVersion

    from ..repository import PromptRepository

logger = logging.getLogger("prompt_library.lifecycle")

__all__ = ["PromptLifecycleMixin"]


def _require_text(value: str | None, field_name: str) -> str:
    """Return *value* when it is non-empty after trimming, else raise."""
    if value is None or not str(value).strip():
        raise PromptValidationError(f"Prompt {field_name} must not be empty")
    return str(value)


class PromptLifecycleMixin:
    """Prompt CRUD orchestration with input validation and error translation."""

    _repository: PromptRepository

    def create_prompt(
        self,
        title: str,
        content: str,
        tags: Iterable[str] | str | None = None,
        is_favorite: bool = False,
        change_note: str | None = None,
    ) -> Prompt:
        """Validate and persist a new prompt together with its first version."""
        clean_title = _require_text(title, "title").strip()
        clean_content = _require_text(content, "content")
        try:
            prompt = self._repository.add(
                title=clean_title,
                content=clean_content,
                tags=normalize_tags(tags),
                is_favorite=bool(is_favorite),
                change_note=(change_note or "").strip(),
            )
        except RepositoryError as exc:
            raise PromptStorageError(f"Failed to persist prompt {clean_title!r}") from exc
        logger.info("Prompt created", extra={"prompt_id": prompt.id})
        return prompt

    def update_prompt(
        self,
        prompt_id: int,
        title: str,
        content: str,
        tags: Iterable[str] | str | None = None,
        is_favorite: bool = False,
        change_note: str | None = None,
    ) -> Prompt:
        """Overwrite an existing prompt, appending a version when warranted."""
        clean_title = _require_text(title, "title").strip()
        clean_content = _require_text(content, "content")
        try:
            prompt = self._repository.update(
                prompt_id,
                title=clean_title,
                content=clean_content,
                tags=normalize_tags(tags),
                is_favorite=bool(is_favorite),
                change_note=(change_note or "").strip(),
            )
        except RepositoryNotFoundError as exc:
            raise PromptNotFoundError(f"Prompt {prompt_id} not found") from exc
        except RepositoryError as exc:
            raise PromptStorageError(f"Failed to update prompt {prompt_id}") from exc
        return prompt

    def upsert_prompt(
        self,
        prompt_id: int | None,
        title: str,
        content: str,
        tags: Iterable[str] | str | None = None,
        is_favorite: bool = False,
        change_note: str | None = None,
    ) -> Prompt:
        """Create a prompt when *prompt_id* is None, otherwise update it."""
        if prompt_id is None:
            return self.create_prompt(title, content, tags, is_favorite, change_note)
        return self.update_prompt(prompt_id, title, content, tags, is_favorite, change_note)

    def get_prompt(self, prompt_id: int) -> Prompt | None:
        """Return the prompt with *prompt_id*, or None when it does not exist."""
        try:
            return self._repository.get(prompt_id)
        except RepositoryError as exc:
            raise PromptStorageError(f"Failed to fetch prompt {prompt_id}") from exc

    def delete_prompt(self, prompt_id: int) -> None:
        """Remove a prompt with its history; missing ids are ignored."""
        try:
            deleted = self._repository.delete(prompt_id)
        except RepositoryError as exc:
            raise PromptStorageError(f"Failed to delete prompt {prompt_id}") from exc
        if deleted:
            logger.info("Prompt deleted", extra={"prompt_id": prompt_id})

    def list_prompt_versions(self, prompt_id: int) -> list[PromptVersion]:
        """Return the revision history of a prompt, newest first."""
        try:
            return self._repository.list_prompt_versions(prompt_id)
        except RepositoryError as exc:
            raise PromptStorageError(
                f"Failed to load version history for prompt {prompt_id}"
            ) from exc
