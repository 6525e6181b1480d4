"""Placeholder preview helpers for stored prompts.

Updates:
  v0.1.0 - 2026-10-14 - Render stored prompt content with caller supplied values.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..exceptions import PromptNotFoundError, PromptStorageError
from ..repository import RepositoryError

if TYPE_CHECKING:  # pragma: no cover - typing helpers only
    from collections.abc import Mapping

    from ..repository import PromptRepository
    from ..templating import TemplateRenderer, TemplateRenderResult

__all__ = ["PromptTemplateMixin"]


class PromptTemplateMixin:
    """Fill ``{{ variable }}`` placeholders of stored prompts."""

    _repository: PromptRepository
    _renderer: TemplateRenderer

    def prompt_variables(self, prompt_id: int) -> list[str]:
        """Return the placeholder names referenced by a stored prompt."""
        return self._renderer.extract_variables(self._require_prompt_content(prompt_id))

    def render_prompt(
        self,
        prompt_id: int,
        values: Mapping[str, Any] | None = None,
    ) -> TemplateRenderResult:
        """Render a stored prompt, leaving unknown placeholders visible."""
        content = self._require_prompt_content(prompt_id)
        return self._renderer.render(content, values or {})

    def _require_prompt_content(self, prompt_id: int) -> str:
        try:
            prompt = self._repository.get(prompt_id)
        except RepositoryError as exc:
            raise PromptStorageError(f"Failed to fetch prompt {prompt_id}") from exc
        if prompt is None:
            raise PromptNotFoundError(f"Prompt {prompt_id} not found")
        return prompt.content
