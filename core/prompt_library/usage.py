"""Usage logging and score aggregation APIs for Prompt Library.

Updates:
  v0.1.1 - 2026-10-13 - Reject boolean ratings and non-JSON payloads up front.
  v0.1.0 - 2026-10-12 - Extract usage ledger APIs into mixin.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from ..exceptions import PromptNotFoundError, PromptStorageError, PromptValidationError
from ..repository import RepositoryError, RepositoryNotFoundError
from ..snapshots import MAX_RATING, MIN_RATING

if TYPE_CHECKING:  # pragma: no cover - typing helpers only
    from models.prompt_model import UsageLog

    from ..repository import PromptRepository

__all__ = ["PromptUsageMixin", "validate_rating"]


def validate_rating(rating: Any) -> int | None:
    """Return *rating* when it is None or an integer within the rating scale."""
    if rating is None:
        return None
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise PromptValidationError("Rating must be an integer between 1 and 5")
    if not MIN_RATING <= rating <= MAX_RATING:
        raise PromptValidationError(
            f"Rating must be between {MIN_RATING} and {MAX_RATING}, got {rating}"
        )
    return rating


class PromptUsageMixin:
    """Usage ledger orchestration on top of the repository."""

    _repository: PromptRepository

    def log_prompt_usage(
        self,
        prompt_id: int,
        input_payload: Any,
        output_text: str,
        rating: int | None = None,
    ) -> UsageLog:
        """Record a usage event and, when rated, fold it into the prompt score."""
        checked_rating = validate_rating(rating)
        try:
            json.dumps(input_payload)
        except (TypeError, ValueError) as exc:
            raise PromptValidationError("Usage input payload must be JSON-serialisable") from exc
        try:
            return self._repository.add_usage(
                prompt_id,
                input_payload,
                output_text,
                checked_rating,
            )
        except RepositoryNotFoundError as exc:
            raise PromptNotFoundError(f"Prompt {prompt_id} not found") from exc
        except RepositoryError as exc:
            raise PromptStorageError(f"Failed to log usage for prompt {prompt_id}") from exc

    def list_usage_logs(self, prompt_id: int, *, limit: int | None = None) -> list[UsageLog]:
        """Return recorded usage events for a prompt, newest first."""
        try:
            return self._repository.list_usage_logs(prompt_id, limit=limit)
        except RepositoryError as exc:
            raise PromptStorageError(f"Failed to load usage logs for prompt {prompt_id}") from exc
