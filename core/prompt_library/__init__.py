"""Prompt Library package façade and orchestration layer.

Updates:
  v0.3.0 - 2026-10-14 - Add placeholder rendering and file snapshot mixins.
  v0.2.0 - 2026-10-13 - Add maintenance helpers for resets and diagnostics.
  v0.1.0 - 2026-10-12 - Compose lifecycle, usage, search, and snapshot mixins.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from ..exceptions import PromptStorageError
from ..repository import PromptRepository, RepositoryError
from ..templating import TemplateRenderer
from .lifecycle import PromptLifecycleMixin
from .search import PromptSearchMixin
from .snapshots import PromptSnapshotMixin
from .templates import PromptTemplateMixin
from .usage import PromptUsageMixin, validate_rating

if TYPE_CHECKING:  # pragma: no cover - typing only
    from types import TracebackType

logger = logging.getLogger("prompt_library.library")

DEFAULT_SNAPSHOT_INDENT = 2


class PromptLibrary(
    PromptLifecycleMixin,
    PromptUsageMixin,
    PromptSearchMixin,
    PromptSnapshotMixin,
    PromptTemplateMixin,
):
    """Manage prompt persistence, usage scoring, and snapshots."""

    def __init__(
        self,
        db_path: str | Path | None = None,
        *,
        repository: PromptRepository | None = None,
        renderer: TemplateRenderer | None = None,
        snapshot_indent: int = DEFAULT_SNAPSHOT_INDENT,
    ) -> None:
        """Bind the façade to a repository, opening one at *db_path* when needed."""
        if repository is None:
            if db_path is None:
                raise ValueError("db_path or repository must be provided")
            try:
                repository = PromptRepository(db_path)
            except RepositoryError as exc:
                raise PromptStorageError(f"Unable to open prompt store at {db_path}") from exc
        self._repository = repository
        self._renderer = renderer or TemplateRenderer()
        self._snapshot_indent = max(int(snapshot_indent), 0)
        logger.debug("Prompt library ready", extra={"db_path": str(repository.db_path)})

    @property
    def repository(self) -> PromptRepository:
        """Expose the SQLite repository."""
        return self._repository

    @property
    def db_path(self) -> Path:
        """Return the SQLite database path."""
        return self._repository.db_path

    @property
    def renderer(self) -> TemplateRenderer:
        """Return the placeholder renderer used for previews."""
        return self._renderer

    def count_prompts(self) -> int:
        """Return the number of stored prompts."""
        try:
            return self._repository.count_prompts()
        except RepositoryError as exc:
            raise PromptStorageError("Failed to count prompts") from exc

    def reset_all_data(self) -> None:
        """Remove every prompt, version, and usage log."""
        try:
            self._repository.reset_all_data()
        except RepositoryError as exc:
            raise PromptStorageError("Failed to reset prompt library data") from exc
        logger.warning("Prompt library data reset", extra={"db_path": str(self.db_path)})

    def close(self) -> None:
        """Release resources; connections are per call so nothing is held open."""

    def __enter__(self) -> PromptLibrary:
        """Support use of PromptLibrary as a context manager."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Close resources when exiting a context manager block."""
        self.close()


__all__ = ["DEFAULT_SNAPSHOT_INDENT", "PromptLibrary", "validate_rating"]
