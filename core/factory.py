"""Factories for constructing PromptLibrary instances from validated settings.

Updates:
  v0.2.0 - 2026-10-14 - Pass busy timeout and snapshot indent through from settings.
  v0.1.0 - 2026-10-12 - Add build_prompt_library factory for shared bootstrap.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .exceptions import PromptStorageError
from .prompt_library import PromptLibrary
from .repository import PromptRepository, RepositoryError
from .templating import TemplateRenderer

if TYPE_CHECKING:  # pragma: no cover - typing only
    from config import PromptLibrarySettings

factory_logger = logging.getLogger("prompt_library.factory")


def build_prompt_library(
    settings: PromptLibrarySettings,
    *,
    repository: PromptRepository | None = None,
    renderer: TemplateRenderer | None = None,
) -> PromptLibrary:
    """Return a PromptLibrary configured from validated settings.

    Opening the store runs the schema bootstrap; failures surface as
    :class:`PromptStorageError` and are not retried.
    """
    if repository is None:
        try:
            repository = PromptRepository(
                settings.db_path,
                busy_timeout_ms=settings.busy_timeout_ms,
            )
        except RepositoryError as exc:
            factory_logger.error(
                "Unable to open prompt store",
                extra={"db_path": str(settings.db_path)},
            )
            raise PromptStorageError(
                f"Unable to open prompt store at {settings.db_path}"
            ) from exc
    factory_logger.debug(
        "Prompt library configured",
        extra={
            "db_path": str(repository.db_path),
            "busy_timeout_ms": settings.busy_timeout_ms,
        },
    )
    return PromptLibrary(
        repository=repository,
        renderer=renderer,
        snapshot_indent=settings.snapshot_indent,
    )


__all__ = ["build_prompt_library"]
