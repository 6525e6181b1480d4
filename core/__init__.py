"""Core service layer for Prompt Library.

Updates:
  v0.3.0 - 2026-10-14 - Export templating and snapshot helpers.
  v0.2.0 - 2026-10-13 - Export build_prompt_library factory for shared bootstrap.
  v0.1.0 - 2026-10-12 - Surface PromptRepository and the initial PromptLibrary API.
"""

from .exceptions import (
    PromptLibraryError,
    PromptNotFoundError,
    PromptStorageError,
    PromptValidationError,
    SnapshotParseError,
)
from .factory import build_prompt_library
from .prompt_library import PromptLibrary
from .repository import PromptRepository, RepositoryError, RepositoryNotFoundError
from .snapshots import (
    IMPORTED_VERSION_NOTE,
    SYNTHESIZED_VERSION_NOTE,
    SnapshotPlan,
    dump_snapshot,
    parse_snapshot,
    plan_import,
)
from .tags import decode_tags, encode_tags, has_tag, normalize_tags, parse_tag_input
from .templating import TemplateRenderer, TemplateRenderResult, summarize_content

__all__ = [
    "IMPORTED_VERSION_NOTE",
    "SYNTHESIZED_VERSION_NOTE",
    "PromptLibrary",
    "PromptLibraryError",
    "PromptNotFoundError",
    "PromptRepository",
    "PromptStorageError",
    "PromptValidationError",
    "RepositoryError",
    "RepositoryNotFoundError",
    "SnapshotParseError",
    "SnapshotPlan",
    "TemplateRenderResult",
    "TemplateRenderer",
    "build_prompt_library",
    "decode_tags",
    "dump_snapshot",
    "encode_tags",
    "has_tag",
    "normalize_tags",
    "parse_snapshot",
    "parse_tag_input",
    "plan_import",
    "summarize_content",
]
