"""Common exception classes for the core package.

All exceptions ultimately inherit from :class:`PromptLibraryError`, allowing
callers to catch a single base class for any library failure while still
distinguishing individual error categories when needed.

Updates:
  v0.2.0 - 2026-10-12 - Add snapshot parse errors for the import reconciler.
  v0.1.0 - 2026-10-10 - Created module with validation/not-found/storage errors.
"""

from __future__ import annotations


class PromptLibraryError(Exception):
    """Base exception for Prompt Library failures."""


class PromptValidationError(PromptLibraryError):
    """Raised when caller input is rejected before anything is written."""


class PromptNotFoundError(PromptLibraryError):
    """Raised when an operation targets a prompt that does not exist."""


class PromptStorageError(PromptLibraryError):
    """Raised when interactions with the SQLite store fail."""


class SnapshotParseError(PromptLibraryError):
    """Raised when snapshot text cannot be parsed into a prompt batch."""


__all__ = [
    "PromptLibraryError",
    "PromptNotFoundError",
    "PromptStorageError",
    "PromptValidationError",
    "SnapshotParseError",
]
