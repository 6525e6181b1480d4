"""Application entry point for Prompt Library.

Updates:
  v0.2.0 - 2026-10-14 - Add --db-path override and map library errors to exit codes.
  v0.1.0 - 2026-10-12 - Wire settings, logging, and CLI commands.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cli.commands import COMMAND_SPECS
from cli.parser import build_parser, parse_args
from cli.runtime import setup_logging
from cli.settings_summary import print_settings_summary
from config import SettingsError, load_settings
from core import PromptLibraryError, PromptStorageError, build_prompt_library

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from collections.abc import Sequence

    from config import PromptLibrarySettings
    from core import PromptLibrary

EXIT_OK = 0
EXIT_OPERATION_ERROR = 1
EXIT_SETTINGS_ERROR = 2
EXIT_STORAGE_ERROR = 3


def _initialise_library(
    settings: PromptLibrarySettings,
    logger: logging.Logger,
) -> PromptLibrary | None:
    try:
        return build_prompt_library(settings)
    except PromptStorageError as exc:
        logger.error("Failed to initialise prompt store: %s", exc)
        return None


def main(argv: Sequence[str] | None = None) -> int:
    """Entrypoint that wires settings, services, and CLI commands."""
    args = parse_args(argv)
    setup_logging(args.logging_config)

    logger = logging.getLogger("prompt_library.main")
    overrides = {}
    if args.db_path is not None:
        overrides["db_path"] = args.db_path
    try:
        settings = load_settings(**overrides)
    except SettingsError as exc:
        cause = f" ({exc.__cause__})" if exc.__cause__ else ""
        logger.error("Failed to load settings: %s%s", exc, cause)
        return EXIT_SETTINGS_ERROR

    if args.print_settings:
        print_settings_summary(settings)
        return EXIT_OK

    command = getattr(args, "command", None)
    spec = COMMAND_SPECS.get(command) if command else None
    if spec is None:
        build_parser().print_help()
        return EXIT_OK

    library = _initialise_library(settings, logger)
    if library is None:
        return EXIT_STORAGE_ERROR

    args.default_sort = settings.default_sort
    with library:
        try:
            return spec.handler(library, args, logger)
        except PromptLibraryError as exc:
            logger.error("%s failed: %s", command, exc)
            return EXIT_OPERATION_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
