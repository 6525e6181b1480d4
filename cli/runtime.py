"""Runtime boot helpers for Prompt Library CLI.

Updates:
  v0.1.0 - 2026-10-12 - Logging configuration helpers.
"""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path

DEFAULT_LOGGING_CONFIG = Path("config/logging.conf")


def setup_logging(logging_conf_path: Path | None) -> None:
    """Configure logging using *logging_conf_path* when available."""
    path = logging_conf_path or DEFAULT_LOGGING_CONFIG
    if path.exists():
        try:
            logging.config.fileConfig(path, disable_existing_loggers=False)
            return
        except (KeyError, ValueError, OSError) as exc:  # pragma: no cover - configuration fallback
            logging.getLogger("prompt_library.main").debug(
                "Ignoring unusable logging config %s: %s", path, exc
            )
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


__all__ = ["DEFAULT_LOGGING_CONFIG", "setup_logging"]
