"""Shared CLI utility functions for Prompt Library commands.

Updates:
  v0.1.0 - 2026-10-12 - Stdout logging, path descriptions, and prompt formatting helpers.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from core.templating import summarize_content

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from logging import Logger

    from models.prompt_model import Prompt
else:  # pragma: no cover - runtime placeholders for type-only imports
    Logger = Prompt = Any


def print_and_log(logger: Logger, level: int, message: str) -> None:
    """Log *message* at *level* and mirror it to stdout."""
    logger.log(level, message)
    print(message)


def describe_path(path_value: object, *, allow_missing_file: bool = False) -> str:
    """Return a human-friendly description of *path_value* suitability."""
    try:
        path = Path(path_value) if path_value is not None else None  # type: ignore[arg-type]
    except TypeError:
        path = None
    if path is None:
        return "not set"

    resolved = path.expanduser()
    if resolved.exists():
        if resolved.is_dir():
            return f"{resolved} (exists but is a directory)"
        return f"{resolved} (exists)"

    message = f"{resolved} (missing)"
    if allow_missing_file:
        message = f"{resolved} (missing - created on demand)"
    parent = resolved.parent
    if not parent.exists():
        message += f", parent missing: {parent}"
    return message


def format_score(score_avg: float, score_count: int) -> str:
    """Return display-friendly score text such as ``4.50 (2)``."""
    if score_count <= 0:
        return "unrated"
    return f"{score_avg:.2f} ({score_count})"


def format_prompt_line(prompt: Prompt) -> str:
    """Return a one-line listing entry for *prompt*."""
    star = "*" if prompt.is_favorite else " "
    tags = ", ".join(prompt.tags) if prompt.tags else "-"
    return (
        f"{prompt.id:>5} {star} {prompt.title}  [{tags}]  "
        f"score={format_score(prompt.score_avg, prompt.score_count)}\n"
        f"        {summarize_content(prompt.content)}"
    )


def parse_assignments(pairs: list[str]) -> dict[str, str]:
    """Turn ``NAME=VALUE`` strings into a mapping."""
    values: dict[str, str] = {}
    for pair in pairs:
        name, separator, value = pair.partition("=")
        if not separator or not name.strip():
            raise ValueError(f"Expected NAME=VALUE, got {pair!r}")
        values[name.strip()] = value
    return values
