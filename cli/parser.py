"""Argument parser for Prompt Library CLI.

Updates:
  v0.2.0 - 2026-10-14 - Add render and file based snapshot commands.
  v0.1.0 - 2026-10-12 - Prompt CRUD, usage, and tag subcommands.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from collections.abc import Sequence

SORT_CHOICES = ("updated", "score", "created")


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for the Prompt Library command line."""
    parser = argparse.ArgumentParser(description="Prompt Library command line")
    parser.add_argument(
        "--db-path",
        type=Path,
        default=None,
        help="SQLite database file (overrides PROMPT_LIBRARY_DB_PATH).",
    )
    parser.add_argument(
        "--logging-config",
        type=Path,
        default=None,
        help="Path to logging configuration file (INI format)",
    )
    parser.add_argument(
        "--print-settings",
        action="store_true",
        help="Print resolved settings and exit",
    )

    subparsers = parser.add_subparsers(dest="command")

    list_parser = subparsers.add_parser("list", help="List prompts with optional filters.")
    list_parser.add_argument("--search", default=None, help="Substring to look for.")
    list_parser.add_argument("--tag", default=None, help="Only prompts carrying this tag.")
    list_parser.add_argument(
        "--sort",
        choices=SORT_CHOICES,
        default=None,
        help="Listing order (defaults to the configured sort mode).",
    )
    list_parser.add_argument("--json", action="store_true", help="Emit JSON records.")

    subparsers.add_parser("tags", help="Show tag usage counts.")

    show_parser = subparsers.add_parser("show", help="Show a single prompt.")
    show_parser.add_argument("prompt_id", type=int, help="Prompt identifier.")
    show_parser.add_argument("--json", action="store_true", help="Emit a JSON record.")

    versions_parser = subparsers.add_parser("versions", help="Show prompt version history.")
    versions_parser.add_argument("prompt_id", type=int, help="Prompt identifier.")

    save_parser = subparsers.add_parser("save", help="Create or update a prompt.")
    save_parser.add_argument(
        "--id",
        dest="prompt_id",
        type=int,
        default=None,
        help="Existing prompt to update (omit to create).",
    )
    save_parser.add_argument("--title", required=True, help="Prompt title.")
    content_group = save_parser.add_mutually_exclusive_group(required=True)
    content_group.add_argument("--content", default=None, help="Prompt body text.")
    content_group.add_argument(
        "--content-file",
        type=Path,
        default=None,
        help="Read the prompt body from this file.",
    )
    save_parser.add_argument(
        "--tags",
        default="",
        help="Comma separated tags, e.g. 'writing, email'.",
    )
    save_parser.add_argument("--favorite", action="store_true", help="Mark as favourite.")
    save_parser.add_argument("--note", default=None, help="Change note for the version.")

    delete_parser = subparsers.add_parser("delete", help="Delete a prompt and its history.")
    delete_parser.add_argument("prompt_id", type=int, help="Prompt identifier.")

    log_parser = subparsers.add_parser("log", help="Record a prompt usage event.")
    log_parser.add_argument("prompt_id", type=int, help="Prompt identifier.")
    log_parser.add_argument(
        "--input",
        dest="input_json",
        default="{}",
        help="JSON payload that was fed to the prompt (default: {}).",
    )
    log_parser.add_argument("--output", default="", help="Output text produced.")
    log_parser.add_argument("--rating", type=int, default=None, help="Rating from 1 to 5.")

    export_parser = subparsers.add_parser(
        "export",
        help="Export all prompts as a snapshot (stdout when no path is given).",
    )
    export_parser.add_argument(
        "path",
        type=Path,
        nargs="?",
        default=None,
        help="Destination file path (.json or .yaml)",
    )
    export_parser.add_argument(
        "--format",
        choices=("json", "yaml"),
        default=None,
        help="Explicit output format (defaults based on file extension).",
    )

    import_parser = subparsers.add_parser("import", help="Import prompts from a snapshot file.")
    import_parser.add_argument("path", type=Path, help="Snapshot file (.json or .yaml)")
    import_parser.add_argument(
        "--format",
        choices=("json", "yaml"),
        default=None,
        help="Explicit input format (defaults based on file extension).",
    )

    render_parser = subparsers.add_parser(
        "render",
        help="Preview a prompt with its {{ variable }} placeholders filled in.",
    )
    render_parser.add_argument("prompt_id", type=int, help="Prompt identifier.")
    render_parser.add_argument(
        "--var",
        dest="variables",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Placeholder value; repeat for several variables.",
    )
    render_parser.add_argument(
        "--vars-json",
        default=None,
        help="Inline JSON object with placeholder values.",
    )
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Return parsed CLI arguments for the Prompt Library command line."""
    return build_parser().parse_args(argv)


__all__ = ["SORT_CHOICES", "build_parser", "parse_args"]
