"""CLI command handlers for Prompt Library.

Handlers receive the configured :class:`PromptLibrary`, the parsed arguments,
and a logger, and return the process exit code. Library errors propagate to
``main`` which maps them to exit code 1.

Updates:
  v0.2.0 - 2026-10-14 - Add render command and YAML snapshot output.
  v0.1.0 - 2026-10-12 - Prompt listing, editing, usage, and snapshot commands.
"""

from __future__ import annotations

import argparse
import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from core.exceptions import PromptValidationError
from core.snapshots import dump_snapshot
from core.tags import parse_tag_input

from .utils import format_prompt_line, format_score, parse_assignments, print_and_log

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from core.prompt_library import PromptLibrary
else:  # pragma: no cover - runtime placeholders for type-only imports
    PromptLibrary = object

CommandHandler = Callable[[PromptLibrary, argparse.Namespace, logging.Logger], int]


@dataclass(frozen=True)
class CommandSpec:
    """Metadata for dispatching CLI command handlers."""

    handler: CommandHandler
    description: str = ""


def _load_json_argument(raw: str | None, label: str) -> Any:
    if raw is None or not raw.strip():
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise PromptValidationError(f"Invalid JSON for {label}: {exc}") from exc


def run_list(library: PromptLibrary, args: argparse.Namespace, logger: logging.Logger) -> int:
    prompts = library.list_prompts(
        search=getattr(args, "search", None),
        tag=getattr(args, "tag", None),
        sort_by=getattr(args, "sort", None) or getattr(args, "default_sort", None),
    )
    if getattr(args, "json", False):
        print(json.dumps([prompt.to_record() for prompt in prompts], ensure_ascii=False, indent=2))
        return 0
    if not prompts:
        logger.info("No prompts matched the given filters.")
        print("No prompts found.")
        return 0
    for prompt in prompts:
        print(format_prompt_line(prompt))
    return 0


def run_tags(library: PromptLibrary, args: argparse.Namespace, logger: logging.Logger) -> int:
    del args
    tag_counts = library.list_tags()
    if not tag_counts:
        print("No tags recorded.")
        return 0
    width = max(len(entry.name) for entry in tag_counts)
    for entry in tag_counts:
        print(f"{entry.name.ljust(width)}  {entry.count}")
    logger.debug("Listed %d tag(s)", len(tag_counts))
    return 0


def run_show(library: PromptLibrary, args: argparse.Namespace, logger: logging.Logger) -> int:
    prompt = library.get_prompt(args.prompt_id)
    if prompt is None:
        print_and_log(logger, logging.ERROR, f"Prompt {args.prompt_id} not found.")
        return 1
    if getattr(args, "json", False):
        print(json.dumps(prompt.to_record(), ensure_ascii=False, indent=2))
        return 0
    tags = ", ".join(prompt.tags) if prompt.tags else "-"
    print(f"#{prompt.id} {prompt.title}{' (favourite)' if prompt.is_favorite else ''}")
    print(f"Tags: {tags}")
    print(f"Score: {format_score(prompt.score_avg, prompt.score_count)}")
    print(f"Created: {prompt.created_at}  Updated: {prompt.updated_at}")
    variables = library.renderer.extract_variables(prompt.content)
    if variables:
        print(f"Variables: {', '.join(variables)}")
    print()
    print(prompt.content)
    return 0


def run_versions(library: PromptLibrary, args: argparse.Namespace, logger: logging.Logger) -> int:
    versions = library.list_prompt_versions(args.prompt_id)
    if not versions:
        logger.info("No versions recorded for prompt %s", args.prompt_id)
        print("No versions found.")
        return 0
    for version in versions:
        note = version.change_note or "-"
        print(f"{version.id:>5}  {version.created_at}  {note}")
    return 0


def run_save(library: PromptLibrary, args: argparse.Namespace, logger: logging.Logger) -> int:
    content = args.content
    content_file: Path | None = getattr(args, "content_file", None)
    if content_file is not None:
        try:
            content = content_file.expanduser().read_text(encoding="utf-8")
        except OSError as exc:
            raise PromptValidationError(f"Unable to read {content_file}: {exc}") from exc
    prompt = library.upsert_prompt(
        args.prompt_id,
        args.title,
        content,
        parse_tag_input(args.tags),
        bool(args.favorite),
        args.note,
    )
    action = "Created" if args.prompt_id is None else "Updated"
    print_and_log(logger, logging.INFO, f"{action} prompt {prompt.id}: {prompt.title}")
    return 0


def run_delete(library: PromptLibrary, args: argparse.Namespace, logger: logging.Logger) -> int:
    library.delete_prompt(args.prompt_id)
    print_and_log(logger, logging.INFO, f"Deleted prompt {args.prompt_id} (if it existed).")
    return 0


def run_log(library: PromptLibrary, args: argparse.Namespace, logger: logging.Logger) -> int:
    payload = _load_json_argument(args.input_json, "--input")
    usage = library.log_prompt_usage(
        args.prompt_id,
        payload if payload is not None else {},
        args.output,
        args.rating,
    )
    prompt = library.get_prompt(args.prompt_id)
    score = format_score(prompt.score_avg, prompt.score_count) if prompt else "n/a"
    print_and_log(
        logger,
        logging.INFO,
        f"Logged usage {usage.id} for prompt {args.prompt_id}; score {score}",
    )
    return 0


def run_export(library: PromptLibrary, args: argparse.Namespace, logger: logging.Logger) -> int:
    path: Path | None = getattr(args, "path", None)
    fmt = getattr(args, "format", None)
    if path is None:
        if fmt == "yaml":
            print(dump_snapshot(library.build_snapshot(), fmt="yaml"), end="")
        else:
            print(library.export_snapshot())
        return 0
    resolved = library.export_snapshot_to_path(path, fmt=fmt)
    print_and_log(logger, logging.INFO, f"Prompt snapshot exported to {resolved}")
    return 0


def run_import(library: PromptLibrary, args: argparse.Namespace, logger: logging.Logger) -> int:
    imported = library.import_snapshot_from_path(args.path, fmt=getattr(args, "format", None))
    print_and_log(logger, logging.INFO, f"Imported {imported} prompt(s) from {args.path}")
    return 0


def run_render(library: PromptLibrary, args: argparse.Namespace, logger: logging.Logger) -> int:
    values: dict[str, Any] = {}
    inline = _load_json_argument(getattr(args, "vars_json", None), "--vars-json")
    if inline is not None:
        if not isinstance(inline, Mapping):
            raise PromptValidationError("--vars-json must be a JSON object")
        values.update({str(key): value for key, value in inline.items()})
    try:
        values.update(parse_assignments(list(getattr(args, "variables", []) or [])))
    except ValueError as exc:
        raise PromptValidationError(str(exc)) from exc
    result = library.render_prompt(args.prompt_id, values)
    if result.errors:
        for error in result.errors:
            print_and_log(logger, logging.ERROR, error)
        return 1
    if result.missing_variables:
        logger.warning("Unfilled placeholders: %s", ", ".join(sorted(result.missing_variables)))
    print(result.rendered_text)
    return 0


COMMAND_SPECS: dict[str, CommandSpec] = {
    "list": CommandSpec(run_list, "List prompts"),
    "tags": CommandSpec(run_tags, "Show tag counts"),
    "show": CommandSpec(run_show, "Show a prompt"),
    "versions": CommandSpec(run_versions, "Show version history"),
    "save": CommandSpec(run_save, "Create or update a prompt"),
    "delete": CommandSpec(run_delete, "Delete a prompt"),
    "log": CommandSpec(run_log, "Record usage"),
    "export": CommandSpec(run_export, "Export snapshot"),
    "import": CommandSpec(run_import, "Import snapshot"),
    "render": CommandSpec(run_render, "Render placeholders"),
}


__all__ = ["COMMAND_SPECS", "CommandSpec"]
