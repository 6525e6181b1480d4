"""Integration checks for the command line entry point.

Updates:
  v0.2.0 - 2026-10-16 - Cover rendering of placeholders that are not Python identifiers.
  v0.1.0 - 2026-10-14 - Cover prompt commands, snapshots, and exit codes against a temp DB.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

import main
from cli.parser import parse_args
from cli.utils import parse_assignments

if TYPE_CHECKING:
    from pathlib import Path


def _run(db_path: Path, *argv: str) -> int:
    return main.main(["--db-path", str(db_path), *argv])


def test_save_list_show_round_trip(
    db_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    assert _run(db_path, "save", "--title", "Greeting", "--content", "Hi {{ name }}",
                "--tags", "ai, Writing, AI", "--favorite") == 0
    capsys.readouterr()

    assert _run(db_path, "list", "--json") == 0
    records = json.loads(capsys.readouterr().out)
    assert [(r["title"], r["tags"], r["isFavorite"]) for r in records] == [
        ("Greeting", ["ai", "Writing"], True)
    ]

    assert _run(db_path, "show", str(records[0]["id"])) == 0
    output = capsys.readouterr().out
    assert "Greeting" in output
    assert "Variables: name" in output


def test_update_and_versions(db_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _run(db_path, "save", "--title", "Draft", "--content", "v1")
    _run(db_path, "save", "--id", "1", "--title", "Draft", "--content", "v2", "--note", "rewrite")
    capsys.readouterr()

    assert _run(db_path, "versions", "1") == 0
    lines = [line for line in capsys.readouterr().out.splitlines() if line.strip()]
    assert len(lines) == 2
    assert lines[0].endswith("rewrite")
    assert lines[1].endswith("initial version")


def test_save_reads_content_file(db_path: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    body = tmp_path / "body.txt"
    body.write_text("From a file\n", encoding="utf-8")

    assert _run(db_path, "save", "--title", "File", "--content-file", str(body)) == 0
    capsys.readouterr()
    _run(db_path, "list", "--json")
    assert json.loads(capsys.readouterr().out)[0]["content"] == "From a file\n"


def test_log_updates_score_and_rejects_bad_rating(
    db_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    _run(db_path, "save", "--title", "Rated", "--content", "body")

    assert _run(db_path, "log", "1", "--input", '{"q": 1}', "--output", "ok", "--rating", "4") == 0
    assert _run(db_path, "log", "1", "--rating", "2") == 0
    assert _run(db_path, "log", "1", "--rating", "6") == 1
    assert _run(db_path, "log", "99") == 1
    assert _run(db_path, "log", "1", "--input", "{broken") == 1
    capsys.readouterr()

    _run(db_path, "list", "--json")
    record = json.loads(capsys.readouterr().out)[0]
    assert (record["scoreAvg"], record["scoreCount"]) == (3.0, 2)


def test_save_with_blank_title_fails(db_path: Path) -> None:
    assert _run(db_path, "save", "--title", "  ", "--content", "body") == 1


def test_show_missing_prompt_fails(db_path: Path) -> None:
    assert _run(db_path, "show", "5") == 1


def test_delete_is_idempotent(db_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _run(db_path, "save", "--title", "Gone", "--content", "body")

    assert _run(db_path, "delete", "1") == 0
    assert _run(db_path, "delete", "1") == 0
    capsys.readouterr()
    _run(db_path, "list", "--json")
    assert json.loads(capsys.readouterr().out) == []


def test_tags_command(db_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _run(db_path, "save", "--title", "A", "--content", "body", "--tags", "ai,code")
    _run(db_path, "save", "--title", "B", "--content", "body", "--tags", "ai")
    capsys.readouterr()

    assert _run(db_path, "tags") == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].split() == ["ai", "2"]
    assert lines[1].split() == ["code", "1"]


def test_export_import_through_files(
    db_path: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    _run(db_path, "save", "--title", "Keep", "--content", "body", "--tags", "x")
    snapshot = tmp_path / "snap.yaml"

    assert _run(db_path, "export", str(snapshot)) == 0
    other_db = tmp_path / "other.db"
    assert _run(other_db, "import", str(snapshot)) == 0
    capsys.readouterr()

    _run(other_db, "list", "--json")
    assert [r["title"] for r in json.loads(capsys.readouterr().out)] == ["Keep"]


def test_export_to_stdout(db_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _run(db_path, "save", "--title", "Out", "--content", "body")
    capsys.readouterr()

    assert _run(db_path, "export") == 0
    document = json.loads(capsys.readouterr().out)
    assert [p["title"] for p in document["prompts"]] == ["Out"]


def test_import_of_malformed_file_fails(db_path: Path, tmp_path: Path) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")

    assert _run(db_path, "import", str(broken)) == 1


def test_render_command(db_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _run(db_path, "save", "--title", "T", "--content", "Hi {{ name }}, {{ mood }}?")
    capsys.readouterr()

    assert _run(db_path, "render", "1", "--var", "name=Ada", "--vars-json", '{"mood": "ok"}') == 0
    assert capsys.readouterr().out.strip() == "Hi Ada, ok?"
    assert _run(db_path, "render", "1", "--var", "nonsense") == 1


def test_render_command_with_spaced_and_hyphenated_names(
    db_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    _run(db_path, "save", "--title", "T", "--content", "Dear {{ user-name }} and {{ full name }}")
    capsys.readouterr()

    assert _run(db_path, "render", "1", "--var", "full name=Ada Lovelace") == 0
    assert capsys.readouterr().out.strip() == "Dear {{user-name}} and Ada Lovelace"


def test_print_settings(db_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main.main(["--db-path", str(db_path), "--print-settings"]) == 0
    assert "Database path" in capsys.readouterr().out


def test_settings_error_exit_code(monkeypatch: pytest.MonkeyPatch, db_path: Path) -> None:
    monkeypatch.setenv("PROMPT_LIBRARY_SNAPSHOT_INDENT", "99")

    assert _run(db_path, "list") == 2


def test_storage_bootstrap_error_exit_code(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("file", encoding="utf-8")

    assert _run(blocker / "nested" / "library.db", "list") == 3


def test_no_command_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    assert main.main([]) == 0
    assert "usage" in capsys.readouterr().out.lower()


def test_parse_args_defaults() -> None:
    args = parse_args(["list"])

    assert args.command == "list"
    assert args.sort is None
    assert args.db_path is None


def test_parse_assignments_rejects_missing_separator() -> None:
    assert parse_assignments(["a=1", " b =x=y"]) == {"a": "1", "b": "x=y"}
    with pytest.raises(ValueError):
        parse_assignments(["novalue"])
