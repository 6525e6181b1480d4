"""Tests for snapshot export/import reconciliation."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import pytest
import yaml

from core.exceptions import PromptStorageError, SnapshotParseError
from core.repository.base import connect
from core.snapshots import (
    IMPORTED_VERSION_NOTE,
    SYNTHESIZED_VERSION_NOTE,
    normalise_timestamp,
    parse_snapshot,
    plan_import,
    resolve_snapshot_format,
)

if TYPE_CHECKING:
    from pathlib import Path

    from core.prompt_library import PromptLibrary


def _seed(library: PromptLibrary) -> None:
    first = library.create_prompt("Summarise", "Summarise {{ text }}", ["writing", "AI"], True)
    library.update_prompt(first.id, "Summarise", "Summarise briefly: {{ text }}", ["writing", "AI"], True)
    library.log_prompt_usage(first.id, {"text": "doc"}, "summary", 4)
    second = library.create_prompt("Translate", "Translate to French", ["language"])
    library.update_prompt(second.id, "Translate", "Translate to French", ["language"], False, "checked")


def _library_state(library: PromptLibrary) -> dict[str, tuple[Any, ...]]:
    state: dict[str, tuple[Any, ...]] = {}
    for prompt in library.list_prompts():
        versions = [v.content for v in library.list_prompt_versions(prompt.id)]
        state[prompt.title] = (prompt.content, prompt.tags, prompt.is_favorite, versions)
    return state


def _table_count(library: PromptLibrary, table: str) -> int:
    with connect(library.db_path) as conn:
        return int(conn.execute(f"SELECT COUNT(*) FROM {table};").fetchone()[0])


def test_export_uses_camel_case_wire_format(library: PromptLibrary) -> None:
    _seed(library)

    document = json.loads(library.export_snapshot())

    assert set(document) == {"exportedAt", "prompts"}
    item = next(p for p in document["prompts"] if p["title"] == "Summarise")
    assert set(item) == {
        "title",
        "content",
        "tags",
        "isFavorite",
        "scoreAvg",
        "scoreCount",
        "versions",
    }
    assert item["scoreAvg"] == 4.0
    assert item["scoreCount"] == 1
    assert [v["content"] for v in item["versions"]] == [
        "Summarise briefly: {{ text }}",
        "Summarise {{ text }}",
    ]
    assert set(item["versions"][0]) == {"content", "changeNote", "createdAt"}


def test_export_is_pretty_printed(library: PromptLibrary) -> None:
    library.create_prompt("Title", "body")

    text = library.export_snapshot()

    assert text.startswith("{\n  ")


def test_export_then_import_round_trip(library: PromptLibrary) -> None:
    _seed(library)
    before = _library_state(library)
    snapshot = library.export_snapshot()

    library.reset_all_data()
    imported = library.import_snapshot(snapshot)

    assert imported == 2
    assert _library_state(library) == before


def test_round_trip_preserves_scores(library: PromptLibrary) -> None:
    _seed(library)
    library.import_snapshot(library.export_snapshot())

    summaries = [p for p in library.list_prompts() if p.title == "Summarise"]
    assert len(summaries) == 2
    assert all((p.score_avg, p.score_count) == (4.0, 1) for p in summaries)


def test_import_skips_invalid_items_without_trace(library: PromptLibrary) -> None:
    payload = json.dumps(
        [
            {"title": "Empty", "content": "   "},
            {"title": "  Valid  ", "content": "body\n", "tags": ["a", "A", " b "]},
            {"title": "", "content": "orphan"},
        ]
    )

    imported = library.import_snapshot(payload)

    assert imported == 1
    prompts = library.list_prompts()
    assert [(p.title, p.content, p.tags) for p in prompts] == [("Valid", "body\n", ["a", "b"])]
    assert _table_count(library, "prompt_versions") == 1


def test_import_accepts_wrapped_and_flat_shapes(library: PromptLibrary) -> None:
    items = [{"title": "One", "content": "first"}]

    assert library.import_snapshot(json.dumps({"prompts": items, "exportedAt": "x", "extra": 1})) == 1
    assert library.import_snapshot(json.dumps(items)) == 1
    assert library.count_prompts() == 2


def test_import_fills_version_defaults_and_orders_oldest_first(library: PromptLibrary) -> None:
    payload = {
        "prompts": [
            {
                "title": "Versioned",
                "content": "v3",
                "versions": [
                    {"content": "v3", "changeNote": "third", "createdAt": "2024-03-01T00:00:00+00:00"},
                    {"content": "   "},
                    {"content": "v2"},
                    {"content": "v1", "changeNote": "", "createdAt": "2024-01-01T00:00:00+00:00"},
                ],
            }
        ]
    }

    library.import_snapshot(json.dumps(payload))

    prompt = library.list_prompts()[0]
    with connect(library.db_path) as conn:
        rows = conn.execute(
            "SELECT content, change_note FROM prompt_versions WHERE prompt_id = ? ORDER BY id;",
            (prompt.id,),
        ).fetchall()
    assert [(row["content"], row["change_note"]) for row in rows] == [
        ("v1", ""),
        ("v2", IMPORTED_VERSION_NOTE),
        ("v3", "third"),
    ]


def test_import_synthesises_version_when_none_survive(library: PromptLibrary) -> None:
    payload = [{"title": "Bare", "content": "only body", "versions": [{"content": ""}]}]

    library.import_snapshot(json.dumps(payload))

    prompt = library.list_prompts()[0]
    versions = library.list_prompt_versions(prompt.id)
    assert [(v.content, v.change_note) for v in versions] == [
        ("only body", SYNTHESIZED_VERSION_NOTE)
    ]
    assert prompt.created_at == prompt.updated_at


def test_import_orders_versions_by_instant_across_offset_styles(library: PromptLibrary) -> None:
    payload = [
        {
            "title": "Offsets",
            "content": "v2",
            "versions": [
                {"content": "v2", "createdAt": "2024-01-01T11:00:00.500+00:00"},
                {"content": "v3", "createdAt": "2024-01-01T12:30:00+02:00"},
                {"content": "v1", "createdAt": "2024-01-01T10:00:00Z"},
            ],
        }
    ]

    library.import_snapshot(json.dumps(payload))

    prompt = library.list_prompts()[0]
    versions = library.list_prompt_versions(prompt.id)
    assert [v.content for v in versions] == ["v2", "v3", "v1"]
    assert [v.created_at for v in versions] == [
        "2024-01-01T11:00:00.500000+00:00",
        "2024-01-01T10:30:00.000000+00:00",
        "2024-01-01T10:00:00.000000+00:00",
    ]


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("2024-05-01T08:00:00Z", "2024-05-01T08:00:00.000000+00:00"),
        ("2024-05-01T10:00:00+02:00", "2024-05-01T08:00:00.000000+00:00"),
        ("2024-05-01T08:00:00", "2024-05-01T08:00:00.000000+00:00"),
        ("yesterday", "yesterday"),
        ("  ", "fallback"),
        (None, "fallback"),
    ],
)
def test_normalise_timestamp(value: str | None, expected: str) -> None:
    assert normalise_timestamp(value, "fallback") == expected


@pytest.mark.parametrize(
    ("score_avg", "score_count", "expected"),
    [
        (4.5, 2, (4.5, 2)),
        (9.0, 3, (5.0, 3)),
        (0.2, 1, (1.0, 1)),
        (4.0, 0, (0.0, 0)),
        (4.0, -5, (0.0, 0)),
        (None, 2, (1.0, 2)),
    ],
)
def test_plan_import_sanitises_scores(
    score_avg: float | None, score_count: int, expected: tuple[float, int]
) -> None:
    items = parse_snapshot(
        json.dumps([{"title": "t", "content": "c", "scoreAvg": score_avg, "scoreCount": score_count}])
    )

    record = plan_import(items, imported_at="2024-01-01T00:00:00+00:00").records[0]

    assert (record.score_avg, record.score_count) == expected


def test_plan_import_reports_skipped_items() -> None:
    items = parse_snapshot(json.dumps([{"title": "a", "content": ""}, {"title": "b", "content": "c"}]))

    plan = plan_import(items)

    assert plan.skipped == 1
    assert plan.total == 2
    assert [record.title for record in plan.records] == ["b"]


@pytest.mark.parametrize(
    "text",
    [
        "",
        "not json",
        '{"prompts": [{"content": "missing title"}]}',
        '[{"title": 5, "content": "c"}]',
        '{"items": []}',
        '"just a string"',
    ],
)
def test_malformed_snapshots_raise_before_any_write(library: PromptLibrary, text: str) -> None:
    library.create_prompt("Existing", "body")

    with pytest.raises(SnapshotParseError):
        library.import_snapshot(text)
    assert library.count_prompts() == 1


def test_storage_failure_mid_import_commits_nothing(library: PromptLibrary) -> None:
    with connect(library.db_path) as conn:
        conn.execute(
            """
            CREATE TRIGGER fail_on_explode BEFORE INSERT ON prompts
            WHEN NEW.title = 'explode'
            BEGIN
                SELECT RAISE(ABORT, 'injected failure');
            END;
            """
        )
    payload = json.dumps(
        [
            {"title": "Valid one", "content": "body"},
            {"title": "explode", "content": "body"},
            {"title": "Valid two", "content": "body"},
        ]
    )

    with pytest.raises(PromptStorageError):
        library.import_snapshot(payload)
    assert library.count_prompts() == 0
    assert _table_count(library, "prompt_versions") == 0


def test_yaml_file_round_trip(library: PromptLibrary, tmp_path: Path) -> None:
    _seed(library)
    before = _library_state(library)
    target = tmp_path / "exports" / "backup.yaml"

    written = library.export_snapshot_to_path(target)
    document = yaml.safe_load(written.read_text(encoding="utf-8"))
    library.reset_all_data()
    imported = library.import_snapshot_from_path(written)

    assert "exportedAt" in document
    assert imported == 2
    assert _library_state(library) == before


def test_json_file_round_trip_with_explicit_format(library: PromptLibrary, tmp_path: Path) -> None:
    library.create_prompt("Title", "body", ["tag"])
    target = tmp_path / "backup.snapshot"

    library.export_snapshot_to_path(target, fmt="json")
    library.reset_all_data()

    assert json.loads(target.read_text(encoding="utf-8"))["prompts"][0]["tags"] == ["tag"]
    assert library.import_snapshot_from_path(target, fmt="json") == 1


def test_import_from_missing_or_bad_yaml_file(library: PromptLibrary, tmp_path: Path) -> None:
    with pytest.raises(SnapshotParseError):
        library.import_snapshot_from_path(tmp_path / "missing.json")

    broken = tmp_path / "broken.yaml"
    broken.write_text("prompts: [unclosed", encoding="utf-8")
    with pytest.raises(SnapshotParseError):
        library.import_snapshot_from_path(broken)


def test_resolve_snapshot_format(tmp_path: Path) -> None:
    assert resolve_snapshot_format(tmp_path / "a.yml") == "yaml"
    assert resolve_snapshot_format(tmp_path / "a.YAML") == "yaml"
    assert resolve_snapshot_format(tmp_path / "a.json") == "json"
    assert resolve_snapshot_format(tmp_path / "a.yaml", "JSON") == "json"
