from __future__ import annotations

import json
from datetime import timezone

import pytest

from analyzer.core.pipeline import analyze_entries
from analyzer.sources.files import (
    LogFileError,
    extract_date_from_filename,
    find_json_files,
    read_log_entries,
    read_many,
)
from tests.payloads import bet_line, resources_entry, win_line


def _write(path, entries) -> None:
    path.write_text(json.dumps(entries), encoding="utf-8")


def test_find_json_files_creates_dir_and_sorts(tmp_path) -> None:
    root = tmp_path / "resources"
    assert find_json_files(root) == []
    assert root.is_dir()

    for name in ("b.json", "a.json", "notes.txt"):
        (root / name).write_text("[]", encoding="utf-8")
    assert [p.name for p in find_json_files(root)] == ["a.json", "b.json"]


def test_read_log_entries_tags_source(tmp_path) -> None:
    path = tmp_path / "25.12.2025.json"
    _write(path, [resources_entry(bet_line("b1", 100)), {"line": None, "timestamp": None, "fields": None}])
    entries = read_log_entries(path)
    assert len(entries) == 2
    assert entries[0].source == "25.12.2025.json"
    assert entries[0].fields == {"level": "info"}
    assert entries[1].line == ""
    assert "source" not in entries[0].model_dump()


def test_read_log_entries_rejects_non_array(tmp_path) -> None:
    path = tmp_path / "bad.json"
    path.write_text('{"line": "x"}', encoding="utf-8")
    with pytest.raises(LogFileError):
        read_log_entries(path)


def test_read_log_entries_missing_file(tmp_path) -> None:
    with pytest.raises(LogFileError):
        read_log_entries(tmp_path / "missing.json")


def test_read_many_skips_unreadable_files(tmp_path) -> None:
    good = tmp_path / "good.json"
    bad = tmp_path / "bad.json"
    _write(good, [resources_entry(bet_line("b1", 100))])
    bad.write_text("not json", encoding="utf-8")
    entries = read_many([bad, good])
    assert [e.source for e in entries] == ["good.json"]


def test_duplicates_detected_across_files(tmp_path) -> None:
    _write(tmp_path / "a.json", [resources_entry(bet_line("b1", 100)), resources_entry(win_line("w1", 40))])
    _write(tmp_path / "b.json", [resources_entry(bet_line("b1", 100))])
    result = analyze_entries(read_many(find_json_files(tmp_path)), tz=timezone.utc)
    assert result.report.summary.total_bets == 1
    assert result.diagnostics.duplicate_bets == 1


@pytest.mark.parametrize(
    "name, expected",
    [
        ("25.12.2025.json", "25.12.2025"),
        ("/data/resources/01.01.2026.extra.json", "01.01.2026"),
        ("2025-12-25_00-04.json", "2025-12-25_00-04.json"),
    ],
)
def test_extract_date_from_filename(name: str, expected: str) -> None:
    assert extract_date_from_filename(name) == expected
