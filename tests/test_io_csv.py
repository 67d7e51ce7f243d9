"""Tests for entrant import and CSV exports."""

import csv
import random

import pytest

from btmm.io_csv import (
    CSVImportError,
    export_matches_csv,
    export_standings_csv,
    import_entrants_csv,
)
from btmm.models import TournamentState
from btmm.tournament import draw, generate_knockout, simulate_results


def read_rows(path):
    with open(path, "r", encoding="utf-8", newline="") as f:
        return list(csv.DictReader(f))


def test_import_plain_text(tmp_path):
    """Test one name per line, with blank lines and spaces."""
    path = tmp_path / "players.txt"
    path.write_text("Ana\n\n  Bia  \nCaio\nDuda\n", encoding="utf-8")

    assert import_entrants_csv(str(path)) == ["Ana", "Bia", "Caio", "Duda"]


def test_import_csv_with_name_column(tmp_path):
    """Test a CSV export from a spreadsheet."""
    path = tmp_path / "players.csv"
    path.write_text("Name,Phone\nAna,111\nBia,222\n,333\nCaio,444\n", encoding="utf-8")

    assert import_entrants_csv(str(path)) == ["Ana", "Bia", "Caio"]


def test_import_single_column_csv(tmp_path):
    """Test a CSV with only the name header."""
    path = tmp_path / "players.csv"
    path.write_text("name\nAna\nBia\n", encoding="utf-8")

    assert import_entrants_csv(str(path)) == ["Ana", "Bia"]


def test_import_csv_without_name_column(tmp_path):
    """Test that a CSV must say which column holds names."""
    path = tmp_path / "players.csv"
    path.write_text("first,last\nAna,Silva\n", encoding="utf-8")

    with pytest.raises(CSVImportError, match="name"):
        import_entrants_csv(str(path))


def test_import_missing_and_empty_file(tmp_path):
    """Test file edge cases."""
    with pytest.raises(CSVImportError, match="not found"):
        import_entrants_csv(str(tmp_path / "missing.txt"))

    empty = tmp_path / "empty.txt"
    empty.write_text("", encoding="utf-8")
    assert import_entrants_csv(str(empty)) == []


def test_import_warns_about_duplicates(tmp_path, capsys):
    """Test that duplicated names are kept but reported."""
    path = tmp_path / "players.txt"
    path.write_text("Ana\nBia\nAna\nCaio\n", encoding="utf-8")

    names = import_entrants_csv(str(path))

    assert names == ["Ana", "Bia", "Ana", "Caio"]
    assert "Duplicate names" in capsys.readouterr().out


@pytest.fixture
def finished_groups():
    state = draw(TournamentState.initial(), [f"P{i}" for i in range(16)], rng=random.Random(9))
    simulate_results(state, rng=random.Random(9), phase="group")
    return state


def test_export_standings(tmp_path, finished_groups):
    """Test the standings CSV."""
    path = tmp_path / "standings.csv"

    export_standings_csv(finished_groups, str(path))

    rows = read_rows(path)
    assert len(rows) == 8
    assert [r["Group"] for r in rows] == ["A"] * 4 + ["B"] * 4
    assert [r["Position"] for r in rows[:4]] == ["1", "2", "3", "4"]
    assert all(r["Matches_Played"] == "3" for r in rows)
    # Leader has the most points in the group
    group_a = rows[:4]
    assert int(group_a[0]["Points"]) == max(int(r["Points"]) for r in group_a)


def test_export_matches(tmp_path, finished_groups):
    """Test the matches CSV with an open knockout bracket."""
    generate_knockout(finished_groups, lang="en")
    path = tmp_path / "matches.csv"

    export_matches_csv(finished_groups, str(path))

    rows = read_rows(path)
    assert len(rows) == 12 + 3
    assert rows[0]["Phase"] == "group"
    assert rows[0]["Completed"] == "YES"

    final = rows[-1]
    assert final["Phase"] == "final"
    assert final["Label"] == "Grand Final"
    assert final["Team1"] == ""
    assert final["Completed"] == "NO"

    semi = rows[12]
    assert semi["Next_Match_ID"] == final["Match_ID"]
    assert semi["Next_Slot"] == "1"
