"""CSV import/export utilities."""

import csv
from pathlib import Path

from btmm.models import TournamentState
from btmm.pairs import clean_names
from btmm.standings import get_sorted_standings


class CSVImportError(Exception):
    """Error during CSV import."""
    pass


def import_entrants_csv(path: str) -> list[str]:
    """Read entrant names from a file.

    Two formats are accepted:
        - CSV with a header containing a 'name' column
        - Plain text with one name per line

    A first line containing commas is read as a CSV header.

    Args:
        path: Path to the file

    Returns:
        Trimmed, non-empty names in file order

    Raises:
        CSVImportError: If the file is missing or a CSV has no 'name' column
    """
    entrants_file = Path(path)
    if not entrants_file.exists():
        raise CSVImportError(f"Entrants file not found: {path}")

    with open(entrants_file, "r", encoding="utf-8") as f:
        lines = f.read().splitlines()

    if not lines:
        return []

    header = [col.strip().lower() for col in lines[0].split(",")]

    if len(header) > 1 or header == ["name"]:
        # CSV file
        reader = csv.DictReader(lines)
        fieldnames = [name.strip().lower() for name in (reader.fieldnames or [])]
        if "name" not in fieldnames:
            raise CSVImportError(f"CSV missing required column 'name' (found: {fieldnames})")
        reader.fieldnames = fieldnames
        names = clean_names(row.get("name") or "" for row in reader)
    else:
        names = clean_names(lines)

    duplicates = {name for name in names if names.count(name) > 1}
    if duplicates:
        print(f"WARNING: Duplicate names in {path}: {', '.join(sorted(duplicates))}")

    return names


def export_standings_csv(state: TournamentState, path: str):
    """Export group standings to CSV.

    Args:
        state: Tournament state
        path: Output CSV path
    """
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([
            "Group", "Position", "Pair_ID", "Pair_Name",
            "Points", "Wins", "Balance", "Matches_Played",
        ])

        for group_id in state.groups:
            ranking = get_sorted_standings(group_id, state.pairs, state.matches)
            for position, pair in enumerate(ranking, start=1):
                writer.writerow([
                    group_id,
                    position,
                    pair.id,
                    pair.name,
                    pair.stats.points,
                    pair.stats.wins,
                    pair.stats.balance,
                    pair.stats.matches_played,
                ])


def export_matches_csv(state: TournamentState, path: str):
    """Export every match (group and knockout) to CSV.

    Args:
        state: Tournament state
        path: Output CSV path
    """
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([
            "Match_ID", "Phase", "Group", "Label", "Team1", "Team2",
            "Score1", "Score2", "Completed", "Next_Match_ID", "Next_Slot",
        ])

        for match in state.matches:
            writer.writerow([
                match.id,
                match.phase.value,
                match.group_id or "",
                match.label or "",
                state.team_name(match.team1) if match.team1 is not None else "",
                state.team_name(match.team2) if match.team2 is not None else "",
                "" if match.score1 is None else match.score1,
                "" if match.score2 is None else match.score2,
                "YES" if match.completed else "NO",
                match.next_match_id or "",
                match.next_slot or "",
            ])
