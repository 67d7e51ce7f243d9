"""Backup export/import of the whole tournament state as JSON text.

The text can be pasted into a chat or a notes app and restored later.
"""

import json
from typing import Any, Optional

from btmm.models import MatchPhase, TournamentPhase, TournamentState


class BackupImportError(Exception):
    """Error while reading a backup payload."""
    pass


VALID_PHASES = {phase.value for phase in TournamentPhase}
VALID_MATCH_PHASES = {phase.value for phase in MatchPhase}


def export_state(state: TournamentState, indent: Optional[int] = None) -> str:
    """Serialize the full state to JSON text."""
    return json.dumps(state.to_dict(), ensure_ascii=False, indent=indent)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_optional_int(value: Any) -> bool:
    return value is None or _is_int(value)


def _validate_pair_entry(entry: Any, idx: int) -> None:
    if not isinstance(entry, dict):
        raise BackupImportError(f"Pair #{idx} must be an object")

    if not _is_int(entry.get("id")):
        raise BackupImportError(f"Pair #{idx}: 'id' must be an integer")

    stats = entry.get("stats")
    if stats is None:
        return
    if not isinstance(stats, dict):
        raise BackupImportError(f"Pair {entry['id']}: 'stats' must be an object")
    for key, value in stats.items():
        if not _is_int(value):
            raise BackupImportError(f"Pair {entry['id']}: stat '{key}' must be an integer")


def _validate_match_entry(entry: Any, idx: int) -> None:
    """Check types and the completed/score invariant of one match."""
    if not isinstance(entry, dict):
        raise BackupImportError(f"Match #{idx} must be an object")

    match_id = entry.get("id")
    if not _is_int(match_id):
        raise BackupImportError(f"Match #{idx}: 'id' must be an integer")

    phase = entry.get("phase")
    if phase not in VALID_MATCH_PHASES:
        raise BackupImportError(f"Match {match_id}: unknown phase {phase!r}")

    for key in ("team1", "team2", "next_match_id", "next_slot"):
        if not _is_optional_int(entry.get(key)):
            raise BackupImportError(f"Match {match_id}: '{key}' must be an integer or null")

    score1 = entry.get("score1")
    score2 = entry.get("score2")
    for key, value in (("score1", score1), ("score2", score2)):
        if not _is_optional_int(value) or (value is not None and value < 0):
            raise BackupImportError(f"Match {match_id}: '{key}' must be a non-negative integer or null")

    completed = entry.get("completed", False)
    if not isinstance(completed, bool):
        raise BackupImportError(f"Match {match_id}: 'completed' must be true or false")

    if phase == MatchPhase.BYE.value:
        if not completed:
            raise BackupImportError(f"Match {match_id}: a bye is always completed")
    else:
        finished = score1 is not None and score2 is not None and score1 != score2
        if completed != finished:
            raise BackupImportError(
                f"Match {match_id}: 'completed' does not match the score ({score1}-{score2})"
            )

    if phase != MatchPhase.GROUP.value and not _is_int(entry.get("round_level")):
        raise BackupImportError(f"Match {match_id}: knockout matches need an integer 'round_level'")


def validate_backup_payload(data: Any) -> None:
    """Check the structure of a parsed backup.

    Every pair and match entry is type-checked, and a non-bye match must be
    completed exactly when both scores are present and differ.

    Raises:
        BackupImportError: If the payload is not a tournament state
    """
    if not isinstance(data, dict):
        raise BackupImportError("Backup must be a JSON object")

    if data.get("phase") not in VALID_PHASES:
        raise BackupImportError(f"Unknown tournament phase: {data.get('phase')!r}")

    for key in ("pairs", "matches"):
        if not isinstance(data.get(key), list):
            raise BackupImportError(f"'{key}' must be a list")

    for key in ("players", "groups"):
        if key in data and not isinstance(data[key], list):
            raise BackupImportError(f"'{key}' must be a list")

    for idx, entry in enumerate(data["pairs"], start=1):
        _validate_pair_entry(entry, idx)

    for idx, entry in enumerate(data["matches"], start=1):
        _validate_match_entry(entry, idx)


def import_state(text: str) -> TournamentState:
    """Parse backup text back into a TournamentState.

    Args:
        text: JSON produced by export_state

    Returns:
        The restored state

    Raises:
        BackupImportError: If the text is not valid JSON or not a valid state
    """
    if not text or not text.strip():
        raise BackupImportError("Backup is empty")

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise BackupImportError(f"Invalid JSON: {e}")

    validate_backup_payload(data)

    try:
        return TournamentState.from_dict(data)
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise BackupImportError(f"Invalid pair or match entry: {e}")
