"""Validation rules for entrants and match scores.

Beach tennis has no draws: a match is only finished when both scores are
entered and they differ.
"""

from typing import Optional, Union

MIN_ENTRANTS = 4


class InputError(Exception):
    """Raised when an operation is called with input it cannot work with."""

    pass


class ValidationError(Exception):
    """Raised when a score is rejected."""

    pass


def validate_entrant_count(count: int) -> tuple[bool, str]:
    """Validate the number of entrants for a doubles draw.

    Args:
        count: Number of (cleaned) entrant names

    Returns:
        Tuple of (is_valid, error_message)

    Examples:
        >>> validate_entrant_count(8)
        (True, '')
        >>> validate_entrant_count(2)
        (False, 'At least 4 players (2 pairs) are required, got 2')
        >>> validate_entrant_count(7)
        (False, 'The number of players must be even, got 7')
    """
    if count < MIN_ENTRANTS:
        return False, f"At least {MIN_ENTRANTS} players (2 pairs) are required, got {count}"

    if count % 2 != 0:
        return False, f"The number of players must be even, got {count}"

    return True, ""


def parse_score(raw: Union[str, int, None]) -> Optional[int]:
    """Parse a raw score value as typed by the operator.

    Empty input clears the score.

    Args:
        raw: Raw value (string from a form or the command line, int, or None)

    Returns:
        Non-negative int, or None when the input is empty

    Raises:
        ValidationError: If the value is not a non-negative integer
    """
    if raw is None:
        return None

    if isinstance(raw, bool):
        raise ValidationError(f"Invalid score: {raw!r}")

    if isinstance(raw, int):
        value = raw
    else:
        text = str(raw).strip()
        if not text:
            return None
        try:
            value = int(text)
        except ValueError:
            raise ValidationError(f"Score must be a whole number, got '{text}'")

    if value < 0:
        raise ValidationError(f"Score cannot be negative, got {value}")

    return value


def validate_match_score(score1: Optional[int], score2: Optional[int]) -> tuple[bool, str]:
    """Validate a (possibly partial) match score.

    A partial score (one side missing) is valid: the match simply stays open.

    Args:
        score1: Games won by team 1
        score2: Games won by team 2

    Returns:
        Tuple of (is_valid, error_message)

    Examples:
        >>> validate_match_score(6, 4)
        (True, '')
        >>> validate_match_score(6, None)
        (True, '')
        >>> validate_match_score(5, 5)
        (False, 'Ties are not allowed in beach tennis, play the tie-break (5-5)')
    """
    if score1 is None or score2 is None:
        return True, ""

    if score1 < 0 or score2 < 0:
        return False, "Scores cannot be negative"

    if score1 == score2:
        return False, f"Ties are not allowed in beach tennis, play the tie-break ({score1}-{score2})"

    return True, ""


def validate_team_index(team_index: int) -> tuple[bool, str]:
    """Validate which side of a match a score belongs to (1 or 2)."""
    if team_index not in (1, 2):
        return False, f"Team must be 1 or 2, got {team_index}"

    return True, ""
