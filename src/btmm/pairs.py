"""Random pair formation for doubles draws."""

import random
from typing import Iterable, Optional

from btmm.models import Pair
from btmm.validation import InputError, validate_entrant_count


def clean_names(raw_names: Iterable[str]) -> list[str]:
    """Trim names and drop blank entries, keeping input order."""
    return [name.strip() for name in raw_names if name and name.strip()]


def shuffle_names(names: list[str], rng: Optional[random.Random] = None) -> list[str]:
    """Return a uniformly shuffled copy of names (Fisher-Yates).

    Args:
        names: Names to shuffle (not modified)
        rng: Optional random generator for deterministic draws

    Returns:
        New list with the same names in random order
    """
    rng = rng or random.Random()
    shuffled = list(names)

    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]

    return shuffled


def form_pairs(names: list[str], rng: Optional[random.Random] = None) -> list[Pair]:
    """Split entrants into random doubles pairs.

    Consecutive names of the shuffled list form a pair; pair ids start at 1.

    Args:
        names: Trimmed, non-empty entrant names
        rng: Optional random generator for deterministic draws

    Returns:
        List of Pair objects without a group assigned

    Raises:
        InputError: If there are fewer than 4 names or an odd number of names
    """
    is_valid, error_msg = validate_entrant_count(len(names))
    if not is_valid:
        raise InputError(error_msg)

    shuffled = shuffle_names(names, rng)

    return [
        Pair(id=idx // 2 + 1, player1=shuffled[idx], player2=shuffled[idx + 1])
        for idx in range(0, len(shuffled), 2)
    ]
