"""Group builder: group sizing, group assignment and round robin fixtures."""

import string
from typing import Iterator

from btmm.models import Match, MatchPhase, Pair
from btmm.validation import InputError

PREFERRED_GROUP_SIZE = 4
FALLBACK_GROUP_SIZE = 3
# Below this a 3/4 split is not always possible (5 pairs), so everyone plays everyone
MIN_PAIRS_FOR_SPLIT = 6


def calculate_group_sizes(num_pairs: int) -> list[int]:
    """Calculate group sizes for a number of pairs.

    Groups of 4 are preferred; groups of 3 absorb the remainder. With fewer
    than 6 pairs a single group holds the whole field.

    Args:
        num_pairs: Total number of pairs

    Returns:
        List of group sizes, groups of 4 first

    Raises:
        InputError: If num_pairs is less than 1

    Examples:
        >>> calculate_group_sizes(5)
        [5]
        >>> calculate_group_sizes(6)
        [3, 3]
        >>> calculate_group_sizes(9)
        [3, 3, 3]
        >>> calculate_group_sizes(13)
        [4, 3, 3, 3]
    """
    if num_pairs < 1:
        raise InputError(f"Cannot create groups with {num_pairs} pairs")

    if num_pairs < MIN_PAIRS_FOR_SPLIT:
        return [num_pairs]

    num_fours = num_pairs // PREFERRED_GROUP_SIZE
    remainder = num_pairs % PREFERRED_GROUP_SIZE

    if remainder == 1:
        # Break two 4s into three 3s: 9 -> [3, 3, 3], 13 -> [4, 3, 3, 3]
        num_fours -= 2
    elif remainder == 2:
        # Break one 4 into two 3s: 6 -> [3, 3], 10 -> [4, 3, 3]
        num_fours -= 1

    sizes = [PREFERRED_GROUP_SIZE] * num_fours
    remaining = num_pairs - PREFERRED_GROUP_SIZE * num_fours
    sizes.extend([FALLBACK_GROUP_SIZE] * (remaining // FALLBACK_GROUP_SIZE))

    return sizes


def group_labels() -> Iterator[str]:
    """Yield group labels: A..Z, then AA, AB, ..."""
    letters = string.ascii_uppercase
    for letter in letters:
        yield letter
    for first in letters:
        for second in letters:
            yield first + second


def assign_groups(pairs: list[Pair], group_sizes: list[int]) -> list[str]:
    """Assign pairs to groups in list order.

    The first group is filled with the first pairs, and so on.

    Args:
        pairs: Pairs in draw order (group_id is set in place)
        group_sizes: Target size of each group

    Returns:
        Group labels in creation order
    """
    labels = []
    pair_iter = iter(pairs)

    for label, size in zip(group_labels(), group_sizes):
        labels.append(label)
        for _ in range(size):
            pair = next(pair_iter, None)
            if pair is None:
                break
            pair.group_id = label

    return labels


def generate_round_robin_fixtures(group_size: int) -> list[tuple[int, int]]:
    """Generate every pairing of a group (0-indexed), in index order.

    Odd groups need no byes: each pair just plays one match less per round.

    Examples:
        >>> generate_round_robin_fixtures(3)
        [(0, 1), (0, 2), (1, 2)]
    """
    return [
        (i, j)
        for i in range(group_size)
        for j in range(i + 1, group_size)
    ]


def generate_group_matches(pairs: list[Pair], groups: list[str]) -> list[Match]:
    """Create the round robin matches of every group.

    Match ids are 1, 2, 3, ... continuing across groups, in group order.

    Args:
        pairs: Pairs with group_id assigned
        groups: Group labels in order

    Returns:
        List of pending group Match objects
    """
    all_matches = []
    match_counter = 1

    for group_id in groups:
        roster = [p for p in pairs if p.group_id == group_id]

        for i, j in generate_round_robin_fixtures(len(roster)):
            match = Match(
                id=match_counter,
                phase=MatchPhase.GROUP,
                group_id=group_id,
                team1=roster[i].id,
                team2=roster[j].id,
            )
            all_matches.append(match)
            match_counter += 1

    return all_matches
