"""Standings calculator with tie-breaking rules."""

from functools import cmp_to_key
from typing import Optional

from btmm.models import Match, Pair, PairStats


def recalculate_standings(pairs: list[Pair], matches: list[Match]) -> None:
    """Recompute every pair's stats from the completed group matches.

    Stats are reset and rebuilt from scratch, so calling this twice in a row
    gives the same result.

    Scoring:
    - Win: 1 point, 1 win
    - Balance: games won minus games lost

    Args:
        pairs: All pairs (stats are replaced in place)
        matches: All matches; only completed group matches count
    """
    stats_by_pair = {pair.id: PairStats() for pair in pairs}

    for match in matches:
        if not match.is_group or not match.completed:
            continue

        stats1 = stats_by_pair.get(match.team1)
        stats2 = stats_by_pair.get(match.team2)
        if stats1 is None or stats2 is None:
            continue

        stats1.matches_played += 1
        stats2.matches_played += 1

        stats1.balance += match.score1 - match.score2
        stats2.balance += match.score2 - match.score1

        winner = stats1 if match.score1 > match.score2 else stats2
        winner.points += 1
        winner.wins += 1

    for pair in pairs:
        pair.stats = stats_by_pair[pair.id]


def find_head_to_head(pair_a_id: int, pair_b_id: int, matches: list[Match]) -> Optional[Match]:
    """Return the completed group match between two pairs, if any."""
    for match in matches:
        if not match.is_group or not match.completed:
            continue
        if match.involves(pair_a_id) and match.involves(pair_b_id):
            return match
    return None


def compare_pairs(a: Pair, b: Pair, matches: list[Match]) -> int:
    """Compare two pairs of the same group (negative = a ranks higher).

    Criteria:
    1. Points (descending)
    2. Balance (descending)
    3. Head-to-head winner
    4. Wins (descending)

    Head-to-head only settles the pair being compared, so a three-way tie
    on points and balance has no guaranteed total order.
    """
    if a.stats.points != b.stats.points:
        return b.stats.points - a.stats.points

    if a.stats.balance != b.stats.balance:
        return b.stats.balance - a.stats.balance

    match = find_head_to_head(a.id, b.id, matches)
    if match is not None:
        if match.winner_id == a.id:
            return -1
        if match.winner_id == b.id:
            return 1

    return b.stats.wins - a.stats.wins


def sort_standings(pairs: list[Pair], matches: list[Match]) -> list[Pair]:
    """Sort pairs of one group by the tie-breaking chain (best first)."""
    return sorted(pairs, key=cmp_to_key(lambda a, b: compare_pairs(a, b, matches)))


def get_sorted_standings(group_id: str, pairs: list[Pair], matches: list[Match]) -> list[Pair]:
    """Get the current ranking of a group.

    Computed on demand from the current stats; nothing is cached.

    Args:
        group_id: Group label
        pairs: All pairs of the tournament
        matches: All matches of the tournament

    Returns:
        Pairs of the group, best first
    """
    group_pairs = [p for p in pairs if p.group_id == group_id]
    return sort_standings(group_pairs, matches)
