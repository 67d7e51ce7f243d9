"""Knockout bracket generator.

The bracket is built round by round from a seeded pool. An odd pool gives
the best remaining seed a bye; the rest is paired best against worst. Each
round's winners (still unknown) form the next pool until one is left.
"""

from dataclasses import dataclass
from typing import Optional

from btmm.i18n import DEFAULT_LANGUAGE, get_string
from btmm.models import Match, MatchPhase, Pair, TournamentState, phase_for_level
from btmm.standings import get_sorted_standings
from btmm.validation import InputError

KNOCKOUT_START_ID = 1000
MIN_QUALIFIERS = 2


@dataclass
class Qualifier:
    """A pair that advanced from the group stage."""

    pair: Pair
    place: int  # Finishing position in its group (1 = winner)
    group_id: str


@dataclass
class PoolEntry:
    """A competitor of the round being built.

    Either a known pair (team_id set) or the future winner of
    origin_match_id (team_id None until that match is played). A bye keeps
    both: the pair is known and the bye match is its origin.
    """

    team_id: Optional[int] = None
    origin_match_id: Optional[int] = None


def collect_qualifiers(state: TournamentState, advance_per_group: int = 2) -> list[Qualifier]:
    """Take the top pairs of each group, in group order.

    Args:
        state: Tournament state with current standings
        advance_per_group: How many pairs advance from each group

    Returns:
        List of Qualifier objects (not yet seeded)
    """
    qualifiers = []

    for group_id in state.groups:
        ranking = get_sorted_standings(group_id, state.pairs, state.matches)
        for place, pair in enumerate(ranking[:advance_per_group], start=1):
            qualifiers.append(Qualifier(pair=pair, place=place, group_id=group_id))

    return qualifiers


def seed_qualifiers(qualifiers: list[Qualifier]) -> list[Qualifier]:
    """Order qualifiers into bracket seeds (best first).

    All group winners come before all runners-up; within the same place,
    points then balance decide. Head-to-head is not used since qualifiers
    of the same place come from different groups.
    """
    return sorted(
        qualifiers,
        key=lambda q: (q.place, -q.pair.stats.points, -q.pair.stats.balance),
    )


def _link(matches_by_id: dict[int, Match], entry: PoolEntry, target: Match, slot: int) -> None:
    """Point the match an entry comes from at the slot it now occupies."""
    if entry.origin_match_id is None:
        return
    origin = matches_by_id.get(entry.origin_match_id)
    if origin is not None:
        origin.next_match_id = target.id
        origin.next_slot = slot


def build_bracket(
    seeds: list[int],
    start_id: int = KNOCKOUT_START_ID,
    lang: str = DEFAULT_LANGUAGE,
) -> list[Match]:
    """Build the knockout matches for seeded pairs.

    Each round:
    1. If the pool is odd, its first entry (best remaining seed) gets a
       bye match, completed on creation. An entry already sitting on a bye
       keeps that bye instead of getting a second one.
    2. The rest is paired best against worst (pool[i] vs pool[-1 - i]).
    3. Matches that fed an entry are linked to the slot it now occupies.

    Args:
        seeds: Pair ids, best seed first
        start_id: First knockout match id (must not collide with group ids)
        lang: Language for the match labels

    Returns:
        All knockout matches (bye placeholders included), round by round

    Raises:
        InputError: If fewer than 2 pairs are given
    """
    if len(seeds) < MIN_QUALIFIERS:
        raise InputError(
            f"At least {MIN_QUALIFIERS} qualified pairs are needed for a knockout, got {len(seeds)}"
        )

    match_id = start_id
    matches_by_id: dict[int, Match] = {}
    rounds: list[list[Match]] = []

    pool = [PoolEntry(team_id=pair_id) for pair_id in seeds]

    while len(pool) > 1:
        round_matches = []
        next_pool = []
        to_pair = list(pool)

        if len(to_pair) % 2 != 0:
            bye_entry = to_pair.pop(0)
            origin = matches_by_id.get(bye_entry.origin_match_id)

            if origin is not None and origin.is_bye:
                next_pool.append(bye_entry)
            else:
                bye = Match(
                    id=match_id,
                    phase=MatchPhase.BYE,
                    team1=bye_entry.team_id,
                    team2=None,
                    score1=0,
                    score2=0,
                    completed=True,
                )
                match_id += 1
                matches_by_id[bye.id] = bye
                _link(matches_by_id, bye_entry, bye, 1)

                round_matches.append(bye)
                next_pool.append(PoolEntry(team_id=bye_entry.team_id, origin_match_id=bye.id))

        half = len(to_pair) // 2
        for i in range(half):
            high = to_pair[i]
            low = to_pair[len(to_pair) - 1 - i]

            match = Match(
                id=match_id,
                phase=MatchPhase.ELIMINATION,
                team1=high.team_id,
                team2=low.team_id,
            )
            match_id += 1
            matches_by_id[match.id] = match
            _link(matches_by_id, high, match, 1)
            _link(matches_by_id, low, match, 2)

            round_matches.append(match)
            next_pool.append(PoolEntry(origin_match_id=match.id))

        rounds.append(round_matches)
        pool = next_pool

    assign_round_names(rounds, lang)

    return [match for round_matches in rounds for match in round_matches]


def assign_round_names(rounds: list[list[Match]], lang: str = DEFAULT_LANGUAGE) -> None:
    """Set phase, level and label of every knockout match.

    Levels count backwards from the last round (0 = final, 1 = semifinal,
    2 = quarterfinal, 3 = round of 16, anything earlier is a generic
    elimination round). Byes keep their phase and get the qualified label.
    """
    total = len(rounds)

    for idx, round_matches in enumerate(rounds):
        level = total - 1 - idx
        phase = phase_for_level(level)
        round_title = get_string(f"bracket.rounds.{phase.value}", lang)

        for position, match in enumerate(round_matches, start=1):
            match.round_level = level

            if match.is_bye:
                match.label = get_string("bracket.bye", lang)
                continue

            match.phase = phase
            if phase == MatchPhase.FINAL:
                match.label = get_string("bracket.final", lang)
            else:
                match.label = get_string(
                    "bracket.match_label", lang, round=round_title, number=position
                )


def next_knockout_id(state: TournamentState) -> int:
    """First free knockout id: 1000, or above every existing match id."""
    highest = max((m.id for m in state.matches), default=0)
    return max(KNOCKOUT_START_ID, highest + 1)


def create_knockout_matches(
    state: TournamentState,
    advance_per_group: int = 2,
    lang: str = DEFAULT_LANGUAGE,
) -> list[Match]:
    """Collect, seed and build the bracket for the current standings.

    The state is not modified.

    Raises:
        InputError: If fewer than 2 pairs qualify
    """
    qualifiers = seed_qualifiers(collect_qualifiers(state, advance_per_group))
    seeds = [q.pair.id for q in qualifiers]
    return build_bracket(seeds, start_id=next_knockout_id(state), lang=lang)
