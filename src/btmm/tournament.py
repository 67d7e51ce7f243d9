"""Tournament operations.

Every function takes the TournamentState it works on. Mutations either
complete fully or raise before touching the state; callers persist and
render the state afterwards.
"""

import random
from typing import Callable, Iterable, Optional, Union

from btmm.bracket import create_knockout_matches
from btmm.group_builder import assign_groups, calculate_group_sizes, generate_group_matches
from btmm.i18n import DEFAULT_LANGUAGE, get_string
from btmm.models import Match, MatchPhase, Pair, TournamentPhase, TournamentState
from btmm.pairs import clean_names, form_pairs
from btmm.standings import recalculate_standings
from btmm.validation import (
    InputError,
    ValidationError,
    parse_score,
    validate_match_score,
    validate_team_index,
)

ConfirmCallback = Callable[[str], bool]
ChampionCallback = Callable[[Pair], None]


def draw(
    state: TournamentState,
    raw_names: Iterable[str],
    rng: Optional[random.Random] = None,
) -> TournamentState:
    """Draw pairs, groups and group fixtures from entrant names.

    Everything is built first and only then written to the state, so a
    failed draw leaves the state untouched.

    Args:
        state: State to fill (any previous tournament is replaced)
        raw_names: Entrant names as typed (trimmed, blanks dropped)
        rng: Optional random generator for deterministic draws

    Returns:
        The same state, now in the group stage

    Raises:
        InputError: If there are fewer than 4 names or an odd number of names
    """
    names = clean_names(raw_names)
    pairs = form_pairs(names, rng)
    groups = assign_groups(pairs, calculate_group_sizes(len(pairs)))
    matches = generate_group_matches(pairs, groups)
    recalculate_standings(pairs, matches)

    state.players = names
    state.pairs = pairs
    state.groups = groups
    state.matches = matches
    state.phase = TournamentPhase.GROUP_STAGE
    return state


def _get_match_or_raise(state: TournamentState, match_id: int) -> Match:
    match = state.get_match(match_id)
    if match is None:
        raise InputError(f"Match {match_id} not found")
    return match


def propagate_winner(
    state: TournamentState,
    match: Match,
    on_champion: Optional[ChampionCallback] = None,
) -> None:
    """Move the winner of a completed knockout match to its next match.

    The winner is written into the slot named by next_slot; the other slot
    is left alone. Byes have no score to enter, so the winner passes
    straight through them. Winning the final notifies on_champion instead.
    """
    winner_id = match.winner_id
    if winner_id is None:
        return

    if match.phase == MatchPhase.FINAL:
        champion = state.get_pair(winner_id)
        if champion is not None and on_champion is not None:
            on_champion(champion)
        return

    if match.next_match_id is None:
        return

    next_match = state.get_match(match.next_match_id)
    if next_match is None:
        return

    if match.next_slot == 1:
        next_match.team1 = winner_id
    else:
        next_match.team2 = winner_id

    if next_match.is_bye:
        propagate_winner(state, next_match, on_champion)


def update_match_score(
    state: TournamentState,
    match_id: int,
    team_index: int,
    raw_value: Union[str, int, None],
    on_champion: Optional[ChampionCallback] = None,
) -> Match:
    """Enter one side of a match score.

    When both scores are present and differ the match is completed: group
    matches trigger a full standings recompute, knockout matches move the
    winner on. Clearing a score reopens the match.

    Args:
        state: Tournament state
        match_id: Match to update
        team_index: 1 for team1's score, 2 for team2's
        raw_value: Score as typed; empty clears it
        on_champion: Called with the winning pair when the final is completed

    Returns:
        The updated match

    Raises:
        InputError: If the match does not exist or team_index is not 1 or 2
        ValidationError: If the value is not a valid score, the match cannot
            be scored yet, or the score is a tie (the field is then cleared)
    """
    match = _get_match_or_raise(state, match_id)

    is_valid, error_msg = validate_team_index(team_index)
    if not is_valid:
        raise InputError(error_msg)

    if match.is_bye:
        raise ValidationError(f"Match {match_id} is a bye and has no score")

    if match.team1 is None or match.team2 is None:
        raise ValidationError(f"Match {match_id} does not have both teams yet")

    value = parse_score(raw_value)

    if team_index == 1:
        match.score1 = value
    else:
        match.score2 = value

    is_valid, error_msg = validate_match_score(match.score1, match.score2)
    if not is_valid:
        if team_index == 1:
            match.score1 = None
        else:
            match.score2 = None
        match.completed = False
        if match.is_group:
            recalculate_standings(state.pairs, state.matches)
        raise ValidationError(error_msg)

    match.completed = match.score1 is not None and match.score2 is not None

    if match.is_group:
        recalculate_standings(state.pairs, state.matches)
    elif match.completed:
        propagate_winner(state, match, on_champion)

    return match


def generate_knockout(
    state: TournamentState,
    confirm: Optional[ConfirmCallback] = None,
    advance_per_group: int = 2,
    lang: str = DEFAULT_LANGUAGE,
) -> bool:
    """Move the tournament to the knockout stage.

    With open group matches the operator must confirm first. An existing
    bracket is reused rather than rebuilt.

    Args:
        state: Tournament state in the group stage
        confirm: Yes/no collaborator; without one, open matches abort
        advance_per_group: How many pairs advance from each group
        lang: Language for the match labels

    Returns:
        True if the tournament is now in the knockout stage, False if the
        operator declined

    Raises:
        InputError: If fewer than 2 pairs qualify
    """
    if state.pending_group_matches:
        if confirm is None or not confirm(get_string("cli.knockout.pending", lang)):
            return False

    if state.has_knockout:
        state.phase = TournamentPhase.KNOCKOUT
        return True

    recalculate_standings(state.pairs, state.matches)
    knockout = create_knockout_matches(state, advance_per_group, lang)

    state.matches.extend(knockout)
    state.phase = TournamentPhase.KNOCKOUT
    return True


def return_to_groups(state: TournamentState) -> TournamentState:
    """Go back to the group stage view; the bracket is kept."""
    state.phase = TournamentPhase.GROUP_STAGE
    return state


def reset_tournament(
    confirm: Optional[ConfirmCallback] = None,
    lang: str = DEFAULT_LANGUAGE,
) -> Optional[TournamentState]:
    """Start over with an empty tournament.

    Returns:
        A fresh initial state, or None if the operator declined
    """
    if confirm is not None and not confirm(get_string("cli.reset.confirm", lang)):
        return None
    return TournamentState.initial()


def get_champion(state: TournamentState) -> Optional[Pair]:
    """Return the winner of the final once it has been played."""
    for match in state.knockout_matches():
        if match.phase == MatchPhase.FINAL and match.completed:
            return state.get_pair(match.winner_id)
    return None


def playable_matches(state: TournamentState) -> list[Match]:
    """Open matches whose two teams are known, in id order."""
    return [
        m for m in state.matches
        if not m.completed and not m.is_bye and m.team1 is not None and m.team2 is not None
    ]


def simulate_results(
    state: TournamentState,
    rng: Optional[random.Random] = None,
    phase: Optional[str] = None,
    on_champion: Optional[ChampionCallback] = None,
) -> int:
    """Fill playable matches with random non-tied scores.

    Goes through update_match_score, so standings and bracket propagation
    behave exactly as with typed scores. Knockout rounds unlock as winners
    move on, so the loop runs until nothing is playable.

    Args:
        state: Tournament state
        rng: Optional random generator
        phase: "group" or "knockout" to restrict, None for both
        on_champion: Forwarded to score entry

    Returns:
        Number of matches completed
    """
    rng = rng or random.Random()
    completed = 0

    while True:
        candidates = [
            m for m in playable_matches(state)
            if phase is None
            or (phase == "group" and m.is_group)
            or (phase == "knockout" and m.is_knockout)
        ]
        if not candidates:
            return completed

        for match in candidates:
            loser_games = rng.randint(0, 4)
            if rng.random() < 0.5:
                score1, score2 = 6, loser_games
            else:
                score1, score2 = loser_games, 6
            update_match_score(state, match.id, 2, None)
            update_match_score(state, match.id, 1, score1)
            update_match_score(state, match.id, 2, score2, on_champion=on_champion)
            completed += 1
