"""Data models for btmm.

Domain model hierarchy:
- TournamentState is the single aggregate value
- TournamentState contains the entrant names, Pairs, group labels and Matches
- Pair carries its PairStats (recomputed from completed group matches)
- Match is either a group match, a knockout match or a bye placeholder
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class TournamentPhase(str, Enum):
    """Tournament phase."""

    REGISTRATION = "registration"  # Entering player names
    GROUP_STAGE = "group_stage"  # Round robin groups
    KNOCKOUT = "knockout"  # Single elimination bracket


class MatchPhase(str, Enum):
    """Match phase."""

    GROUP = "group"
    ELIMINATION = "elimination"  # Any round before the round of 16
    ROUND_OF_16 = "round_of_16"
    QUARTERFINAL = "quarterfinal"
    SEMIFINAL = "semifinal"
    FINAL = "final"
    BYE = "bye"  # Direct qualification, never played


# Knockout phase by distance from the final (0 = final)
PHASE_BY_LEVEL = {
    0: MatchPhase.FINAL,
    1: MatchPhase.SEMIFINAL,
    2: MatchPhase.QUARTERFINAL,
    3: MatchPhase.ROUND_OF_16,
}


def phase_for_level(level: int) -> MatchPhase:
    """Return the knockout phase for a round level (0 = final)."""
    return PHASE_BY_LEVEL.get(level, MatchPhase.ELIMINATION)


# ============================================================================
# Core Domain Models
# ============================================================================


@dataclass
class PairStats:
    """Group stage statistics for a pair.

    Always the fold of the completed group matches, never patched.
    """

    points: int = 0  # 1 per win
    wins: int = 0
    balance: int = 0  # Games won minus games lost
    matches_played: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "points": self.points,
            "wins": self.wins,
            "balance": self.balance,
            "matches_played": self.matches_played,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PairStats":
        return cls(
            points=int(data.get("points", 0)),
            wins=int(data.get("wins", 0)),
            balance=int(data.get("balance", 0)),
            matches_played=int(data.get("matches_played", 0)),
        )


@dataclass
class Pair:
    """A doubles team formed at draw time.

    The id is stable for the lifetime of the tournament.
    """

    id: int
    player1: str
    player2: str
    group_id: Optional[str] = None  # "A", "B", ... once groups are drawn
    stats: PairStats = field(default_factory=PairStats)

    @property
    def name(self) -> str:
        """Display name joining both members."""
        return f"{self.player1} & {self.player2}"

    def __str__(self) -> str:
        """String representation."""
        group_str = f" [{self.group_id}]" if self.group_id else ""
        return f"#{self.id} {self.name}{group_str}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "player1": self.player1,
            "player2": self.player2,
            "group_id": self.group_id,
            "stats": self.stats.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Pair":
        return cls(
            id=int(data["id"]),
            player1=data["player1"],
            player2=data["player2"],
            group_id=data.get("group_id"),
            stats=PairStats.from_dict(data.get("stats") or {}),
        )


@dataclass
class Match:
    """A match between two pairs.

    team1/team2 hold pair ids; None means the slot is not determined yet
    (winner of a previous knockout match, or the empty side of a bye).
    next_match_id/next_slot say where the winner of this match goes.
    """

    id: int
    phase: MatchPhase
    team1: Optional[int] = None
    team2: Optional[int] = None
    group_id: Optional[str] = None  # Group matches only
    score1: Optional[int] = None
    score2: Optional[int] = None
    completed: bool = False
    next_match_id: Optional[int] = None
    next_slot: Optional[int] = None  # 1 or 2
    round_level: Optional[int] = None  # Knockout only, 0 = final
    label: Optional[str] = None  # "Semifinal 1", "Grand Final", ...

    @property
    def is_group(self) -> bool:
        return self.phase == MatchPhase.GROUP

    @property
    def is_bye(self) -> bool:
        return self.phase == MatchPhase.BYE

    @property
    def is_knockout(self) -> bool:
        return self.phase != MatchPhase.GROUP

    @property
    def winner_id(self) -> Optional[int]:
        """Pair id of the winner, None while the match is open."""
        if not self.completed:
            return None
        if self.is_bye:
            return self.team1
        return self.team1 if self.score1 > self.score2 else self.team2

    def involves(self, pair_id: int) -> bool:
        return pair_id in (self.team1, self.team2)

    def __str__(self) -> str:
        """String representation."""
        if self.score1 is not None and self.score2 is not None:
            score = f"{self.score1}-{self.score2}"
        else:
            score = "vs"
        return f"Match {self.id}: T{self.team1} {score} T{self.team2}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "phase": self.phase.value,
            "group_id": self.group_id,
            "team1": self.team1,
            "team2": self.team2,
            "score1": self.score1,
            "score2": self.score2,
            "completed": self.completed,
            "next_match_id": self.next_match_id,
            "next_slot": self.next_slot,
            "round_level": self.round_level,
            "label": self.label,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Match":
        return cls(
            id=int(data["id"]),
            phase=MatchPhase(data["phase"]),
            group_id=data.get("group_id"),
            team1=data.get("team1"),
            team2=data.get("team2"),
            score1=data.get("score1"),
            score2=data.get("score2"),
            completed=bool(data.get("completed", False)),
            next_match_id=data.get("next_match_id"),
            next_slot=data.get("next_slot"),
            round_level=data.get("round_level"),
            label=data.get("label"),
        )


# ============================================================================
# Tournament State
# ============================================================================


@dataclass
class TournamentState:
    """The whole tournament as one value.

    Persistence, rendering and backup all exchange this object.
    """

    phase: TournamentPhase = TournamentPhase.REGISTRATION
    players: list[str] = field(default_factory=list)
    pairs: list[Pair] = field(default_factory=list)
    groups: list[str] = field(default_factory=list)
    matches: list[Match] = field(default_factory=list)

    @classmethod
    def initial(cls) -> "TournamentState":
        """Return the empty state of a tournament that has not started."""
        return cls()

    def get_match(self, match_id: int) -> Optional[Match]:
        for match in self.matches:
            if match.id == match_id:
                return match
        return None

    def get_pair(self, pair_id: Optional[int]) -> Optional[Pair]:
        for pair in self.pairs:
            if pair.id == pair_id:
                return pair
        return None

    def pairs_in_group(self, group_id: str) -> list[Pair]:
        return [p for p in self.pairs if p.group_id == group_id]

    def group_matches(self, group_id: Optional[str] = None) -> list[Match]:
        """Group stage matches, optionally for one group only."""
        return [
            m for m in self.matches
            if m.is_group and (group_id is None or m.group_id == group_id)
        ]

    def knockout_matches(self) -> list[Match]:
        return [m for m in self.matches if m.is_knockout]

    @property
    def has_knockout(self) -> bool:
        return any(m.is_knockout for m in self.matches)

    @property
    def pending_group_matches(self) -> list[Match]:
        return [m for m in self.group_matches() if not m.completed]

    def team_name(self, pair_id: Optional[int]) -> str:
        """Display name for a slot; 'TBD' when not determined yet."""
        pair = self.get_pair(pair_id)
        return pair.name if pair else "TBD"

    def to_dict(self) -> dict[str, Any]:
        return {
            "phase": self.phase.value,
            "players": list(self.players),
            "pairs": [p.to_dict() for p in self.pairs],
            "groups": list(self.groups),
            "matches": [m.to_dict() for m in self.matches],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TournamentState":
        return cls(
            phase=TournamentPhase(data["phase"]),
            players=list(data.get("players") or []),
            pairs=[Pair.from_dict(p) for p in data.get("pairs") or []],
            groups=list(data.get("groups") or []),
            matches=[Match.from_dict(m) for m in data.get("matches") or []],
        )
