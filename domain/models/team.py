"""
Team split domain model.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from domain.models.player import Player

MatchupKey = frozenset[frozenset[str]]


def canonical_matchup_key(team1: Iterable[Player], team2: Iterable[Player]) -> MatchupKey:
    """
    Order-independent key for a pair of teams.

    [A,B] vs [C,D] and [C,D] vs [A,B] produce the same key. Names are kept
    as separate set members, so "ab" + "c" never collides with "a" + "bc".
    """
    return frozenset([frozenset(p.name for p in team1), frozenset(p.name for p in team2)])


@dataclass(frozen=True)
class TeamResult:
    """
    One candidate split of the active roster into two teams.

    Players carry their effective (modifier-adjusted) strength. Lower
    strength_difference means a more balanced split.
    """

    team1: list[Player]
    team2: list[Player]
    strength_difference: float
    handicap: int = 0

    @property
    def team1_strength(self) -> float:
        """Raw team 1 sum, without handicap."""
        return sum(p.strength for p in self.team1)

    @property
    def team2_strength(self) -> float:
        """Raw team 2 sum, without handicap."""
        return sum(p.strength for p in self.team2)

    @property
    def is_uneven(self) -> bool:
        return len(self.team1) != len(self.team2)

    @property
    def matchup_key(self) -> MatchupKey:
        return canonical_matchup_key(self.team1, self.team2)

    def team_names(self) -> tuple[list[str], list[str]]:
        return [p.name for p in self.team1], [p.name for p in self.team2]

    def __str__(self) -> str:
        team1_names = ", ".join(p.name for p in self.team1)
        team2_names = ", ".join(p.name for p in self.team2)
        return f"[{team1_names}] vs [{team2_names}] (diff {self.strength_difference:g})"
