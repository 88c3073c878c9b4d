"""
Match record domain model.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from domain.models.player import Player

DRAW = 0
TEAM1_WON = 1
TEAM2_WON = 2

# Per-player outcome of a recorded match
OUTCOME_WIN = "win"
OUTCOME_LOSS = "loss"
OUTCOME_DRAW = "draw"


def winner_from_scores(team1_score: int, team2_score: int) -> int:
    """Return 1 or 2 for the winning side, 0 for a draw."""
    if team1_score > team2_score:
        return TEAM1_WON
    if team1_score < team2_score:
        return TEAM2_WON
    return DRAW


@dataclass
class MatchRecord:
    """
    A completed match as stored in the match log.

    Team members keep the strength they had when the match was played.
    """

    team1: list[Player]
    team2: list[Player]
    team1_score: int
    team2_score: int
    winner: int
    rating_changes: dict[str, int] = field(default_factory=dict)
    map_played: str | None = None
    handicap: int = 0
    handicap_coefficient_before: float | None = None
    handicap_coefficient_after: float | None = None
    played_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    match_id: int | None = None

    @property
    def is_draw(self) -> bool:
        return self.winner == DRAW

    @property
    def is_uneven(self) -> bool:
        return len(self.team1) != len(self.team2)

    def get_team_for_player(self, name: str) -> int | None:
        """Return 1 or 2 for the side the player was on, None if absent."""
        if any(p.name == name for p in self.team1):
            return TEAM1_WON
        if any(p.name == name for p in self.team2):
            return TEAM2_WON
        return None

    def get_outcome_for_player(self, name: str) -> str | None:
        """Return "win", "loss" or "draw" for a participant, None if absent."""
        side = self.get_team_for_player(name)
        if side is None:
            return None
        if self.is_draw:
            return OUTCOME_DRAW
        return OUTCOME_WIN if side == self.winner else OUTCOME_LOSS

    def to_dict(self) -> dict:
        """Serializable representation used by the match log and backups."""
        return {
            "id": self.match_id,
            "date": self.played_at.isoformat(),
            "team1": [{"name": p.name, "strength": p.strength} for p in self.team1],
            "team2": [{"name": p.name, "strength": p.strength} for p in self.team2],
            "team1Score": self.team1_score,
            "team2Score": self.team2_score,
            "winner": self.winner,
            "mapPlayed": self.map_played,
            "ratingChanges": dict(self.rating_changes),
            "handicap": self.handicap,
            "handicapCoefficientBefore": self.handicap_coefficient_before,
            "handicapCoefficientAfter": self.handicap_coefficient_after,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MatchRecord":
        raw_date = data["date"]
        # fromisoformat only reads a "Z" suffix from Python 3.11 on
        if raw_date.endswith("Z"):
            raw_date = raw_date[:-1] + "+00:00"
        played_at = datetime.fromisoformat(raw_date)
        if played_at.tzinfo is None:
            played_at = played_at.replace(tzinfo=timezone.utc)
        else:
            played_at = played_at.astimezone(timezone.utc)
        return cls(
            match_id=data.get("id"),
            played_at=played_at,
            team1=[Player(name=p["name"], strength=p["strength"]) for p in data["team1"]],
            team2=[Player(name=p["name"], strength=p["strength"]) for p in data["team2"]],
            team1_score=int(data["team1Score"]),
            team2_score=int(data["team2Score"]),
            winner=int(data["winner"]),
            map_played=data.get("mapPlayed"),
            rating_changes={k: int(v) for k, v in data.get("ratingChanges", {}).items()},
            handicap=int(data.get("handicap", 0)),
            handicap_coefficient_before=data.get("handicapCoefficientBefore"),
            handicap_coefficient_after=data.get("handicapCoefficientAfter"),
        )
