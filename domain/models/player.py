"""
Player domain models.
"""

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class Player:
    """
    A rated player as seen by the team balancer.

    Players are plain value records: identity across calls is by name only.
    """

    name: str
    strength: float

    def with_strength(self, strength: float) -> "Player":
        """Return a copy of this player with a different strength."""
        return replace(self, strength=strength)

    def __str__(self) -> str:
        return f"{self.name} ({self.strength:g})"


@dataclass
class PlayerRating:
    """
    Persistent rating record for a player.

    This is a pure domain model with no infrastructure dependencies.
    """

    name: str
    rating: float
    wins: int = 0
    losses: int = 0
    draws: int = 0
    games_played: int = 0

    def get_win_rate(self) -> float | None:
        """Get win rate as a percentage, or None if no games played."""
        if self.games_played == 0:
            return None
        return (self.wins / self.games_played) * 100

    def get_win_loss_differential(self) -> int:
        """Get wins minus losses."""
        return self.wins - self.losses

    def to_player(self) -> Player:
        """Use the current rating as balancing strength."""
        return Player(name=self.name, strength=self.rating)

    def __str__(self) -> str:
        return (
            f"{self.name} (Rating: {self.rating:g}, "
            f"W-L-D: {self.wins}-{self.losses}-{self.draws})"
        )
