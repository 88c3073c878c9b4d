"""
Player-facing business logic (registration, leaderboard, stats).
"""

import logging
from collections.abc import Iterable

from config import DEFAULT_PLAYER_RATING
from domain.models.player import Player, PlayerRating
from repositories.interfaces import IPlayerRepository
from services import error_codes
from services.result import Result

logger = logging.getLogger("qmg_teams.services.player")


class PlayerService:
    """Encapsulates registration, rating lookups and the roster view."""

    def __init__(self, player_repo: IPlayerRepository):
        self.player_repo = player_repo

    def register_player(
        self, name: str, rating: float = DEFAULT_PLAYER_RATING
    ) -> Result[PlayerRating]:
        """Add a player to the rating store with a starting rating."""
        name = (name or "").strip()
        if not name:
            return Result.fail("Player name cannot be empty.", code=error_codes.VALIDATION_ERROR)
        if self.player_repo.exists(name):
            return Result.fail(
                f"Player {name} is already registered.", code=error_codes.PLAYER_ALREADY_EXISTS
            )
        self.player_repo.add(name, rating)
        logger.info(f"Registered player {name} at rating {rating:g}")
        return Result.ok(PlayerRating(name=name, rating=rating))

    def get_leaderboard(self, limit: int | None = None) -> list[PlayerRating]:
        players = self.player_repo.get_all()
        return players[:limit] if limit is not None else players

    def get_player_stats(self, name: str) -> Result[dict]:
        rating = self.player_repo.get(name)
        if rating is None:
            return Result.fail(f"Player {name} not found.", code=error_codes.PLAYER_NOT_FOUND)
        return Result.ok(
            {
                "name": rating.name,
                "rating": rating.rating,
                "wins": rating.wins,
                "losses": rating.losses,
                "draws": rating.draws,
                "games_played": rating.games_played,
                "win_rate": rating.get_win_rate(),
                "win_loss_differential": rating.get_win_loss_differential(),
            }
        )

    def get_roster(self, names: Iterable[str] | None = None) -> list[Player]:
        """
        Balancing roster built from stored ratings.

        With `names`, only those players are returned, in the given order;
        unknown names are skipped.
        """
        if names is None:
            return [r.to_player() for r in self.player_repo.get_all()]
        names = list(dict.fromkeys(names))
        stored = self.player_repo.get_many(names)
        return [stored[name].to_player() for name in names if name in stored]

    def reset_ratings(self) -> int:
        """Forget every stored rating."""
        count = self.player_repo.delete_all()
        logger.warning(f"Reset ratings for {count} player(s)")
        return count
