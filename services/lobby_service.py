"""
Session state for a team generation round: who plays, who is on fire, who is off.
"""

import logging
from collections.abc import Iterable, Sequence

from config import MIN_ACTIVE_PLAYERS
from domain.models.player import Player
from domain.models.team import TeamResult
from repositories.interfaces import ISettingsRepository
from services import error_codes
from services.result import Result
from shuffler import BalancedShuffler

logger = logging.getLogger("qmg_teams.services.lobby")


class LobbyService:
    """
    Holds the roster for one session and feeds it to the shuffler.

    Buffs and nerfs are session-only modifiers: they change the strength
    used for balancing but are never written to the rating store.
    """

    def __init__(
        self,
        roster: Sequence[Player],
        settings_repo: ISettingsRepository,
        shuffler: BalancedShuffler | None = None,
        min_players: int = MIN_ACTIVE_PLAYERS,
    ):
        names = [p.name for p in roster]
        if len(names) != len(set(names)):
            raise ValueError("Roster contains duplicate player names.")
        self.roster: dict[str, Player] = {p.name: p for p in roster}
        self.settings_repo = settings_repo
        self.shuffler = shuffler or BalancedShuffler()
        self.min_players = min_players
        self.active_names: list[str] = list(self.roster)
        self.buffed: set[str] = set()
        self.nerfed: set[str] = set()
        self.manual_handicap_offset: float = 0.0

    def get_active_players(self) -> list[Player]:
        return [self.roster[name] for name in self.active_names]

    def set_active_players(self, names: Iterable[str]) -> Result[list[Player]]:
        """
        Choose which roster players take part in the next generation.

        Duplicates are collapsed; roster order is kept.
        """
        requested = set(names)
        unknown = sorted(requested - set(self.roster))
        if unknown:
            logger.warning(f"Unknown active player(s) requested: {unknown}")
            return Result.fail(
                f"Unknown player(s): {', '.join(unknown)}", code=error_codes.PLAYER_NOT_FOUND
            )
        if len(requested) < self.min_players:
            logger.warning(f"Refused active selection of {len(requested)} player(s)")
            return Result.fail(
                f"Need at least {self.min_players} active players, got {len(requested)}.",
                code=error_codes.INSUFFICIENT_PLAYERS,
            )

        self.active_names = [name for name in self.roster if name in requested]
        logger.info(f"Active players set: {len(self.active_names)}")
        return Result.ok(self.get_active_players())

    def buff(self, name: str) -> Result[None]:
        """Mark a player as on fire. Clears a nerf on the same player."""
        if name not in self.roster:
            return Result.fail(f"Unknown player: {name}", code=error_codes.PLAYER_NOT_FOUND)
        self.nerfed.discard(name)
        self.buffed.add(name)
        return Result.ok()

    def nerf(self, name: str) -> Result[None]:
        """Mark a player as having an off day. Clears a buff on the same player."""
        if name not in self.roster:
            return Result.fail(f"Unknown player: {name}", code=error_codes.PLAYER_NOT_FOUND)
        self.buffed.discard(name)
        self.nerfed.add(name)
        return Result.ok()

    def clear_modifier(self, name: str) -> None:
        self.buffed.discard(name)
        self.nerfed.discard(name)

    def set_manual_handicap_offset(self, offset: float) -> None:
        """Session-only nudge on top of the learned coefficient."""
        self.manual_handicap_offset = offset

    def effective_handicap_coefficient(self, stored: float | None = None) -> float:
        if stored is None:
            stored = self.settings_repo.get_handicap_coefficient()
        return max(0.0, stored + self.manual_handicap_offset)

    def is_even_split(self) -> bool:
        return len(self.active_names) % 2 == 0

    def generate_teams(self, max_results: int | None = None) -> Result[list[TeamResult]]:
        """
        Rank all splits of the active players.

        Returns:
            Result with candidate splits, best first
        """
        if len(self.active_names) < self.min_players:
            return Result.fail(
                f"Need at least {self.min_players} active players, got {len(self.active_names)}.",
                code=error_codes.INSUFFICIENT_PLAYERS,
            )

        coefficient = self.effective_handicap_coefficient()
        results = self.shuffler.create_balanced_teams(
            self.get_active_players(),
            buffed_names=self.buffed,
            nerfed_names=self.nerfed,
            handicap_coefficient=coefficient,
            max_results=max_results,
        )
        logger.info(
            f"Generated {len(results)} candidate split(s) for {len(self.active_names)} players"
        )
        return Result.ok(results)
