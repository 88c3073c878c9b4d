"""
Service container for dependency injection and initialization.

Usage:
    container = ServiceContainer(ServiceConfig(db_path="league.db"))
    container.initialize()

    lobby = container.create_lobby(["Alice", "Bob", "Cara", "Dan"])
    teams = lobby.generate_teams().unwrap()
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from config import BALANCER_SETTINGS, DB_PATH, DEFAULT_HANDICAP_COEFFICIENT, MIN_ACTIVE_PLAYERS
from database import Database
from domain.models.player import Player
from repositories.match_repository import MatchRepository
from repositories.player_repository import PlayerRepository
from repositories.settings_repository import SettingsRepository
from services.backup_service import BackupService
from services.lobby_service import LobbyService
from services.match_service import MatchService
from services.player_service import PlayerService
from shuffler import BalancedShuffler

logger = logging.getLogger("qmg_teams.infrastructure.container")


@dataclass
class RepositoryContainer:
    """Container for all repositories."""

    player: PlayerRepository | None = None
    match: MatchRepository | None = None
    settings: SettingsRepository | None = None


@dataclass
class ServiceConfig:
    """Configuration for service initialization."""

    db_path: str = DB_PATH

    # Balancer settings
    buff_amount: float = BALANCER_SETTINGS["buff_amount"]
    nerf_amount: float = BALANCER_SETTINGS["nerf_amount"]
    max_results: int = BALANCER_SETTINGS["max_results"]
    min_active_players: int = MIN_ACTIVE_PLAYERS

    # Handicap settings
    default_handicap_coefficient: float = DEFAULT_HANDICAP_COEFFICIENT


class ServiceContainer:
    """
    Central container for all application services.

    Handles initialization order and dependency injection. Lobbies are not
    cached: each session gets its own from create_lobby().
    """

    def __init__(self, config: ServiceConfig | None = None):
        self.config = config or ServiceConfig()
        self._initialized = False
        self._repos = RepositoryContainer()
        self._database: Database | None = None
        self._shuffler: BalancedShuffler | None = None
        self._player_service: PlayerService | None = None
        self._match_service: MatchService | None = None
        self._backup_service: BackupService | None = None

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> None:
        """
        Initialize all services in correct order.

        This method is idempotent - calling it multiple times has no effect.
        """
        if self._initialized:
            logger.debug("ServiceContainer already initialized, skipping")
            return

        logger.info("Initializing ServiceContainer...")
        logger.debug(f"Initializing database at {self.config.db_path}")
        self._database = Database.for_path(self.config.db_path)

        db_path = self.config.db_path
        self._repos.player = PlayerRepository(db_path)
        self._repos.match = MatchRepository(db_path)
        self._repos.settings = SettingsRepository(
            db_path, default_coefficient=self.config.default_handicap_coefficient
        )

        self._shuffler = BalancedShuffler(
            buff_amount=self.config.buff_amount,
            nerf_amount=self.config.nerf_amount,
            max_results=self.config.max_results,
        )
        self._player_service = PlayerService(self._repos.player)
        self._match_service = MatchService(
            player_repo=self._repos.player,
            match_repo=self._repos.match,
            settings_repo=self._repos.settings,
        )
        self._backup_service = BackupService(
            player_repo=self._repos.player,
            match_repo=self._repos.match,
            settings_repo=self._repos.settings,
        )

        self._initialized = True
        logger.info("ServiceContainer initialization complete")

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError("ServiceContainer.initialize() has not been called.")

    def create_lobby(
        self, names: Iterable[str] | None = None, roster: list[Player] | None = None
    ) -> LobbyService:
        """
        Start a session from an explicit roster or from stored ratings.

        Args:
            names: Active players, picked from the roster
            roster: Explicit roster; defaults to every stored player

        Raises:
            ValueError: If names holds unknown players or too few of them
        """
        self._require_initialized()
        if roster is None:
            roster = self._player_service.get_roster()
        lobby = LobbyService(
            roster,
            self._repos.settings,
            shuffler=self._shuffler,
            min_players=self.config.min_active_players,
        )
        if names is not None:
            selection = lobby.set_active_players(names)
            if not selection:
                raise ValueError(selection.error)
        return lobby

    @property
    def player_repo(self) -> PlayerRepository:
        return self._repos.player

    @property
    def match_repo(self) -> MatchRepository:
        return self._repos.match

    @property
    def settings_repo(self) -> SettingsRepository:
        return self._repos.settings

    @property
    def shuffler(self) -> BalancedShuffler:
        self._require_initialized()
        return self._shuffler

    @property
    def player_service(self) -> PlayerService:
        self._require_initialized()
        return self._player_service

    @property
    def match_service(self) -> MatchService:
        self._require_initialized()
        return self._match_service

    @property
    def backup_service(self) -> BackupService:
        self._require_initialized()
        return self._backup_service
