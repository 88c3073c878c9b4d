"""
Repository layer for data access abstraction.
"""

from repositories.base_repository import BaseRepository
from repositories.interfaces import (
    IMatchRepository,
    IPlayerRepository,
    ISettingsRepository,
)
from repositories.match_repository import MatchRepository
from repositories.player_repository import PlayerRepository
from repositories.settings_repository import SettingsRepository

__all__ = [
    "BaseRepository",
    "PlayerRepository",
    "MatchRepository",
    "SettingsRepository",
    "IPlayerRepository",
    "IMatchRepository",
    "ISettingsRepository",
]
