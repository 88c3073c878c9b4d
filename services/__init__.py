"""
Application services layer.

Services orchestrate business operations using repositories and domain services.
"""

from services.backup_service import BackupService
from services.lobby_service import LobbyService
from services.match_service import MatchService
from services.player_service import PlayerService

# Result type for consistent error handling
from services.result import Result

__all__ = [
    "BackupService",
    "LobbyService",
    "MatchService",
    "PlayerService",
    "Result",
]
