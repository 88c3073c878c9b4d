"""
Domain models - pure data structures representing business entities.
"""

from domain.models.match import MatchRecord
from domain.models.player import Player, PlayerRating
from domain.models.team import TeamResult

__all__ = ["Player", "PlayerRating", "TeamResult", "MatchRecord"]
