"""
Team balancing domain service.

Handles effective strengths and balance scoring of candidate splits.
"""

from collections.abc import Collection, Sequence

from domain.models.player import Player
from domain.models.team import TeamResult
from rating_system import calculate_uneven_team_handicap


class TeamBalancingService:
    """
    Pure domain service for team balancing logic.

    Responsibilities:
    - Apply temporary buff/nerf modifiers
    - Calculate team strengths
    - Score a split, including the uneven-team handicap
    """

    def __init__(self, buff_amount: float = 50.0, nerf_amount: float = 50.0):
        """
        Initialize team balancing service.

        Args:
            buff_amount: Strength added to buffed ("on fire") players
            nerf_amount: Strength removed from nerfed ("off day") players
        """
        self.buff_amount = buff_amount
        self.nerf_amount = nerf_amount

    def get_modifier(
        self, name: str, buffed_names: Collection[str], nerfed_names: Collection[str]
    ) -> float:
        """Strength offset for one player. Buffed wins if a name is in both sets."""
        if name in buffed_names:
            return self.buff_amount
        if name in nerfed_names:
            return -self.nerf_amount
        return 0.0

    def apply_modifiers(
        self,
        players: Sequence[Player],
        buffed_names: Collection[str] = (),
        nerfed_names: Collection[str] = (),
    ) -> list[Player]:
        """
        Return an adjusted copy of the roster.

        The caller's players are never mutated; unmodified players are
        returned as-is.
        """
        buffed = set(buffed_names)
        nerfed = set(nerfed_names)
        adjusted = []
        for player in players:
            modifier = self.get_modifier(player.name, buffed, nerfed)
            adjusted.append(player.with_strength(player.strength + modifier) if modifier else player)
        return adjusted

    @staticmethod
    def calculate_team_strength(team: Sequence[Player]) -> float:
        """Sum of effective strengths."""
        return sum(p.strength for p in team)

    def score_partition(
        self,
        team1: Sequence[Player],
        team2: Sequence[Player],
        handicap_coefficient: float,
    ) -> TeamResult:
        """
        Score one split (lower strength_difference = more balanced).

        For uneven splits the handicap is added to the smaller team, which
        is how the balancer ends up giving that team its strongest players.
        """
        team1_strength = self.calculate_team_strength(team1)
        team2_strength = self.calculate_team_strength(team2)

        handicap = 0
        if len(team1) != len(team2):
            smaller_size = min(len(team1), len(team2))
            larger_size = max(len(team1), len(team2))
            handicap = calculate_uneven_team_handicap(
                smaller_size, larger_size, handicap_coefficient
            )
            if len(team1) < len(team2):
                team1_strength += handicap
            else:
                team2_strength += handicap

        return TeamResult(
            team1=list(team1),
            team2=list(team2),
            strength_difference=abs(team1_strength - team2_strength),
            handicap=handicap,
        )

    def get_team_stats(self, result: TeamResult) -> dict:
        """
        Get presentation stats for a scored split.

        Returns:
            Dict with sizes, raw and adjusted sums, handicap and favoured side
            (0 when both adjusted sums are equal).
        """
        team1_strength = result.team1_strength
        team2_strength = result.team2_strength
        team1_adjusted = team1_strength
        team2_adjusted = team2_strength
        if len(result.team1) < len(result.team2):
            team1_adjusted += result.handicap
        elif len(result.team2) < len(result.team1):
            team2_adjusted += result.handicap

        if team1_adjusted > team2_adjusted:
            favoured = 1
        elif team2_adjusted > team1_adjusted:
            favoured = 2
        else:
            favoured = 0

        return {
            "team1_size": len(result.team1),
            "team2_size": len(result.team2),
            "team1_strength": team1_strength,
            "team2_strength": team2_strength,
            "team1_adjusted_strength": team1_adjusted,
            "team2_adjusted_strength": team2_adjusted,
            "handicap": result.handicap,
            "strength_difference": result.strength_difference,
            "favoured_team": favoured,
        }
