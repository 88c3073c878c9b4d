"""
Balanced team shuffling algorithm.
"""

import heapq
import logging
import math
from collections.abc import Collection, Sequence
from typing import TypeVar

from config import BALANCER_SETTINGS, LOG_TOP_MATCHUPS
from domain.models.player import Player
from domain.models.team import MatchupKey, TeamResult, canonical_matchup_key
from domain.services.team_balancing_service import TeamBalancingService
from utils.formatting import format_team_result

logger = logging.getLogger("qmg_teams.shuffler")

T = TypeVar("T")


def get_combinations(items: Sequence[T], size: int) -> list[tuple[T, ...]]:
    """
    Generate every way of choosing `size` items, by choose-or-skip backtracking.

    Combinations come out in lexicographic order of the original indices and
    keep input order inside each combination, e.g.
    get_combinations([1, 2, 3], 2) -> [(1, 2), (1, 3), (2, 3)].
    """
    n = len(items)
    if size < 0 or size > n:
        return []
    if size == 0:
        return [()]
    if size == n:
        return [tuple(items)]

    result: list[tuple[T, ...]] = []
    combination: list[T] = []

    def helper(start: int) -> None:
        if len(combination) == size:
            result.append(tuple(combination))
            return
        # Stop early once too few items remain to complete the combination
        for i in range(start, n - (size - len(combination)) + 1):
            combination.append(items[i])
            helper(i + 1)
            combination.pop()

    helper(0)
    return result


class BalancedShuffler:
    """
    Exhaustive two-team balancer.

    Every split of the roster into floor(n/2) and ceil(n/2) players is scored,
    so the globally best split is always found. Rosters are small (4-16
    players), at most C(16, 8) = 12870 candidates.
    """

    def __init__(
        self,
        buff_amount: float | None = None,
        nerf_amount: float | None = None,
        max_results: int | None = None,
    ):
        """
        Initialize the shuffler.

        Args:
            buff_amount: Strength added to buffed players (default 50)
            nerf_amount: Strength removed from nerfed players (default 50)
            max_results: Number of ranked splits returned (default 100)
        """
        settings = BALANCER_SETTINGS
        self.max_results = max_results if max_results is not None else settings["max_results"]
        if self.max_results < 1:
            raise ValueError(f"max_results must be at least 1, got {self.max_results}")
        self.balancing_service = TeamBalancingService(
            buff_amount=buff_amount if buff_amount is not None else settings["buff_amount"],
            nerf_amount=nerf_amount if nerf_amount is not None else settings["nerf_amount"],
        )

    def create_balanced_teams(
        self,
        players: Sequence[Player],
        buffed_names: Collection[str] = (),
        nerfed_names: Collection[str] = (),
        handicap_coefficient: float = 0.0,
        max_results: int | None = None,
    ) -> list[TeamResult]:
        """
        Rank all two-team splits of the roster.

        Args:
            players: Active roster (names unique; never mutated)
            buffed_names: Players given a temporary strength boost
            nerfed_names: Players given a temporary strength penalty
            handicap_coefficient: Scales the handicap added to the smaller team
            max_results: Override for the number of splits returned

        Returns:
            Splits sorted by strength_difference ascending; ties keep
            enumeration order.
        """
        limit = max_results if max_results is not None else self.max_results
        if limit < 1:
            return []

        adjusted_players = self.balancing_service.apply_modifiers(
            players, buffed_names, nerfed_names
        )
        total_players = len(adjusted_players)
        half_size = total_players // 2
        dedupe = half_size == total_players - half_size

        logger.debug(
            f"Evaluating {math.comb(total_players, half_size)} splits "
            f"({half_size}v{total_players - half_size}, coefficient={handicap_coefficient})"
        )

        # Max-heap of the best `limit` splits seen so far, keyed on
        # (difference, emission order). Emission order keeps ties stable.
        best: list[tuple[float, int, TeamResult]] = []
        seen_matchups: set[MatchupKey] = set()
        evaluated = 0

        for team1_indices in get_combinations(range(total_players), half_size):
            chosen = set(team1_indices)
            team1 = [adjusted_players[i] for i in team1_indices]
            team2 = [p for i, p in enumerate(adjusted_players) if i not in chosen]

            # [A,B] vs [C,D] is the same matchup as [C,D] vs [A,B]
            if dedupe:
                matchup_key = canonical_matchup_key(team1, team2)
                if matchup_key in seen_matchups:
                    continue
                seen_matchups.add(matchup_key)

            result = self.balancing_service.score_partition(team1, team2, handicap_coefficient)
            order = evaluated
            evaluated += 1

            if len(best) < limit:
                heapq.heappush(best, (-result.strength_difference, -order, result))
            elif result.strength_difference < -best[0][0]:
                heapq.heapreplace(best, (-result.strength_difference, -order, result))

        ranked = [result for _, _, result in sorted(best, key=lambda e: (-e[0], -e[1]))]

        if ranked:
            logger.debug(
                f"Evaluated {evaluated} unique splits, best difference "
                f"{ranked[0].strength_difference:g}"
            )
        if LOG_TOP_MATCHUPS and logger.isEnabledFor(logging.DEBUG):
            for i, result in enumerate(ranked[:5], 1):
                logger.debug(format_team_result(result, index=i))

        return ranked


def create_balanced_teams(
    players: Sequence[Player],
    buffed_names: Collection[str] = (),
    nerfed_names: Collection[str] = (),
    handicap_coefficient: float = 0.0,
    max_results: int | None = None,
) -> list[TeamResult]:
    """Rank all splits of a roster using the default shuffler settings."""
    return BalancedShuffler().create_balanced_teams(
        players, buffed_names, nerfed_names, handicap_coefficient, max_results
    )
