"""
Elo rating deltas and the adaptive uneven-team handicap.

All functions here are pure. The handicap coefficient is passed in and
returned as a value; reading and persisting it is the caller's job (see
repositories.settings_repository).

Sign convention for the handicap:
- Team ranking ADDS the handicap to the smaller team's summed strength, which
  pushes the balancer toward giving the smaller team stronger players.
- Rating updates SUBTRACT the handicap from the smaller team's average rating
  basis, so a handicap-assisted win does not earn an inflated rating gain.
"""

import math
from collections.abc import Iterable

from config import (
    ELO_K_FACTOR,
    ELO_SCALE,
    HANDICAP_COEFFICIENT_MAX,
    HANDICAP_COEFFICIENT_MIN,
    HANDICAP_LEARNING_RATE,
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity."""
    return math.floor(value + 0.5)


def _actual_score(won: bool, draw: bool) -> float:
    if draw:
        return 0.5
    return 1.0 if won else 0.0


def calculate_uneven_team_handicap(
    smaller_size: int, larger_size: int, coefficient: float
) -> int:
    """
    Handicap points owed to the smaller team of an uneven split.

    handicap = round(coefficient * (1 - smaller / larger))

    2v3 at coefficient 300 -> 100 points, 5v6 -> 50 points. Equal sizes
    (or an empty larger team) produce 0.
    """
    if larger_size <= 0 or smaller_size == larger_size:
        return 0
    ratio = 1 - (smaller_size / larger_size)
    return round_half_up(coefficient * ratio)


def expected_score(team_avg_rating: float, opponent_avg_rating: float) -> float:
    """Logistic expected score of a team against an opponent (0..1)."""
    return 1.0 / (1.0 + 10 ** ((opponent_avg_rating - team_avg_rating) / ELO_SCALE))


def calculate_rating_change(
    team_avg_rating: float,
    opponent_avg_rating: float,
    won: bool,
    k_factor: float = ELO_K_FACTOR,
    *,
    draw: bool = False,
) -> int:
    """
    Elo rating delta for every player on a team.

    All members of a team share the same delta: outcomes are attributed to
    the team, using team average ratings as the basis.
    """
    expected = expected_score(team_avg_rating, opponent_avg_rating)
    return round_half_up(k_factor * (_actual_score(won, draw) - expected))


def adjust_handicap_coefficient(
    current_coefficient: float,
    smaller_team_won: bool,
    expected_win_probability: float,
    learning_rate: float = HANDICAP_LEARNING_RATE,
    *,
    draw: bool = False,
) -> float:
    """
    Move the handicap coefficient against the observed prediction error.

    A smaller team that beats its expected win probability was
    over-compensated, so the coefficient shrinks; one that under-performs
    makes it grow. The result is clamped to the configured bounds.
    """
    error = _actual_score(smaller_team_won, draw) - expected_win_probability
    adjustment = -error * learning_rate
    new_coefficient = current_coefficient + adjustment
    return max(HANDICAP_COEFFICIENT_MIN, min(HANDICAP_COEFFICIENT_MAX, new_coefficient))


def team_average_rating(ratings: Iterable[float]) -> float:
    """Mean of a team's ratings, 0.0 for an empty team."""
    values = list(ratings)
    if not values:
        return 0.0
    return sum(values) / len(values)
