"""
Shared formatting helpers for presenting candidate splits.
"""

from collections.abc import Iterable

from config import BALANCED_DIFF_THRESHOLD, UNBALANCED_DIFF_THRESHOLD
from domain.models.player import Player
from domain.models.team import TeamResult
from rating_system import calculate_uneven_team_handicap

QUALITY_BALANCED = "balanced"
QUALITY_FAIR = "fair"
QUALITY_UNBALANCED = "unbalanced"

# Team sizes shown when explaining the current handicap coefficient
HANDICAP_EXAMPLE_SIZES = ((2, 3), (5, 6))


def get_balance_quality(strength_difference: float) -> str:
    """Bucket a strength difference into balanced / fair / unbalanced."""
    if strength_difference <= BALANCED_DIFF_THRESHOLD:
        return QUALITY_BALANCED
    if strength_difference >= UNBALANCED_DIFF_THRESHOLD:
        return QUALITY_UNBALANCED
    return QUALITY_FAIR


def strength_difference_indicator(result: TeamResult) -> str:
    """
    Arrow pointing at the stronger side of a split.

    "" for balanced splits, ">" or "<" for fair ones, ">>" or "<<" for
    unbalanced ones. Raw team sums are compared, without handicap.
    """
    quality = get_balance_quality(result.strength_difference)
    if quality == QUALITY_BALANCED:
        return ""
    team1_stronger = result.team1_strength > result.team2_strength
    if quality == QUALITY_UNBALANCED:
        return ">>" if team1_stronger else "<<"
    return ">" if team1_stronger else "<"


def format_team(players: Iterable[Player]) -> str:
    return ", ".join(f"{p.name}({p.strength:g})" for p in players)


def format_team_result(result: TeamResult, index: int | None = None) -> str:
    """Single-line summary of a split, e.g. '#1 [A(2000), D(1400)] vs [...] diff 0'."""
    prefix = f"#{index} " if index is not None else ""
    indicator = strength_difference_indicator(result)
    line = (
        f"{prefix}[{format_team(result.team1)}] vs [{format_team(result.team2)}] "
        f"diff {result.strength_difference:g}"
    )
    if result.handicap:
        line += f" (handicap {result.handicap})"
    if indicator:
        line += f" {indicator}"
    return line


def format_handicap_examples(coefficient: float) -> list[str]:
    """Human-readable handicap values for common uneven splits."""
    lines = []
    for smaller, larger in HANDICAP_EXAMPLE_SIZES:
        points = calculate_uneven_team_handicap(smaller, larger, coefficient)
        lines.append(f"{smaller}v{larger} match: {points} rating points to smaller team")
    return lines
