"""
Match recording: rating updates, handicap learning and the match log.
"""

import logging
from collections.abc import Mapping, Sequence

from domain.models.match import (
    DRAW,
    OUTCOME_DRAW,
    OUTCOME_LOSS,
    OUTCOME_WIN,
    TEAM1_WON,
    TEAM2_WON,
    MatchRecord,
    winner_from_scores,
)
from domain.models.player import Player
from rating_system import (
    adjust_handicap_coefficient,
    calculate_rating_change,
    calculate_uneven_team_handicap,
    expected_score,
    team_average_rating,
)
from repositories.interfaces import IMatchRepository, IPlayerRepository, ISettingsRepository
from services import error_codes
from services.result import Result

logger = logging.getLogger("qmg_teams.services.match")


class MatchService:
    """Records played matches and keeps ratings and the handicap coefficient in step."""

    def __init__(
        self,
        player_repo: IPlayerRepository,
        match_repo: IMatchRepository,
        settings_repo: ISettingsRepository,
    ):
        self.player_repo = player_repo
        self.match_repo = match_repo
        self.settings_repo = settings_repo

    @staticmethod
    def _validate_teams(team1: Sequence[Player], team2: Sequence[Player]) -> str | None:
        if not team1 or not team2:
            return "Both teams need at least one player."
        names1 = [p.name for p in team1]
        names2 = [p.name for p in team2]
        if len(set(names1)) != len(names1) or len(set(names2)) != len(names2):
            return "A player is listed twice on the same team."
        overlap = sorted(set(names1) & set(names2))
        if overlap:
            return f"Player(s) on both teams: {', '.join(overlap)}"
        return None

    @staticmethod
    def preview_rating_changes(
        team1: Sequence[Player],
        team2: Sequence[Player],
        winner: int,
        handicap_coefficient: float,
        ratings: Mapping[str, float] | None = None,
    ) -> dict:
        """
        Work out what recording a match would do, without writing anything.

        Each player's rating basis is their stored rating when known,
        otherwise the strength they played with. The smaller team of an
        uneven match has the handicap taken off its average, so a win it was
        given points for is not rewarded twice.

        Args:
            team1: First team
            team2: Second team
            winner: 1, 2, or 0 for a draw
            handicap_coefficient: Coefficient in effect for this match
            ratings: Stored ratings by name

        Returns:
            Dict with team1_change, team2_change, handicap, smaller_team
            (0 when even) and smaller_team_expected (None when even)
        """
        ratings = ratings or {}
        avg1 = team_average_rating(ratings.get(p.name, p.strength) for p in team1)
        avg2 = team_average_rating(ratings.get(p.name, p.strength) for p in team2)

        smaller_team = 0
        handicap = 0
        if len(team1) != len(team2):
            smaller_team = TEAM1_WON if len(team1) < len(team2) else TEAM2_WON
            handicap = calculate_uneven_team_handicap(
                min(len(team1), len(team2)), max(len(team1), len(team2)), handicap_coefficient
            )
            if smaller_team == TEAM1_WON:
                avg1 -= handicap
            else:
                avg2 -= handicap

        draw = winner == DRAW
        team1_change = calculate_rating_change(avg1, avg2, winner == TEAM1_WON, draw=draw)
        team2_change = calculate_rating_change(avg2, avg1, winner == TEAM2_WON, draw=draw)

        smaller_team_expected = None
        if smaller_team == TEAM1_WON:
            smaller_team_expected = expected_score(avg1, avg2)
        elif smaller_team == TEAM2_WON:
            smaller_team_expected = expected_score(avg2, avg1)

        return {
            "team1_change": team1_change,
            "team2_change": team2_change,
            "handicap": handicap,
            "smaller_team": smaller_team,
            "smaller_team_expected": smaller_team_expected,
        }

    def record_match(
        self,
        team1: Sequence[Player],
        team2: Sequence[Player],
        team1_score: int,
        team2_score: int,
        map_played: str | None = None,
    ) -> Result[MatchRecord]:
        """
        Record a played match.

        Ratings of every participant are updated (all members of a team get
        the same delta), the handicap coefficient learns from uneven
        matches, and the match is appended to the log.

        Returns:
            Result with the stored MatchRecord
        """
        problem = self._validate_teams(team1, team2)
        if problem:
            logger.warning(f"Refused match recording: {problem}")
            return Result.fail(problem, code=error_codes.INVALID_TEAMS)
        if team1_score < 0 or team2_score < 0:
            logger.warning(f"Refused match recording: negative score {team1_score}-{team2_score}")
            return Result.fail("Scores cannot be negative.", code=error_codes.INVALID_SCORE)

        winner = winner_from_scores(team1_score, team2_score)
        draw = winner == DRAW

        # Reads and writes share one immediate-lock transaction: a failure at
        # any step leaves ratings, coefficient and log as they were.
        with self.match_repo.atomic_transaction() as conn:
            stored = self.player_repo.get_many([p.name for p in (*team1, *team2)], conn=conn)
            ratings = {name: r.rating for name, r in stored.items()}
            coefficient = self.settings_repo.get_handicap_coefficient(conn=conn)
            preview = self.preview_rating_changes(team1, team2, winner, coefficient, ratings)

            rating_changes: dict[str, int] = {}
            for side, team, change in (
                (TEAM1_WON, team1, preview["team1_change"]),
                (TEAM2_WON, team2, preview["team2_change"]),
            ):
                if draw:
                    outcome = OUTCOME_DRAW
                else:
                    outcome = OUTCOME_WIN if side == winner else OUTCOME_LOSS
                for player in team:
                    self.player_repo.apply_match_result(
                        player.name, change, outcome, initial_rating=player.strength, conn=conn
                    )
                    rating_changes[player.name] = change

            coefficient_before = None
            coefficient_after = None
            smaller_team = preview["smaller_team"]
            if smaller_team:
                expected = preview["smaller_team_expected"]
                smaller_won = winner == smaller_team
                coefficient_before, coefficient_after = (
                    self.settings_repo.update_handicap_coefficient(
                        lambda current: adjust_handicap_coefficient(
                            current, smaller_won, expected, draw=draw
                        ),
                        conn=conn,
                    )
                )

            record = MatchRecord(
                team1=list(team1),
                team2=list(team2),
                team1_score=team1_score,
                team2_score=team2_score,
                winner=winner,
                rating_changes=rating_changes,
                map_played=map_played or None,
                handicap=preview["handicap"],
                handicap_coefficient_before=coefficient_before,
                handicap_coefficient_after=coefficient_after,
            )
            self.match_repo.record_match(record, conn=conn)

        logger.info(
            f"Recorded match {record.match_id}: {len(team1)}v{len(team2)} "
            f"{team1_score}-{team2_score} (winner={winner}, "
            f"changes={preview['team1_change']:+d}/{preview['team2_change']:+d}, "
            f"handicap={preview['handicap']})"
        )
        return Result.ok(record)

    def get_match_history(self) -> list[MatchRecord]:
        """All recorded matches, newest first."""
        return self.match_repo.get_all(newest_first=True)

    def delete_match(self, match_id: int) -> Result[None]:
        """Remove a match from the log. Ratings it produced are kept."""
        if not self.match_repo.delete(match_id):
            return Result.fail(f"Match {match_id} not found.", code=error_codes.MATCH_NOT_FOUND)
        logger.info(f"Deleted match {match_id}")
        return Result.ok()

    def clear_history(self) -> int:
        return self.match_repo.delete_all()
