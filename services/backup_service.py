"""
JSON export and import of ratings, match history and the handicap coefficient.
"""

import json
import logging
from datetime import datetime, timezone

from domain.models.match import MatchRecord
from domain.models.player import PlayerRating
from repositories.interfaces import IMatchRepository, IPlayerRepository, ISettingsRepository
from services import error_codes
from services.result import Result

logger = logging.getLogger("qmg_teams.services.backup")


class BackupService:
    """
    Whole-store backup in the same shape the web client exported.

    Layout:
        {
            "matchHistory": [MatchRecord.to_dict(), ...],
            "playerRatings": {name: {"rating", "wins", "losses", "draws", "gamesPlayed"}},
            "handicapCoefficient": float,
            "exportDate": ISO timestamp
        }
    """

    def __init__(
        self,
        player_repo: IPlayerRepository,
        match_repo: IMatchRepository,
        settings_repo: ISettingsRepository,
    ):
        self.player_repo = player_repo
        self.match_repo = match_repo
        self.settings_repo = settings_repo

    def export_data(self) -> str:
        ratings = {
            r.name: {
                "rating": r.rating,
                "wins": r.wins,
                "losses": r.losses,
                "draws": r.draws,
                "gamesPlayed": r.games_played,
            }
            for r in self.player_repo.get_all()
        }
        payload = {
            "matchHistory": [m.to_dict() for m in self.match_repo.get_all(newest_first=True)],
            "playerRatings": ratings,
            "handicapCoefficient": self.settings_repo.get_handicap_coefficient(),
            "exportDate": datetime.now(timezone.utc).isoformat(),
        }
        logger.info(f"Exported {len(ratings)} rating(s), {len(payload['matchHistory'])} match(es)")
        return json.dumps(payload, indent=2)

    @staticmethod
    def _parse_ratings(raw: dict) -> list[PlayerRating]:
        ratings = []
        for name, data in raw.items():
            ratings.append(
                PlayerRating(
                    name=name,
                    rating=float(data["rating"]),
                    wins=int(data.get("wins", 0)),
                    losses=int(data.get("losses", 0)),
                    draws=int(data.get("draws", 0)),
                    games_played=int(data.get("gamesPlayed", 0)),
                )
            )
        return ratings

    def import_data(self, text: str) -> Result[dict]:
        """
        Replace ratings and match history with the contents of a backup.

        Sections missing from the backup are left as they are. Nothing is
        written unless the whole backup parses, and all sections are written
        in one transaction.

        Returns:
            Result with counts of imported ratings and matches
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            logger.warning(f"Refused backup import: invalid JSON ({exc})")
            return Result.fail(f"Backup is not valid JSON: {exc}", code=error_codes.VALIDATION_ERROR)
        if not isinstance(data, dict):
            return Result.fail("Backup must be a JSON object.", code=error_codes.VALIDATION_ERROR)

        try:
            matches = None
            if "matchHistory" in data:
                matches = [MatchRecord.from_dict(m) for m in data["matchHistory"]]
                matches.sort(key=lambda m: m.played_at)
            ratings = None
            if "playerRatings" in data:
                ratings = self._parse_ratings(data["playerRatings"])
            coefficient = data.get("handicapCoefficient")
            if coefficient is not None:
                coefficient = float(coefficient)
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            logger.warning(f"Refused backup import: malformed content ({exc!r})")
            return Result.fail(f"Backup is malformed: {exc}", code=error_codes.INVALID_BACKUP)

        with self.match_repo.atomic_transaction() as conn:
            if matches is not None:
                self.match_repo.replace_all(matches, conn=conn)
            if ratings is not None:
                self.player_repo.replace_all(ratings, conn=conn)
            if coefficient is not None:
                self.settings_repo.set_handicap_coefficient(coefficient, conn=conn)

        summary = {
            "ratings": len(ratings) if ratings is not None else 0,
            "matches": len(matches) if matches is not None else 0,
        }
        logger.info(f"Imported backup: {summary['ratings']} rating(s), {summary['matches']} match(es)")
        return Result.ok(summary)
