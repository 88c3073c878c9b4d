"""
Repository for match history data access.
"""

import json
import logging
from datetime import datetime

from domain.models.match import MatchRecord
from domain.models.player import Player
from repositories.base_repository import BaseRepository
from repositories.interfaces import IMatchRepository

logger = logging.getLogger("qmg_teams.repositories.match")


class MatchRepository(BaseRepository, IMatchRepository):
    """
    Handles all match-log database operations.

    Responsibilities:
    - Match recording
    - History retrieval and deletion
    - Bulk replace for backup import

    Teams are stored as JSON lists of {"name", "strength"} so a match keeps
    the strengths its players had when it was played.
    """

    @staticmethod
    def _encode_team(players: list[Player]) -> str:
        return json.dumps([{"name": p.name, "strength": p.strength} for p in players])

    @staticmethod
    def _decode_team(raw: str) -> list[Player]:
        return [Player(name=p["name"], strength=p["strength"]) for p in json.loads(raw)]

    def _row_to_record(self, row) -> MatchRecord:
        return MatchRecord(
            match_id=row["match_id"],
            played_at=datetime.fromisoformat(row["played_at"]),
            team1=self._decode_team(row["team1_players"]),
            team2=self._decode_team(row["team2_players"]),
            team1_score=row["team1_score"],
            team2_score=row["team2_score"],
            winner=row["winner"],
            map_played=row["map_played"],
            rating_changes=json.loads(row["rating_changes"]),
            handicap=row["handicap"] or 0,
            handicap_coefficient_before=row["handicap_coefficient_before"],
            handicap_coefficient_after=row["handicap_coefficient_after"],
        )

    def _record_params(self, record: MatchRecord) -> tuple:
        return (
            record.played_at.isoformat(),
            self._encode_team(record.team1),
            self._encode_team(record.team2),
            record.team1_score,
            record.team2_score,
            record.winner,
            record.map_played,
            json.dumps(record.rating_changes),
            record.handicap,
            record.handicap_coefficient_before,
            record.handicap_coefficient_after,
        )

    _INSERT_SQL = """
        INSERT INTO match_history (played_at, team1_players, team2_players,
                                   team1_score, team2_score, winner, map_played,
                                   rating_changes, handicap,
                                   handicap_coefficient_before, handicap_coefficient_after)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
    """

    def record_match(self, record: MatchRecord, conn=None) -> int:
        """
        Append a match to the log.

        Returns:
            Match ID
        """
        with self._borrow(conn) as conn:
            cursor = conn.cursor()
            cursor.execute(self._INSERT_SQL, self._record_params(record))
            match_id = cursor.lastrowid
        record.match_id = match_id
        logger.debug(f"Stored match {match_id}")
        return match_id

    def get(self, match_id: int) -> MatchRecord | None:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM match_history WHERE match_id = ?", (match_id,))
            row = cursor.fetchone()
            return self._row_to_record(row) if row else None

    def get_all(self, newest_first: bool = True) -> list[MatchRecord]:
        order = "DESC" if newest_first else "ASC"
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT * FROM match_history ORDER BY played_at {order}, match_id {order}"
            )
            return [self._row_to_record(row) for row in cursor.fetchall()]

    def delete(self, match_id: int) -> bool:
        """Remove a match from the log. Ratings are left untouched."""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM match_history WHERE match_id = ?", (match_id,))
            return cursor.rowcount > 0

    def delete_all(self) -> int:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM match_history")
            count = cursor.rowcount
        logger.info(f"Cleared {count} match(es) from history")
        return count

    def replace_all(self, records: list[MatchRecord], conn=None) -> None:
        """Replace the whole match log in one transaction (IDs are reassigned)."""
        with self._borrow(conn, atomic=True) as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM match_history")
            for record in records:
                cursor.execute(self._INSERT_SQL, self._record_params(record))
                record.match_id = cursor.lastrowid
