"""
Repository for player rating data access.
"""

import logging

from domain.models.match import OUTCOME_DRAW, OUTCOME_LOSS, OUTCOME_WIN
from domain.models.player import PlayerRating
from repositories.base_repository import BaseRepository
from repositories.interfaces import IPlayerRepository

logger = logging.getLogger("qmg_teams.repositories.player")

_OUTCOME_COLUMNS = {
    OUTCOME_WIN: "wins",
    OUTCOME_LOSS: "losses",
    OUTCOME_DRAW: "draws",
}


class PlayerRepository(BaseRepository, IPlayerRepository):
    """
    Handles all rating-store operations.

    Responsibilities:
    - CRUD operations for player ratings
    - Win/loss/draw counters
    - Bulk replace for backup import
    """

    @staticmethod
    def _row_to_rating(row) -> PlayerRating:
        return PlayerRating(
            name=row["name"],
            rating=row["rating"],
            wins=row["wins"] or 0,
            losses=row["losses"] or 0,
            draws=row["draws"] or 0,
            games_played=row["games_played"] or 0,
        )

    def add(self, name: str, rating: float) -> None:
        """
        Add a new player with a starting rating.

        Raises:
            ValueError: If a player with that name already exists
        """
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT 1 FROM player_ratings WHERE name = ?", (name,))
            if cursor.fetchone():
                raise ValueError(f"Player with name {name} already exists.")
            cursor.execute(
                "INSERT INTO player_ratings (name, rating) VALUES (?, ?)",
                (name, rating),
            )

    def get(self, name: str) -> PlayerRating | None:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM player_ratings WHERE name = ?", (name,))
            row = cursor.fetchone()
            return self._row_to_rating(row) if row else None

    def get_many(self, names: list[str], conn=None) -> dict[str, PlayerRating]:
        """Get ratings for several players keyed by name; unknown names are omitted."""
        if not names:
            return {}
        placeholders = ",".join("?" * len(names))
        with self._borrow(conn) as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT * FROM player_ratings WHERE name IN ({placeholders})",
                list(names),
            )
            return {row["name"]: self._row_to_rating(row) for row in cursor.fetchall()}

    def get_all(self) -> list[PlayerRating]:
        """All players, highest rating first."""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM player_ratings ORDER BY rating DESC, name ASC")
            return [self._row_to_rating(row) for row in cursor.fetchall()]

    def exists(self, name: str) -> bool:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT 1 FROM player_ratings WHERE name = ?", (name,))
            return cursor.fetchone() is not None

    def set_rating(self, name: str, rating: float) -> None:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                UPDATE player_ratings
                SET rating = ?, updated_at = CURRENT_TIMESTAMP
                WHERE name = ?
                """,
                (rating, name),
            )

    def apply_match_result(
        self, name: str, rating_change: int, outcome: str, initial_rating: float, conn=None
    ) -> None:
        """
        Apply one match outcome to a player's rating record.

        Unknown players are created with `initial_rating` first, so a match
        can be recorded for guests that were never registered.

        Args:
            name: Player name
            rating_change: Elo delta to add
            outcome: "win", "loss" or "draw"
            initial_rating: Starting rating for a player not yet in the store
            conn: Open connection to write on, for callers grouping several writes
        """
        column = _OUTCOME_COLUMNS.get(outcome)
        if column is None:
            raise ValueError(f"Unknown match outcome: {outcome}")

        with self._borrow(conn) as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO player_ratings (name, rating)
                VALUES (?, ?)
                ON CONFLICT(name) DO NOTHING
                """,
                (name, initial_rating),
            )
            cursor.execute(
                f"""
                UPDATE player_ratings
                SET rating = rating + ?,
                    {column} = COALESCE({column}, 0) + 1,
                    games_played = COALESCE(games_played, 0) + 1,
                    updated_at = CURRENT_TIMESTAMP
                WHERE name = ?
                """,
                (rating_change, name),
            )

    def delete(self, name: str) -> bool:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM player_ratings WHERE name = ?", (name,))
            return cursor.rowcount > 0

    def delete_all(self) -> int:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM player_ratings")
            count = cursor.rowcount
        logger.info(f"Deleted {count} player rating(s)")
        return count

    def replace_all(self, ratings: list[PlayerRating], conn=None) -> None:
        """Replace the whole rating store in one transaction."""
        with self._borrow(conn, atomic=True) as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM player_ratings")
            cursor.executemany(
                """
                INSERT INTO player_ratings (name, rating, wins, losses, draws, games_played)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                [
                    (r.name, r.rating, r.wins, r.losses, r.draws, r.games_played)
                    for r in ratings
                ],
            )
