"""
Repository for application-wide settings, chiefly the handicap coefficient.
"""

import logging
from collections.abc import Callable

from config import DEFAULT_HANDICAP_COEFFICIENT
from repositories.base_repository import BaseRepository
from repositories.interfaces import ISettingsRepository

logger = logging.getLogger("qmg_teams.repositories.settings")

HANDICAP_COEFFICIENT_KEY = "handicap_coefficient"


class SettingsRepository(BaseRepository, ISettingsRepository):
    """
    Persists the adaptive handicap coefficient.

    The coefficient is the only state shared across balancing calls. It is
    created with the configured default on first use and read-modify-written
    at most once per recorded uneven match.
    """

    def __init__(self, db_path: str, default_coefficient: float = DEFAULT_HANDICAP_COEFFICIENT):
        super().__init__(db_path)
        self.default_coefficient = default_coefficient

    def _read(self, cursor) -> tuple[float, int] | None:
        cursor.execute(
            "SELECT value, version FROM app_settings WHERE key = ?",
            (HANDICAP_COEFFICIENT_KEY,),
        )
        row = cursor.fetchone()
        return (row["value"], row["version"]) if row else None

    def _write(self, cursor, value: float) -> None:
        cursor.execute(
            """
            INSERT INTO app_settings (key, value, version)
            VALUES (?, ?, 1)
            ON CONFLICT(key) DO UPDATE SET
                value = excluded.value,
                version = app_settings.version + 1,
                updated_at = CURRENT_TIMESTAMP
            """,
            (HANDICAP_COEFFICIENT_KEY, value),
        )

    def get_handicap_coefficient(self, conn=None) -> float:
        """Current coefficient, or the default if none was stored yet."""
        with self._borrow(conn) as conn:
            stored = self._read(conn.cursor())
        return stored[0] if stored else self.default_coefficient

    def set_handicap_coefficient(self, value: float, conn=None) -> None:
        with self._borrow(conn) as conn:
            self._write(conn.cursor(), value)

    def update_handicap_coefficient(
        self, update: Callable[[float], float], conn=None
    ) -> tuple[float, float]:
        """
        Atomically read, transform and persist the coefficient.

        The read and the write happen inside one immediate-lock transaction,
        so concurrent match recordings serialize rather than overwrite each
        other's adjustment.

        Args:
            update: Pure function mapping the current value to the new value
            conn: Open connection to run on instead of a transaction of its own

        Returns:
            Tuple of (old_value, new_value)
        """
        with self._borrow(conn, atomic=True) as conn:
            cursor = conn.cursor()
            stored = self._read(cursor)
            old_value = stored[0] if stored else self.default_coefficient
            new_value = update(old_value)
            self._write(cursor, new_value)
        logger.info(f"Handicap coefficient adjusted: {old_value:.2f} -> {new_value:.2f}")
        return old_value, new_value

    def compare_and_set_handicap_coefficient(self, expected: float, new_value: float) -> bool:
        """
        Persist new_value only if the stored coefficient still equals expected.

        Returns:
            True if the write happened, False if another writer got there first
        """
        with self.atomic_transaction() as conn:
            cursor = conn.cursor()
            stored = self._read(cursor)
            current = stored[0] if stored else self.default_coefficient
            if current != expected:
                logger.warning(
                    f"Coefficient changed concurrently (expected {expected}, found {current})"
                )
                return False
            self._write(cursor, new_value)
            return True
