"""
Base repository with common database operations.
"""

import logging
from abc import ABC
from contextlib import contextmanager

from database import Database

logger = logging.getLogger("qmg_teams.repositories")


class BaseRepository(ABC):
    """
    Shared connection handling for the SQLite repositories.

    Every public method opens its own short-lived connection, so repository
    instances are cheap and safe to share between threads.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path
        self.database = Database.for_path(db_path)

    def get_connection(self):
        return self.database.get_connection()

    @contextmanager
    def _transaction(self, begin: str | None):
        conn = self.get_connection()
        try:
            if begin:
                conn.execute(begin)
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            logger.debug(f"Rolled back transaction on {self.db_path}")
            raise
        finally:
            conn.close()

    def connection(self):
        """
        Connection that commits on success and rolls back on error.

        Writes start a transaction lazily, at the first modifying statement.
        """
        return self._transaction(None)

    def atomic_transaction(self):
        """
        Connection holding the write lock from the first statement.

        Use for read-modify-write cycles: with BEGIN IMMEDIATE, two writers
        (e.g. concurrent match recordings adjusting the handicap coefficient)
        queue on the lock instead of both reading the same old value.

        Usage:
            with self.atomic_transaction() as conn:
                cursor = conn.cursor()
                cursor.execute(...)
        """
        return self._transaction("BEGIN IMMEDIATE")

    @contextmanager
    def _borrow(self, conn=None, atomic: bool = False):
        """
        Run on the caller's connection when one is given, else on our own.

        Passing conn lets a service group writes from several repositories
        into one transaction; commit and rollback are then left to the owner.
        """
        if conn is not None:
            yield conn
            return
        with (self.atomic_transaction() if atomic else self.connection()) as own:
            yield own
