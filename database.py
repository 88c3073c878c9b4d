"""
Database bootstrap for the rating store, match log and settings.
"""

import logging
import sqlite3

from config import DB_PATH
from infrastructure.schema_manager import SchemaManager

logger = logging.getLogger("qmg_teams.database")

# Busy timeout (ms) for writers waiting on the immediate lock
BUSY_TIMEOUT_MS = 5000


class Database:
    """
    One SQLite file with the schema applied.

    Use Database.for_path() to share a single instance per file, so the
    schema check runs once per process and path.
    """

    _instances: dict[str, "Database"] = {}

    def __init__(self, db_path: str = DB_PATH):
        self.db_path = db_path
        SchemaManager(db_path).initialize()

    @classmethod
    def for_path(cls, db_path: str) -> "Database":
        database = cls._instances.get(db_path)
        if database is None:
            database = cls(db_path)
            cls._instances[db_path] = database
        return database

    def get_connection(self) -> sqlite3.Connection:
        """Open a connection with row access by column name and WAL enabled."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute(f"PRAGMA busy_timeout={BUSY_TIMEOUT_MS}")
        return conn
