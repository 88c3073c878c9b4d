"""
Schema and migration management for SQLite database.
"""

import logging
import sqlite3

logger = logging.getLogger("qmg_teams.schema")


class SchemaManager:
    """
    Owns schema creation and migrations.

    Call initialize() to ensure schema is present and migrations are applied.
    """

    def __init__(self, db_path: str, use_uri: bool = False):
        self.db_path = db_path
        self.use_uri = use_uri

    def initialize(self) -> None:
        """Create base schema and apply migrations."""
        logger.info(f"Initializing database schema: {self.db_path}")
        with self._connect() as conn:
            cursor = conn.cursor()
            self._create_base_schema(cursor)
            self._create_schema_migrations_table(cursor)
            self._run_migrations(cursor)
            conn.commit()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, uri=self.use_uri)
        conn.row_factory = sqlite3.Row
        if not self.use_uri:  # Skip WAL for in-memory databases
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA busy_timeout=5000")
        return conn

    def _create_base_schema(self, cursor) -> None:
        # Rating store
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS player_ratings (
                name TEXT PRIMARY KEY,
                rating REAL NOT NULL,
                wins INTEGER DEFAULT 0,
                losses INTEGER DEFAULT 0,
                draws INTEGER DEFAULT 0,
                games_played INTEGER DEFAULT 0,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            """
        )

        # Match log (append-only apart from explicit deletes)
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS match_history (
                match_id INTEGER PRIMARY KEY AUTOINCREMENT,
                played_at TEXT NOT NULL,
                team1_players TEXT NOT NULL,
                team2_players TEXT NOT NULL,
                team1_score INTEGER NOT NULL,
                team2_score INTEGER NOT NULL,
                winner INTEGER NOT NULL,
                map_played TEXT,
                rating_changes TEXT NOT NULL
            )
            """
        )

    # --- Migration helpers ---

    def _add_column_if_not_exists(self, cursor, table: str, column: str, column_type: str) -> None:
        try:
            cursor.execute(f"ALTER TABLE {table} ADD COLUMN {column} {column_type}")
        except sqlite3.OperationalError:
            pass

    def _create_schema_migrations_table(self, cursor) -> None:
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS schema_migrations (
                name TEXT PRIMARY KEY,
                applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            """
        )

    def _run_migrations(self, cursor) -> None:
        applied = {row["name"] for row in cursor.execute("SELECT name FROM schema_migrations")}
        for name, action in self._get_migrations():
            if name in applied:
                continue
            logger.info(f"Applying migration: {name}")
            action(cursor)
            cursor.execute(
                "INSERT INTO schema_migrations (name) VALUES (?)",
                (name,),
            )

    def _get_migrations(self):
        return [
            ("create_app_settings_table", self._migration_create_app_settings_table),
            ("add_match_handicap_columns", self._migration_add_match_handicap_columns),
            ("add_indexes_v1", self._migration_add_indexes_v1),
        ]

    # --- Migrations ---

    def _migration_create_app_settings_table(self, cursor) -> None:
        # Holds the adaptive handicap coefficient; version guards optimistic updates
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS app_settings (
                key TEXT PRIMARY KEY,
                value REAL NOT NULL,
                version INTEGER NOT NULL DEFAULT 0,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            """
        )

    def _migration_add_match_handicap_columns(self, cursor) -> None:
        self._add_column_if_not_exists(cursor, "match_history", "handicap", "INTEGER DEFAULT 0")
        self._add_column_if_not_exists(
            cursor, "match_history", "handicap_coefficient_before", "REAL"
        )
        self._add_column_if_not_exists(
            cursor, "match_history", "handicap_coefficient_after", "REAL"
        )

    def _migration_add_indexes_v1(self, cursor) -> None:
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_player_ratings_rating ON player_ratings(rating DESC)"
        )
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_match_history_played_at ON match_history(played_at)"
        )
