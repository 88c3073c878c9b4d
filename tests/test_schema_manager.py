import sqlite3

from infrastructure.schema_manager import SchemaManager


def _tables(db_path):
    with sqlite3.connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT name FROM sqlite_master WHERE type='table'")
        return {row[0] for row in cursor.fetchall()}


def _columns(db_path, table):
    with sqlite3.connect(db_path) as conn:
        return {row[1] for row in conn.execute(f"PRAGMA table_info({table})")}


def test_schema_manager_initializes_tables(tmp_path):
    """Test that SchemaManager creates all required tables."""
    db_path = str(tmp_path / "test.db")
    SchemaManager(db_path).initialize()

    required = {"player_ratings", "match_history", "app_settings", "schema_migrations"}
    assert required.issubset(_tables(db_path))


def test_match_history_has_handicap_columns(tmp_path):
    db_path = str(tmp_path / "test.db")
    SchemaManager(db_path).initialize()

    columns = _columns(db_path, "match_history")
    assert {"handicap", "handicap_coefficient_before", "handicap_coefficient_after"} <= columns


def test_initialize_is_idempotent(tmp_path):
    """Running twice neither fails nor re-applies migrations."""
    db_path = str(tmp_path / "test.db")
    SchemaManager(db_path).initialize()
    SchemaManager(db_path).initialize()

    with sqlite3.connect(db_path) as conn:
        names = [row[0] for row in conn.execute("SELECT name FROM schema_migrations")]
    assert len(names) == len(set(names))
    assert "create_app_settings_table" in names
