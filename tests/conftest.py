"""
Pytest fixtures for tests.

Performance optimization: uses a session-scoped schema template so the
migrations run once; each test gets a copy of the resulting database file.
"""

import shutil

import pytest

from database import Database
from domain.models.player import Player
from repositories.match_repository import MatchRepository
from repositories.player_repository import PlayerRepository
from repositories.settings_repository import SettingsRepository
from services.backup_service import BackupService
from services.match_service import MatchService
from services.player_service import PlayerService
from shuffler import BalancedShuffler


@pytest.fixture(scope="session")
def _schema_template_path(tmp_path_factory):
    """
    Create a schema template database once per test session.

    Tests copy from this template instead of running schema initialization each time.
    """
    template_dir = tmp_path_factory.mktemp("schema_template")
    template_path = str(template_dir / "template.db")
    Database(template_path)
    yield template_path


@pytest.fixture
def temp_db_path(tmp_path):
    """Create a temporary database path (no schema)."""
    path = str(tmp_path / "temp.db")
    yield path


@pytest.fixture
def repo_db_path(_schema_template_path, tmp_path):
    """Create a temporary database with initialized schema for repository tests."""
    test_db_path = str(tmp_path / "test.db")
    shutil.copy2(_schema_template_path, test_db_path)
    yield test_db_path


@pytest.fixture
def sample_players():
    """Four players 200 apart: the textbook 2v2 roster."""
    return [
        Player(name="A", strength=2000),
        Player(name="B", strength=1800),
        Player(name="C", strength=1600),
        Player(name="D", strength=1400),
    ]


@pytest.fixture
def ten_players():
    return [Player(name=f"Player{i}", strength=1000 + i * 100) for i in range(10)]


@pytest.fixture
def player_repository(repo_db_path):
    """Create a player repository with temp database."""
    return PlayerRepository(repo_db_path)


@pytest.fixture
def match_repository(repo_db_path):
    """Create a match repository with temp database."""
    return MatchRepository(repo_db_path)


@pytest.fixture
def settings_repository(repo_db_path):
    """Settings repository starting at the default coefficient of 300."""
    return SettingsRepository(repo_db_path, default_coefficient=300.0)


@pytest.fixture
def shuffler():
    return BalancedShuffler(buff_amount=50, nerf_amount=50, max_results=100)


@pytest.fixture
def player_service(player_repository):
    return PlayerService(player_repository)


@pytest.fixture
def match_service(player_repository, match_repository, settings_repository):
    return MatchService(player_repository, match_repository, settings_repository)


@pytest.fixture
def backup_service(player_repository, match_repository, settings_repository):
    return BackupService(player_repository, match_repository, settings_repository)
