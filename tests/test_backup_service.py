"""
Tests for JSON export/import of the whole store.
"""

import json
import sqlite3

import pytest

from domain.models.player import Player
from repositories.match_repository import MatchRepository
from repositories.player_repository import PlayerRepository
from repositories.settings_repository import SettingsRepository
from services import error_codes
from services.backup_service import BackupService


@pytest.fixture
def populated(match_service, sample_players):
    a, b, c, d = sample_players
    match_service.record_match([a, d], [b, c], 13, 7, map_played="Nuke")
    match_service.record_match([Player("A", 2000), Player("B", 1800)], [c, d, Player("E", 1000)], 9, 13)
    return match_service


class TestExport:
    """Test export layout."""

    def test_export_keys(self, backup_service, populated):
        data = json.loads(backup_service.export_data())
        assert set(data) == {"matchHistory", "playerRatings", "handicapCoefficient", "exportDate"}
        assert len(data["matchHistory"]) == 2
        assert set(data["playerRatings"]) == {"A", "B", "C", "D", "E"}

    def test_export_rating_fields(self, backup_service, populated):
        data = json.loads(backup_service.export_data())
        entry = data["playerRatings"]["A"]
        assert set(entry) == {"rating", "wins", "losses", "draws", "gamesPlayed"}
        assert entry["gamesPlayed"] == 2

    def test_export_match_fields(self, backup_service, populated):
        data = json.loads(backup_service.export_data())
        match = data["matchHistory"][-1]
        assert match["mapPlayed"] == "Nuke"
        assert match["team1"][0] == {"name": "A", "strength": 2000}
        assert match["winner"] == 1

    def test_export_coefficient(self, backup_service, populated, settings_repository):
        data = json.loads(backup_service.export_data())
        assert data["handicapCoefficient"] == pytest.approx(
            settings_repository.get_handicap_coefficient()
        )

    def test_export_empty_store(self, backup_service):
        data = json.loads(backup_service.export_data())
        assert data["matchHistory"] == []
        assert data["playerRatings"] == {}
        assert data["handicapCoefficient"] == 300.0


class TestImport:
    """Test restoring a backup."""

    def test_round_trip_into_fresh_store(self, backup_service, populated, tmp_path):
        exported = backup_service.export_data()

        other_db = str(tmp_path / "restore.db")
        players = PlayerRepository(other_db)
        matches = MatchRepository(other_db)
        settings = SettingsRepository(other_db)
        restored = BackupService(players, matches, settings)

        result = restored.import_data(exported)
        assert result.success
        assert result.value == {"ratings": 5, "matches": 2}
        assert {r.name for r in players.get_all()} == {"A", "B", "C", "D", "E"}
        assert len(matches.get_all()) == 2
        assert settings.get_handicap_coefficient() == pytest.approx(
            backup_service.settings_repo.get_handicap_coefficient()
        )

    def test_import_replaces_existing(self, backup_service, player_repository):
        player_repository.add("Stale", 1000)
        payload = json.dumps({"playerRatings": {"Fresh": {"rating": 1300, "wins": 2}}})

        assert backup_service.import_data(payload).success
        assert not player_repository.exists("Stale")
        fresh = player_repository.get("Fresh")
        assert fresh.rating == 1300
        assert fresh.wins == 2
        assert fresh.games_played == 0

    def test_missing_sections_untouched(self, backup_service, populated, match_repository):
        backup_service.import_data(json.dumps({"playerRatings": {}}))
        assert len(match_repository.get_all()) == 2

    def test_matches_get_chronological_ids(self, backup_service, populated, match_repository):
        exported = backup_service.export_data()
        backup_service.import_data(exported)
        oldest_first = match_repository.get_all(newest_first=False)
        ids = [m.match_id for m in oldest_first]
        assert ids == sorted(ids)

    def test_invalid_json(self, backup_service):
        result = backup_service.import_data("{not json")
        assert not result.success
        assert result.error_code == error_codes.VALIDATION_ERROR

    def test_non_object(self, backup_service):
        result = backup_service.import_data("[1, 2, 3]")
        assert result.error_code == error_codes.VALIDATION_ERROR

    def test_malformed_content_writes_nothing(self, backup_service, populated, player_repository):
        before = player_repository.get_all()
        payload = json.dumps(
            {
                "playerRatings": {"X": {"rating": 1000}},
                "matchHistory": [{"team1": []}],
            }
        )
        result = backup_service.import_data(payload)

        assert result.error_code == error_codes.INVALID_BACKUP
        assert player_repository.get_all() == before

    def test_failed_write_leaves_store_untouched(
        self, backup_service, populated, player_repository, match_repository, monkeypatch
    ):
        """Matches and ratings are not replaced when a later section fails to save."""
        ratings_before = player_repository.get_all()
        matches_before = match_repository.get_all()
        payload = json.dumps(
            {
                "playerRatings": {"X": {"rating": 1000}},
                "matchHistory": [],
                "handicapCoefficient": 250,
            }
        )

        def fail_set(value, conn=None):
            raise sqlite3.OperationalError("disk I/O error")

        monkeypatch.setattr(backup_service.settings_repo, "set_handicap_coefficient", fail_set)
        with pytest.raises(sqlite3.OperationalError):
            backup_service.import_data(payload)

        assert player_repository.get_all() == ratings_before
        assert match_repository.get_all() == matches_before
