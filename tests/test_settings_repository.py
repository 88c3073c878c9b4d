"""
Tests for handicap coefficient persistence.
"""

import threading

import pytest

from repositories.settings_repository import SettingsRepository


class TestHandicapCoefficient:
    """Test coefficient read/write."""

    def test_default_when_unset(self, settings_repository):
        assert settings_repository.get_handicap_coefficient() == 300.0

    def test_custom_default(self, repo_db_path):
        repo = SettingsRepository(repo_db_path, default_coefficient=150.0)
        assert repo.get_handicap_coefficient() == 150.0

    def test_set_and_get(self, settings_repository):
        settings_repository.set_handicap_coefficient(275.5)
        assert settings_repository.get_handicap_coefficient() == 275.5

    def test_persists_across_instances(self, repo_db_path):
        SettingsRepository(repo_db_path).set_handicap_coefficient(420.0)
        assert SettingsRepository(repo_db_path).get_handicap_coefficient() == 420.0


class TestAtomicUpdate:
    """Test read-modify-write of the coefficient."""

    def test_update_returns_old_and_new(self, settings_repository):
        old, new = settings_repository.update_handicap_coefficient(lambda c: c - 10)
        assert old == 300.0
        assert new == 290.0
        assert settings_repository.get_handicap_coefficient() == 290.0

    def test_update_failure_leaves_value(self, settings_repository):
        settings_repository.set_handicap_coefficient(310.0)

        def broken(_current):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            settings_repository.update_handicap_coefficient(broken)
        assert settings_repository.get_handicap_coefficient() == 310.0

    def test_concurrent_updates_are_not_lost(self, repo_db_path):
        """Every concurrent adjustment lands exactly once."""
        repo = SettingsRepository(repo_db_path, default_coefficient=300.0)
        workers = 8
        errors = []

        def bump():
            try:
                repo.update_handicap_coefficient(lambda c: c + 1)
            except Exception as exc:  # collected for the assertion below
                errors.append(exc)

        threads = [threading.Thread(target=bump) for _ in range(workers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert repo.get_handicap_coefficient() == 300.0 + workers


class TestCompareAndSet:
    """Test optimistic coefficient writes."""

    def test_succeeds_when_unchanged(self, settings_repository):
        assert settings_repository.compare_and_set_handicap_coefficient(300.0, 280.0) is True
        assert settings_repository.get_handicap_coefficient() == 280.0

    def test_fails_when_stale(self, settings_repository):
        settings_repository.set_handicap_coefficient(320.0)
        assert settings_repository.compare_and_set_handicap_coefficient(300.0, 280.0) is False
        assert settings_repository.get_handicap_coefficient() == 320.0
