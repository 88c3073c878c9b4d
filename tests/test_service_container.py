"""Tests for ServiceContainer."""

import pytest

from domain.models.player import Player
from infrastructure.service_container import ServiceConfig, ServiceContainer
from services.lobby_service import LobbyService


@pytest.fixture
def config(temp_db_path):
    """Create a test configuration."""
    return ServiceConfig(db_path=temp_db_path, max_results=20, default_handicap_coefficient=240.0)


@pytest.fixture
def container(config):
    container = ServiceContainer(config)
    container.initialize()
    return container


class TestServiceContainerInitialization:
    """Tests for ServiceContainer initialization."""

    def test_initialize_creates_repositories(self, container):
        assert container.player_repo is not None
        assert container.match_repo is not None
        assert container.settings_repo is not None

    def test_initialize_creates_services(self, container):
        assert container.player_service is not None
        assert container.match_service is not None
        assert container.backup_service is not None

    def test_initialize_is_idempotent(self, container):
        player_repo = container.player_repo
        container.initialize()
        assert container.player_repo is player_repo

    def test_services_require_initialize(self, config):
        container = ServiceContainer(config)
        assert not container.is_initialized
        with pytest.raises(RuntimeError):
            _ = container.match_service

    def test_config_reaches_components(self, container):
        assert container.shuffler.max_results == 20
        assert container.settings_repo.get_handicap_coefficient() == 240.0


class TestCreateLobby:
    """Tests for lobby construction."""

    def test_lobby_from_store(self, container):
        for name, rating in (("A", 2000), ("B", 1800), ("C", 1600), ("D", 1400)):
            container.player_service.register_player(name, rating)

        lobby = container.create_lobby()
        assert isinstance(lobby, LobbyService)
        best = lobby.generate_teams().unwrap()[0]
        assert best.strength_difference == 0

    def test_lobby_from_named_players(self, container):
        for name in "ABCDE":
            container.player_service.register_player(name, 1000)
        lobby = container.create_lobby(names=["A", "B", "C", "D"])
        assert [p.name for p in lobby.get_active_players()] == ["A", "B", "C", "D"]

    def test_names_select_from_explicit_roster(self, container):
        roster = [Player(n, 1000) for n in "VWXYZ"]
        lobby = container.create_lobby(names=["W", "X", "Y", "Z"], roster=roster)
        assert [p.name for p in lobby.get_active_players()] == ["W", "X", "Y", "Z"]

    def test_unknown_name_refused(self, container):
        for name in "ABCD":
            container.player_service.register_player(name, 1000)
        with pytest.raises(ValueError, match="Unknown player"):
            container.create_lobby(names=["A", "B", "C", "Dx"])

    def test_lobby_and_match_share_coefficient(self, container):
        """A recorded uneven match changes the handicap the next lobby uses."""
        pair = [Player("P1", 2000), Player("P2", 1800)]
        trio = [Player("P3", 1600), Player("P4", 1400), Player("P5", 1200)]
        container.match_service.record_match(pair, trio, 0, 13)

        lobby = container.create_lobby(roster=pair + trio)
        assert lobby.effective_handicap_coefficient() > 240.0
