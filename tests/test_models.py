"""
Tests for domain models.
"""

from datetime import datetime, timedelta, timezone

import pytest

from domain.models.match import (
    DRAW,
    OUTCOME_DRAW,
    OUTCOME_LOSS,
    OUTCOME_WIN,
    TEAM1_WON,
    TEAM2_WON,
    MatchRecord,
    winner_from_scores,
)
from domain.models.player import Player, PlayerRating
from domain.models.team import TeamResult


class TestPlayer:
    def test_with_strength_returns_copy(self):
        player = Player("A", 1000)
        buffed = player.with_strength(1050)
        assert buffed == Player("A", 1050)
        assert player.strength == 1000

    def test_players_are_immutable(self):
        with pytest.raises(AttributeError):
            Player("A", 1000).strength = 5


class TestPlayerRating:
    def test_win_rate(self):
        rating = PlayerRating("A", 1000, wins=3, losses=1, games_played=4)
        assert rating.get_win_rate() == 75.0
        assert rating.get_win_loss_differential() == 2

    def test_win_rate_without_games(self):
        assert PlayerRating("A", 1000).get_win_rate() is None

    def test_to_player(self):
        assert PlayerRating("A", 1234).to_player() == Player("A", 1234)


class TestTeamResult:
    def test_raw_strengths_exclude_handicap(self):
        result = TeamResult(
            team1=[Player("A", 2000), Player("B", 1800)],
            team2=[Player("C", 1600), Player("D", 1400), Player("E", 1200)],
            strength_difference=300,
            handicap=100,
        )
        assert result.team1_strength == 3800
        assert result.team2_strength == 4200
        assert result.is_uneven
        assert result.team_names() == (["A", "B"], ["C", "D", "E"])


class TestWinnerFromScores:
    @pytest.mark.parametrize(
        "score1,score2,expected", [(13, 7, TEAM1_WON), (7, 13, TEAM2_WON), (10, 10, DRAW), (0, 0, DRAW)]
    )
    def test_winner(self, score1, score2, expected):
        assert winner_from_scores(score1, score2) == expected


class TestMatchRecord:
    def _record(self, **kwargs):
        defaults = dict(
            team1=[Player("A", 2000), Player("D", 1400)],
            team2=[Player("B", 1800), Player("C", 1600)],
            team1_score=13,
            team2_score=7,
            winner=TEAM1_WON,
            rating_changes={"A": 16, "D": 16, "B": -16, "C": -16},
        )
        defaults.update(kwargs)
        return MatchRecord(**defaults)

    def test_outcome_for_player(self):
        record = self._record()
        assert record.get_outcome_for_player("A") == OUTCOME_WIN
        assert record.get_outcome_for_player("B") == OUTCOME_LOSS
        assert record.get_outcome_for_player("Zed") is None

    def test_outcome_for_draw(self):
        record = self._record(team1_score=5, team2_score=5, winner=DRAW)
        assert record.is_draw
        assert record.get_outcome_for_player("C") == OUTCOME_DRAW

    def test_team_for_player(self):
        record = self._record()
        assert record.get_team_for_player("D") == 1
        assert record.get_team_for_player("C") == 2

    def test_to_dict_keys(self):
        data = self._record(map_played="Mirage").to_dict()
        assert data["team1Score"] == 13
        assert data["mapPlayed"] == "Mirage"
        assert data["ratingChanges"]["B"] == -16
        assert data["team2"][1] == {"name": "C", "strength": 1600}

    def test_from_dict_restores_record(self):
        record = self._record(handicap=50, handicap_coefficient_before=300.0)
        restored = MatchRecord.from_dict(record.to_dict())
        assert restored.team1 == record.team1
        assert restored.rating_changes == record.rating_changes
        assert restored.handicap == 50
        assert restored.played_at == record.played_at

    def test_from_dict_defaults_optional_fields(self):
        data = {
            "date": "2024-03-01T20:00:00",
            "team1": [{"name": "A", "strength": 1000}],
            "team2": [{"name": "B", "strength": 1000}],
            "team1Score": 1,
            "team2Score": 0,
            "winner": 1,
        }
        record = MatchRecord.from_dict(data)
        assert record.handicap == 0
        assert record.map_played is None
        assert record.rating_changes == {}
        assert record.played_at.tzinfo == timezone.utc

    def test_from_dict_normalises_timezone(self):
        plus_two = timezone(timedelta(hours=2))
        data = self._record(played_at=datetime(2024, 5, 1, 22, 0, tzinfo=plus_two)).to_dict()
        restored = MatchRecord.from_dict(data)
        assert restored.played_at == datetime(2024, 5, 1, 20, 0, tzinfo=timezone.utc)
        assert restored.played_at.utcoffset() == timedelta(0)

    def test_from_dict_reads_zulu_suffix(self):
        """Browser exports end timestamps in "Z" instead of an offset."""
        data = self._record().to_dict()
        data["date"] = "2024-05-01T18:30:00.000Z"
        restored = MatchRecord.from_dict(data)
        assert restored.played_at == datetime(2024, 5, 1, 18, 30, tzinfo=timezone.utc)
