"""Tests for the smart sports client fallbacks"""

import pytest
from unittest.mock import Mock

from sliptactix.data.models import GameStats, TeamInfo
from sliptactix.data.smart_client import SmartSportsClient


@pytest.fixture
def sports_data():
    client = Mock()
    client.current_season = "2024-25"
    return client


@pytest.fixture
def espn():
    return Mock()


@pytest.fixture
def smart(sports_data, espn):
    return SmartSportsClient(sports_data=sports_data, espn=espn)


class TestTeamLookup:
    def test_primary_source(self, smart, sports_data, espn):
        sports_data.get_team_by_name.return_value = TeamInfo(team_id="LOS_ANGELES_LAKERS_NBA", name="Los Angeles Lakers")
        team = smart.get_team_by_name("lakers")
        assert team.team_id == "LOS_ANGELES_LAKERS_NBA"
        espn.get_team_by_name.assert_not_called()

    def test_falls_back_to_espn(self, smart, sports_data, espn):
        sports_data.get_team_by_name.side_effect = RuntimeError("boom")
        espn.get_team_by_name.return_value = {
            "id": 13, "displayName": "Los Angeles Lakers", "abbreviation": "LAL", "location": "Los Angeles",
        }
        team = smart.get_team_by_name("lakers")
        assert team.team_id == "13"
        assert team.abbreviation == "LAL"
        assert team.source == "espn"

    def test_not_found_anywhere(self, smart, sports_data, espn):
        sports_data.get_team_by_name.return_value = None
        espn.get_team_by_name.return_value = None
        with pytest.raises(LookupError, match="sonics"):
            smart.get_team_by_name("sonics")


class TestGames:
    def test_recent_games_from_primary(self, smart, sports_data, espn):
        sports_data.get_team_by_name.return_value = TeamInfo(team_id="T", name="Team")
        sports_data.get_team_recent_games.return_value = [GameStats(game_id="g1", home_team="A", away_team="B", date="")]
        games = smart.get_team_recent_games("team", 3)
        assert [g.game_id for g in games] == ["g1"]
        sports_data.get_team_recent_games.assert_called_once_with("T", 3)
        espn.get_team_recent_games.assert_not_called()

    def test_recent_games_from_espn(self, smart, sports_data, espn, sample_espn_event):
        sports_data.get_team_by_name.return_value = None
        espn.get_team_recent_games.return_value = [sample_espn_event]
        games = smart.get_team_recent_games("lakers")
        assert games[0].game_id == "401585001"
        assert games[0].season == "2024-25"

    def test_recent_games_none(self, smart, sports_data, espn):
        sports_data.get_team_by_name.return_value = None
        espn.get_team_recent_games.return_value = []
        assert smart.get_team_recent_games("lakers") == []

    def test_todays_games_fallback_on_empty(self, smart, sports_data, espn, sample_espn_event):
        sports_data.get_live_games.return_value = []
        espn.get_todays_games.return_value = [sample_espn_event]
        games = smart.get_todays_games()
        assert len(games) == 1
        assert games[0].source == "espn"

    def test_todays_games_fallback_on_error(self, smart, sports_data, espn):
        sports_data.get_live_games.side_effect = RuntimeError("down")
        espn.get_todays_games.return_value = []
        assert smart.get_todays_games() == []
