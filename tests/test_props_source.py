"""Tests for the props sources"""

import random
import pytest
from unittest.mock import Mock

from sliptactix.data.models import PlayerProp
from sliptactix.data.props_source import (
    LINE_RANGES,
    LegitimatePropsSource,
    PrizePicksSource,
    realistic_line,
)
from sliptactix.utils.errors import MissingApiKeyError


def make_prop(**overrides):
    values = dict(
        prop_id="p1", event_id="e1", stat_type="points", line=25.5,
        over_odds="-115", under_odds="-105", league="NBA", sport="BASKETBALL",
        player_id="LEBRON_JAMES_1_NBA", player_name="LeBron James", team_name="LAL",
    )
    values.update(overrides)
    return PlayerProp(**values)


@pytest.fixture
def odds_client():
    return Mock()


@pytest.fixture
def espn():
    client = Mock()
    client.get_todays_games.return_value = []
    return client


@pytest.fixture
def source(odds_client, espn):
    return LegitimatePropsSource(odds_client=odds_client, espn=espn, rng=random.Random(7))


class TestRealisticLine:
    @pytest.mark.parametrize("prop_type", sorted(LINE_RANGES))
    def test_within_range(self, prop_type):
        rng = random.Random(1)
        low, spread = LINE_RANGES[prop_type]
        for _ in range(50):
            line = realistic_line(prop_type, rng)
            assert low <= float(line) <= low + spread
            assert len(line.split(".")[1]) == 1

    def test_unknown_type(self):
        assert realistic_line("Blocks") == "20.5"


class TestLegitimatePropsSource:
    """Test the props fallback ladder"""

    def test_odds_api_props(self, source, odds_client, espn):
        odds_client.get_nba_prop_bets.return_value = [make_prop(), make_prop(prop_id="p2", player_name=None, team_name=None)]
        props = source.get_active_props()
        assert len(props) == 2
        assert props[0].player == "LeBron James"
        assert props[0].line == "25.5"
        assert props[0].odds == "-115"
        assert props[1].player == "NBA Player"
        assert props[1].team == "NBA"
        assert all(p.source == "Sports-Games-Odds-API" for p in props)
        assert all(65 <= p.confidence <= 94 for p in props)
        espn.get_todays_games.assert_not_called()

    def test_espn_props_when_api_unavailable(self, source, odds_client, espn, sample_espn_event):
        odds_client.get_nba_prop_bets.side_effect = MissingApiKeyError("no key")
        espn.get_todays_games.return_value = [sample_espn_event]
        props = source.get_active_props()
        assert len(props) == 1
        assert props[0].id == "espn-401585001-home"
        assert props[0].player == "Los Angeles Lakers Player"
        assert props[0].team == "LAL"
        assert props[0].source == "ESPN-Based"
        assert "Los Angeles Lakers vs Boston Celtics" in props[0].analysis
        assert 15 <= float(props[0].line) <= 25

    def test_espn_uses_first_three_games(self, source, odds_client, espn, sample_espn_event):
        odds_client.get_nba_prop_bets.return_value = []
        espn.get_todays_games.return_value = [dict(sample_espn_event, id=str(i)) for i in range(5)]
        assert len(source.get_active_props()) == 3

    def test_realistic_samples_last(self, source, odds_client):
        odds_client.get_nba_prop_bets.return_value = []
        props = source.get_active_props()
        assert len(props) == 10
        assert {p.prop for p in props} == {"Points", "Rebounds"}
        assert all(p.source == "Realistic-Sample" for p in props)
        assert all(70 <= p.confidence <= 94 for p in props)
        assert len({p.id for p in props}) == 10

    def test_unexpected_error_returns_empty(self, source, odds_client):
        odds_client.get_nba_prop_bets.side_effect = RuntimeError("bug")
        assert source.get_active_props() == []


class TestPrizePicksSource:
    def test_board(self):
        props = PrizePicksSource().get_active_props()
        assert len(props) == 5
        assert all(p.odds == "Pick" and p.source == "PrizePicks" for p in props)

    def test_player_filter(self):
        props = PrizePicksSource().get_player_props("curry")
        assert [p.player for p in props] == ["Stephen Curry"]

    def test_game_filter(self):
        props = PrizePicksSource().get_game_props("LAL", "BOS")
        assert {p.team for p in props} == {"LAL", "BOS"}
        assert PrizePicksSource().get_game_props("NYK", "ORL") == []
