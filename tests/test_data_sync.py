"""Tests for the data sync service"""

import pytest
from datetime import datetime, timedelta
from unittest.mock import Mock, patch

from sliptactix.data.models import GameStats, GameStatus, Injury, NewsItem, PropCard
from sliptactix.data.storage import NewsModel, PropModel
from sliptactix.orchestration.data_sync import DataSyncService


def make_card(index: int, confidence: int = 80) -> PropCard:
    return PropCard(
        id=f"realistic-{index}", player=f"Player {index}", team="LAL", prop="Points", line="25.5",
        odds="-110", confidence=confidence, trend="up", analysis="Projection", source="Realistic-Sample",
        updated=datetime.now().isoformat(),
    )


def make_game(index: int) -> GameStats:
    return GameStats(
        game_id=f"game-{index}", home_team="LAL", away_team="BOS", date="2025-01-15",
        status=GameStatus.LIVE, home_score=88, away_score=80, quarter="3Q", time_remaining="5:42",
        home_odds="-110", away_odds="+100", start_time="20:00",
    )


NEWS = [
    NewsItem(id="news-1", title="Curry reaches milestone", content="History", source="ESPN", date="2025-01-14"),
    NewsItem(id="news-2", title="Embiid out", content="Knee", source="ESPN", date="2025-01-14", impact="negative"),
]


@pytest.fixture
def props_source():
    source = Mock()
    source.get_active_props.return_value = [make_card(i, confidence=70 + i) for i in range(8)]
    return source


@pytest.fixture
def feed():
    sports_feed = Mock()
    sports_feed.get_live_games.return_value = [make_game(i) for i in range(5)]
    sports_feed.get_injury_report.return_value = [
        Injury(player_name="Anthony Davis", team="LAL", status="Out", injury="Ankle"),
        Injury(player_name="Jrue Holiday", team="BOS", status="Probable", injury="Finger", id="espn-injury-1"),
    ]
    sports_feed.get_news.return_value = NEWS
    return sports_feed


@pytest.fixture
def sync_service(mock_database, props_source, feed):
    return DataSyncService(db=mock_database, props_source=props_source, feed=feed)


def add_stale_prop(db, prop_id="old-prop", hours=2):
    session = db.get_session()
    session.add(PropModel(
        id=prop_id, player_name="Old Player", prop_type="Points", line=20.5, confidence=99,
        sport="NBA", is_active=True, updated_at=datetime.now() - timedelta(hours=hours),
    ))
    session.commit()
    session.close()


class TestTableSyncs:
    """Test syncing each table"""

    def test_sync_props(self, sync_service, mock_database):
        assert sync_service.sync_props() == 8
        session = mock_database.get_session()
        stored = session.get(PropModel, "realistic-0")
        assert stored.line == 25.5
        assert stored.is_active is True
        assert session.query(PropModel).count() == 8
        session.close()

    def test_sync_props_upserts(self, sync_service, props_source, mock_database):
        sync_service.sync_props()
        props_source.get_active_props.return_value = [make_card(0, confidence=55)]
        sync_service.sync_props()
        session = mock_database.get_session()
        assert session.get(PropModel, "realistic-0").confidence == 55
        assert session.query(PropModel).count() == 8
        session.close()

    def test_full_sync_retires_old_props(self, sync_service, mock_database):
        add_stale_prop(mock_database)
        sync_service.sync_props()
        session = mock_database.get_session()
        assert session.get(PropModel, "old-prop").is_active is False
        session.close()

    def test_limited_sync_keeps_old_props(self, sync_service, mock_database):
        add_stale_prop(mock_database)
        assert sync_service.sync_props(limit=3) == 3
        session = mock_database.get_session()
        assert session.get(PropModel, "old-prop").is_active is True
        session.close()

    def test_sync_games(self, sync_service):
        assert sync_service.sync_games(limit=2) == 2
        games = sync_service.get_latest_games()
        assert len(games) == 2
        assert games[0]["status"] == "live"

    def test_sync_injuries(self, sync_service):
        assert sync_service.sync_injuries() == 2
        ids = {row["id"] for row in sync_service.get_latest_injuries()}
        assert ids == {"anthony-davis-lal", "espn-injury-1"}

    def test_sync_news_skips_stored(self, sync_service, mock_database):
        assert sync_service.sync_news() == 2
        assert sync_service.sync_news() == 2
        session = mock_database.get_session()
        assert session.query(NewsModel).count() == 2
        session.close()


class TestSyncRuns:
    def test_quick_sync(self, sync_service, feed):
        result = sync_service.perform_quick_sync()
        assert result.type == "quick"
        assert result.props == 5
        assert result.games == 3
        assert result.injuries == 0
        assert result.news == 0
        assert result.errors == []
        feed.get_injury_report.assert_not_called()

    def test_full_sync_collects_errors(self, sync_service, feed):
        feed.get_injury_report.side_effect = RuntimeError("page changed")
        result = sync_service.perform_full_sync()
        assert result.type == "full"
        assert result.props == 8
        assert result.games == 5
        assert result.news == 2
        assert result.injuries == 0
        assert result.errors == ["Injuries: page changed"]
        assert "NBA" in sync_service.last_sync_time


class TestStaleness:
    def test_empty_is_stale(self, sync_service):
        assert sync_service.is_data_stale() is True

    def test_fresh_after_sync(self, sync_service):
        sync_service.sync_props(limit=1)
        assert sync_service.is_data_stale() is False

    def test_old_data_is_stale(self, sync_service, mock_database):
        add_stale_prop(mock_database, hours=3)
        assert sync_service.is_data_stale() is True


class TestReads:
    def test_latest_props_by_confidence(self, sync_service, mock_database):
        sync_service.sync_props()
        add_stale_prop(mock_database, prop_id="inactive", hours=0)
        session = mock_database.get_session()
        session.get(PropModel, "inactive").is_active = False
        session.commit()
        session.close()

        props = sync_service.get_latest_props(limit=3)
        assert [p["id"] for p in props] == ["realistic-7", "realistic-6", "realistic-5"]
        assert isinstance(props[0]["updated_at"], str)

    def test_latest_news(self, sync_service):
        sync_service.sync_news()
        assert len(sync_service.get_latest_news(limit=1)) == 1
        assert sync_service.get_latest_news(sport="WNBA") == []


class TestScheduler:
    """Test the background schedule"""

    def test_start_and_stop(self, sync_service):
        with patch("sliptactix.orchestration.data_sync.BackgroundScheduler") as mock_scheduler_cls:
            sync_service.start_real_time_sync()
            sync_service.start_real_time_sync()

            assert mock_scheduler_cls.call_count == 1
            assert mock_scheduler_cls.call_args.kwargs["daemon"] is True
            scheduler = mock_scheduler_cls.return_value
            job_kwargs = scheduler.add_job.call_args.kwargs
            assert job_kwargs["id"] == "full_data_sync"
            assert job_kwargs["trigger"].interval == timedelta(minutes=sync_service.interval_minutes)
            scheduler.start.assert_called_once()
            assert sync_service.is_running

            sync_service.stop_real_time_sync()
            scheduler.shutdown.assert_called_once_with(wait=False)
            assert not sync_service.is_running

    def test_start_runs_initial_sync(self, sync_service, props_source):
        with patch("sliptactix.orchestration.data_sync.BackgroundScheduler"):
            sync_service.start_real_time_sync()
        props_source.get_active_props.assert_called_once_with("NBA")

    def test_stop_when_not_running(self, sync_service):
        sync_service.stop_real_time_sync()
        assert not sync_service.is_running
