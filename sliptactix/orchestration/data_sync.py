"""Keeps the local database in step with the live props, games, injuries and news feeds"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Dict, Any

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
import pytz

from sliptactix.data.props_source import LegitimatePropsSource
from sliptactix.data.sports_feed import SportsFeed
from sliptactix.data.storage import Database, GameModel, InjuryModel, NewsModel, PropModel
from sliptactix.utils.config import config
from sliptactix.utils.logging import get_logger

logger = get_logger("orchestration.data_sync")

INACTIVE_AFTER = timedelta(minutes=10)


@dataclass
class SyncResult:
    """Counts per synced table plus any per-task errors"""
    type: str
    props: int = 0
    games: int = 0
    injuries: int = 0
    news: int = 0
    errors: List[str] = field(default_factory=list)


def _parse_float(value: Any) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _parse_datetime(value: Optional[str]) -> datetime:
    if value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).replace(tzinfo=None)
        except ValueError:
            pass
    return datetime.now()


def _row_to_dict(row: Any) -> Dict[str, Any]:
    result = {}
    for column in row.__table__.columns:
        value = getattr(row, column.name)
        result[column.name] = value.isoformat() if isinstance(value, datetime) else value
    return result


class DataSyncService:
    """Syncs feeds into the database, on demand or on a background schedule"""

    def __init__(
        self,
        db: Optional[Database] = None,
        props_source: Optional[LegitimatePropsSource] = None,
        feed: Optional[SportsFeed] = None
    ):
        self.db = db or Database()
        self.props_source = props_source or LegitimatePropsSource()
        self.feed = feed or SportsFeed()

        sync_config = config.get_sync_config()
        self.interval_minutes = int(sync_config.get('interval_minutes', 2))
        self.stale_after_hours = float(sync_config.get('stale_after_hours', 1))
        self.quick_props_limit = int(sync_config.get('quick_props_limit', 5))
        self.quick_games_limit = int(sync_config.get('quick_games_limit', 3))

        self.scheduler: Optional[BackgroundScheduler] = None
        self.last_sync_time: Dict[str, datetime] = {}

    @property
    def is_running(self) -> bool:
        return self.scheduler is not None

    # ------------------------------------------------------------------
    # Table syncs
    # ------------------------------------------------------------------

    def sync_props(self, limit: Optional[int] = None) -> int:
        """Upsert active props; a full sync also retires props older than ten minutes"""
        props = self.props_source.get_active_props("NBA")
        if limit:
            props = props[:limit]

        now = datetime.now()
        session = self.db.get_session()
        try:
            for prop in props:
                session.merge(PropModel(
                    id=prop.id,
                    player_name=prop.player,
                    team=prop.team,
                    prop_type=prop.prop,
                    line=_parse_float(prop.line),
                    odds=prop.odds,
                    confidence=prop.confidence,
                    trend=prop.trend,
                    analysis=prop.analysis,
                    source=prop.source,
                    sport="NBA",
                    is_active=True,
                    updated_at=now,
                ))

            if not limit:
                retired = session.query(PropModel).filter(
                    PropModel.updated_at < now - INACTIVE_AFTER,
                    PropModel.is_active.is_(True)
                ).update({PropModel.is_active: False}, synchronize_session=False)
                if retired:
                    logger.info(f"🗄️ Marked {retired} stale props inactive")

            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

        return len(props)

    def sync_games(self, limit: Optional[int] = None) -> int:
        games = self.feed.get_live_games()
        if limit:
            games = games[:limit]

        now = datetime.now()
        session = self.db.get_session()
        try:
            for game in games:
                session.merge(GameModel(
                    id=game.game_id,
                    home_team=game.home_team,
                    away_team=game.away_team,
                    home_score=game.home_score,
                    away_score=game.away_score,
                    status=game.status.value,
                    quarter=game.quarter,
                    time_remaining=game.time_remaining,
                    home_odds=game.home_odds,
                    away_odds=game.away_odds,
                    start_time=game.start_time,
                    game_date=game.date,
                    sport="NBA",
                    updated_at=now,
                ))
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

        return len(games)

    def sync_injuries(self) -> int:
        injuries = self.feed.get_injury_report()
        session = self.db.get_session()
        try:
            for injury in injuries:
                session.merge(InjuryModel(
                    id=injury.id or f"{injury.player_name}-{injury.team}".lower().replace(" ", "-"),
                    player_name=injury.player_name,
                    team=injury.team,
                    status=injury.status,
                    injury_type=injury.injury,
                    notes=injury.notes,
                    sport="NBA",
                    updated_at=_parse_datetime(injury.updated),
                ))
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

        return len(injuries)

    def sync_news(self) -> int:
        """Insert new headlines; ones already stored still count as synced"""
        news = self.feed.get_news()
        synced = 0
        session = self.db.get_session()
        try:
            for item in news:
                synced += 1
                if session.get(NewsModel, item.id) is not None:
                    continue
                session.add(NewsModel(
                    id=item.id,
                    title=item.title,
                    content=item.content,
                    source=item.source,
                    published_date=item.date,
                    impact=item.impact,
                    player_name=item.player_name,
                    team_name=item.team_name,
                    sport="NBA",
                ))
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

        return synced

    # ------------------------------------------------------------------
    # Sync runs
    # ------------------------------------------------------------------

    def _run_tasks(self, sync_type: str, tasks: Dict[str, Callable[[], int]]) -> SyncResult:
        """Run sync tasks side by side; a failing task is recorded, not fatal"""
        result = SyncResult(type=sync_type)

        with ThreadPoolExecutor(max_workers=len(tasks)) as executor:
            future_to_label = {executor.submit(task): label for label, task in tasks.items()}
            for future in as_completed(future_to_label):
                label = future_to_label[future]
                try:
                    setattr(result, label.lower(), future.result())
                except Exception as e:
                    logger.error(f"❌ {label} sync failed: {e}")
                    result.errors.append(f"{label}: {e or 'Unknown error'}")

        self.last_sync_time["NBA"] = datetime.now()
        logger.info(
            f"🔄 {sync_type.title()} sync completed: {result.props} props, {result.games} games, "
            f"{result.injuries} injuries, {result.news} news"
        )
        if result.errors:
            logger.warning(f"⚠️ Sync completed with errors: {result.errors}")
        return result

    def perform_quick_sync(self) -> SyncResult:
        """Props and games only, small batches"""
        logger.info("⚡ Performing quick data sync...")
        return self._run_tasks("quick", {
            "Props": lambda: self.sync_props(self.quick_props_limit),
            "Games": lambda: self.sync_games(self.quick_games_limit),
        })

    def perform_full_sync(self) -> SyncResult:
        logger.info("🔄 Performing full data sync...")
        return self._run_tasks("full", {
            "Props": self.sync_props,
            "Games": self.sync_games,
            "Injuries": self.sync_injuries,
            "News": self.sync_news,
        })

    def is_data_stale(self, sport: str = "NBA") -> bool:
        """True when there are no active props or the newest is over the stale threshold"""
        session = self.db.get_session()
        try:
            latest = session.query(PropModel).filter(
                PropModel.sport == sport,
                PropModel.is_active.is_(True)
            ).order_by(PropModel.updated_at.desc()).first()
        finally:
            session.close()

        if latest is None:
            logger.info(f"No recent data found for {sport}, sync needed")
            return True

        hours_since_update = (datetime.now() - latest.updated_at).total_seconds() / 3600
        logger.info(f"Last {sport} update: {hours_since_update:.1f} hours ago")
        return hours_since_update > self.stale_after_hours

    # ------------------------------------------------------------------
    # Background schedule
    # ------------------------------------------------------------------

    def start_real_time_sync(self) -> None:
        """Full sync now, then every interval in the background"""
        if self.is_running:
            logger.debug("Real-time sync already running")
            return

        logger.info("🚀 Starting real-time data sync...")
        self.perform_full_sync()

        self.scheduler = BackgroundScheduler(daemon=True, timezone=pytz.timezone(config.get_timezone()))
        self.scheduler.add_job(
            self.perform_full_sync,
            trigger=IntervalTrigger(minutes=self.interval_minutes),
            id='full_data_sync',
            name='Full data sync',
            replace_existing=True
        )
        self.scheduler.start()
        logger.info(f"Scheduler configured to sync every {self.interval_minutes} minutes")

    def stop_real_time_sync(self) -> None:
        if self.scheduler is not None:
            self.scheduler.shutdown(wait=False)
            self.scheduler = None
        logger.info("🛑 Stopped real-time data sync")

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_latest_props(self, sport: str = "NBA", limit: int = 20) -> List[Dict[str, Any]]:
        session = self.db.get_session()
        try:
            rows = session.query(PropModel).filter(
                PropModel.sport == sport,
                PropModel.is_active.is_(True)
            ).order_by(PropModel.confidence.desc()).limit(limit).all()
            return [_row_to_dict(row) for row in rows]
        finally:
            session.close()

    def get_latest_games(self, sport: str = "NBA") -> List[Dict[str, Any]]:
        session = self.db.get_session()
        try:
            rows = session.query(GameModel).filter(
                GameModel.sport == sport
            ).order_by(GameModel.updated_at.desc()).limit(10).all()
            return [_row_to_dict(row) for row in rows]
        finally:
            session.close()

    def get_latest_injuries(self, sport: str = "NBA") -> List[Dict[str, Any]]:
        session = self.db.get_session()
        try:
            rows = session.query(InjuryModel).filter(
                InjuryModel.sport == sport
            ).order_by(InjuryModel.updated_at.desc()).limit(15).all()
            return [_row_to_dict(row) for row in rows]
        finally:
            session.close()

    def get_latest_news(self, sport: str = "NBA", limit: int = 10) -> List[Dict[str, Any]]:
        session = self.db.get_session()
        try:
            rows = session.query(NewsModel).filter(
                NewsModel.sport == sport
            ).order_by(NewsModel.created_at.desc()).limit(limit).all()
            return [_row_to_dict(row) for row in rows]
        finally:
            session.close()
