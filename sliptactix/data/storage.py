"""Database storage and models"""

from datetime import datetime
from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine, Column, String, Float, Integer, DateTime, Boolean, Text
from sqlalchemy.orm import declarative_base, sessionmaker, Session, scoped_session

from sliptactix.utils.config import config
from sliptactix.utils.logging import get_logger

logger = get_logger("data.storage")

Base = declarative_base()


class PropModel(Base):
    """Prop board entry"""
    __tablename__ = 'props'

    id = Column(String, primary_key=True)
    player_name = Column(String, nullable=False)
    team = Column(String, nullable=True)
    prop_type = Column(String, nullable=False)
    line = Column(Float, nullable=True)
    odds = Column(String, nullable=True)
    confidence = Column(Integer, default=0)
    trend = Column(String, nullable=True)
    analysis = Column(Text, nullable=True)
    source = Column(String, nullable=True)
    sport = Column(String, default="NBA", index=True)
    is_active = Column(Boolean, default=True, index=True)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, index=True)


class GameModel(Base):
    """Game snapshot"""
    __tablename__ = 'games'

    id = Column(String, primary_key=True)
    home_team = Column(String, nullable=False)
    away_team = Column(String, nullable=False)
    home_score = Column(Integer, nullable=True)
    away_score = Column(Integer, nullable=True)
    status = Column(String, nullable=True)
    quarter = Column(String, nullable=True)
    time_remaining = Column(String, nullable=True)
    home_odds = Column(String, nullable=True)
    away_odds = Column(String, nullable=True)
    start_time = Column(String, nullable=True)
    game_date = Column(String, nullable=True)
    sport = Column(String, default="NBA", index=True)
    updated_at = Column(DateTime, default=datetime.now, index=True)


class InjuryModel(Base):
    """Injury report entry"""
    __tablename__ = 'injuries'

    id = Column(String, primary_key=True)
    player_name = Column(String, nullable=False)
    team = Column(String, nullable=True)
    status = Column(String, nullable=True)
    injury_type = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    sport = Column(String, default="NBA", index=True)
    updated_at = Column(DateTime, default=datetime.now, index=True)


class NewsModel(Base):
    """News headline"""
    __tablename__ = 'news'

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=True)
    source = Column(String, nullable=True)
    published_date = Column(String, nullable=True)
    impact = Column(String, nullable=True)
    player_name = Column(String, nullable=True)
    team_name = Column(String, nullable=True)
    sport = Column(String, default="NBA", index=True)
    created_at = Column(DateTime, default=datetime.now, index=True)


class Database:
    """Database interface"""

    def __init__(self, database_url: Optional[str] = None):
        """Initialize database connection"""
        self.database_url = database_url or config.get_database_url()
        if self.database_url.startswith("sqlite:///") and ":memory:" not in self.database_url:
            Path(self.database_url[len("sqlite:///"):]).parent.mkdir(parents=True, exist_ok=True)
        self.engine = create_engine(self.database_url, echo=False)
        self.SessionLocal = scoped_session(sessionmaker(bind=self.engine))
        Base.metadata.create_all(self.engine)

    def get_session(self) -> Session:
        """Get database session"""
        return self.SessionLocal()

    def close(self):
        """Close database connection"""
        self.SessionLocal.remove()

    def create_tables(self):
        """Create all tables"""
        Base.metadata.create_all(self.engine)

    def drop_tables(self):
        """Drop all tables (use with caution)"""
        Base.metadata.drop_all(self.engine)
