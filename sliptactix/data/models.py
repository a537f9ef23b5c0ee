"""Data models for the sliptactix system"""

from __future__ import annotations

from datetime import datetime, date
from enum import Enum
from typing import List, Optional, Any, Dict
from dataclasses import dataclass, field, asdict, is_dataclass


class GameStatus(str, Enum):
    """Game status"""
    SCHEDULED = "scheduled"
    LIVE = "live"
    FINAL = "final"
    POSTPONED = "postponed"


class ItemType(str, Enum):
    """Kinds of data the query router can retrieve"""
    PLAYER_PROP = "player_prop"
    PLAYER_PROP_SPECIFIC = "player_prop_specific"
    PRIZEPICKS_PROP = "prizepicks_prop"
    LIVE_GAME = "live_game"
    UPCOMING_GAME = "upcoming_game"
    TEAM_INFO = "team_info"
    TEAM_GAME_RECENT = "team_game_recent"
    TEAM_GAME_UPCOMING = "team_game_upcoming"
    PLAYER_INFO = "player_info"
    ESPN_GAME = "espn_game"


PROP_ITEM_TYPES = (ItemType.PLAYER_PROP, ItemType.PLAYER_PROP_SPECIFIC, ItemType.PRIZEPICKS_PROP)
GAME_ITEM_TYPES = (
    ItemType.LIVE_GAME,
    ItemType.UPCOMING_GAME,
    ItemType.TEAM_GAME_RECENT,
    ItemType.TEAM_GAME_UPCOMING,
)


@dataclass
class PlayerProp:
    """Over/under player prop extracted from an odds event"""
    prop_id: str
    event_id: str
    stat_type: str
    line: float
    over_odds: str
    under_odds: str
    league: str
    sport: str
    player_id: Optional[str] = None
    player_name: Optional[str] = None
    team_id: Optional[str] = None
    team_name: Optional[str] = None
    game_time: Optional[str] = None


@dataclass
class GameStats:
    """Normalized game, whichever provider it came from"""
    game_id: str
    home_team: str
    away_team: str
    date: str  # ISO string
    status: GameStatus = GameStatus.SCHEDULED
    league: str = "NBA"
    sport: str = "BASKETBALL"
    home_team_id: Optional[str] = None
    away_team_id: Optional[str] = None
    home_score: Optional[int] = None
    away_score: Optional[int] = None
    odds: Dict[str, Any] = field(default_factory=dict)
    player_props: List[PlayerProp] = field(default_factory=list)
    raw_event: Optional[Dict[str, Any]] = None
    source: str = "sportsgameodds"
    season: Optional[str] = None
    quarter: str = ""
    time_remaining: str = ""
    venue: str = ""
    broadcast: str = ""
    home_odds: Optional[str] = None
    away_odds: Optional[str] = None
    start_time: str = ""


@dataclass
class TeamInfo:
    """Team lookup result"""
    team_id: str
    name: str
    league_id: str = "NBA"
    sport_id: str = "BASKETBALL"
    abbreviation: Optional[str] = None
    city: Optional[str] = None
    source: str = "sportsgameodds"
    raw: Optional[Dict[str, Any]] = None


@dataclass
class SeasonStats:
    """Season record for a team"""
    team_id: str
    season: str
    wins: Optional[int] = None
    losses: Optional[int] = None


@dataclass
class PropCard:
    """Display-ready prop as shown on the props board"""
    id: str
    player: str
    team: str
    prop: str
    line: str
    odds: str
    confidence: int
    trend: str
    analysis: str
    source: str
    updated: str


@dataclass
class Injury:
    """Injury report entry"""
    player_name: str
    team: str
    status: str
    injury: str
    notes: str = ""
    id: Optional[str] = None
    severity: Optional[str] = None
    expected_return: Optional[str] = None
    source: str = ""
    updated: str = field(default_factory=lambda: datetime.now().isoformat())


@dataclass
class NewsItem:
    """League news headline"""
    id: str
    title: str
    content: str
    source: str
    date: str
    impact: str = "neutral"
    player_name: str = ""
    team_name: str = ""
    url: str = ""
    category: str = ""


@dataclass
class RetrievedItem:
    """One piece of context picked up by the query router"""
    item_type: ItemType
    data: Any


def to_serializable(obj: Any) -> Any:
    """
    Recursively convert dataclasses, enums, and dates to JSON-serializable types

    Args:
        obj: Object to convert

    Returns:
        JSON-serializable version of the object
    """
    if is_dataclass(obj) and not isinstance(obj, type):
        return {k: to_serializable(v) for k, v in asdict(obj).items()}
    elif isinstance(obj, Enum):
        return obj.value
    elif isinstance(obj, (date, datetime)):
        return obj.isoformat()
    elif isinstance(obj, dict):
        return {k: to_serializable(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [to_serializable(item) for item in obj]
    else:
        return obj
