"""ESPN public API client - free NBA data source, no key required"""

from typing import List, Optional, Dict, Any

import requests

from sliptactix.data.models import GameStats, GameStatus
from sliptactix.utils.cache import TTLCache
from sliptactix.utils.config import config
from sliptactix.utils.errors import ExternalServiceError
from sliptactix.utils.logging import get_logger

logger = get_logger("clients.espn")

DEFAULT_BASE_URL = "https://site.api.espn.com/apis/site/v2/sports/basketball/nba"

LIVE_STATUSES = ("STATUS_IN_PROGRESS", "STATUS_HALFTIME", "STATUS_END_PERIOD")
FINAL_STATUSES = ("STATUS_FINAL", "STATUS_FINAL_OT")


def map_espn_status(status_name: Optional[str]) -> GameStatus:
    """Map an ESPN status type name onto our game status"""
    if not status_name:
        return GameStatus.SCHEDULED
    if status_name in LIVE_STATUSES:
        return GameStatus.LIVE
    if status_name in FINAL_STATUSES:
        return GameStatus.FINAL
    return GameStatus.SCHEDULED


def _competitor(competition: Dict[str, Any], side: str) -> Dict[str, Any]:
    for competitor in competition.get("competitors") or []:
        if competitor.get("homeAway") == side:
            return competitor
    return {}


def _score(competitor: Dict[str, Any]) -> int:
    raw = competitor.get("score")
    # Schedule endpoints return score objects, scoreboard returns strings
    if isinstance(raw, dict):
        raw = raw.get("value", raw.get("displayValue"))
    try:
        return int(float(raw))
    except (TypeError, ValueError):
        return 0


def parse_espn_game(event: Dict[str, Any], season: Optional[str] = None) -> GameStats:
    """Normalize an ESPN scoreboard/schedule event"""
    competition = (event.get("competitions") or [{}])[0]
    home = _competitor(competition, "home")
    away = _competitor(competition, "away")
    status = competition.get("status") or event.get("status") or {}
    status_type = status.get("type") or {}

    if status_type.get("completed"):
        game_status = GameStatus.FINAL
    elif status_type.get("state") == "in":
        game_status = GameStatus.LIVE
    else:
        game_status = GameStatus.SCHEDULED

    broadcasts = competition.get("broadcasts") or []
    broadcast = ""
    if broadcasts and broadcasts[0].get("names"):
        broadcast = broadcasts[0]["names"][0]

    return GameStats(
        game_id=str(event.get("id", "")),
        home_team=(home.get("team") or {}).get("abbreviation") or "HOME",
        away_team=(away.get("team") or {}).get("abbreviation") or "AWAY",
        home_team_id=(home.get("team") or {}).get("id"),
        away_team_id=(away.get("team") or {}).get("id"),
        home_score=_score(home),
        away_score=_score(away),
        date=event.get("date", ""),
        status=game_status,
        league="NBA",
        sport="BASKETBALL",
        source="espn",
        season=season,
        quarter=f"{status['period']}Q" if status.get("period") else "",
        time_remaining=status.get("displayClock") or "",
        venue=(competition.get("venue") or {}).get("fullName") or "",
        broadcast=broadcast,
    )


class ESPNSportsClient:
    """Client for ESPN's site API"""

    def __init__(self, base_url: Optional[str] = None, cache: Optional[TTLCache] = None):
        """Initialize ESPN client"""
        self.base_url = base_url or config.get('espn.base_url', DEFAULT_BASE_URL)
        self.cache = cache or TTLCache(default_ttl=config.get_cache_ttl())
        self.timeout = config.get_request_timeout()
        self.headers = {
            'Accept': 'application/json',
            'User-Agent': 'Mozilla/5.0 (compatible; SlipTactix/1.0)'
        }

    def make_request(self, endpoint: str) -> Dict[str, Any]:
        """GET an endpoint through the cache"""
        cache_key = f"espn_{endpoint}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug(f"📋 ESPN cache hit for {endpoint}")
            return cached

        url = f"{self.base_url}{endpoint}"
        logger.debug(f"Fetching from ESPN API: {url}")
        try:
            response = requests.get(url, headers=self.headers, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"❌ ESPN API request failed for {endpoint}: {e}")
            status_code = getattr(getattr(e, 'response', None), 'status_code', None)
            raise ExternalServiceError(f"ESPN API error for {endpoint}: {e}", status_code=status_code, endpoint=endpoint) from e

        self.cache.set(cache_key, data)
        return data

    def get_todays_games(self) -> List[Dict[str, Any]]:
        """Get today's NBA scoreboard events"""
        try:
            data = self.make_request("/scoreboard")
            return data.get("events") or []
        except ExternalServiceError as e:
            logger.error(f"Error fetching today's games: {e}")
            return []

    def get_teams(self) -> List[Dict[str, Any]]:
        try:
            data = self.make_request("/teams")
        except ExternalServiceError as e:
            logger.error(f"Error fetching teams: {e}")
            return []
        sports = data.get("sports") or [{}]
        leagues = sports[0].get("leagues") or [{}]
        return [entry.get("team", {}) for entry in leagues[0].get("teams") or []]

    def get_team_by_name(self, team_name: str) -> Optional[Dict[str, Any]]:
        lower_name = team_name.lower()
        for team in self.get_teams():
            if (
                lower_name in (team.get("displayName") or "").lower()
                or lower_name in (team.get("shortDisplayName") or "").lower()
                or (team.get("abbreviation") or "").lower() == lower_name
                or lower_name in (team.get("location") or "").lower()
            ):
                return team
        return None

    def get_team_recent_games(self, team_name: str, limit: int = 5) -> List[Dict[str, Any]]:
        """Completed games from the team's schedule"""
        team = self.get_team_by_name(team_name)
        if not team:
            logger.warning(f"Team \"{team_name}\" not found on ESPN")
            return []

        try:
            data = self.make_request(f"/teams/{team['id']}/schedule")
        except ExternalServiceError as e:
            logger.error(f"Error fetching team recent games: {e}")
            return []

        completed = [
            event for event in data.get("events") or []
            if (((event.get("competitions") or [{}])[0].get("status") or {}).get("type") or {}).get("completed")
        ]
        return completed[:limit]

    def get_standings(self) -> List[Dict[str, Any]]:
        try:
            data = self.make_request("/standings")
            return data.get("children") or []
        except ExternalServiceError as e:
            logger.error(f"Error fetching standings: {e}")
            return []

    def get_news(self, limit: int = 10) -> List[Dict[str, Any]]:
        """Raw news articles"""
        try:
            data = self.make_request("/news")
            return (data.get("articles") or [])[:limit]
        except ExternalServiceError as e:
            logger.error(f"Error fetching news: {e}")
            return []
