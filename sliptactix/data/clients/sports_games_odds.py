"""Sports Games Odds API client (paid odds provider)"""

import json
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Dict, Any

import requests

from sliptactix.data.models import PlayerProp
from sliptactix.utils.cache import TTLCache
from sliptactix.utils.config import config
from sliptactix.utils.errors import (
    AccessForbiddenError,
    ExternalServiceError,
    InvalidApiKeyError,
    MissingApiKeyError,
    RateLimitExceededError,
    SportsApiError,
)
from sliptactix.utils.logging import get_logger
from sliptactix.utils.security import sanitize_api_key

logger = get_logger("clients.sports_games_odds")

DEFAULT_BASE_URL = "https://api.sportsgameodds.com/v1"
LIVE_EVENTS_TTL = 60  # seconds, for unfinalized events

PRIZEPICKS_STATS = [
    "points",
    "rebounds",
    "assists",
    "steals",
    "blocks",
    "turnovers",
    "freethrows_made",
    "threepointers_made",
    "passing_yards",
    "rushing_yards",
    "receiving_yards",
]

# Statuses that rule an event out of the live window
NOT_LIVE_MARKERS = ("final", "scheduled", "postponed", "ft")

DIAGNOSTIC_ENDPOINTS = [
    {"path": "/sports/", "params": {}, "description": "Sports List"},
    {"path": "/leagues/", "params": {"sportID": "BASKETBALL"}, "description": "Basketball Leagues"},
    {"path": "/teams/", "params": {"sportID": "BASKETBALL", "leagueID": "NBA", "limit": "1"}, "description": "NBA Teams (1)"},
    {
        "path": "/events/",
        "params": {"sportID": "BASKETBALL", "leagueID": "NBA", "limit": "1", "marketOddsAvailable": "true"},
        "description": "NBA Events with Odds (1)",
    },
    {"path": "/players/", "params": {"teamID": "BOSTON_CELTICS_NBA", "limit": "1"}, "description": "Players (Celtics)"},
    {"path": "/stats/", "params": {"sportID": "BASKETBALL", "statLevel": "player"}, "description": "Basketball Player Stats Definitions"},
    {"path": "/account/usage", "params": {}, "description": "Account Usage"},
]


def _iso(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).strftime('%Y-%m-%dT%H:%M:%S.000Z')


def _stringify_params(params: Dict[str, Any]) -> Dict[str, str]:
    """Drop unset params and render the rest the way the API expects"""
    rendered = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            rendered[key] = "true" if value else "false"
        else:
            rendered[key] = str(value)
    return rendered


class SportsGamesOddsClient:
    """Client for the Sports Games Odds v1 REST API"""

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None, cache: Optional[TTLCache] = None):
        """Initialize the client"""
        self.api_key = api_key if api_key is not None else config.get_sports_api_key()
        self.base_url = base_url or config.get('sports_games_odds.base_url', DEFAULT_BASE_URL)
        self.cache = cache or TTLCache(default_ttl=config.get_cache_ttl())
        self.timeout = config.get_request_timeout()

        logger.info(
            f"🏀 Sports Games Odds client initialized | Key present: {'YES' if self.api_key else 'NO'} | "
            f"Base URL: {self.base_url}"
        )

    def make_request(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """GET an endpoint and return the decoded body

        Raises a SportsApiError subclass for a missing key, HTTP errors or
        transport failures.
        """
        if not self.api_key:
            raise MissingApiKeyError(
                "Sports Games Odds API key not configured. Please set SPORTS_API_KEY.",
                endpoint=endpoint
            )

        url = f"{self.base_url}{endpoint}"
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "x-api-key": self.api_key,
        }
        query = _stringify_params(params or {})
        logger.debug(f"Fetching from SGO API: {url} {query}")

        try:
            response = requests.get(url, headers=headers, params=query, timeout=self.timeout)
        except requests.RequestException as e:
            raise ExternalServiceError(f"Sports Games Odds request failed for {endpoint}: {e}", endpoint=endpoint) from e

        if not response.ok:
            status = response.status_code
            error_text = (response.text or "")[:500]
            logger.error(f"❌ SGO API Error: {status} - {endpoint} - {error_text}")
            if status == 401:
                raise InvalidApiKeyError(
                    f"Invalid Sports Games Odds API key (401) for endpoint {endpoint}. "
                    f"Ensure your SPORTS_API_KEY is correct and active.",
                    status_code=status, endpoint=endpoint
                )
            if status == 403:
                raise AccessForbiddenError(
                    f"Sports Games Odds API access forbidden (403) for endpoint {endpoint}. Check subscription.",
                    status_code=status, endpoint=endpoint
                )
            if status == 429:
                raise RateLimitExceededError(
                    f"Sports Games Odds API rate limit exceeded (429) for endpoint {endpoint}.",
                    status_code=status, endpoint=endpoint
                )
            raise ExternalServiceError(
                f"Sports Games Odds API error: {status} for {endpoint} - {error_text[:200]}",
                status_code=status, endpoint=endpoint
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ExternalServiceError(f"Sports Games Odds returned invalid JSON for {endpoint}", endpoint=endpoint) from e

        items = data.get("data") if isinstance(data, dict) else None
        logger.debug(f"Fetched SGO {endpoint} - Items: {len(items) if isinstance(items, list) else 'N/A'}")
        return data

    def _cached_list(self, cache_key: str, endpoint: str, params: Optional[Dict[str, Any]] = None, ttl: Optional[float] = None) -> List[Dict[str, Any]]:
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        response = self.make_request(endpoint, params)
        data = response.get("data") or []
        self.cache.set(cache_key, data, ttl=ttl)
        return data

    def test_connection(self) -> Dict[str, Any]:
        """Hit the sports listing; never raises"""
        try:
            result = self.make_request("/sports/")
            data = result.get("data") or []
            return {
                "success": True,
                "message": "Connected to Sports Games Odds API",
                "sports_count": len(data),
                "data": data,
            }
        except SportsApiError as e:
            return {"success": False, "message": "Failed to connect to Sports Games Odds API", "error": str(e)}

    def get_sports(self) -> List[Dict[str, Any]]:
        return self._cached_list("v3-sports", "/sports/")

    def get_leagues(self, sport_id: Optional[str] = None) -> List[Dict[str, Any]]:
        return self._cached_list(f"v3-leagues-{sport_id or 'all'}", "/leagues/", {"sportID": sport_id})

    def get_teams(self, sport_id: str, league_id: str, limit: int = 50) -> List[Dict[str, Any]]:
        params = {"sportID": sport_id, "leagueID": league_id, "limit": limit}
        return self._cached_list(f"v3-teams-{sport_id}-{league_id}-{limit}", "/teams/", params)

    def get_players(
        self,
        team_id: Optional[str] = None,
        event_id: Optional[str] = None,
        player_id: Optional[str] = None,
        limit: int = 50
    ) -> List[Dict[str, Any]]:
        if not (team_id or event_id or player_id):
            logger.warning("⚠️ Fetching players without teamID, eventID, or playerID might return many results or fail.")

        params = {"limit": limit, "teamID": team_id, "eventID": event_id, "playerID": player_id}
        return self._cached_list(f"v3-players-{team_id}-{event_id}-{player_id}-{limit}", "/players/", params)

    def get_events(self, **options: Any) -> List[Dict[str, Any]]:
        """Query /events/ with any of the documented filters

        Accepted options: sportID, leagueID, eventID, teamID,
        marketOddsAvailable, finalized, startsAfter, startsBefore, limit, cursor.
        """
        params = {key: value for key, value in options.items() if value is not None}
        cache_key = f"v3-events-{json.dumps(params, sort_keys=True, default=str)}"
        ttl = LIVE_EVENTS_TTL if params.get("finalized") is False else None
        return self._cached_list(cache_key, "/events/", params, ttl=ttl)

    def extract_player_props_from_event(self, event: Dict[str, Any]) -> List[PlayerProp]:
        """Pair over/under odds per player, stat, period and line into props"""
        extracted: Dict[str, PlayerProp] = {}
        event_type = event.get("type")
        odds = event.get("odds") or {}

        if event_type == "prop":
            logger.info(f"ℹ️ Event {event.get('eventID')} is a standalone prop event: {event.get('eventName')}")
            return []
        if event_type != "match" or not odds:
            return []

        players = event.get("players") or {}
        teams = event.get("teams") or {}
        home = teams.get("home") or {}
        away = teams.get("away") or {}

        for odd in odds.values():
            player_id = odd.get("playerID")
            stat_id = odd.get("statID")
            over_under = odd.get("overUnder")
            side = odd.get("sideID")
            if not player_id or not stat_id or over_under is None:
                continue
            if side not in ("over", "under"):
                continue

            prop_id = f"{event.get('eventID')}-{player_id}-{stat_id}-{odd.get('periodID')}"
            if prop_id in extracted:
                continue

            opposite = "under" if side == "over" else "over"
            counterpart = next(
                (
                    o for o in odds.values()
                    if o.get("playerID") == player_id
                    and o.get("statID") == stat_id
                    and o.get("periodID") == odd.get("periodID")
                    and o.get("overUnder") == over_under
                    and o.get("sideID") == opposite
                ),
                None
            )
            if counterpart is None:
                continue

            over_odds = odd.get("odds") if side == "over" else counterpart.get("odds")
            under_odds = counterpart.get("odds") if side == "over" else odd.get("odds")
            if not over_odds or not under_odds:
                continue

            player = players.get(player_id) or {}
            team = None
            if player.get("teamID") and teams:
                if home.get("teamID") == player["teamID"]:
                    team = home
                elif away.get("teamID") == player["teamID"]:
                    team = away
            elif teams:
                if odd.get("statEntityID") == home.get("statEntityID"):
                    team = home
                elif odd.get("statEntityID") == away.get("statEntityID"):
                    team = away

            try:
                line = float(over_under)
            except (TypeError, ValueError):
                logger.debug(f"Skipping prop {prop_id} with non-numeric line {over_under!r}")
                continue

            extracted[prop_id] = PlayerProp(
                prop_id=prop_id,
                event_id=event.get("eventID"),
                player_id=player_id,
                player_name=player.get("name") or "Unknown Player",
                team_id=(team or {}).get("teamID"),
                team_name=((team or {}).get("names") or {}).get("short") or "UNK",
                stat_type=stat_id,
                line=line,
                over_odds=over_odds,
                under_odds=under_odds,
                game_time=(event.get("status") or {}).get("startsAt"),
                league=event.get("leagueID"),
                sport=event.get("sportID"),
            )

        return list(extracted.values())

    def get_nba_prop_bets(self, date: Optional[str] = None, limit: Optional[int] = None) -> List[PlayerProp]:
        """Player props from unfinalized NBA events, optionally for one day (YYYY-MM-DD)"""
        params: Dict[str, Any] = {
            "sportID": "BASKETBALL",
            "leagueID": "NBA",
            "marketOddsAvailable": True,
            "finalized": False,
            "limit": limit or 50,
        }
        if date:
            params["startsAfter"] = f"{date}T00:00:00Z"
            params["startsBefore"] = f"{date}T23:59:59Z"

        events = self.get_events(**params)
        unique: Dict[str, PlayerProp] = {}
        for event in events:
            for prop in self.extract_player_props_from_event(event):
                unique[prop.prop_id] = prop

        logger.info(f"🏀 Found {len(unique)} unique NBA player props.")
        return list(unique.values())

    def get_prizepicks_data(self, date: Optional[str] = None, limit: Optional[int] = None) -> List[PlayerProp]:
        """NBA props limited to stat types PrizePicks commonly offers"""
        props = self.get_nba_prop_bets(date=date, limit=limit)
        filtered = [
            prop for prop in props
            if any(stat in prop.stat_type.lower() for stat in PRIZEPICKS_STATS)
        ]
        logger.info(f"🎯 Formatted {len(filtered)} props for PrizePicks compatibility.")
        return filtered

    def get_live_nba_games(self) -> List[Dict[str, Any]]:
        now = datetime.now(timezone.utc)
        events = self.get_events(
            sportID="BASKETBALL",
            leagueID="NBA",
            marketOddsAvailable=True,
            finalized=False,
            startsAfter=_iso(now - timedelta(hours=2)),
            startsBefore=_iso(now + timedelta(hours=12)),
            limit=20,
        )

        live = []
        for event in events:
            status_name = ((event.get("status") or {}).get("displayShort") or "").lower()
            if status_name and not any(marker in status_name for marker in NOT_LIVE_MARKERS):
                live.append(event)

        logger.info(f"🔴 Found {len(live)} potentially live NBA games.")
        return live

    def get_team_events(self, team_id: str, limit: int = 10) -> List[Dict[str, Any]]:
        return self.get_events(teamID=team_id, limit=limit, sportID="BASKETBALL", leagueID="NBA")

    def diagnose_api(self) -> Dict[str, Any]:
        """Hit a fixed set of endpoints and summarize what works"""
        diagnosis: Dict[str, Any] = {
            "environment": {
                "api_key_present": bool(self.api_key),
                "api_key_length": len(self.api_key or ""),
                "api_key_prefix": sanitize_api_key(self.api_key) if self.api_key else "Not found",
            },
            "base_url": self.base_url,
            "endpoints_tested": [],
            "working_endpoints": [],
            "errors": [],
            "recommendations": [],
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

        if not self.api_key:
            diagnosis["errors"].append("API key not configured in environment (SPORTS_API_KEY).")
            diagnosis["recommendations"].append("Set SPORTS_API_KEY environment variable.")
            diagnosis["recommendations"].append("Get API key from: https://sportsgameodds.com/")
            return diagnosis

        for endpoint in DIAGNOSTIC_ENDPOINTS:
            path = endpoint["path"]
            try:
                result = self.make_request(path, endpoint["params"])
            except SportsApiError as e:
                diagnosis["endpoints_tested"].append({
                    "path": path,
                    "description": endpoint["description"],
                    "params": endpoint["params"],
                    "success": False,
                    "error": str(e),
                })
                diagnosis["errors"].append(f"{path}: {e}")
                continue

            data = result.get("data")
            if isinstance(data, list):
                data_count = len(data)
            else:
                data_count = 1 if data else 0
            success = result["success"] if "success" in result else data is not None
            test_result = {
                "path": path,
                "description": endpoint["description"],
                "params": endpoint["params"],
                "success": success,
                "data_count": data_count,
                "message": result.get("message") or ("Data received" if data else "No data field or success=false"),
            }
            diagnosis["endpoints_tested"].append(test_result)

            if not success:
                diagnosis["errors"].append(f"{path}: API reported failure (Message: {test_result['message']})")
            elif data_count > 0 or path == "/account/usage":
                diagnosis["working_endpoints"].append(path)
            else:
                diagnosis["errors"].append(
                    f"{path}: Success but no data returned. This might be okay depending on filters/availability."
                )
                diagnosis["working_endpoints"].append(path)

        working = len(diagnosis["working_endpoints"])
        total = len(DIAGNOSTIC_ENDPOINTS)
        recommendations = diagnosis["recommendations"]
        if working == total:
            recommendations.append("✅ Sports Games Odds API is working across all tested endpoints!")
        elif working > 0:
            recommendations.append("⚠️ Some Sports Games Odds API endpoints are working, but others have issues or returned no data.")
        else:
            recommendations.append("❌ Major issues detected. No Sports Games Odds API endpoints seem to be working.")

        errors = diagnosis["errors"]
        if any("401" in e or "Invalid" in e for e in errors):
            recommendations.append("🔑 CRITICAL: API key is invalid or expired. Verify SPORTS_API_KEY at sportsgameodds.com.")
        if any("403" in e for e in errors):
            recommendations.append("🔒 API access forbidden. Check your subscription plan with Sports Games Odds.")
        if any("429" in e for e in errors):
            recommendations.append("⏱️ Rate limit exceeded. Wait before trying again.")
        if errors and working < total:
            recommendations.append("🔍 Further review of specific endpoint errors is needed.")

        return diagnosis
