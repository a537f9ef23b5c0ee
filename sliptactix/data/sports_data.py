"""Sports data client - normalizes Sports Games Odds events into games, teams and props"""

import re
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Dict, Any

from sliptactix.data.clients.sports_games_odds import SportsGamesOddsClient, _iso
from sliptactix.data.models import GameStats, GameStatus, PlayerProp, SeasonStats, TeamInfo
from sliptactix.utils.errors import SportsApiError
from sliptactix.utils.logging import get_logger

logger = get_logger("data.sports_data")

MINUTE_MARKER = re.compile(r"\d{1,2}'")


def estimate_current_season(today: Optional[datetime] = None) -> str:
    """NBA season label, e.g. '2024-25'; seasons roll over in October"""
    today = today or datetime.now()
    year = today.year
    if today.month >= 10:
        return f"{year}-{str(year + 1)[-2:]}"
    return f"{year - 1}-{str(year)[-2:]}"


def parse_game_status(event: Dict[str, Any]) -> GameStatus:
    """Derive a game status from the event's display strings, then its periods"""
    status = event.get("status") or {}
    display = (status.get("displayShort") or status.get("displayLong") or "").lower()
    if not display:
        return GameStatus.SCHEDULED

    if "final" in display or "ft" in display or "aet" in display:
        return GameStatus.FINAL
    if "live" in display or "progress" in display or MINUTE_MARKER.search(display) or "ht" in display:
        return GameStatus.LIVE
    if "postponed" in display or "canc" in display:
        return GameStatus.POSTPONED
    if "scheduled" in display or "sched." in display or "vs" in display:
        return GameStatus.SCHEDULED

    periods = status.get("periods")
    if periods:
        started = periods.get("started") or []
        ended = periods.get("ended") or []
        if started and len(ended) == len(started) and "game" in started:
            return GameStatus.FINAL
        if started:
            return GameStatus.LIVE
    return GameStatus.SCHEDULED


def map_event_to_game_stats(event: Dict[str, Any], player_props: Optional[List[PlayerProp]] = None) -> GameStats:
    teams = event.get("teams") or {}
    home = teams.get("home") or {}
    away = teams.get("away") or {}
    results = ((event.get("results") or {}).get("game")) or {}

    home_score = (results.get("home") or {}).get("points")
    if home_score is None:
        home_score = home.get("score")
    away_score = (results.get("away") or {}).get("points")
    if away_score is None:
        away_score = away.get("score")

    home_names = home.get("names") or {}
    away_names = away.get("names") or {}

    return GameStats(
        game_id=event.get("eventID"),
        home_team=home_names.get("medium") or home_names.get("short") or "Home",
        away_team=away_names.get("medium") or away_names.get("short") or "Away",
        home_team_id=home.get("teamID"),
        away_team_id=away.get("teamID"),
        home_score=home_score,
        away_score=away_score,
        date=(event.get("status") or {}).get("startsAt") or datetime.now(timezone.utc).isoformat(),
        status=parse_game_status(event),
        league=event.get("leagueID"),
        sport=event.get("sportID"),
        odds=event.get("odds") or {},
        player_props=player_props or [],
        raw_event=event,
        source="sportsgameodds",
    )


class SportsDataClient:
    """Game/team/prop lookups over the Sports Games Odds API

    Every lookup catches provider errors, logs them and returns an empty
    result, so callers only need to check for emptiness.
    """

    def __init__(self, odds_client: Optional[SportsGamesOddsClient] = None):
        self.odds_client = odds_client or SportsGamesOddsClient()
        self.current_season = estimate_current_season()
        logger.info(f"🏀 SportsDataClient initialized. Current NBA season (estimated): {self.current_season}")

    def test_connection(self) -> bool:
        """True when at least one endpoint works and nothing failed outright"""
        try:
            diagnosis = self.odds_client.diagnose_api()
        except Exception as e:
            logger.error(f"❌ Sports Games Odds connection test failed: {e}")
            return False

        working = diagnosis.get("working_endpoints", [])
        errors = diagnosis.get("errors", [])
        logger.info(
            f"📊 API diagnosis | Key present: {diagnosis['environment']['api_key_present']} | "
            f"Working endpoints: {len(working)}/{len(diagnosis.get('endpoints_tested', []))} | Errors: {len(errors)}"
        )
        hard_errors = [e for e in errors if "no data returned" not in e]
        return len(working) > 0 and len(hard_errors) == 0

    def get_live_games(self, sport_id: str = "BASKETBALL", league_id: str = "NBA") -> List[GameStats]:
        now = datetime.now(timezone.utc)
        try:
            events = self.odds_client.get_events(
                sportID=sport_id,
                leagueID=league_id,
                marketOddsAvailable=True,
                finalized=False,
                startsAfter=_iso(now - timedelta(hours=2)),
                startsBefore=_iso(now + timedelta(hours=12)),
                limit=25,
            )
        except SportsApiError as e:
            logger.error(f"Error fetching live {league_id} games: {e}")
            return []

        return [
            map_event_to_game_stats(event) for event in events
            if parse_game_status(event) == GameStatus.LIVE
        ]

    def get_upcoming_games(self, sport_id: str = "BASKETBALL", league_id: str = "NBA", days_ahead: int = 2) -> List[GameStats]:
        now = datetime.now(timezone.utc)
        try:
            events = self.odds_client.get_events(
                sportID=sport_id,
                leagueID=league_id,
                marketOddsAvailable=True,
                finalized=False,
                startsAfter=_iso(now),
                startsBefore=_iso(now + timedelta(days=days_ahead)),
                limit=50,
            )
        except SportsApiError as e:
            logger.error(f"Error fetching upcoming {league_id} games: {e}")
            return []
        return [map_event_to_game_stats(event) for event in events]

    def get_team_by_name(self, team_name: str, sport_id: str = "BASKETBALL", league_id: str = "NBA") -> Optional[TeamInfo]:
        try:
            teams = self.odds_client.get_teams(sport_id, league_id)
        except SportsApiError as e:
            logger.error(f"Error fetching {league_id} team by name \"{team_name}\": {e}")
            return None

        lower_name = team_name.lower()
        for team in teams:
            names = team.get("names") or {}
            if (
                lower_name in (names.get("long") or "").lower()
                or lower_name in (names.get("medium") or "").lower()
                or (names.get("short") or "").lower() == lower_name
                or (team.get("teamID") or "").lower() == lower_name
            ):
                return TeamInfo(
                    team_id=team.get("teamID"),
                    name=names.get("long") or names.get("medium") or team.get("teamID"),
                    abbreviation=names.get("short"),
                    league_id=team.get("leagueID") or league_id,
                    sport_id=team.get("sportID") or sport_id,
                    raw=team,
                )
        return None

    def get_team_recent_games(self, team_id: str, limit: int = 5) -> List[GameStats]:
        """Finalized games from the last 30 days, newest first"""
        now = datetime.now(timezone.utc)
        try:
            events = self.odds_client.get_events(
                teamID=team_id,
                finalized=True,
                startsAfter=_iso(now - timedelta(days=30)),
                startsBefore=_iso(now),
                limit=limit * 2,
            )
        except SportsApiError as e:
            logger.error(f"Error fetching recent games for team {team_id}: {e}")
            return []

        ordered = sorted(
            events,
            key=lambda event: (event.get("status") or {}).get("startsAt") or "",
            reverse=True
        )
        return [map_event_to_game_stats(event) for event in ordered[:limit]]

    def _get_event(self, event_id: str) -> Optional[Dict[str, Any]]:
        events = self.odds_client.get_events(eventID=event_id, limit=1)
        return events[0] if events else None

    def get_game_details(self, event_id: str) -> Optional[GameStats]:
        try:
            event = self._get_event(event_id)
        except SportsApiError as e:
            logger.error(f"Error fetching details for game {event_id}: {e}")
            return None
        if event is None:
            return None
        props = self.odds_client.extract_player_props_from_event(event)
        return map_event_to_game_stats(event, props)

    def get_player_props_for_game(self, event_id: str) -> List[PlayerProp]:
        try:
            event = self._get_event(event_id)
        except SportsApiError as e:
            logger.error(f"Error fetching player props for game {event_id}: {e}")
            return []
        if event is None:
            return []
        return self.odds_client.extract_player_props_from_event(event)

    def get_nba_prop_bets(self, date: Optional[str] = None, limit: Optional[int] = None) -> List[PlayerProp]:
        try:
            return self.odds_client.get_nba_prop_bets(date=date, limit=limit)
        except SportsApiError as e:
            logger.error(f"Error fetching NBA prop bets: {e}")
            return []

    def get_prizepicks_compatible_props(self, date: Optional[str] = None, limit: Optional[int] = None) -> List[PlayerProp]:
        try:
            return self.odds_client.get_prizepicks_data(date=date, limit=limit)
        except SportsApiError as e:
            logger.error(f"Error fetching PrizePicks compatible props: {e}")
            return []

    def get_player_by_name(self, player_name: str, sport_id: str = "BASKETBALL", league_id: str = "NBA") -> Optional[Dict[str, Any]]:
        """Search the rosters of the first few teams for a name match

        The players endpoint has no name filter, so this only covers five teams.
        """
        lower_name = player_name.lower()
        try:
            team_ids = [team.get("teamID") for team in self.odds_client.get_teams(sport_id, league_id, 5)]
            for team_id in team_ids:
                for player in self.odds_client.get_players(team_id=team_id):
                    if lower_name in (player.get("name") or "").lower():
                        return player
        except SportsApiError as e:
            logger.error(f"Error in get_player_by_name for {player_name}: {e}")
        return None

    def get_team_season_stats(self, team_name: str, league_id: str = "NBA") -> Optional[SeasonStats]:
        logger.warning(f"get_team_season_stats for {team_name} is not supported by the odds API.")
        return None

    def get_injury_report(self, sport_id: str = "BASKETBALL", league_id: str = "NBA") -> List[Dict[str, Any]]:
        logger.warning(f"get_injury_report for {league_id} is not supported by the odds API.")
        return []

    def get_news(self, sport_id: str = "BASKETBALL", league_id: str = "NBA") -> List[Dict[str, Any]]:
        logger.warning(f"get_news for {league_id} is not supported by the odds API.")
        return []
