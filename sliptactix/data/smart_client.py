"""Smart sports client - picks the best available data source per lookup"""

from typing import List, Optional

from sliptactix.data.clients.espn import ESPNSportsClient, parse_espn_game
from sliptactix.data.models import GameStats, TeamInfo
from sliptactix.data.sports_data import SportsDataClient
from sliptactix.utils.logging import get_logger, SourceInteractionLogger

logger = get_logger("data.smart_client")


class SmartSportsClient:
    """Sports Games Odds first, ESPN when it comes back empty or fails"""

    PRIMARY = "sportsgamesodds"
    FALLBACK = "espn"

    def __init__(self, sports_data: Optional[SportsDataClient] = None, espn: Optional[ESPNSportsClient] = None):
        self.sports_data = sports_data or SportsDataClient()
        self.espn = espn or ESPNSportsClient()
        self.source_logger = SourceInteractionLogger(logger)

    def get_team_by_name(self, team_name: str) -> TeamInfo:
        """Resolve a team; raises LookupError when no source knows it"""
        logger.info(f"🔍 Looking up team: {team_name}")
        try:
            team = self.sports_data.get_team_by_name(team_name)
            if team:
                self.source_logger.log_success(self.PRIMARY, f"team {team.name}")
                return team
        except Exception as e:
            self.source_logger.log_fallback(self.PRIMARY, self.FALLBACK, str(e))

        espn_team = self.espn.get_team_by_name(team_name)
        if espn_team:
            self.source_logger.log_success(self.FALLBACK, f"team {espn_team.get('displayName')}")
            return TeamInfo(
                team_id=str(espn_team.get("id")),
                name=espn_team.get("displayName"),
                abbreviation=espn_team.get("abbreviation"),
                city=espn_team.get("location"),
                source="espn",
                raw=espn_team,
            )

        raise LookupError(f'Team "{team_name}" not found in any data source')

    def get_team_recent_games(self, team_name: str, limit: int = 5) -> List[GameStats]:
        logger.info(f"🔍 Getting recent games for: {team_name}")
        try:
            team = self.sports_data.get_team_by_name(team_name)
            if team:
                games = self.sports_data.get_team_recent_games(team.team_id, limit)
                if games:
                    self.source_logger.log_success(self.PRIMARY, "recent games", len(games))
                    return games
        except Exception as e:
            self.source_logger.log_fallback(self.PRIMARY, self.FALLBACK, str(e))

        espn_games = self.espn.get_team_recent_games(team_name, limit)
        if espn_games:
            self.source_logger.log_success(self.FALLBACK, "recent games", len(espn_games))
            return [parse_espn_game(event, self.sports_data.current_season) for event in espn_games]
        return []

    def get_todays_games(self) -> List[GameStats]:
        logger.info("🔍 Getting today's games...")
        try:
            games = self.sports_data.get_live_games()
            if games:
                self.source_logger.log_success(self.PRIMARY, "games", len(games))
                return games
        except Exception as e:
            self.source_logger.log_fallback(self.PRIMARY, self.FALLBACK, str(e))

        espn_games = self.espn.get_todays_games()
        if espn_games:
            self.source_logger.log_success(self.FALLBACK, "games", len(espn_games))
            return [parse_espn_game(event, self.sports_data.current_season) for event in espn_games]
        return []
