"""Retrieval step of the chat pipeline: route a query to sports data and format it for Grok"""

import json
import re
from datetime import datetime, timezone
from typing import List, Optional

import pytz

from sliptactix.data.clients.espn import ESPNSportsClient, _competitor
from sliptactix.data.models import (
    GAME_ITEM_TYPES,
    PROP_ITEM_TYPES,
    ItemType,
    RetrievedItem,
    to_serializable,
)
from sliptactix.data.sports_data import SportsDataClient
from sliptactix.prompts import RETRIEVAL_INSTRUCTIONS, general_sports_context
from sliptactix.utils.cache import TTLCache
from sliptactix.utils.config import config
from sliptactix.utils.logging import get_logger

logger = get_logger("rag.processor")

MAX_ITEMS_TO_GROK = 15

PROP_KEYWORDS = ("prop", "bet", "odds", "prizepicks", "player performance")
LIVE_KEYWORDS = ("live", "today's games", "current games")
SCHEDULE_KEYWORDS = ("games", "schedule")
TEAM_KEYWORDS = [
    "lakers", "warriors", "celtics", "nets", "suns", "bucks",
    "76ers", "nuggets", "clippers", "heat", "pacers",
]

PLAYER_PATTERN = re.compile(r"player\s+([a-zA-Z\s]+)")
TRAILING_QUALIFIER = re.compile(r"\s+(props|stats)$")


def extract_player_name(lower_query: str) -> Optional[str]:
    """Name following the word 'player', without a trailing 'props'/'stats'"""
    match = PLAYER_PATTERN.search(lower_query)
    if not match:
        return None
    name = TRAILING_QUALIFIER.sub("", match.group(1).strip())
    return name or None


class RAGProcessor:
    """Keyword router over the sports data clients"""

    def __init__(
        self,
        sports_data: Optional[SportsDataClient] = None,
        espn: Optional[ESPNSportsClient] = None,
        cache: Optional[TTLCache] = None
    ):
        self.sports_data = sports_data or SportsDataClient()
        self.espn = espn or ESPNSportsClient()
        self.cache = cache or TTLCache(default_ttl=config.get_cache_ttl())

    def process_query(self, query: str) -> str:
        """Context string for Grok: retrieved data, or general guidance"""
        try:
            logger.info(f"🔍 Processing RAG query: {query}")
            items = self.retrieve_data(query)
            if items:
                logger.info(f"✅ Retrieved {len(items)} data points for RAG")
                return self.format_data_for_grok(items, query)
            logger.info("⚠️ No sports data retrieved, using general context")
            return self.get_general_sports_context(query)
        except Exception as e:
            logger.error(f"❌ RAG processing failed: {e}", exc_info=True)
            return self.get_general_sports_context(query)

    def retrieve_data(self, query: str) -> List[RetrievedItem]:
        """Route the query to the data it asks about; memoized per query"""
        cache_key = f"rag_{query.strip().lower()}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug(f"📋 Using cached retrieval for: {query}")
            return cached

        items = self._route(query)
        if items:
            self.cache.set(cache_key, items)
        return items

    def _route(self, query: str) -> List[RetrievedItem]:
        lower_query = query.lower()
        today = datetime.now(pytz.timezone(config.get_timezone())).strftime("%Y-%m-%d")
        items: List[RetrievedItem] = []

        try:
            if not self.sports_data.test_connection():
                logger.warning("⚠️ Sports API not connected or has issues, attempting ESPN fallback.")
                return self.get_espn_fallback_data()

            if any(keyword in lower_query for keyword in PROP_KEYWORDS):
                logger.info("🎲 Fetching NBA prop bets for today...")
                props = self.sports_data.get_nba_prop_bets(date=today, limit=100)
                items.extend(RetrievedItem(ItemType.PLAYER_PROP, prop) for prop in props)

            if any(keyword in lower_query for keyword in LIVE_KEYWORDS):
                logger.info("🔴 Fetching live NBA games...")
                games = self.sports_data.get_live_games("BASKETBALL", "NBA")
                items.extend(RetrievedItem(ItemType.LIVE_GAME, game) for game in games)

            if not items and any(keyword in lower_query for keyword in SCHEDULE_KEYWORDS):
                logger.info("🗓️ Fetching upcoming NBA games...")
                games = self.sports_data.get_upcoming_games("BASKETBALL", "NBA", 2)
                items.extend(RetrievedItem(ItemType.UPCOMING_GAME, game) for game in games)

            team_keyword = next((keyword for keyword in TEAM_KEYWORDS if keyword in lower_query), None)
            if team_keyword:
                items.extend(self._team_items(team_keyword))

            if "player" in lower_query and not team_keyword:
                player_name = extract_player_name(lower_query)
                if player_name:
                    items.extend(self._player_items(player_name))

            if not items and "prizepicks" in lower_query:
                logger.info("💰 No specific data matched, trying PrizePicks compatible props")
                props = self.sports_data.get_prizepicks_compatible_props(date=today, limit=50)
                items.extend(RetrievedItem(ItemType.PRIZEPICKS_PROP, prop) for prop in props)

            if not items:
                logger.info("🤷 No data from Sports Games Odds API for query, attempting ESPN fallback.")
                return self.get_espn_fallback_data()
            return items
        except Exception as e:
            logger.error(f"❌ Error retrieving sports data: {e}", exc_info=True)
            return self.get_espn_fallback_data()

    def _team_items(self, team_keyword: str) -> List[RetrievedItem]:
        logger.info(f"🏀 Fetching data for team: {team_keyword}")
        team = self.sports_data.get_team_by_name(team_keyword, "BASKETBALL", "NBA")
        if not team:
            return []

        items = [RetrievedItem(ItemType.TEAM_INFO, team)]
        recent = self.sports_data.get_team_recent_games(team.team_id, 3)
        items.extend(RetrievedItem(ItemType.TEAM_GAME_RECENT, game) for game in recent)

        upcoming = [
            game for game in self.sports_data.get_upcoming_games("BASKETBALL", "NBA", 7)
            if team.team_id in (game.home_team_id, game.away_team_id)
        ]
        items.extend(RetrievedItem(ItemType.TEAM_GAME_UPCOMING, game) for game in upcoming[:2])
        return items

    def _player_items(self, player_name: str) -> List[RetrievedItem]:
        logger.info(f"👤 Fetching data for player: {player_name}")
        player = self.sports_data.get_player_by_name(player_name, "BASKETBALL", "NBA")
        if not player:
            return []

        items = [RetrievedItem(ItemType.PLAYER_INFO, player)]
        player_id = player.get("playerID")
        for game in self.sports_data.get_upcoming_games("BASKETBALL", "NBA", 2):
            roster = (game.raw_event or {}).get("players") or {}
            if player_id not in roster:
                continue
            props = [p for p in self.sports_data.get_player_props_for_game(game.game_id) if p.player_id == player_id]
            if props:
                items.extend(RetrievedItem(ItemType.PLAYER_PROP_SPECIFIC, prop) for prop in props)
                break
        return items

    def get_espn_fallback_data(self) -> List[RetrievedItem]:
        """Today's ESPN scoreboard as a last resort"""
        logger.info("📺 Using ESPN as fallback data source...")
        events = self.espn.get_todays_games()
        items = []
        for event in events:
            competition = (event.get("competitions") or [{}])[0]
            home = _competitor(competition, "home")
            away = _competitor(competition, "away")
            items.append(RetrievedItem(ItemType.ESPN_GAME, {
                "game_id": event.get("id"),
                "home_team": (home.get("team") or {}).get("abbreviation") or "HOME",
                "away_team": (away.get("team") or {}).get("abbreviation") or "AWAY",
                "home_score": home.get("score") or "0",
                "away_score": away.get("score") or "0",
                "status": (((event.get("status") or {}).get("type")) or {}).get("description") or "Scheduled",
                "date": event.get("date"),
                "source": "ESPN (Fallback)",
            }))
        logger.info(f"✅ Retrieved {len(items)} games from ESPN fallback")
        return items

    def format_data_for_grok(self, items: List[RetrievedItem], query: str) -> str:
        shown = items[:MAX_ITEMS_TO_GROK]
        lines = [
            f"Query: {query}",
            f"Timestamp: {datetime.now(timezone.utc).isoformat()}",
            "Source: Sports Game Odds API & ESPN Fallback",
            "",
            f"Key Information Retrieved ({len(shown)} items shown):",
        ]

        for index, item in enumerate(shown, start=1):
            lines.append("")
            lines.append(f"Item {index} (Type: {item.item_type.value}):")
            lines.extend(f"  {line}" for line in self._describe(item))

        if len(items) > MAX_ITEMS_TO_GROK:
            lines.append("")
            lines.append(f"... and {len(items) - MAX_ITEMS_TO_GROK} more items not shown.")

        lines.append("")
        lines.append(RETRIEVAL_INSTRUCTIONS)
        return "\n".join(lines)

    @staticmethod
    def _describe(item: RetrievedItem) -> List[str]:
        data = item.data
        if item.item_type in PROP_ITEM_TYPES:
            described = [
                f"Player: {data.player_name} ({data.team_name or 'N/A'})",
                f"Stat: {data.stat_type}, Line: {data.line}",
                f"Over: {data.over_odds}, Under: {data.under_odds}",
            ]
            if data.game_time:
                described.append(f"Game Time: {data.game_time}")
            return described

        if item.item_type in GAME_ITEM_TYPES:
            described = [
                f"Game: {data.away_team} at {data.home_team}",
                f"Status: {data.status.value}, Score: {data.away_score}-{data.home_score}",
                f"Date: {data.date}",
            ]
            if data.player_props:
                sample = data.player_props[0]
                described.append(f"Sample Prop: {sample.player_name} {sample.stat_type} {sample.line}")
            return described

        if item.item_type == ItemType.TEAM_INFO:
            return [
                f"Team: {data.name} ({data.abbreviation or data.team_id})",
                f"League: {data.league_id}, Sport: {data.sport_id}",
            ]

        if item.item_type == ItemType.PLAYER_INFO:
            described = [f"Player: {data.get('name')} ({data.get('playerID')})"]
            if data.get("teamID"):
                described.append(f"Team ID: {data['teamID']}")
            if data.get("position"):
                described.append(f"Position: {data['position']}")
            return described

        if item.item_type == ItemType.ESPN_GAME:
            return [
                f"ESPN Game: {data['away_team']} at {data['home_team']}",
                f"Status: {data['status']}, Score: {data['away_score']}-{data['home_score']}",
            ]

        return json.dumps(to_serializable(data), indent=2, default=str).splitlines()

    def get_general_sports_context(self, query: str) -> str:
        return general_sports_context(query)
