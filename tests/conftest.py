"""Pytest configuration and shared fixtures"""

import copy
import pytest
from typing import Dict, Any, Optional, List
from unittest.mock import Mock

from sliptactix.data.storage import Database
from sliptactix.utils.cache import TTLCache
from sliptactix.utils.errors import GrokError


class MockLLMClient:
    """Mock Grok client that returns predefined replies for unit tests"""

    def __init__(self, model: str = "mock-model"):
        self.model = model
        self.total_tokens_used = 0
        self.total_prompt_tokens = 0
        self.total_completion_tokens = 0
        self.calls: List[Dict[str, str]] = []
        self._reply = "Mock analysis reply"
        self._error: Optional[GrokError] = None

    def set_reply(self, reply: str):
        """Set the text returned by generate_sports_response"""
        self._reply = reply
        self._error = None

    def set_error(self, reason: str):
        """Make the next calls fail with a GrokError of the given reason"""
        self._error = GrokError(f"mock failure: {reason}", reason=reason)

    def generate_sports_response(self, query: str, context: str) -> str:
        """Mock Grok call"""
        self.calls.append({"query": query, "context": context})
        # Track token usage (simulated)
        self.total_prompt_tokens += (len(query) + len(context)) // 4
        self.total_completion_tokens += 100
        self.total_tokens_used = self.total_prompt_tokens + self.total_completion_tokens

        if self._error is not None:
            raise self._error
        return self._reply

    def get_usage_stats(self) -> Dict[str, int]:
        """Get token usage statistics"""
        return {
            "total_tokens": self.total_tokens_used,
            "prompt_tokens": self.total_prompt_tokens,
            "completion_tokens": self.total_completion_tokens
        }


@pytest.fixture
def mock_llm_client():
    """Fixture providing a mock LLM client for unit tests"""
    return MockLLMClient()


@pytest.fixture
def mock_database(tmp_path):
    """Fixture providing a throwaway SQLite database"""
    db_path = tmp_path / "test_sliptactix.db"
    db = Database(database_url=f"sqlite:///{db_path}")

    yield db

    # Cleanup
    db.close()
    db.engine.dispose()
    if db_path.exists():
        db_path.unlink()


@pytest.fixture
def fresh_cache():
    """Empty TTL cache so tests never share cached responses"""
    return TTLCache(default_ttl=300)


def make_response(status_code: int = 200, json_data: Any = None, text: str = "") -> Mock:
    """Build a requests.Response stand-in"""
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.text = text
    if json_data is None:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        response.json.return_value = json_data
    if response.ok:
        response.raise_for_status.return_value = None
    else:
        import requests
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Error", response=response)
    return response


SAMPLE_EVENT: Dict[str, Any] = {
    "eventID": "EVT_LAL_BOS",
    "type": "match",
    "sportID": "BASKETBALL",
    "leagueID": "NBA",
    "status": {
        "startsAt": "2025-01-15T00:30:00.000Z",
        "displayShort": "Scheduled",
    },
    "teams": {
        "home": {
            "teamID": "LOS_ANGELES_LAKERS_NBA",
            "statEntityID": "home",
            "names": {"long": "Los Angeles Lakers", "medium": "Lakers", "short": "LAL"},
        },
        "away": {
            "teamID": "BOSTON_CELTICS_NBA",
            "statEntityID": "away",
            "names": {"long": "Boston Celtics", "medium": "Celtics", "short": "BOS"},
        },
    },
    "players": {
        "LEBRON_JAMES_1_NBA": {
            "playerID": "LEBRON_JAMES_1_NBA",
            "name": "LeBron James",
            "teamID": "LOS_ANGELES_LAKERS_NBA",
        },
        "JAYSON_TATUM_1_NBA": {
            "playerID": "JAYSON_TATUM_1_NBA",
            "name": "Jayson Tatum",
            "teamID": "BOSTON_CELTICS_NBA",
        },
    },
    "odds": {
        "points-LEBRON_JAMES_1_NBA-game-ou-over": {
            "playerID": "LEBRON_JAMES_1_NBA", "statID": "points", "periodID": "game",
            "sideID": "over", "overUnder": "25.5", "odds": "-115",
            "statEntityID": "LEBRON_JAMES_1_NBA",
        },
        "points-LEBRON_JAMES_1_NBA-game-ou-under": {
            "playerID": "LEBRON_JAMES_1_NBA", "statID": "points", "periodID": "game",
            "sideID": "under", "overUnder": "25.5", "odds": "-105",
            "statEntityID": "LEBRON_JAMES_1_NBA",
        },
        "rebounds-JAYSON_TATUM_1_NBA-game-ou-over": {
            "playerID": "JAYSON_TATUM_1_NBA", "statID": "rebounds", "periodID": "game",
            "sideID": "over", "overUnder": "8.5", "odds": "+100",
            "statEntityID": "JAYSON_TATUM_1_NBA",
        },
        "rebounds-JAYSON_TATUM_1_NBA-game-ou-under": {
            "playerID": "JAYSON_TATUM_1_NBA", "statID": "rebounds", "periodID": "game",
            "sideID": "under", "overUnder": "8.5", "odds": "-120",
            "statEntityID": "JAYSON_TATUM_1_NBA",
        },
        # Over without a matching under: not a usable prop
        "assists-LEBRON_JAMES_1_NBA-game-ou-over": {
            "playerID": "LEBRON_JAMES_1_NBA", "statID": "assists", "periodID": "game",
            "sideID": "over", "overUnder": "7.5", "odds": "-110",
            "statEntityID": "LEBRON_JAMES_1_NBA",
        },
        # Team moneyline: no player
        "points-home-game-ml-home": {
            "statID": "points", "periodID": "game", "sideID": "home",
            "odds": "-150", "statEntityID": "home",
        },
    },
}


SAMPLE_ESPN_EVENT: Dict[str, Any] = {
    "id": "401585001",
    "date": "2025-01-15T00:30Z",
    "status": {"type": {"name": "STATUS_IN_PROGRESS", "state": "in", "description": "In Progress"}},
    "competitions": [{
        "status": {
            "period": 3,
            "displayClock": "5:42",
            "type": {"name": "STATUS_IN_PROGRESS", "state": "in", "completed": False},
        },
        "venue": {"fullName": "Crypto.com Arena"},
        "broadcasts": [{"names": ["ESPN"]}],
        "competitors": [
            {"homeAway": "home", "score": "88", "team": {"id": "13", "abbreviation": "LAL", "displayName": "Los Angeles Lakers"}},
            {"homeAway": "away", "score": "80", "team": {"id": "2", "abbreviation": "BOS", "displayName": "Boston Celtics"}},
        ],
    }],
}


@pytest.fixture
def sample_event():
    """Sports Games Odds event with paired and unpaired player odds"""
    return copy.deepcopy(SAMPLE_EVENT)


@pytest.fixture
def sample_espn_event():
    """ESPN scoreboard event for a game in progress"""
    return copy.deepcopy(SAMPLE_ESPN_EVENT)
