"""API key hygiene and per-client request limits"""

from typing import List, Tuple

from slowapi.util import get_remote_address
from starlette.requests import Request

from sliptactix.utils.config import config
from sliptactix.utils.logging import get_logger

logger = get_logger("utils.security")


def sanitize_api_key(key: str) -> str:
    """Masked form of a key that is safe to log"""
    if not key:
        return "none"
    return f"{key[:4]}...{key[-4:]}"


def validate_environment() -> Tuple[bool, List[str]]:
    """Check that the keys the chat pipeline needs are present"""
    issues = []
    if not config.get_grok_api_key():
        issues.append("Missing environment variable: GROK_API_KEY (or XAI_API_KEY)")
    if not config.get_sports_api_key():
        issues.append("Missing environment variable: SPORTS_API_KEY")
    return len(issues) == 0, issues


def client_key(request: Request) -> str:
    """Rate limit key: first X-Forwarded-For hop, else the peer address"""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


def chat_rate_limit() -> str:
    """Limit string for the chat endpoint, e.g. '100/3600 seconds'"""
    chat_config = config.get_chat_config()
    max_requests = int(chat_config.get('rate_limit_requests', 100))
    window_seconds = int(chat_config.get('rate_limit_window_seconds', 3600))
    return f"{max_requests}/{window_seconds} seconds"
