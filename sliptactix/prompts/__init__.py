from .chat import (
    DEFAULT_EMPTY_REPLY,
    FALLBACK_RESPONSES,
    RETRIEVAL_INSTRUCTIONS,
    SPORTS_ANALYST_SYSTEM_PROMPT,
    VALUE_PLAYS_SYSTEM_PROMPT,
    VALUE_PLAYS_UNAVAILABLE,
    fallback_response,
    general_sports_context,
    sports_analyst_system_prompt,
    value_plays_fallback,
    value_plays_prompt,
)

__all__ = [
    "DEFAULT_EMPTY_REPLY",
    "FALLBACK_RESPONSES",
    "RETRIEVAL_INSTRUCTIONS",
    "SPORTS_ANALYST_SYSTEM_PROMPT",
    "VALUE_PLAYS_SYSTEM_PROMPT",
    "VALUE_PLAYS_UNAVAILABLE",
    "fallback_response",
    "general_sports_context",
    "sports_analyst_system_prompt",
    "value_plays_fallback",
    "value_plays_prompt",
]
