from typing import Any, Dict, List

SPORTS_ANALYST_SYSTEM_PROMPT = """You are SLIPTACTIX, an expert NBA analyst with access to real-time sports data.

IMPORTANT: You have been provided with CURRENT, REAL-TIME sports data below. Use ONLY this data for your analysis. Do not use any pre-trained knowledge about team records or stats.

{context}

Provide a comprehensive analysis based ONLY on the real-time data provided above. If the data shows current season information, make sure to reference it as current season data. Be specific about the numbers and facts from the provided data.

Keep your response under 200 words and conversational."""

RETRIEVAL_INSTRUCTIONS = (
    "Instructions for Grok: Based on the query and the retrieved data, provide a concise and relevant answer. "
    "Focus on player props, game odds, and schedules as requested. If specific data isn't present, state that clearly. "
    "Prioritize data from 'Sports Game Odds API' over 'ESPN (Fallback)' if both are present for the same entity."
)

DEFAULT_EMPTY_REPLY = "I couldn't process that request right now."

FALLBACK_RESPONSES = {
    "configuration": "I'm currently in demo mode. Here are some insights I can share based on your query!",
    "credits": (
        "I'm currently running in demo mode while we set up the AI analysis engine. I can still help you with "
        "sports insights using my built-in knowledge! Try asking about live games, trending props, or player analysis."
    ),
    "auth": (
        "I'm having authentication issues with my analysis engine. "
        "Let me provide some general insights based on your query."
    ),
    "rate_limit": "I'm getting a lot of requests right now. Let me provide some quick insights while I catch up!",
    "api_error": (
        "I'm having trouble connecting to my analysis engine right now, "
        "but I can still help with sports insights using my built-in data!"
    ),
}


def sports_analyst_system_prompt(context: str) -> str:
    return SPORTS_ANALYST_SYSTEM_PROMPT.format(context=context)


def general_sports_context(query: str) -> str:
    return f"""
SPORTS BETTING CONTEXT:

Query: {query}

Note: Specific live sports data from the primary API might be unavailable or did not match the query. Provide general sports betting guidance. If ESPN fallback data was used, mention it.

Available general topics:
- NBA betting strategies (e.g., analyzing matchups, player form, injuries).
- Understanding prop bets (e.g., points, rebounds, assists).
- General sports insights and terminology.
- Importance of checking multiple sources for the latest odds.

Recommend users check:
- Official sportsbooks for the most current odds and lines.
- Reputable sports news sites (like ESPN, The Athletic) for game previews, live scores, and injury reports.
"""


def fallback_response(reason: str) -> str:
    return FALLBACK_RESPONSES.get(reason, FALLBACK_RESPONSES["api_error"])


VALUE_PLAYS_SYSTEM_PROMPT = (
    "You are a professional sports betting analyst. "
    "Provide clear, data-driven insights for value betting opportunities."
)

VALUE_PLAYS_UNAVAILABLE = "Analysis temporarily unavailable."


def value_plays_prompt(props: List[Dict[str, Any]], projections: List[Dict[str, Any]], sport: str) -> str:
    prop_lines = "\n".join(
        f"- {prop.get('name')} ({prop.get('team')}): {prop.get('prop')} {prop.get('line')}"
        for prop in props
    )
    projection_lines = []
    for projection in projections:
        first = (projection.get("projections") or [{}])[0]
        projection_lines.append(
            f"- {projection.get('name')} {projection.get('prop')}: {first.get('value')} ({first.get('source')})"
        )

    return f"""Analyze these {sport} player props for value betting opportunities:

Props to analyze:
{prop_lines}

Projections:
{chr(10).join(projection_lines)}

Provide a concise analysis focusing on:
1. Which props offer the best value
2. Key factors supporting each recommendation
3. Risk assessment for each play
4. Overall confidence in the selections

Keep the response under 200 words and actionable."""


def value_plays_fallback(sport: str, reason: str) -> str:
    if reason == "configuration":
        return (
            f"Based on current {sport} trends and statistical models, these props show strong value potential. "
            "Consider the matchup dynamics and recent performance trends when making your selections."
        )
    return (
        f"These {sport} props show strong value based on recent performance trends and matchup analysis. "
        "Focus on the higher confidence plays and consider the injury reports before finalizing your selections."
    )


__all__ = [
    "SPORTS_ANALYST_SYSTEM_PROMPT",
    "RETRIEVAL_INSTRUCTIONS",
    "DEFAULT_EMPTY_REPLY",
    "FALLBACK_RESPONSES",
    "VALUE_PLAYS_SYSTEM_PROMPT",
    "VALUE_PLAYS_UNAVAILABLE",
    "sports_analyst_system_prompt",
    "general_sports_context",
    "fallback_response",
    "value_plays_prompt",
    "value_plays_fallback",
]
