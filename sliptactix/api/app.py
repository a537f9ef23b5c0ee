"""HTTP API for the chat assistant and the data board"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from sliptactix.chat import ChatService
from sliptactix.data.models import to_serializable
from sliptactix.data.sports_data import SportsDataClient
from sliptactix.orchestration.data_sync import DataSyncService
from sliptactix.utils.errors import ChatValidationError
from sliptactix.utils.llm import LLMClient, get_llm_client
from sliptactix.utils.logging import get_logger
from sliptactix.utils.security import chat_rate_limit, client_key, validate_environment

logger = get_logger("api.app")

CHAT_USAGE = {
    "name": "Sports Chat API",
    "description": "AI-powered sports analysis using Grok 3 Mini with RAG",
    "version": "1.0.0",
    "endpoints": {
        "POST /api/chat": {
            "description": "Send a sports-related query and get AI analysis",
            "body": {
                "message": "string (required) - Your sports question",
                "context": "string (optional) - Additional context",
            },
            "response": {
                "response": "string - AI generated response",
                "data_used": "array - Sports data used for analysis",
                "confidence": "number - Confidence score (0-1)",
                "sources": "array - Data sources used",
                "fallback": "boolean - True when the AI engine was unavailable",
                "reason": "string - Why the fallback was used",
                "timestamp": "string - Response timestamp",
            },
        },
    },
    "examples": [
        "Who scored the most points in the last Lakers game?",
        "How did the Warriors perform in their recent games?",
        "What are the best player props for tonight?",
    ],
}


class ChatRequest(BaseModel):
    # non-string messages are rejected by validate_message with a 400
    message: Any = None
    context: Optional[str] = None


class ValuePlaysRequest(BaseModel):
    props: List[Dict[str, Any]] = Field(default_factory=list)
    projections: List[Dict[str, Any]] = Field(default_factory=list)
    sport: str = "NBA"


def create_app(
    chat_service: Optional[ChatService] = None,
    sync_service: Optional[DataSyncService] = None,
    sports_data: Optional[SportsDataClient] = None,
    llm_client: Optional[LLMClient] = None,
    rate_limit: Optional[str] = None
) -> FastAPI:
    """Build the API; services are created on first use unless injected"""
    app = FastAPI(title="SlipTactix API")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    limiter = Limiter(key_func=client_key)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    services = {"chat": chat_service, "sync": sync_service, "sports_data": sports_data, "llm": llm_client}

    def get_chat_service() -> ChatService:
        if services["chat"] is None:
            services["chat"] = ChatService()
        return services["chat"]

    def get_sync_service() -> DataSyncService:
        if services["sync"] is None:
            services["sync"] = DataSyncService()
        return services["sync"]

    def get_sports_data() -> SportsDataClient:
        if services["sports_data"] is None:
            services["sports_data"] = SportsDataClient()
        return services["sports_data"]

    def get_llm() -> LLMClient:
        if services["llm"] is None:
            services["llm"] = get_llm_client()
        return services["llm"]

    @app.post("/api/chat")
    @limiter.limit(rate_limit or chat_rate_limit())
    def chat(request: Request, req: ChatRequest):
        try:
            result = get_chat_service().handle(req.message, req.context)
        except ChatValidationError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return to_serializable(result)

    @app.get("/api/chat")
    def chat_usage():
        return CHAT_USAGE

    @app.get("/api/props")
    def props(limit: int = 20):
        sync = get_sync_service()
        stored = sync.get_latest_props(limit=limit)
        if stored:
            return {"props": stored, "source": "database"}
        live = sync.props_source.get_active_props("NBA")[:limit]
        return {"props": to_serializable(live), "source": "live"}

    @app.get("/api/games")
    def games():
        sync = get_sync_service()
        stored = sync.get_latest_games()
        if stored:
            return {"games": stored, "source": "database"}
        return {"games": to_serializable(sync.feed.get_live_games()), "source": "live"}

    @app.get("/api/injuries")
    def injuries():
        sync = get_sync_service()
        stored = sync.get_latest_injuries()
        if stored:
            return {"injuries": stored, "source": "database"}
        return {"injuries": to_serializable(sync.feed.get_injury_report()), "source": "live"}

    @app.get("/api/news")
    def news(limit: int = 10):
        sync = get_sync_service()
        stored = sync.get_latest_news(limit=limit)
        if stored:
            return {"news": stored, "source": "database"}
        return {"news": to_serializable(sync.feed.get_news(limit)), "source": "live"}

    @app.get("/api/player/{name}")
    def player(name: str):
        found = get_sports_data().get_player_by_name(name)
        if not found:
            raise HTTPException(status_code=404, detail="Player not found")
        return {"success": True, "player": found}

    @app.post("/api/grok-analysis/value-plays")
    def value_plays(req: ValuePlaysRequest):
        result = get_llm().analyze_value_plays(req.props, req.projections, req.sport)
        return {"analysis": result["analysis"], "fallback": result["fallback"]}

    @app.get("/health")
    def health():
        env_ok, issues = validate_environment()
        sync = services["sync"]
        return {
            "status": "ok" if env_ok else "degraded",
            "issues": issues,
            "sync_running": bool(sync and sync.is_running),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    return app


app = create_app()
