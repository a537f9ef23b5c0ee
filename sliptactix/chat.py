"""Chat pipeline: validate, retrieve sports data, ask Grok"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Any

from sliptactix.data.models import ItemType, RetrievedItem, to_serializable
from sliptactix.prompts import fallback_response
from sliptactix.rag.processor import MAX_ITEMS_TO_GROK, RAGProcessor
from sliptactix.utils.config import config
from sliptactix.utils.errors import ChatValidationError, GrokError
from sliptactix.utils.llm import LLMClient, get_llm_client
from sliptactix.utils.logging import get_logger, log_data_object

logger = get_logger("chat")

PRIMARY_SOURCE = "Sports Games Odds API"
ESPN_SOURCE = "ESPN"
GENERAL_SOURCE = "General sports knowledge"

CONFIDENCE_PRIMARY = 0.85
CONFIDENCE_ESPN = 0.6
CONFIDENCE_GENERAL = 0.3


@dataclass
class ChatResponse:
    """Reply returned to chat clients"""
    response: str
    data_used: List[Any] = field(default_factory=list)
    sources: List[str] = field(default_factory=list)
    confidence: float = CONFIDENCE_GENERAL
    fallback: bool = False
    reason: Optional[str] = None
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


def validate_message(message: Any, max_length: Optional[int] = None) -> str:
    """Return the message if it is a usable query, else raise ChatValidationError"""
    max_length = max_length or int(config.get_chat_config().get('max_message_length', 1000))
    if not isinstance(message, str) or not message.strip():
        raise ChatValidationError("Message is required and must be a non-empty string")
    if len(message) > max_length:
        raise ChatValidationError(f"Message too long. Please keep it under {max_length} characters.")
    return message


def sources_for(items: List[RetrievedItem]) -> List[str]:
    sources = []
    for item in items:
        source = ESPN_SOURCE if item.item_type == ItemType.ESPN_GAME else PRIMARY_SOURCE
        if source not in sources:
            sources.append(source)
    return sources or [GENERAL_SOURCE]


def confidence_for(items: List[RetrievedItem]) -> float:
    if not items:
        return CONFIDENCE_GENERAL
    if all(item.item_type == ItemType.ESPN_GAME for item in items):
        return CONFIDENCE_ESPN
    return CONFIDENCE_PRIMARY


class ChatService:
    """Answers sports questions with retrieved data and Grok"""

    def __init__(self, rag_processor: Optional[RAGProcessor] = None, llm_client: Optional[LLMClient] = None):
        self.rag_processor = rag_processor or RAGProcessor()
        self.llm_client = llm_client or get_llm_client()

    def handle(self, message: Any, context: Optional[str] = None) -> ChatResponse:
        """
        Answer one chat message

        Raises:
            ChatValidationError: message is empty, not a string or too long
        """
        message = validate_message(message)
        logger.info(f"💬 Processing chat request: {message}")

        try:
            items = self.rag_processor.retrieve_data(message)
        except Exception as e:
            logger.error(f"❌ Retrieval failed, continuing with general context: {e}", exc_info=True)
            items = []
        log_data_object(logger, "Retrieved items", items)

        if items:
            grok_context = self.rag_processor.format_data_for_grok(items, message)
        else:
            grok_context = self.rag_processor.get_general_sports_context(message)
        if context:
            grok_context = f"{grok_context}\n\nAdditional context from the user: {context}"

        data_used = [
            {"type": item.item_type.value, "data": to_serializable(item.data)}
            for item in items[:MAX_ITEMS_TO_GROK]
        ]
        sources = sources_for(items)
        confidence = confidence_for(items)

        try:
            reply = self.llm_client.generate_sports_response(message, grok_context)
        except GrokError as e:
            logger.warning(f"⚠️ Grok unavailable ({e.reason}), returning fallback response")
            return ChatResponse(
                response=fallback_response(e.reason),
                data_used=data_used,
                sources=sources,
                confidence=confidence,
                fallback=True,
                reason=e.reason,
            )

        logger.info("✅ Chat response generated successfully")
        return ChatResponse(
            response=reply,
            data_used=data_used,
            sources=sources,
            confidence=confidence,
        )
