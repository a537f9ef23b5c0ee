"""LLM client for xAI Grok through the OpenAI-compatible API"""

from typing import Optional, Dict, Any, List

import openai

from sliptactix.prompts import (
    DEFAULT_EMPTY_REPLY,
    VALUE_PLAYS_SYSTEM_PROMPT,
    VALUE_PLAYS_UNAVAILABLE,
    sports_analyst_system_prompt,
    value_plays_fallback,
    value_plays_prompt,
)
from sliptactix.utils.config import config
from sliptactix.utils.errors import GrokError
from sliptactix.utils.logging import get_logger
from sliptactix.utils.rate_limiter import RateLimiter, grok_rate_limiter

logger = get_logger("utils.llm")


def map_api_error(error: Exception) -> GrokError:
    """Translate an OpenAI SDK error into a GrokError with a fallback reason"""
    if isinstance(error, openai.APIStatusError):
        status = error.status_code
        message = str(error)
        if status == 401:
            reason = "auth"
        elif status == 403 and "credits" in message.lower():
            reason = "credits"
        elif status == 429:
            reason = "rate_limit"
        else:
            reason = "api_error"
        return GrokError(f"Grok API error: {status} - {message}", reason=reason, status_code=status)
    return GrokError(f"Grok API error: {error}", reason="api_error")


class LLMClient:
    """Client for Grok chat completions"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        rate_limiter: Optional[RateLimiter] = None
    ):
        """
        Initialize LLM client

        Args:
            api_key: xAI key (defaults to GROK_API_KEY, then XAI_API_KEY)
            model: Model to use (defaults to GROK_MODEL or llm.model, grok-3-mini)
            base_url: OpenAI-compatible base URL (defaults to https://api.x.ai/v1)
            rate_limiter: Token bucket guarding outbound calls
        """
        self.api_key = api_key or config.get_grok_api_key()
        self.model = model or config.get_llm_model()
        self.base_url = base_url or config.get_grok_api_url()
        self.rate_limiter = rate_limiter or grok_rate_limiter()
        self.logger = logger

        # The SDK refuses to build without a key; calls report it instead
        self.client = openai.OpenAI(api_key=self.api_key, base_url=self.base_url) if self.api_key else None

        self.logger.info(
            f"🔑 Grok client initialized | Key: {'YES' if self.api_key else 'NO'} "
            f"(source: {config.get_grok_key_source() if not api_key else 'argument'}) | "
            f"Model: {self.model} | Base URL: {self.base_url}"
        )

        # Token usage tracking
        self.total_tokens_used = 0
        self.total_prompt_tokens = 0
        self.total_completion_tokens = 0

    @property
    def is_configured(self) -> bool:
        return self.client is not None

    def call(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ) -> Dict[str, Any]:
        """Single system + user turn"""
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt}
        ]
        return self.call_chat(messages=messages, temperature=temperature, max_tokens=max_tokens)

    def call_chat(
        self,
        messages: List[Dict[str, Any]],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        Make a Grok chat completion call

        Args:
            messages: Chat messages
            temperature: Sampling temperature (defaults to llm.temperature, 0.7)
            max_tokens: Maximum tokens in response (defaults to llm.max_tokens, 500)

        Returns:
            {"content": reply text, "usage": token counts or None}

        Raises:
            GrokError: reason tells the caller which fallback to show
        """
        if self.client is None:
            raise GrokError("Grok API key not configured", reason="configuration")

        request_params = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature if temperature is not None else config.get('llm.temperature', 0.7),
            "max_tokens": max_tokens or config.get('llm.max_tokens', 500),
        }

        self.rate_limiter.wait_for_token()
        self.logger.debug(f"🤖 Calling Grok {self.model} with {len(messages)} messages")

        try:
            response = self.client.chat.completions.create(**request_params)
        except openai.OpenAIError as e:
            error = map_api_error(e)
            self.logger.error(f"❌ Error calling Grok ({error.reason}): {e}")
            raise error from e

        usage = None
        if response.usage:
            prompt_tokens = response.usage.prompt_tokens
            completion_tokens = response.usage.completion_tokens
            total_tokens = response.usage.total_tokens

            self.total_prompt_tokens += prompt_tokens
            self.total_completion_tokens += completion_tokens
            self.total_tokens_used += total_tokens
            usage = {
                "prompt_tokens": prompt_tokens,
                "completion_tokens": completion_tokens,
                "total_tokens": total_tokens,
            }

            self.logger.info(
                f"📊 Token usage ({self.model}): "
                f"Prompt: {prompt_tokens:,} | "
                f"Completion: {completion_tokens:,} | "
                f"Total: {total_tokens:,}"
            )

        content = ""
        if response.choices:
            content = response.choices[0].message.content or ""
        return {"content": content, "usage": usage}

    def generate_sports_response(self, query: str, context: str) -> str:
        """Answer a user query grounded in retrieved sports context"""
        result = self.call(
            system_prompt=sports_analyst_system_prompt(context),
            user_prompt=query
        )
        return result["content"] or DEFAULT_EMPTY_REPLY

    def analyze_value_plays(
        self,
        props: List[Dict[str, Any]],
        projections: List[Dict[str, Any]],
        sport: str = "NBA"
    ) -> Dict[str, Any]:
        """
        Ask Grok which props offer the best value

        Returns:
            {"analysis", "fallback", "usage"}; fallback is True with a canned
            analysis when Grok is not configured or the call fails
        """
        try:
            result = self.call(
                system_prompt=VALUE_PLAYS_SYSTEM_PROMPT,
                user_prompt=value_plays_prompt(props, projections, sport),
                temperature=0.6,
                max_tokens=300
            )
        except GrokError as e:
            self.logger.warning(f"⚠️ Value plays analysis unavailable ({e.reason}), using fallback")
            return {"analysis": value_plays_fallback(sport, e.reason), "fallback": True, "usage": None}

        return {
            "analysis": result["content"] or VALUE_PLAYS_UNAVAILABLE,
            "fallback": False,
            "usage": result["usage"],
        }

    def get_usage_stats(self) -> Dict[str, int]:
        """Get cumulative token usage statistics"""
        return {
            "total_tokens": self.total_tokens_used,
            "prompt_tokens": self.total_prompt_tokens,
            "completion_tokens": self.total_completion_tokens
        }

    def reset_usage_stats(self) -> None:
        """Reset token usage statistics"""
        self.total_tokens_used = 0
        self.total_prompt_tokens = 0
        self.total_completion_tokens = 0


def get_llm_client() -> LLMClient:
    """Get a configured Grok client"""
    model = config.get_llm_model()
    logger.debug(f"🤖 LLM Client: using model '{model}'")
    return LLMClient(model=model)
