"""Tests for the Grok client"""

import httpx
import openai
import pytest
from unittest.mock import Mock

from sliptactix.utils.errors import GrokError
from sliptactix.utils.llm import LLMClient, map_api_error

GROK_URL = "https://api.x.ai/v1/chat/completions"


def status_error(status_code: int, message: str) -> openai.APIStatusError:
    request = httpx.Request("POST", GROK_URL)
    response = httpx.Response(status_code, request=request)
    return openai.APIStatusError(message, response=response, body=None)


def completion(content="Take the over.", usage=True):
    response = Mock()
    response.usage = Mock(prompt_tokens=120, completion_tokens=30, total_tokens=150) if usage else None
    response.choices = [Mock(message=Mock(content=content))]
    return response


@pytest.fixture
def llm():
    client = LLMClient(api_key="xai-test-key", model="grok-test", rate_limiter=Mock())
    client.client = Mock()
    return client


class TestErrorMapping:
    @pytest.mark.parametrize("status,message,reason", [
        (401, "Incorrect API key provided", "auth"),
        (403, "Your team has no credits left", "credits"),
        (403, "Forbidden", "api_error"),
        (429, "Too many requests", "rate_limit"),
        (500, "Internal error", "api_error"),
    ])
    def test_status_errors(self, status, message, reason):
        error = map_api_error(status_error(status, message))
        assert isinstance(error, GrokError)
        assert error.reason == reason
        assert error.status_code == status

    def test_connection_error(self):
        error = map_api_error(openai.APIConnectionError(request=httpx.Request("POST", GROK_URL)))
        assert error.reason == "api_error"
        assert error.status_code is None


class TestLLMClient:
    """Test Grok calls and usage tracking"""

    def test_missing_key(self, monkeypatch):
        monkeypatch.delenv("GROK_API_KEY", raising=False)
        monkeypatch.delenv("XAI_API_KEY", raising=False)
        client = LLMClient(rate_limiter=Mock())
        assert not client.is_configured
        with pytest.raises(GrokError) as exc_info:
            client.generate_sports_response("lakers?", "context")
        assert exc_info.value.reason == "configuration"

    def test_key_from_xai_env(self, monkeypatch):
        monkeypatch.delenv("GROK_API_KEY", raising=False)
        monkeypatch.setenv("XAI_API_KEY", "xai-from-env")
        client = LLMClient(rate_limiter=Mock())
        assert client.is_configured
        assert client.api_key == "xai-from-env"

    def test_generate_response(self, llm):
        llm.client.chat.completions.create.return_value = completion()
        reply = llm.generate_sports_response("Lakers tonight?", "Item 1 (Type: live_game):")
        assert reply == "Take the over."

        kwargs = llm.client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "grok-test"
        assert kwargs["messages"][0]["role"] == "system"
        assert "Item 1 (Type: live_game):" in kwargs["messages"][0]["content"]
        assert kwargs["messages"][1] == {"role": "user", "content": "Lakers tonight?"}
        llm.rate_limiter.wait_for_token.assert_called_once()

    def test_empty_reply(self, llm):
        llm.client.chat.completions.create.return_value = completion(content=None, usage=False)
        assert llm.generate_sports_response("q", "c") == "I couldn't process that request right now."

    def test_usage_tracking(self, llm):
        llm.client.chat.completions.create.return_value = completion()
        result = llm.call("system", "user")
        llm.call("system", "user")
        assert result["usage"] == {"prompt_tokens": 120, "completion_tokens": 30, "total_tokens": 150}
        assert llm.get_usage_stats() == {"total_tokens": 300, "prompt_tokens": 240, "completion_tokens": 60}
        llm.reset_usage_stats()
        assert llm.get_usage_stats()["total_tokens"] == 0

    def test_api_error_mapped(self, llm):
        llm.client.chat.completions.create.side_effect = status_error(429, "slow down")
        with pytest.raises(GrokError) as exc_info:
            llm.call("system", "user")
        assert exc_info.value.reason == "rate_limit"


class TestValuePlays:
    """Test the value-plays analysis and its fallbacks"""

    PROPS = [{"name": "LeBron James", "team": "LAL", "prop": "Points", "line": 25.5}]
    PROJECTIONS = [{"name": "LeBron James", "prop": "Points", "projections": [{"value": 28.1, "source": "model"}]}]

    def test_analysis(self, llm):
        llm.client.chat.completions.create.return_value = completion(content="Over 25.5 is the best value.")
        result = llm.analyze_value_plays(self.PROPS, self.PROJECTIONS)
        assert result["analysis"] == "Over 25.5 is the best value."
        assert result["fallback"] is False
        assert result["usage"]["total_tokens"] == 150

        kwargs = llm.client.chat.completions.create.call_args.kwargs
        assert kwargs["temperature"] == 0.6
        assert kwargs["max_tokens"] == 300
        user_prompt = kwargs["messages"][1]["content"]
        assert "- LeBron James (LAL): Points 25.5" in user_prompt
        assert "- LeBron James Points: 28.1 (model)" in user_prompt

    def test_empty_reply(self, llm):
        llm.client.chat.completions.create.return_value = completion(content=None, usage=False)
        assert llm.analyze_value_plays(self.PROPS, [])["analysis"] == "Analysis temporarily unavailable."

    def test_not_configured(self, monkeypatch):
        monkeypatch.delenv("GROK_API_KEY", raising=False)
        monkeypatch.delenv("XAI_API_KEY", raising=False)
        result = LLMClient(rate_limiter=Mock()).analyze_value_plays(self.PROPS, [], sport="WNBA")
        assert result["fallback"] is True
        assert result["analysis"].startswith("Based on current WNBA trends")

    def test_api_error(self, llm):
        llm.client.chat.completions.create.side_effect = status_error(500, "boom")
        result = llm.analyze_value_plays(self.PROPS, [])
        assert result["fallback"] is True
        assert result["analysis"].startswith("These NBA props show strong value")
