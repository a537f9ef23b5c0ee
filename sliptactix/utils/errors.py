"""Exceptions raised by the external API clients"""

from typing import Optional


class SportsApiError(Exception):
    """Base error for sports data providers"""

    def __init__(self, message: str, status_code: Optional[int] = None, endpoint: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.endpoint = endpoint


class MissingApiKeyError(SportsApiError):
    """No API key configured for the provider"""


class InvalidApiKeyError(SportsApiError):
    """Provider rejected the key (401)"""


class AccessForbiddenError(SportsApiError):
    """Key valid but subscription does not cover the endpoint (403)"""


class RateLimitExceededError(SportsApiError):
    """Provider rate limit hit (429)"""


class ExternalServiceError(SportsApiError):
    """Any other HTTP or transport failure"""


class GrokError(Exception):
    """Failure talking to the xAI API

    ``reason`` is one of ``configuration``, ``credits``, ``auth``,
    ``rate_limit`` or ``api_error``.
    """

    REASONS = ("configuration", "credits", "auth", "rate_limit", "api_error")

    def __init__(self, message: str, reason: str = "api_error", status_code: Optional[int] = None):
        super().__init__(message)
        if reason not in self.REASONS:
            reason = "api_error"
        self.reason = reason
        self.status_code = status_code


class ChatValidationError(ValueError):
    """User message failed validation"""
