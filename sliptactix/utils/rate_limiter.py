"""Token bucket rate limiter for outbound LLM calls"""

import time
from typing import Callable

from sliptactix.utils.logging import get_logger

logger = get_logger("utils.rate_limiter")


class RateLimiter:
    """Token bucket: ``refill_rate`` tokens are added per elapsed ``refill_interval`` seconds"""

    def __init__(
        self,
        max_tokens: int,
        refill_rate: int,
        refill_interval: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep
    ):
        self.max_tokens = max_tokens
        self.refill_rate = refill_rate
        self.refill_interval = refill_interval
        self._clock = clock
        self._sleep = sleep
        self.tokens = max_tokens
        self.last_refill = clock()

    def _refill_tokens(self) -> None:
        now = self._clock()
        elapsed = now - self.last_refill
        tokens_to_add = int(elapsed // self.refill_interval) * self.refill_rate
        if tokens_to_add > 0:
            self.tokens = min(self.max_tokens, self.tokens + tokens_to_add)
            self.last_refill = now

    def can_make_request(self) -> bool:
        """Consume a token if one is available"""
        self._refill_tokens()
        if self.tokens > 0:
            self.tokens -= 1
            return True
        return False

    def time_until_next_token(self) -> float:
        """Seconds until the next refill, 0 when a token is available"""
        self._refill_tokens()
        if self.tokens > 0:
            return 0.0
        return max(0.0, self.refill_interval - (self._clock() - self.last_refill))

    def wait_for_token(self) -> None:
        """Block until a token is consumed"""
        while not self.can_make_request():
            wait_time = self.time_until_next_token()
            if wait_time > 0:
                logger.debug(f"⏳ Rate limit: waiting {wait_time * 1000:.0f}ms for next token")
                self._sleep(wait_time)


def grok_rate_limiter() -> RateLimiter:
    """Three requests per second"""
    return RateLimiter(max_tokens=3, refill_rate=1, refill_interval=0.333)
