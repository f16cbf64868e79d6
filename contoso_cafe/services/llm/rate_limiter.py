"""Token bucket limiter for recognition calls.

Recognition runs on every unmatched message, so a burst of chat traffic
can exhaust the Groq free tier (6,000 tokens and 30 requests per minute).
Requests wait for the buckets to refill, up to ``max_wait`` seconds.
"""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any

from contoso_cafe.logging_config import get_logger
from contoso_cafe.services.llm.exceptions import LLMRateLimitError

logger: Any = get_logger(__name__)


@dataclass
class TokenBucketRateLimiter:
    """Limits both tokens per minute and requests per minute."""

    tokens_per_minute: int = 6000
    requests_per_minute: int = 30
    max_wait: float = 5.0

    _tokens: float = field(default=0.0, init=False, repr=False)
    _requests: float = field(default=0.0, init=False, repr=False)
    _updated: float = field(default_factory=time.monotonic, init=False, repr=False)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False, repr=False)

    def __post_init__(self) -> None:
        self._tokens = float(self.tokens_per_minute)
        self._requests = float(self.requests_per_minute)

    async def acquire(self, estimated_tokens: int) -> None:
        """Take capacity for one request.

        Raises:
            LLMRateLimitError: If the wait would exceed ``max_wait``
        """
        async with self._lock:
            self._refill()
            wait = max(
                self._seconds_until(estimated_tokens, self._tokens, self.tokens_per_minute),
                self._seconds_until(1, self._requests, self.requests_per_minute),
            )

            if wait > self.max_wait:
                raise LLMRateLimitError(
                    f"Local rate limit: {wait:.1f}s wait exceeds {self.max_wait:.1f}s",
                    retry_after=wait,
                )

            if wait > 0:
                logger.debug(f"Rate limiter waiting {wait:.2f}s")
                await asyncio.sleep(wait)
                self._refill()

            self._tokens -= estimated_tokens
            self._requests -= 1

    def record_usage(self, estimated_tokens: int, actual_tokens: int) -> None:
        """Correct the token bucket once the real usage is known."""
        self._tokens = min(
            float(self.tokens_per_minute),
            self._tokens + estimated_tokens - actual_tokens,
        )

    @property
    def available_tokens(self) -> int:
        self._refill()
        return int(self._tokens)

    def _refill(self) -> None:
        now = time.monotonic()
        minutes = (now - self._updated) / 60
        self._updated = now
        self._tokens = min(
            float(self.tokens_per_minute), self._tokens + minutes * self.tokens_per_minute
        )
        self._requests = min(
            float(self.requests_per_minute), self._requests + minutes * self.requests_per_minute
        )

    @staticmethod
    def _seconds_until(needed: float, available: float, per_minute: int) -> float:
        if available >= needed:
            return 0.0
        return (needed - available) / per_minute * 60
