"""LLM services (Groq)."""

from contoso_cafe.services.llm.exceptions import (
    LLMAuthenticationError,
    LLMConnectionError,
    LLMRateLimitError,
    LLMResponseError,
    LLMServiceError,
)
from contoso_cafe.services.llm.groq import GroqService
from contoso_cafe.services.llm.rate_limiter import TokenBucketRateLimiter
from contoso_cafe.services.llm.token_counter import estimate_tokens

__all__ = [
    # Implementation
    "GroqService",
    # Utilities
    "TokenBucketRateLimiter",
    "estimate_tokens",
    # Exceptions
    "LLMServiceError",
    "LLMRateLimitError",
    "LLMResponseError",
    "LLMConnectionError",
    "LLMAuthenticationError",
]
