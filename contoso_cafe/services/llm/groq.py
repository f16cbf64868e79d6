"""Groq client for JSON-mode completions."""

from __future__ import annotations

import json
from typing import Any

import groq
from groq import AsyncGroq

from contoso_cafe.config import Settings, get_settings
from contoso_cafe.core.exceptions import ConfigurationError
from contoso_cafe.logging_config import get_logger
from contoso_cafe.services.llm.exceptions import (
    LLMAuthenticationError,
    LLMConnectionError,
    LLMRateLimitError,
    LLMResponseError,
    LLMServiceError,
)
from contoso_cafe.services.llm.rate_limiter import TokenBucketRateLimiter
from contoso_cafe.services.llm.token_counter import estimate_messages_tokens

logger: Any = get_logger(__name__)

# Groq free tier limits
GROQ_FREE_TIER_TPM = 6000  # Tokens per minute
GROQ_FREE_TIER_RPM = 30  # Requests per minute


class GroqService:
    """Groq chat completions with rate limiting and error mapping."""

    def __init__(
        self,
        settings: Settings | None = None,
        client: AsyncGroq | None = None,
        rate_limiter: TokenBucketRateLimiter | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._model = self._settings.groq_model
        self._client = client
        self._rate_limiter = rate_limiter or TokenBucketRateLimiter(
            tokens_per_minute=GROQ_FREE_TIER_TPM,
            requests_per_minute=GROQ_FREE_TIER_RPM,
        )

        if self._client is None and not self._settings.groq_api_key:
            raise ConfigurationError("GROQ_API_KEY is required for the LLM recognizer")

    @property
    def model(self) -> str:
        return self._model

    @property
    def client(self) -> AsyncGroq:
        """Lazy initialization of AsyncGroq client."""
        if self._client is None:
            assert self._settings.groq_api_key is not None
            self._client = AsyncGroq(
                api_key=self._settings.groq_api_key.get_secret_value(),
                timeout=15.0,
                max_retries=1,
            )
        return self._client

    async def extract_json(
        self,
        messages: list[dict],
        *,
        max_tokens: int = 256,
        temperature: float = 0.0,
    ) -> dict:
        """Run a JSON-mode completion and parse the result.

        Args:
            messages: List of message dicts with role/content
            max_tokens: Maximum response tokens
            temperature: Low temperature (0.0) for deterministic extraction

        Returns:
            Parsed JSON dict from LLM response

        Raises:
            LLMRateLimitError: When rate limit exceeded
            LLMConnectionError: When API unreachable
            LLMAuthenticationError: When API key invalid
            LLMResponseError: When the content is not a JSON object
            LLMServiceError: For other API errors
        """
        estimated = estimate_messages_tokens(messages) + max_tokens
        await self._rate_limiter.acquire(estimated)

        try:
            response = await self.client.chat.completions.create(  # type: ignore[call-overload]
                messages=messages,
                model=self._model,
                temperature=temperature,
                max_tokens=max_tokens,
                response_format={"type": "json_object"},
            )
        except groq.RateLimitError as e:
            logger.warning(f"Groq rate limit hit during recognition: {e}")
            raise LLMRateLimitError(
                "Rate limit exceeded",
                retry_after=self._extract_retry_after(e),
            ) from e
        except groq.APIConnectionError as e:
            logger.error(f"Groq connection error during recognition: {e.__cause__}")
            raise LLMConnectionError("Failed to connect to Groq API") from e
        except groq.AuthenticationError as e:
            logger.error("Groq authentication failed during recognition")
            raise LLMAuthenticationError("Invalid Groq API key") from e
        except groq.APIStatusError as e:
            logger.error(f"Groq API error during recognition: {e.status_code} - {e.message}")
            raise LLMServiceError(f"Groq API error: {e.status_code}") from e

        if response.usage:
            self._rate_limiter.record_usage(estimated, response.usage.total_tokens)

        content = response.choices[0].message.content
        if not content:
            raise LLMResponseError("Empty response from Groq JSON completion")

        try:
            result = json.loads(content)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse JSON from Groq response: {e}")
            raise LLMResponseError(f"Invalid JSON in response: {e}") from e

        if not isinstance(result, dict):
            raise LLMResponseError("Expected a JSON object from Groq")
        return result

    def _extract_retry_after(self, error: groq.RateLimitError) -> float:
        """Extract retry-after from rate limit error."""
        response = getattr(error, "response", None)
        if response is not None:
            retry_after = response.headers.get("retry-after")
            if retry_after:
                try:
                    return float(retry_after)
                except ValueError:
                    pass
        return 60.0

    async def close(self) -> None:
        """Close the client connection."""
        if self._client:
            await self._client.close()
            self._client = None
