"""Tests for Groq LLM service."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import groq
import httpx
import pytest

from contoso_cafe.core.exceptions import ConfigurationError
from contoso_cafe.services.llm.exceptions import (
    LLMAuthenticationError,
    LLMConnectionError,
    LLMRateLimitError,
    LLMResponseError,
)
from contoso_cafe.services.llm.groq import GroqService
from contoso_cafe.services.llm.rate_limiter import TokenBucketRateLimiter

MESSAGES = [{"role": "user", "content": "table for 4"}]
REQUEST = httpx.Request("POST", "https://api.groq.com/openai/v1/chat/completions")


def completion(content: str | None, total_tokens: int = 40) -> SimpleNamespace:
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=SimpleNamespace(total_tokens=total_tokens),
    )


@pytest.fixture
def mock_client() -> MagicMock:
    client = MagicMock()
    client.chat.completions.create = AsyncMock()
    client.close = AsyncMock()
    return client


@pytest.fixture
def service(settings, mock_client: MagicMock) -> GroqService:
    return GroqService(settings, client=mock_client)


class TestGroqService:
    """Tests for JSON-mode completions."""

    def test_requires_api_key(self, settings_factory) -> None:
        with pytest.raises(ConfigurationError):
            GroqService(settings_factory(groq_api_key=None))

    def test_uses_configured_model(self, settings_factory, mock_client) -> None:
        settings = settings_factory(groq_model="llama-3.1-8b-instant")

        assert GroqService(settings, client=mock_client).model == "llama-3.1-8b-instant"

    @pytest.mark.asyncio
    async def test_extract_json(self, service: GroqService, mock_client: MagicMock) -> None:
        mock_client.chat.completions.create.return_value = completion(
            '{"intent": "RESERVATION", "score": 0.9}'
        )

        result = await service.extract_json(MESSAGES)

        assert result == {"intent": "RESERVATION", "score": 0.9}
        kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["temperature"] == 0.0
        assert kwargs["max_tokens"] == 256

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", [None, "not json", "[1, 2]"])
    async def test_bad_content(
        self, service: GroqService, mock_client: MagicMock, content: str | None
    ) -> None:
        mock_client.chat.completions.create.return_value = completion(content)

        with pytest.raises(LLMResponseError):
            await service.extract_json(MESSAGES)

    @pytest.mark.asyncio
    async def test_rate_limit_maps_retry_after(
        self, service: GroqService, mock_client: MagicMock
    ) -> None:
        response = httpx.Response(429, headers={"retry-after": "12"}, request=REQUEST)
        mock_client.chat.completions.create.side_effect = groq.RateLimitError(
            "rate limited", response=response, body=None
        )

        with pytest.raises(LLMRateLimitError) as exc_info:
            await service.extract_json(MESSAGES)

        assert exc_info.value.retry_after == 12.0

    @pytest.mark.asyncio
    async def test_connection_error(self, service: GroqService, mock_client: MagicMock) -> None:
        mock_client.chat.completions.create.side_effect = groq.APIConnectionError(
            request=REQUEST
        )

        with pytest.raises(LLMConnectionError):
            await service.extract_json(MESSAGES)

    @pytest.mark.asyncio
    async def test_authentication_error(
        self, service: GroqService, mock_client: MagicMock
    ) -> None:
        response = httpx.Response(401, request=REQUEST)
        mock_client.chat.completions.create.side_effect = groq.AuthenticationError(
            "bad key", response=response, body=None
        )

        with pytest.raises(LLMAuthenticationError):
            await service.extract_json(MESSAGES)

    @pytest.mark.asyncio
    async def test_local_rate_limit(self, settings, mock_client: MagicMock) -> None:
        limiter = TokenBucketRateLimiter(tokens_per_minute=10, requests_per_minute=30, max_wait=0.1)
        service = GroqService(settings, client=mock_client, rate_limiter=limiter)

        with pytest.raises(LLMRateLimitError):
            await service.extract_json(MESSAGES)

        mock_client.chat.completions.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_close(self, service: GroqService, mock_client: MagicMock) -> None:
        await service.close()

        mock_client.close.assert_awaited_once()
