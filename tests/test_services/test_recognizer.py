"""Tests for intent recognizers."""

from unittest.mock import AsyncMock

import pytest

from contoso_cafe.core.conversation_state import FieldKeys
from contoso_cafe.prompts.recognition import RecognitionPromptBuilder
from contoso_cafe.services.llm.exceptions import LLMConnectionError, LLMRateLimitError
from contoso_cafe.services.recognizer.keyword import KeywordRecognizer
from contoso_cafe.services.recognizer.llm import LlmRecognizer
from contoso_cafe.services.recognizer.protocol import Intent, ReservationEntities
from tests.helpers import FIXED_NOW

LOCATIONS = ["Bellevue", "Redmond", "Renton", "Seattle"]


@pytest.fixture
def prompt_builder() -> RecognitionPromptBuilder:
    return RecognitionPromptBuilder("Contoso Cafe", LOCATIONS)


@pytest.fixture
def mock_llm() -> AsyncMock:
    """Mock GroqService; tests set extract_json's result."""
    return AsyncMock()


@pytest.fixture
def recognizer(mock_llm: AsyncMock, prompt_builder: RecognitionPromptBuilder) -> LlmRecognizer:
    return LlmRecognizer(mock_llm, prompt_builder)


class TestKeywordRecognizer:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("text", "intent"),
        [
            ("book a table", Intent.RESERVATION),
            ("help", Intent.HELP),
            ("who are you?", Intent.WHO_ARE_YOU),
            ("cancel", Intent.NONE),
            ("table for four in seattle", Intent.NONE),
        ],
    )
    async def test_intents(self, text: str, intent: Intent) -> None:
        result = await KeywordRecognizer().recognize(text, FIXED_NOW)

        assert result.intent == intent
        assert result.entities.is_empty


class TestPromptBuilder:
    def test_messages_name_locations_and_date(
        self, prompt_builder: RecognitionPromptBuilder
    ) -> None:
        messages = prompt_builder.build("table for 2", FIXED_NOW)

        assert [m["role"] for m in messages] == ["system", "user"]
        assert "Seattle" in messages[0]["content"]
        assert "Monday, October 19, 2026" in messages[0]["content"]
        assert messages[1]["content"].startswith("Message: table for 2")


class TestLlmRecognizer:
    """Tests for LLM-backed recognition."""

    @pytest.mark.asyncio
    async def test_reservation_with_entities(
        self, recognizer: LlmRecognizer, mock_llm: AsyncMock
    ) -> None:
        mock_llm.extract_json.return_value = {
            "intent": "reservation",
            "score": 0.93,
            "locations": ["Seattle"],
            "date_times": ["tomorrow at 7pm"],
            "party_sizes": [4, "6"],
            "names": ["  Alex "],
        }

        result = await recognizer.recognize("table for 4 at seattle tomorrow 7pm", FIXED_NOW)

        assert result.intent == Intent.RESERVATION
        assert result.score == pytest.approx(0.93)
        assert result.entities.as_seeds() == {
            FieldKeys.LOCATION: ["Seattle"],
            FieldKeys.DATE_TIME: ["tomorrow at 7pm"],
            FieldKeys.GUESTS: [4, 6],
            FieldKeys.NAME: ["Alex"],
        }
        mock_llm.extract_json.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_llm_failure_falls_back_to_keywords(
        self, recognizer: LlmRecognizer, mock_llm: AsyncMock
    ) -> None:
        mock_llm.extract_json.side_effect = LLMConnectionError("down")

        result = await recognizer.recognize("book a table", FIXED_NOW)

        assert result.intent == Intent.RESERVATION
        assert result.entities.is_empty

    @pytest.mark.asyncio
    async def test_rate_limited_unmatched_text(
        self, recognizer: LlmRecognizer, mock_llm: AsyncMock
    ) -> None:
        mock_llm.extract_json.side_effect = LLMRateLimitError("slow down", retry_after=2)

        result = await recognizer.recognize("what's on the menu", FIXED_NOW)

        assert result.intent == Intent.NONE

    @pytest.mark.asyncio
    async def test_close_closes_llm(self, recognizer: LlmRecognizer, mock_llm: AsyncMock) -> None:
        await recognizer.close()

        mock_llm.close.assert_awaited_once()


class TestParse:
    """Tests for tolerant parsing of model output."""

    def test_unknown_intent_is_none(self) -> None:
        result = LlmRecognizer.parse("hi", {"intent": "ORDER_FOOD", "score": 0.8})

        assert result.intent == Intent.NONE

    def test_score_clamped(self) -> None:
        assert LlmRecognizer.parse("hi", {"intent": "HELP", "score": 7}).score == 1.0
        assert LlmRecognizer.parse("hi", {"intent": "HELP", "score": "high"}).score == 0.0

    def test_scalar_and_bad_entities(self) -> None:
        result = LlmRecognizer.parse(
            "hi",
            {
                "intent": "RESERVATION",
                "locations": "Redmond",
                "party_sizes": ["a few", None, 3],
                "names": [42, ""],
            },
        )

        assert result.entities == ReservationEntities(
            locations=["Redmond"], party_sizes=[3]
        )

    def test_empty_payload(self) -> None:
        result = LlmRecognizer.parse("hi", {})

        assert result.intent == Intent.NONE
        assert result.score == 0.0
        assert result.entities.is_empty
