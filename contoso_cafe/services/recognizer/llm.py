"""LLM-backed intent and entity recognition (Groq JSON mode)."""

from __future__ import annotations

import time
from datetime import datetime
from typing import TYPE_CHECKING, Any

from contoso_cafe.logging_config import get_logger
from contoso_cafe.observability.metrics import record_recognizer_latency
from contoso_cafe.prompts.recognition import RecognitionPromptBuilder
from contoso_cafe.services.llm.exceptions import LLMServiceError
from contoso_cafe.services.recognizer.keyword import KeywordRecognizer
from contoso_cafe.services.recognizer.protocol import (
    Intent,
    RecognizerResult,
    ReservationEntities,
)

if TYPE_CHECKING:
    from contoso_cafe.services.llm.groq import GroqService

logger: Any = get_logger(__name__)


class LlmRecognizer:
    """Recognize intents and reservation entities with an LLM.

    Falls back to fixed-phrase recognition when the LLM call fails, so a
    Groq outage degrades the bot to its command set instead of breaking
    the turn.
    """

    def __init__(
        self,
        llm_service: GroqService,
        prompt_builder: RecognitionPromptBuilder,
        fallback: KeywordRecognizer | None = None,
    ) -> None:
        """Initialize recognizer.

        Args:
            llm_service: Groq client used for JSON-mode completions
            prompt_builder: Builds the classification prompt
            fallback: Recognizer used when the LLM call fails
        """
        self._llm = llm_service
        self._prompts = prompt_builder
        self._fallback = fallback or KeywordRecognizer()

    async def recognize(self, text: str, now: datetime) -> RecognizerResult:
        start = time.perf_counter()
        try:
            raw = await self._llm.extract_json(self._prompts.build(text, now))
        except LLMServiceError as e:
            logger.warning(f"LLM recognition failed, using keyword fallback: {e}")
            return await self._fallback.recognize(text, now)
        finally:
            record_recognizer_latency((time.perf_counter() - start) * 1000)

        result = self.parse(text, raw)
        logger.debug(f"Recognized {result.intent.value} ({result.score:.2f})")
        return result

    @staticmethod
    def parse(text: str, raw: dict) -> RecognizerResult:
        """Turn the model's JSON into a RecognizerResult, dropping bad values."""
        intent_str = str(raw.get("intent") or "NONE").upper()
        try:
            intent = Intent(intent_str)
        except ValueError:
            intent = Intent.NONE

        score = 0.0
        if raw.get("score") is not None:
            try:
                score = max(0.0, min(1.0, float(raw["score"])))
            except (ValueError, TypeError):
                pass

        party_sizes: list[int] = []
        for value in _as_list(raw.get("party_sizes")):
            try:
                party_sizes.append(int(value))
            except (ValueError, TypeError):
                continue

        return RecognizerResult(
            text=text,
            intent=intent,
            score=score,
            entities=ReservationEntities(
                locations=_strings(raw.get("locations")),
                date_times=_strings(raw.get("date_times")),
                party_sizes=party_sizes,
                names=_strings(raw.get("names")),
            ),
        )

    async def close(self) -> None:
        """Close the LLM service."""
        await self._llm.close()


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _strings(value: Any) -> list[str]:
    return [item.strip() for item in _as_list(value) if isinstance(item, str) and item.strip()]
