"""QnA Maker runtime client.

Calls ``POST {host}/knowledgebases/{kb}/generateAnswer``. QnA Maker scores
answers from 0 to 100; the configured threshold is 0 to 1 and compared
against the normalized score.
"""

from __future__ import annotations

import time
from typing import Any

import httpx

from contoso_cafe.config import Settings
from contoso_cafe.core.exceptions import ConfigurationError
from contoso_cafe.logging_config import get_logger
from contoso_cafe.observability.metrics import record_qna_lookup
from contoso_cafe.services.qna.exceptions import QnAServiceError
from contoso_cafe.services.qna.protocol import QueryResult

logger: Any = get_logger(__name__)

NO_ANSWER_TEXT = "No good match found in KB."


class QnAMakerService:
    """Query a QnA Maker knowledge base over HTTP."""

    def __init__(
        self,
        host: str,
        endpoint_key: str,
        knowledgebase_id: str,
        *,
        score_threshold: float = 0.3,
        top: int = 1,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not host or not endpoint_key or not knowledgebase_id:
            raise ConfigurationError(
                "QnA Maker needs a host, an endpoint key and a knowledge base id"
            )
        if not 0.0 <= score_threshold <= 1.0:
            raise ConfigurationError("QnA score threshold must be between 0 and 1")

        self._url = f"{host.rstrip('/')}/knowledgebases/{knowledgebase_id}/generateAnswer"
        self._endpoint_key = endpoint_key
        self._score_threshold = score_threshold
        self._top = top
        self._timeout = timeout
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> QnAMakerService:
        if not settings.qna_enabled:
            raise ConfigurationError("QnA Maker settings are incomplete")
        assert settings.qna_endpoint_key is not None
        return cls(
            host=settings.qna_host or "",
            endpoint_key=settings.qna_endpoint_key.get_secret_value(),
            knowledgebase_id=settings.qna_knowledgebase_id or "",
            score_threshold=settings.qna_score_threshold,
            top=settings.qna_top,
            timeout=settings.qna_timeout_seconds,
        )

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy initialization of the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def get_answers(self, question: str) -> list[QueryResult] | None:
        start = time.perf_counter()
        try:
            answers = await self.query(question)
        except QnAServiceError as e:
            record_qna_lookup("error", (time.perf_counter() - start) * 1000)
            logger.warning(f"QnA Maker query failed: {e}")
            return None

        record_qna_lookup(
            "answered" if answers else "no_answer",
            (time.perf_counter() - start) * 1000,
        )
        return answers

    async def query(self, question: str) -> list[QueryResult]:
        """Query the knowledge base.

        Raises:
            QnAServiceError: On transport errors, non-2xx responses or bad JSON
        """
        body = {
            "question": question,
            "top": self._top,
            "scoreThreshold": self._score_threshold * 100,
        }
        headers = {"Authorization": f"EndpointKey {self._endpoint_key}"}

        try:
            response = await self.client.post(self._url, json=body, headers=headers)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise QnAServiceError(
                f"QnA Maker returned {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise QnAServiceError(f"QnA Maker request failed: {e}") from e
        except ValueError as e:
            raise QnAServiceError(f"Invalid JSON from QnA Maker: {e}") from e

        return self._parse_answers(payload)

    def _parse_answers(self, payload: Any) -> list[QueryResult]:
        raw_answers = payload.get("answers") if isinstance(payload, dict) else None
        if not isinstance(raw_answers, list):
            return []

        results: list[QueryResult] = []
        for raw in raw_answers:
            if not isinstance(raw, dict):
                continue
            answer = raw.get("answer")
            if not isinstance(answer, str) or not answer or answer == NO_ANSWER_TEXT:
                continue
            try:
                score = float(raw.get("score", 0)) / 100
            except (TypeError, ValueError):
                continue
            if score < self._score_threshold:
                continue

            questions = raw.get("questions")
            results.append(
                QueryResult(
                    answer=answer,
                    score=score,
                    questions=[q for q in questions if isinstance(q, str)]
                    if isinstance(questions, list)
                    else [],
                    source=raw.get("source"),
                    id=raw.get("id"),
                )
            )

        results.sort(key=lambda result: result.score, reverse=True)
        return results[: self._top]

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
