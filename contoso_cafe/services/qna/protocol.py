"""Knowledge-base protocol and result type."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol


@dataclass(frozen=True)
class QueryResult:
    """One answer from the knowledge base. ``score`` is 0 to 1."""

    answer: str
    score: float
    questions: list[str] = field(default_factory=list)
    source: str | None = None
    id: int | None = None


class QnAService(Protocol):
    """Protocol for knowledge-base Q&A services."""

    async def get_answers(self, question: str) -> list[QueryResult] | None:
        """Answers at or above the score threshold, best first.

        Returns None when the service could not be reached, and an empty
        list when it had nothing good enough.
        """
        ...

    async def close(self) -> None:
        ...
