"""Intent and entity recognizers."""

from contoso_cafe.services.recognizer.keyword import KeywordRecognizer
from contoso_cafe.services.recognizer.llm import LlmRecognizer
from contoso_cafe.services.recognizer.protocol import (
    Intent,
    Recognizer,
    RecognizerResult,
    ReservationEntities,
)

__all__ = [
    # Protocol and types
    "Recognizer",
    "RecognizerResult",
    "ReservationEntities",
    "Intent",
    # Implementations
    "KeywordRecognizer",
    "LlmRecognizer",
]
