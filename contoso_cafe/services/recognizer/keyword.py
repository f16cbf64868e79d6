"""Fixed-phrase recognizer used when no NLU service is configured."""

from __future__ import annotations

from datetime import datetime

from contoso_cafe.core.commands import Command, match_command
from contoso_cafe.services.recognizer.protocol import Intent, RecognizerResult

_INTENTS = {
    Command.BOOK_TABLE: Intent.RESERVATION,
    Command.HELP: Intent.HELP,
    Command.WHO_ARE_YOU: Intent.WHO_ARE_YOU,
}


class KeywordRecognizer:
    """Maps the fixed command phrases to intents. Extracts no entities."""

    async def recognize(self, text: str, now: datetime) -> RecognizerResult:
        command = match_command(text)
        intent = _INTENTS.get(command) if command else None
        if intent is None:
            return RecognizerResult(text=text)
        return RecognizerResult(text=text, intent=intent, score=1.0)

    async def close(self) -> None:
        pass
