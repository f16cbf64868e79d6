"""Fixed-phrase command routing.

Messages are normalized (trimmed, lower-cased) and matched exactly against
a small phrase table. Anything else is left to the recognizer.
"""

from __future__ import annotations

from enum import Enum


class Command(str, Enum):
    HELP = "help"
    WHO_ARE_YOU = "who_are_you"
    BOOK_TABLE = "book_table"
    CANCEL = "cancel"


CANCEL_PHRASES = frozenset({"cancel", "stop", "start over"})
HELP_PHRASES = frozenset({"help"})
WHO_ARE_YOU_PHRASES = frozenset({"who are you", "who are you?"})
BOOK_TABLE_PHRASES = frozenset({"book", "table", "book table", "book a table"})

_PHRASES: dict[Command, frozenset[str]] = {
    Command.CANCEL: CANCEL_PHRASES,
    Command.HELP: HELP_PHRASES,
    Command.WHO_ARE_YOU: WHO_ARE_YOU_PHRASES,
    Command.BOOK_TABLE: BOOK_TABLE_PHRASES,
}


def normalize(text: str | None) -> str:
    return (text or "").strip().lower()


def is_cancel(text: str | None) -> bool:
    return normalize(text) in CANCEL_PHRASES


def match_command(text: str | None) -> Command | None:
    """Return the command whose phrase equals the normalized text."""
    normalized = normalize(text)
    for command, phrases in _PHRASES.items():
        if normalized in phrases:
            return command
    return None
