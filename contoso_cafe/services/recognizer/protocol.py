"""Intent recognizer protocol and result types."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Protocol

from contoso_cafe.core.conversation_state import FieldKeys


class Intent(str, Enum):
    """Intents the bot acts on."""

    RESERVATION = "RESERVATION"
    HELP = "HELP"
    WHO_ARE_YOU = "WHO_ARE_YOU"
    NONE = "NONE"


@dataclass
class ReservationEntities:
    """Reservation details mentioned in a message.

    Every list keeps the order the values were found in; the dialog
    validates them in that order and uses the first that fits.
    """

    locations: list[str] = field(default_factory=list)
    date_times: list[str] = field(default_factory=list)
    party_sizes: list[int] = field(default_factory=list)
    names: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.locations or self.date_times or self.party_sizes or self.names)

    def as_seeds(self) -> dict[str, list[Any]]:
        """Seed values keyed by reservation field."""
        return {
            FieldKeys.LOCATION: list(self.locations),
            FieldKeys.DATE_TIME: list(self.date_times),
            FieldKeys.GUESTS: list(self.party_sizes),
            FieldKeys.NAME: list(self.names),
        }


@dataclass
class RecognizerResult:
    """Top intent and entities for one message."""

    text: str
    intent: Intent = Intent.NONE
    score: float = 0.0
    entities: ReservationEntities = field(default_factory=ReservationEntities)


class Recognizer(Protocol):
    """Protocol for intent/entity recognizers."""

    async def recognize(self, text: str, now: datetime) -> RecognizerResult:
        """Classify a message and extract reservation entities.

        Implementations never raise for unusable input; they return
        ``Intent.NONE`` instead.
        """
        ...

    async def close(self) -> None:
        """Release any client resources."""
        ...
