"""Conversation data tracked across turns.

Holds the turn counter, the in-progress reservation dialog (its current
step plus the draft of collected fields) and the last completed booking.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class FieldKeys:
    """Keys of the reservation draft; also used as step names."""

    LOCATION = "location"
    DATE_TIME = "dateTime"
    GUESTS = "numberOfGuests"
    NAME = "reservationName"
    CONFIRM = "confirmation"


class ReservationStep(str, Enum):
    """Steps of the reservation dialog, in order."""

    COLLECT_LOCATION = FieldKeys.LOCATION
    COLLECT_DATE_TIME = FieldKeys.DATE_TIME
    COLLECT_GUESTS = FieldKeys.GUESTS
    COLLECT_NAME = FieldKeys.NAME
    CONFIRM = FieldKeys.CONFIRM

    @property
    def field_key(self) -> str:
        return self.value

    def next(self) -> ReservationStep | None:
        """The step after this one, or None after CONFIRM."""
        steps = list(ReservationStep)
        index = steps.index(self)
        return steps[index + 1] if index + 1 < len(steps) else None


class ReservationOutcome(str, Enum):
    """How a reservation dialog ended."""

    BOOKED = "booked"
    DECLINED = "declined"  # Said "no" at the confirmation prompt
    CANCELLED = "cancelled"  # Cancel phrase mid-dialog


class DialogState(BaseModel):
    """An active reservation dialog.

    ``values`` holds validated field values. ``seeds`` holds raw candidates
    from entity recognition that have not been validated yet; a step
    consumes its seed on entry.
    """

    step: ReservationStep = ReservationStep.COLLECT_LOCATION
    values: dict[str, Any] = Field(default_factory=dict)
    seeds: dict[str, list[Any]] = Field(default_factory=dict)

    def has_value(self, key: str) -> bool:
        return key in self.values

    @property
    def draft_complete(self) -> bool:
        """True once every field before confirmation has a value."""
        return all(
            step.field_key in self.values
            for step in ReservationStep
            if step is not ReservationStep.CONFIRM
        )


class ReservationSnapshot(BaseModel):
    """A confirmed reservation kept after its dialog ends."""

    location: str
    date_time: str
    number_of_guests: int
    reservation_name: str
    reference: str
    date_time_timex: str | None = None
    booked_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def from_draft(
        cls,
        values: dict[str, Any],
        reference: str,
        timex: str | None = None,
    ) -> ReservationSnapshot:
        return cls(
            location=values[FieldKeys.LOCATION],
            date_time=values[FieldKeys.DATE_TIME],
            number_of_guests=values[FieldKeys.GUESTS],
            reservation_name=values[FieldKeys.NAME],
            reference=reference,
            date_time_timex=timex,
        )


class ConversationData(BaseModel):
    """Per-conversation record persisted between turns."""

    turn_count: int = 0
    dialog_state: DialogState | None = None
    last_reservation: ReservationSnapshot | None = None

    @property
    def has_active_dialog(self) -> bool:
        return self.dialog_state is not None
