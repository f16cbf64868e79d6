"""Table reservation dialog.

A fixed sequence of steps over a keyed draft:

    location -> dateTime -> numberOfGuests -> reservationName -> confirmation

Entering a step first checks the draft and any seeded entity values. A
value that validates is stored and the dialog falls through to the next
step without prompting. Otherwise the step prompts and waits; rejected
replies get the step's retry prompt and leave the state unchanged.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any
from zoneinfo import ZoneInfo

from contoso_cafe.core.activity import (
    Activity,
    delay_activity,
    suggested_actions_activity,
    text_activity,
    typing_activity,
)
from contoso_cafe.core.conversation_state import (
    ConversationData,
    DialogState,
    FieldKeys,
    ReservationOutcome,
    ReservationSnapshot,
    ReservationStep,
)
from contoso_cafe.core.datetime_resolver import DateTimeConstraints, DateTimeResolution
from contoso_cafe.core.validators import (
    ValidationResult,
    validate_confirmation,
    validate_date_candidates,
    validate_date_time,
    validate_guests,
    validate_location,
    validate_name,
    validate_seeded_guests,
    validate_seeded_location,
    validate_seeded_name,
)
from contoso_cafe.logging_config import (
    for_conversation,
    get_logger,
    mask_name,
    sanitize_for_log,
)
from contoso_cafe.observability.metrics import (
    record_reservation_outcome,
    record_validation_failure,
)
from contoso_cafe.prompts import cafe

if TYPE_CHECKING:
    from contoso_cafe.config import Settings
    from contoso_cafe.core.turn_context import TurnContext

logger: Any = get_logger(__name__)

DEFAULT_LOCATIONS = ("Bellevue", "Redmond", "Renton", "Seattle")

# Draft key for the TIMEX form of the resolved slot
TIMEX_KEY = "dateTimeTimex"


@dataclass(frozen=True)
class ReservationPolicy:
    """Business rules the dialog validates against."""

    locations: tuple[str, ...] = DEFAULT_LOCATIONS
    min_party_size: int = 1
    max_party_size: int = 12
    window_days: int = 14
    evening_start_hour: int = 16
    evening_end_hour: int = 20
    booking_reference: str = "#K89HG38SZ"
    booking_delay_ms: int = 3000
    timezone: str = "America/Los_Angeles"

    @classmethod
    def from_settings(cls, settings: Settings) -> ReservationPolicy:
        return cls(
            locations=tuple(settings.locations),
            min_party_size=settings.min_party_size,
            max_party_size=settings.max_party_size,
            window_days=settings.booking_window_days,
            evening_start_hour=settings.evening_start_hour,
            evening_end_hour=settings.evening_end_hour,
            booking_reference=settings.booking_reference,
            booking_delay_ms=settings.booking_delay_ms,
            timezone=settings.timezone,
        )

    def constraints(self, now: datetime) -> DateTimeConstraints:
        return DateTimeConstraints.for_window(
            now.date(),
            days=self.window_days,
            start_hour=self.evening_start_hour,
            end_hour=self.evening_end_hour,
        )


@dataclass(frozen=True)
class FieldDefinition:
    """Prompt texts and validators for one step."""

    step: ReservationStep
    prompt: str
    retry_prompt: str
    validate: Callable[[str | None, datetime], ValidationResult]
    validate_seeds: Callable[[list[Any], datetime], ValidationResult] | None = None
    choices: tuple[str, ...] = field(default_factory=tuple)

    @property
    def key(self) -> str:
        return self.step.field_key


def build_fields(policy: ReservationPolicy) -> dict[ReservationStep, FieldDefinition]:
    """The five reservation fields, in dialog order."""
    locations = policy.locations
    minimum, maximum = policy.min_party_size, policy.max_party_size

    definitions = [
        FieldDefinition(
            step=ReservationStep.COLLECT_LOCATION,
            prompt=cafe.LOCATION_PROMPT,
            retry_prompt=cafe.LOCATION_RETRY,
            validate=lambda text, now: validate_location(text, locations),
            validate_seeds=lambda seeds, now: validate_seeded_location(seeds, locations),
            choices=locations,
        ),
        FieldDefinition(
            step=ReservationStep.COLLECT_DATE_TIME,
            prompt=cafe.DATE_TIME_PROMPT,
            retry_prompt=cafe.DATE_TIME_RETRY,
            validate=lambda text, now: validate_date_time(
                text, policy.constraints(now), now
            ),
            validate_seeds=lambda seeds, now: validate_date_candidates(
                seeds, policy.constraints(now), now
            ),
        ),
        FieldDefinition(
            step=ReservationStep.COLLECT_GUESTS,
            prompt=cafe.GUESTS_PROMPT,
            retry_prompt=cafe.guests_retry(maximum),
            validate=lambda text, now: validate_guests(text, minimum, maximum),
            validate_seeds=lambda seeds, now: validate_seeded_guests(seeds, minimum, maximum),
        ),
        FieldDefinition(
            step=ReservationStep.COLLECT_NAME,
            prompt=cafe.NAME_PROMPT,
            retry_prompt=cafe.NAME_RETRY,
            validate=lambda text, now: validate_name(text),
            validate_seeds=lambda seeds, now: validate_seeded_name(seeds),
        ),
        FieldDefinition(
            step=ReservationStep.CONFIRM,
            prompt=cafe.CONFIRM_PROMPT,
            retry_prompt=cafe.CONFIRM_RETRY,
            validate=lambda text, now: validate_confirmation(text),
        ),
    ]
    return {definition.step: definition for definition in definitions}


class ReservationDialog:
    """Drives the reservation steps for one conversation at a time.

    The dialog itself is stateless; everything it tracks lives in
    ``ConversationData.dialog_state`` so it survives between turns.
    """

    def __init__(
        self,
        policy: ReservationPolicy | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the dialog.

        Args:
            policy: Locations, party size range and booking window
            clock: Returns the current local time (defaults to the policy timezone)
        """
        self._policy = policy or ReservationPolicy()
        self._tz = ZoneInfo(self._policy.timezone)
        self._clock = clock or (lambda: datetime.now(self._tz))
        self._fields = build_fields(self._policy)

    @property
    def fields(self) -> Sequence[FieldDefinition]:
        return list(self._fields.values())

    def now(self) -> datetime:
        return self._clock()

    async def begin(
        self,
        turn: TurnContext,
        data: ConversationData,
        seeds: dict[str, list[Any]] | None = None,
    ) -> None:
        """Start a new dialog, replacing any active one.

        Args:
            turn: Current turn
            data: Conversation record the dialog state is kept in
            seeds: Candidate values per field key from entity recognition
        """
        data.dialog_state = DialogState(
            seeds={key: list(values) for key, values in (seeds or {}).items() if values}
        )
        log = for_conversation(logger, turn.conversation_id)
        log.info("Reservation dialog started")
        if data.dialog_state.seeds:
            log.debug(f"Reservation seeds: {sanitize_for_log(data.dialog_state.seeds)}")
        await self._enter(turn, data, ReservationStep.COLLECT_LOCATION)

    async def continue_dialog(self, turn: TurnContext, data: ConversationData) -> None:
        """Feed the user's reply to the waiting step."""
        state = data.dialog_state
        if state is None:
            return

        definition = self._fields[state.step]
        result = definition.validate(turn.activity.text, self._clock())

        if not result.succeeded:
            record_validation_failure(definition.key, result.status.value)
            logger.debug(
                f"Rejected reply for {definition.key}: {result.status.value}"
            )
            await turn.send_activity(self._prompt_activity(definition, state, retry=True))
            return

        if state.step is ReservationStep.CONFIRM:
            await self._finish(turn, data, confirmed=bool(result.value))
            return

        self._store(state, definition, result.value)
        await self._enter(turn, data, state.step.next())

    def end(self, data: ConversationData, outcome: ReservationOutcome) -> None:
        """Discard the active dialog and its draft."""
        if data.dialog_state is None:
            return
        data.dialog_state = None
        record_reservation_outcome(outcome.value)
        logger.info(f"Reservation dialog ended: {outcome.value}")

    async def _enter(
        self,
        turn: TurnContext,
        data: ConversationData,
        step: ReservationStep | None,
    ) -> None:
        """Enter ``step``, falling through every step that is already satisfied."""
        state = data.dialog_state
        assert state is not None

        while step is not None:
            state.step = step
            definition = self._fields[step]

            if step is not ReservationStep.CONFIRM and await self._satisfy_from_seeds(
                turn, state, definition
            ):
                step = step.next()
                continue

            if step is ReservationStep.CONFIRM and not state.draft_complete:
                # Cannot happen through normal flow; restart rather than confirm a partial draft
                logger.warning("Reached confirmation with an incomplete draft")
                step = ReservationStep.COLLECT_LOCATION
                continue

            await turn.send_activity(self._prompt_activity(definition, state))
            return

    async def _satisfy_from_seeds(
        self,
        turn: TurnContext,
        state: DialogState,
        definition: FieldDefinition,
    ) -> bool:
        if state.has_value(definition.key):
            return True

        seeds = state.seeds.pop(definition.key, [])
        if not seeds or definition.validate_seeds is None:
            return False

        result = definition.validate_seeds(seeds, self._clock())
        if not result.succeeded:
            logger.debug(f"Seeded {definition.key} rejected: {result.status.value}")
            return False

        self._store(state, definition, result.value)
        await turn.trace_activity(
            "ReservationSeed", cafe.seed_trace(state.values[definition.key], definition.key)
        )
        return True

    def _store(self, state: DialogState, definition: FieldDefinition, value: Any) -> None:
        if isinstance(value, DateTimeResolution):
            state.values[definition.key] = value.value
            state.values[TIMEX_KEY] = value.timex
        else:
            state.values[definition.key] = value

    def _prompt_activity(
        self,
        definition: FieldDefinition,
        state: DialogState,
        retry: bool = False,
    ) -> Activity:
        if definition.step is ReservationStep.CONFIRM and not retry:
            values = state.values
            text = cafe.confirm_prompt(
                guests=values[FieldKeys.GUESTS],
                location=values[FieldKeys.LOCATION],
                date_time=values[FieldKeys.DATE_TIME],
                name=values[FieldKeys.NAME],
            )
        else:
            text = definition.retry_prompt if retry else definition.prompt

        if definition.choices:
            return suggested_actions_activity(list(definition.choices), text)
        return text_activity(text)

    async def _finish(
        self,
        turn: TurnContext,
        data: ConversationData,
        confirmed: bool,
    ) -> None:
        state = data.dialog_state
        assert state is not None

        if not confirmed:
            await turn.send_activity(cafe.DECLINED_TEXT)
            self.end(data, ReservationOutcome.DECLINED)
            return

        reference = self._policy.booking_reference
        await turn.send_activities(
            [
                typing_activity(),
                delay_activity(self._policy.booking_delay_ms),
                cafe.booked_text(reference),
            ]
        )

        snapshot = ReservationSnapshot.from_draft(
            state.values, reference, timex=state.values.get(TIMEX_KEY)
        )
        data.last_reservation = snapshot
        logger.info(
            f"Table booked for {mask_name(snapshot.reservation_name)}: "
            f"{snapshot.number_of_guests} at {snapshot.location}, {snapshot.date_time}"
        )
        self.end(data, ReservationOutcome.BOOKED)
