"""Contoso Cafe bot turn dispatcher.

Per message turn, in order:
1. Count the turn
2. Cancel phrases end any active dialog and stop the turn
3. An active reservation dialog takes the reply
4. Fixed-phrase commands
5. Intent recognition (reservation intents seed the dialog)
6. Knowledge-base answer
7. Fallback: "don't understand" plus help

State is saved once at the end of a turn that completed normally.
"""

from __future__ import annotations

from typing import Any

from contoso_cafe.core.activity import ActivityTypes
from contoso_cafe.core.commands import Command, is_cancel, match_command, normalize
from contoso_cafe.core.conversation_state import ConversationData, ReservationOutcome
from contoso_cafe.core.exceptions import ConfigurationError
from contoso_cafe.core.reservation_dialog import ReservationDialog
from contoso_cafe.core.state import ConversationState, StatePropertyAccessor
from contoso_cafe.core.turn_context import TurnContext
from contoso_cafe.logging_config import get_logger
from contoso_cafe.prompts import cafe
from contoso_cafe.services.qna.protocol import QnAService
from contoso_cafe.services.recognizer.keyword import KeywordRecognizer
from contoso_cafe.services.recognizer.protocol import (
    Intent,
    Recognizer,
    RecognizerResult,
)

logger: Any = get_logger(__name__)

CONVERSATION_DATA_PROPERTY = "ConversationData"


class ContosoCafeBot:
    """Greets users, answers fixed commands and books tables."""

    def __init__(
        self,
        conversation_state: ConversationState | None,
        dialog: ReservationDialog | None = None,
        recognizer: Recognizer | None = None,
        qna: QnAService | None = None,
    ) -> None:
        """Initialize the bot.

        Args:
            conversation_state: Conversation-scoped state (required)
            dialog: Reservation dialog; defaults to the standard rules
            recognizer: Intent/entity recognizer; defaults to fixed phrases
            qna: Optional knowledge base consulted before the fallback

        Raises:
            ConfigurationError: If no conversation state is given
        """
        if conversation_state is None:
            raise ConfigurationError("ContosoCafeBot requires conversation state")

        self._state = conversation_state
        self._data: StatePropertyAccessor[ConversationData] = (
            conversation_state.create_property(
                CONVERSATION_DATA_PROPERTY, ConversationData, ConversationData
            )
        )
        self._dialog = dialog or ReservationDialog()
        self._recognizer: Recognizer = recognizer or KeywordRecognizer()
        self._qna = qna

    async def on_turn(self, turn: TurnContext) -> None:
        activity = turn.activity

        if activity.type == ActivityTypes.CONVERSATION_UPDATE.value:
            await self._on_members_added(turn)
            return

        if not activity.is_message:
            logger.debug(f"Ignoring {activity.type} activity")
            return

        data = await self._data.get(turn)
        data.turn_count += 1

        await self._on_message(turn, data)
        await self._state.save_changes(turn)

    async def _on_members_added(self, turn: TurnContext) -> None:
        recipient = turn.activity.recipient
        for member in turn.activity.members_added:
            if recipient is not None and member.id == recipient.id:
                continue
            await turn.send_activities([cafe.WELCOME_TEXT, cafe.WELCOME_FOLLOW_UP])

    async def _on_message(self, turn: TurnContext, data: ConversationData) -> None:
        text = turn.activity.text

        if is_cancel(text):
            self._dialog.end(data, ReservationOutcome.CANCELLED)
            await turn.send_activity(cafe.CANCELLED_TEXT)
            return

        if data.has_active_dialog:
            await self._dialog.continue_dialog(turn, data)
            return

        command = match_command(text)
        if command is Command.HELP:
            await turn.send_activity(cafe.HELP_TEXT)
            return
        if command is Command.WHO_ARE_YOU:
            await turn.send_activity(cafe.WHO_ARE_YOU_TEXT)
            return
        if command is Command.BOOK_TABLE:
            await self._dialog.begin(turn, data)
            return

        query = normalize(text)
        if query:
            result = await self._recognizer.recognize(query, self._dialog.now())
            await self._dispatch_intent(turn, data, result)

        if not turn.responded and query:
            await self._answer_from_knowledge_base(turn, query)

        if not turn.responded:
            await turn.send_activities([cafe.NOT_UNDERSTOOD_TEXT, cafe.HELP_TEXT])

    async def _dispatch_intent(
        self,
        turn: TurnContext,
        data: ConversationData,
        result: RecognizerResult,
    ) -> None:
        if result.intent is Intent.RESERVATION:
            await self._dialog.begin(turn, data, seeds=result.entities.as_seeds())
        elif result.intent is Intent.HELP:
            await turn.send_activity(cafe.HELP_TEXT)
        elif result.intent is Intent.WHO_ARE_YOU:
            await turn.send_activity(cafe.WHO_ARE_YOU_TEXT)

    async def _answer_from_knowledge_base(self, turn: TurnContext, question: str) -> None:
        if self._qna is None:
            return

        answers = await self._qna.get_answers(question)
        if answers is None:
            await turn.trace_activity("QnAMaker", cafe.QNA_FAILED_TRACE)
            return
        if answers:
            await turn.send_activity(answers[0].answer)
