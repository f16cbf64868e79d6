"""Reference echo bot: repeats each message with a per-conversation turn count."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from contoso_cafe.core.exceptions import ConfigurationError
from contoso_cafe.core.state import ConversationState
from contoso_cafe.core.turn_context import TurnContext
from contoso_cafe.logging_config import get_logger
from contoso_cafe.prompts import cafe

logger: Any = get_logger(__name__)


class EchoState(BaseModel):
    turn_count: int = 0


class EchoBot:
    def __init__(self, conversation_state: ConversationState | None) -> None:
        if conversation_state is None:
            raise ConfigurationError("EchoBot requires conversation state")
        self._state = conversation_state
        self._counter = conversation_state.create_property("EchoState", EchoState, EchoState)

    async def on_turn(self, turn: TurnContext) -> None:
        if not turn.activity.is_message:
            logger.debug(f"Ignoring {turn.activity.type} activity")
            return

        state = await self._counter.get(turn)
        state.turn_count += 1
        await turn.send_activity(
            cafe.ECHO_TEXT.format(turn=state.turn_count, text=turn.activity.text or "")
        )
        await self._state.save_changes(turn)
