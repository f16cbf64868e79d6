"""Turn processing for activities arriving over HTTP.

Turns of one conversation run one at a time; turns of different
conversations run concurrently. Replies collected during the turn are
returned to the caller instead of being posted back to a channel.
"""

from __future__ import annotations

import asyncio
import weakref
from collections.abc import Awaitable, Callable
from typing import Any

from contoso_cafe.core.activity import Activity, ActivityTypes
from contoso_cafe.core.turn_context import TurnContext
from contoso_cafe.logging_config import for_conversation, get_logger
from contoso_cafe.observability.metrics import (
    ACTIVE_TURNS,
    record_turn,
    record_turn_error,
)
from contoso_cafe.prompts import cafe

logger: Any = get_logger(__name__)

BotLogic = Callable[[TurnContext], Awaitable[None]]

_KNOWN_TYPES = frozenset(t.value for t in ActivityTypes)


def turn_label(activity_type: str | None) -> str:
    """Metric label for an activity type; unknown types share "other"."""
    return activity_type if activity_type in _KNOWN_TYPES else "other"


class CafeAdapter:
    """Runs bot logic for inbound activities."""

    def __init__(self) -> None:
        # Entries vanish once no turn holds the lock
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def _lock_for(self, conversation_id: str) -> asyncio.Lock:
        lock = self._locks.get(conversation_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[conversation_id] = lock
        return lock

    async def process_activity(self, activity: Activity, logic: BotLogic) -> list[Activity]:
        """Run one turn and return every activity the bot sent.

        Args:
            activity: Inbound activity
            logic: The bot's turn handler

        Returns:
            Outbound activities in send order
        """
        turn = TurnContext(activity)
        conversation_id = turn.conversation_id or ""
        record_turn(turn_label(activity.type))

        lock = self._lock_for(conversation_id)
        async with lock:
            ACTIVE_TURNS.inc()
            try:
                await logic(turn)
            except Exception as e:
                await self.on_turn_error(turn, e)
            finally:
                ACTIVE_TURNS.dec()

        return turn.sent

    async def on_turn_error(self, turn: TurnContext, error: Exception) -> None:
        """Report an unhandled turn error to the user.

        State is not saved, so the conversation resumes from before the
        failed turn.
        """
        record_turn_error()
        for_conversation(logger, turn.conversation_id).exception(
            f"Unhandled error in {turn.activity.type} turn: {error}"
        )
        await turn.trace_activity(
            cafe.TURN_ERROR_TRACE,
            f"{error}",
            label="TurnError",
        )
        await turn.send_activity(cafe.TURN_ERROR_TEXT)
