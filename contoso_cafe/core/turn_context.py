"""Per-turn context handed to bot logic."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from contoso_cafe.core.activity import (
    Activity,
    ActivityTypes,
    text_activity,
    trace_activity,
)


class TurnContext:
    """Wraps one inbound activity and collects the replies sent for it.

    Replies are addressed back to the sender and kept in ``sent`` so the
    adapter can return them to the channel once the turn completes.
    """

    def __init__(self, activity: Activity) -> None:
        self._activity = activity
        self._responded = False
        self.sent: list[Activity] = []
        # Scratch space for the duration of the turn (cached state lives here)
        self.turn_state: dict[str, Any] = {}

    @property
    def activity(self) -> Activity:
        return self._activity

    @property
    def responded(self) -> bool:
        """True once a non-trace activity has been sent this turn."""
        return self._responded

    async def send_activity(self, activity_or_text: Activity | str) -> Activity:
        """Send a single activity (plain strings become messages)."""
        sent = await self.send_activities([activity_or_text])
        return sent[0]

    async def send_activities(
        self, activities: Sequence[Activity | str]
    ) -> list[Activity]:
        """Send activities in order."""
        outbound: list[Activity] = []
        for item in activities:
            activity = text_activity(item) if isinstance(item, str) else item
            activity.apply_reference(self._activity)
            outbound.append(activity)

            if activity.type != ActivityTypes.TRACE.value:
                self._responded = True

        self.sent.extend(outbound)
        return outbound

    async def trace_activity(
        self,
        name: str,
        value: Any = None,
        label: str | None = None,
    ) -> Activity:
        """Send a trace activity; does not count as a response."""
        return await self.send_activity(trace_activity(name, value=value, label=label))

    @property
    def conversation_id(self) -> str | None:
        conversation = self._activity.conversation
        return conversation.id if conversation else None
