"""Shared test constants and conversation helpers."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

from contoso_cafe.core.activity import (
    Activity,
    ActivityTypes,
    ChannelAccount,
    ConversationAccount,
)
from contoso_cafe.core.runtime import BotRuntime

TZ = ZoneInfo("America/Los_Angeles")

# Monday morning; "tomorrow evening" is Tuesday 2026-10-20
FIXED_NOW = datetime(2026, 10, 19, 10, 0, tzinfo=TZ)

USER = ChannelAccount(id="user-1", name="Test User")
BOT = ChannelAccount(id="bot-1", name="Contoso Cafe")


def make_activity(
    activity_type: str = ActivityTypes.MESSAGE.value,
    conversation_id: str = "conv-1",
    **fields,
) -> Activity:
    """Inbound activity from USER to BOT."""
    return Activity(
        type=activity_type,
        channel_id="test",
        conversation=ConversationAccount(id=conversation_id),
        from_property=USER,
        recipient=BOT,
        **fields,
    )


def texts(replies: list[Activity]) -> list[str]:
    """Text of the message activities, in order."""
    return [reply.text or "" for reply in replies if reply.is_message]


class Conversation:
    """Drives one conversation through a runtime."""

    def __init__(self, runtime: BotRuntime, conversation_id: str = "conv-1") -> None:
        self.runtime = runtime
        self.conversation_id = conversation_id
        self._counter = 0

    async def send(self, text: str) -> list[Activity]:
        self._counter += 1
        activity = make_activity(
            conversation_id=self.conversation_id,
            id=f"msg-{self._counter}",
            text=text,
        )
        return await self.runtime.process(activity)

    async def say(self, *messages: str) -> list[Activity]:
        """Send several messages; return the replies to the last one."""
        replies: list[Activity] = []
        for message in messages:
            replies = await self.send(message)
        return replies

    async def join(self) -> list[Activity]:
        activity = make_activity(
            ActivityTypes.CONVERSATION_UPDATE.value,
            conversation_id=self.conversation_id,
            members_added=[BOT, USER],
        )
        return await self.runtime.process(activity)

    async def stored(self) -> dict[str, Any]:
        """Conversation data as persisted in storage."""
        key = f"test/conversations/{self.conversation_id}"
        items = await self.runtime.storage.read([key])
        return items.get(key, {}).get("ConversationData", {})
