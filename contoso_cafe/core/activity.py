"""Activity schema exchanged with the channel.

Mirrors the subset of the Bot Framework activity shape the bots use.
Field names are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ActivityTypes(str, Enum):
    """Activity types understood by the bots."""

    MESSAGE = "message"
    CONVERSATION_UPDATE = "conversationUpdate"
    TYPING = "typing"
    DELAY = "delay"
    TRACE = "trace"


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class ChannelAccount(_WireModel):
    """A user or bot on a channel."""

    id: str
    name: str | None = None


class ConversationAccount(_WireModel):
    """The conversation an activity belongs to."""

    id: str
    name: str | None = None


class CardAction(_WireModel):
    """A clickable suggestion."""

    type: str = "imBack"
    title: str
    value: str


class SuggestedActions(_WireModel):
    """Quick replies shown under a message."""

    actions: list[CardAction] = Field(default_factory=list)


class Activity(_WireModel):
    """A single inbound or outbound activity."""

    type: str
    id: str | None = None
    timestamp: datetime | None = None
    channel_id: str = "emulator"
    from_property: ChannelAccount | None = Field(default=None, alias="from")
    recipient: ChannelAccount | None = None
    conversation: ConversationAccount | None = None
    text: str | None = None
    value: Any = None
    name: str | None = None
    label: str | None = None
    value_type: str | None = None
    members_added: list[ChannelAccount] = Field(default_factory=list)
    suggested_actions: SuggestedActions | None = None
    reply_to_id: str | None = None

    @property
    def is_message(self) -> bool:
        return self.type == ActivityTypes.MESSAGE.value

    def apply_reference(self, inbound: Activity) -> Activity:
        """Address this outbound activity as a reply to ``inbound``."""
        self.channel_id = inbound.channel_id
        self.conversation = inbound.conversation
        self.from_property = inbound.recipient
        self.recipient = inbound.from_property
        self.reply_to_id = inbound.id
        if self.timestamp is None:
            self.timestamp = datetime.now(UTC)
        return self


class ExpectedReplies(_WireModel):
    """Response body carrying every activity the bot sent during a turn."""

    activities: list[Activity] = Field(default_factory=list)


# =============================================================================
# Factory helpers
# =============================================================================


def text_activity(text: str) -> Activity:
    return Activity(type=ActivityTypes.MESSAGE.value, text=text)


def suggested_actions_activity(choices: list[str], text: str) -> Activity:
    """Message with one quick-reply button per choice."""
    return Activity(
        type=ActivityTypes.MESSAGE.value,
        text=text,
        suggested_actions=SuggestedActions(
            actions=[CardAction(title=choice, value=choice) for choice in choices]
        ),
    )


def typing_activity() -> Activity:
    return Activity(type=ActivityTypes.TYPING.value)


def delay_activity(milliseconds: int) -> Activity:
    """Ask the channel to pause before rendering the next activity."""
    return Activity(type=ActivityTypes.DELAY.value, value=milliseconds)


def trace_activity(
    name: str,
    value: Any = None,
    label: str | None = None,
    value_type: str | None = None,
) -> Activity:
    """Debug-only activity; emulators show it, user channels drop it."""
    return Activity(
        type=ActivityTypes.TRACE.value,
        name=name,
        value=value,
        label=label,
        value_type=value_type or name,
    )
