"""SQLModel database models.

Conversation state is stored as one JSON document per storage key.
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlmodel import Field, SQLModel


class ConversationRecord(SQLModel, table=True):
    """Persisted state of one conversation."""

    __tablename__ = "conversation_states"

    key: str = Field(
        primary_key=True,
        max_length=512,
        description="{channelId}/conversations/{conversationId}",
    )
    data: str = Field(description="JSON-encoded state document")
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC), index=True)
