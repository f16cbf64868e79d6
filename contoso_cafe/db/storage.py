"""SQL-backed conversation state storage."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from contoso_cafe.core.exceptions import StorageError
from contoso_cafe.db.models import ConversationRecord
from contoso_cafe.db.session import get_session_context
from contoso_cafe.logging_config import get_logger

logger: Any = get_logger(__name__)


class SqlStorage:
    """Stores each state item as a JSON row in ``conversation_states``."""

    def __init__(self, engine: AsyncEngine | None = None) -> None:
        self._engine = engine

    async def read(self, keys: list[str]) -> dict[str, dict[str, Any]]:
        if not keys:
            return {}

        query = select(ConversationRecord).where(
            ConversationRecord.key.in_(keys)  # type: ignore[attr-defined]
        )
        try:
            async with get_session_context(self._engine) as session:
                result = await session.execute(query)
                records = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Failed to read conversation state: {e}")
            raise StorageError("Failed to read conversation state") from e

        return {record.key: json.loads(record.data) for record in records}

    async def write(self, changes: dict[str, dict[str, Any]]) -> None:
        if not changes:
            return

        try:
            async with get_session_context(self._engine) as session:
                for key, value in changes.items():
                    data = json.dumps(value, default=str)
                    record = await session.get(ConversationRecord, key)
                    if record is None:
                        record = ConversationRecord(key=key, data=data)
                    else:
                        record.data = data
                        record.updated_at = datetime.now(UTC)
                    session.add(record)
        except SQLAlchemyError as e:
            logger.error(f"Failed to write conversation state: {e}")
            raise StorageError("Failed to write conversation state") from e

    async def delete(self, keys: list[str]) -> None:
        if not keys:
            return

        query = delete(ConversationRecord).where(
            ConversationRecord.key.in_(keys)  # type: ignore[attr-defined]
        )
        try:
            async with get_session_context(self._engine) as session:
                await session.execute(query)
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete conversation state: {e}")
            raise StorageError("Failed to delete conversation state") from e
