"""Tests for SQL-backed conversation state storage."""

from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import create_async_engine

from contoso_cafe.core.exceptions import StorageError
from contoso_cafe.core.runtime import build_runtime
from contoso_cafe.db.storage import SqlStorage
from contoso_cafe.prompts import cafe
from tests.helpers import Conversation, texts


class TestSqlStorage:
    """Tests for SqlStorage read/write/delete."""

    @pytest.mark.asyncio
    async def test_write_then_read(self, async_engine) -> None:
        storage = SqlStorage(async_engine)

        await storage.write({"c/conversations/1": {"ConversationData": {"turn_count": 1}}})

        items = await storage.read(["c/conversations/1", "c/conversations/2"])
        assert items == {"c/conversations/1": {"ConversationData": {"turn_count": 1}}}

    @pytest.mark.asyncio
    async def test_write_replaces_existing(self, async_engine) -> None:
        storage = SqlStorage(async_engine)
        await storage.write({"k": {"n": 1}})

        await storage.write({"k": {"n": 2}})

        assert await storage.read(["k"]) == {"k": {"n": 2}}

    @pytest.mark.asyncio
    async def test_delete(self, async_engine) -> None:
        storage = SqlStorage(async_engine)
        await storage.write({"a": {}, "b": {"x": True}})

        await storage.delete(["a", "missing"])

        assert await storage.read(["a", "b"]) == {"b": {"x": True}}

    @pytest.mark.asyncio
    async def test_empty_keys(self, async_engine) -> None:
        storage = SqlStorage(async_engine)

        assert await storage.read([]) == {}
        await storage.write({})
        await storage.delete([])

    @pytest.mark.asyncio
    async def test_missing_table_raises_storage_error(self) -> None:
        engine = create_async_engine("sqlite+aiosqlite:///:memory:")
        storage = SqlStorage(engine)

        with pytest.raises(StorageError):
            await storage.read(["k"])

        await engine.dispose()


class TestSqlBackedBot:
    @pytest.mark.asyncio
    async def test_dialog_survives_restart(self, async_engine, settings, fixed_clock) -> None:
        """A second runtime on the same database resumes the dialog."""
        first = Conversation(
            build_runtime(settings, storage=SqlStorage(async_engine), clock=fixed_clock)
        )
        await first.say("book a table", "Seattle")

        second = Conversation(
            build_runtime(settings, storage=SqlStorage(async_engine), clock=fixed_clock)
        )
        replies = await second.send("tomorrow evening")

        assert texts(replies) == [cafe.GUESTS_PROMPT]
        stored = await second.stored()
        assert stored["dialog_state"]["values"]["location"] == "Seattle"
