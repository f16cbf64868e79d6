"""Keyed conversation state storage and property accessors.

State is loaded once per turn into the turn context, handed out through
property accessors, and written back by an explicit ``save_changes`` call
at the end of the turn. Nothing is written if the turn changed nothing.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, Protocol, TypeVar

from pydantic import BaseModel

from contoso_cafe.core.exceptions import ConfigurationError, StorageError
from contoso_cafe.logging_config import get_logger

if TYPE_CHECKING:
    from contoso_cafe.core.turn_context import TurnContext

logger: Any = get_logger(__name__)

T = TypeVar("T")

_CACHE_KEY = "ConversationState"


class Storage(Protocol):
    """Protocol for key/value state backends."""

    async def read(self, keys: list[str]) -> dict[str, dict[str, Any]]:
        """Return stored items for the keys that exist."""
        ...

    async def write(self, changes: dict[str, dict[str, Any]]) -> None:
        """Insert or replace items."""
        ...

    async def delete(self, keys: list[str]) -> None:
        """Remove items; missing keys are ignored."""
        ...


class MemoryStorage:
    """In-process storage. Values are JSON-copied on the way in and out."""

    def __init__(self, initial: dict[str, dict[str, Any]] | None = None) -> None:
        self._items: dict[str, str] = {}
        self._lock = asyncio.Lock()
        for key, value in (initial or {}).items():
            self._items[key] = _dumps(value)

    async def read(self, keys: list[str]) -> dict[str, dict[str, Any]]:
        async with self._lock:
            return {key: json.loads(self._items[key]) for key in keys if key in self._items}

    async def write(self, changes: dict[str, dict[str, Any]]) -> None:
        async with self._lock:
            for key, value in changes.items():
                self._items[key] = _dumps(value)

    async def delete(self, keys: list[str]) -> None:
        async with self._lock:
            for key in keys:
                self._items.pop(key, None)

    def __len__(self) -> int:
        return len(self._items)


@dataclass
class _CachedState:
    state: dict[str, Any]
    fingerprint: str


class ConversationState:
    """Conversation-scoped state keyed by channel and conversation id."""

    def __init__(self, storage: Storage | None) -> None:
        if storage is None:
            raise ConfigurationError("ConversationState requires a storage backend")
        self._storage = storage

    @property
    def storage(self) -> Storage:
        return self._storage

    def storage_key(self, turn: TurnContext) -> str:
        activity = turn.activity
        if not activity.conversation or not activity.conversation.id:
            raise StorageError("Activity is missing conversation.id")
        if not activity.channel_id:
            raise StorageError("Activity is missing channelId")
        return f"{activity.channel_id}/conversations/{activity.conversation.id}"

    def create_property(
        self,
        name: str,
        default_factory: Callable[[], T],
        model: type[BaseModel] | None = None,
    ) -> StatePropertyAccessor[T]:
        """Create an accessor for one named property of the state."""
        return StatePropertyAccessor(self, name, default_factory, model)

    async def load(self, turn: TurnContext, force: bool = False) -> None:
        """Read state into the turn context (once per turn unless forced)."""
        if _CACHE_KEY in turn.turn_state and not force:
            return

        key = self.storage_key(turn)
        items = await self._storage.read([key])
        state = items.get(key, {})
        turn.turn_state[_CACHE_KEY] = _CachedState(
            state=dict(state),
            fingerprint=_dumps(state),
        )

    async def save_changes(self, turn: TurnContext, force: bool = False) -> None:
        """Write state back if it changed during the turn."""
        cached: _CachedState | None = turn.turn_state.get(_CACHE_KEY)
        if cached is None:
            return

        serialized = _serialize(cached.state)
        fingerprint = _dumps(serialized)
        if not force and fingerprint == cached.fingerprint:
            return

        key = self.storage_key(turn)
        await self._storage.write({key: serialized})
        cached.fingerprint = fingerprint
        logger.debug(f"Saved conversation state for {key}")

    async def clear(self, turn: TurnContext) -> None:
        """Empty the cached state; the next save persists the empty state."""
        await self.load(turn)
        turn.turn_state[_CACHE_KEY].state = {}

    async def delete(self, turn: TurnContext) -> None:
        """Drop the cache and remove the stored item."""
        turn.turn_state.pop(_CACHE_KEY, None)
        await self._storage.delete([self.storage_key(turn)])

    def _cached(self, turn: TurnContext) -> dict[str, Any]:
        cached: _CachedState | None = turn.turn_state.get(_CACHE_KEY)
        if cached is None:
            raise StorageError("State was not loaded for this turn")
        return cached.state


class StatePropertyAccessor(Generic[T]):
    """Get-or-create / set / delete access to one state property."""

    def __init__(
        self,
        store: ConversationState,
        name: str,
        default_factory: Callable[[], T],
        model: type[BaseModel] | None = None,
    ) -> None:
        self._store = store
        self._name = name
        self._default_factory = default_factory
        self._model = model

    @property
    def name(self) -> str:
        return self._name

    async def get(self, turn: TurnContext) -> T:
        """Return the property, creating it from the default factory if absent."""
        await self._store.load(turn)
        state = self._store._cached(turn)

        if self._name not in state:
            state[self._name] = self._default_factory()
        elif self._model is not None and not isinstance(state[self._name], self._model):
            state[self._name] = self._model.model_validate(state[self._name])

        return state[self._name]

    async def set(self, turn: TurnContext, value: T) -> None:
        await self._store.load(turn)
        self._store._cached(turn)[self._name] = value

    async def delete(self, turn: TurnContext) -> None:
        await self._store.load(turn)
        self._store._cached(turn).pop(self._name, None)


def _serialize(state: dict[str, Any]) -> dict[str, Any]:
    return {
        name: value.model_dump(mode="json") if isinstance(value, BaseModel) else value
        for name, value in state.items()
    }


def _dumps(value: Any) -> str:
    return json.dumps(value, sort_keys=True, default=str)
