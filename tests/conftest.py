"""Shared pytest fixtures for Contoso Cafe bot tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Callable, Generator
from datetime import datetime
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from contoso_cafe.config import Settings
from contoso_cafe.core.runtime import BotRuntime, build_runtime
from contoso_cafe.core.state import MemoryStorage
from tests.helpers import FIXED_NOW, Conversation


def build_settings(**overrides) -> Settings:
    """Create a Settings object with safe test defaults (no .env)."""
    base: dict[str, Any] = {
        "storage_backend": "memory",
        "recognizer": "keyword",
        "database_url": "sqlite+aiosqlite:///:memory:",
        "timezone": "America/Los_Angeles",
        "qna_host": None,
        "qna_endpoint_key": None,
        "qna_knowledgebase_id": None,
    }
    base.update(overrides)
    return Settings(_env_file=None, **base)


@pytest.fixture
def settings_factory() -> Callable[..., Settings]:
    """Return a factory to build Settings with overrides."""
    return build_settings


@pytest.fixture
def settings(settings_factory: Callable[..., Settings]) -> Settings:
    """Default Settings fixture."""
    return settings_factory()


# =============================================================================
# Bot Fixtures
# =============================================================================


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """Clock pinned to FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def runtime(settings: Settings, storage: MemoryStorage, fixed_clock) -> BotRuntime:
    """Cafe bot runtime with memory storage and a fixed clock."""
    return build_runtime(settings, storage=storage, clock=fixed_clock)


@pytest.fixture
def conversation(runtime: BotRuntime) -> Conversation:
    return Conversation(runtime)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine shared by every session of a test."""
    from contoso_cafe.db.session import init_db

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_db(engine)

    yield engine

    await engine.dispose()


# =============================================================================
# FastAPI Test Client Fixtures
# =============================================================================


@pytest.fixture
def test_client(settings: Settings, runtime: BotRuntime) -> Generator:
    """FastAPI TestClient around the fixed-clock runtime."""
    from fastapi.testclient import TestClient

    from contoso_cafe.main import create_app

    app = create_app(settings, runtime)
    with TestClient(app) as client:
        yield client
