"""Pytest configuration and fixtures for test suite."""
import os

# Settings are read at import time, so the environment must be ready first
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("EMBEDDING_ENDPOINT_URL", "http://test-embedding-service/v1/embeddings")
os.environ.setdefault("EMBEDDING_API_KEY", "test-embedding-key")
os.environ.setdefault("EMBEDDING_DIMENSION", "3")
os.environ.setdefault("CHAT_COMPLETION_URL", "http://test-chat-service/v1/chat/completions")
os.environ.setdefault("CHAT_API_KEY", "test-chat-key")
os.environ.setdefault("ENABLE_EMBEDDING_CACHE", "false")

from datetime import datetime
from typing import Any, AsyncGenerator, Dict, List, Sequence, Union
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from copilot import models  # noqa: F401
from copilot.agent.completion import FinalMessage, ToolCallRequest
from copilot.agent.models import Turn
from copilot.db.session import Base
from copilot.models import Booking, Hotel
from copilot.services.database import DatabaseService
from copilot.vector.search_service import VectorSearchService

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def test_engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def database(session_factory) -> AsyncGenerator[DatabaseService, None]:
    """DatabaseService seeded with two hotels and a handful of bookings."""
    async with session_factory() as session:
        session.add_all([
            Hotel(id=1, name="Oceanview Inn", city="Seattle", country="USA"),
            Hotel(id=2, name="Alpine Lodge", city="Zermatt", country="Switzerland"),
        ])
        session.add_all([
            Booking(
                id=1, hotel_id=1, customer_name="Ana Silva",
                stay_begin_date=datetime(2024, 3, 1), stay_end_date=datetime(2024, 3, 4),
                number_of_guests=2,
            ),
            Booking(
                id=2, hotel_id=1, customer_name="Kenji Sato",
                stay_begin_date=datetime(2024, 5, 10), stay_end_date=datetime(2024, 5, 12),
                number_of_guests=1,
            ),
            Booking(
                id=3, hotel_id=2, customer_name="Lea Meier",
                stay_begin_date=datetime(2024, 4, 2), stay_end_date=datetime(2024, 4, 9),
                number_of_guests=4,
            ),
        ])
        await session.commit()

    yield DatabaseService(session_factory)


@pytest.fixture
def mock_embedding_client():
    """Mock embedding provider returning a fixed 3-dimensional vector."""
    client = AsyncMock()
    client.dimension = 3
    client.model = "test-embedding-model"
    client.embed.return_value = [1.0, 0.0, 0.0]
    client.health_check.return_value = True
    return client


@pytest.fixture
def search_service(mock_embedding_client) -> VectorSearchService:
    return VectorSearchService(mock_embedding_client, max_retries=2)


CompletionStep = Union[FinalMessage, List[ToolCallRequest], BaseException]


class ScriptedCompletion:
    """
    Completion capability that replays a fixed script.

    Each step is a FinalMessage, a list of ToolCallRequests, or an exception
    to raise. The history seen by every call is recorded.
    """

    def __init__(self, steps: Sequence[CompletionStep]):
        self.steps = list(steps)
        self.histories: List[List[Turn]] = []
        self.tools_seen: List[List[Dict[str, Any]]] = []

    @property
    def calls(self) -> int:
        return len(self.histories)

    async def complete(self, history, tools):
        self.histories.append(list(history))
        self.tools_seen.append(list(tools))
        if not self.steps:
            raise AssertionError("Completion called more times than scripted")
        step = self.steps.pop(0)
        if isinstance(step, BaseException):
            raise step
        return step


def tool_call(name: str, call_id: str = "call_1", **arguments: Any) -> ToolCallRequest:
    return ToolCallRequest(id=call_id, name=name, arguments=arguments)
