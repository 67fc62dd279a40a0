"""Shared fixtures for the test suite."""

import random
from datetime import datetime, timedelta
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from pet_activity_tracker.api.app import create_app
from pet_activity_tracker.config import Settings
from pet_activity_tracker.repositories.memory import (
    InMemoryActivityRepository,
    InMemoryChatRepository,
)


class FakeClock:
    """Callable clock that tests can move around."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    """Morning of a fixed day, local time."""
    return FakeClock(datetime(2024, 5, 14, 10, 0, 0))


@pytest.fixture
def settings() -> Settings:
    return Settings(CORS_ORIGINS="http://localhost:3000")


@pytest.fixture
def activity_repository(clock) -> InMemoryActivityRepository:
    return InMemoryActivityRepository(clock=clock)


@pytest.fixture
def chat_repository() -> InMemoryChatRepository:
    return InMemoryChatRepository()


@pytest.fixture
def app(settings, clock):
    """Fresh app with empty stores for every test."""
    return create_app(settings=settings, clock=clock, rng=random.Random(7))


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
