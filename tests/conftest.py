# tests/conftest.py

from datetime import datetime
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from eventhub.core.config import Settings
from eventhub.db.memory import MemoryEventStore
from eventhub.db.session_store import SessionStore
from eventhub.main import create_app
from eventhub.services.ai_assistant import EventAssistant

# A Wednesday. This week ends on Sunday 2024-05-19, next week on 2024-05-26.
FIXED_NOW = datetime(2024, 5, 15, 10, 0, 0)


class FrozenClock:
    """Callable clock that tests can move forward."""

    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def store(clock) -> MemoryEventStore:
    return MemoryEventStore(session_store=SessionStore(ttl_seconds=3600), clock=clock)


@pytest.fixture
def assistant() -> MagicMock:
    """Stands in for the Anthropic-backed assistant."""
    mock = MagicMock(spec=EventAssistant)
    mock.generate_response.return_value = "There are three events coming up."
    return mock


@pytest.fixture
def settings() -> Settings:
    return Settings(
        SEED_DEMO_DATA=True,
        ANTHROPIC_API_KEY=None,
        ADMIN_USERNAME="admin",
        ADMIN_PASSWORD="admin_password",
        ADMIN_EMAIL="admin@eventhub.com",
    )


@pytest.fixture
def client(settings, store, assistant):
    """
    A TestClient over an app with the seeded in-memory store
    (admin user id 1 and three demo events, ids 1-3) and a mocked assistant.
    """
    app = create_app(settings=settings, store=store, assistant=assistant)
    with TestClient(app) as c:
        yield c
