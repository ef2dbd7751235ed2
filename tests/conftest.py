"""
Shared test fixtures for the Daggerboard test suite.

Provides:
- Database fixtures: fresh in-memory SQLite per test, migrated by Alembic
- A private EventBus per test plus an EventRecorder to inspect broadcasts
- StateManager fixtures with and without a selected campaign
- A FastAPI TestClient running the real lifespan
"""

import os
import tempfile

import pytest

# Set test environment BEFORE any daggerboard imports
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault(
    "LEGACY_STORE_PATH",
    os.path.join(tempfile.gettempdir(), "daggerboard-test-absent-store.json"),
)
os.environ.setdefault("LOCK_TIMEOUT", "2.0")

from daggerboard.core.events import ChangeEvent, EventBus
from daggerboard.db import session as session_module
from daggerboard.db.session import init_db
from daggerboard.db.state_manager import StateManager
from daggerboard.enums import EventType
from daggerboard.schemas import DamageThresholds


class EventRecorder:
    """Collects every event emitted on a bus."""

    def __init__(self, bus: EventBus):
        self.events: list[ChangeEvent] = []
        bus.on_any(self.events.append)

    @property
    def names(self) -> list[EventType]:
        return [e.type for e in self.events]

    def of(self, event_type: EventType) -> list[ChangeEvent]:
        return [e for e in self.events if e.type == event_type]

    def last(self, event_type: EventType) -> ChangeEvent:
        matching = self.of(event_type)
        assert matching, f"no {event_type.value} event recorded (got {self.names})"
        return matching[-1]

    def clear(self) -> None:
        self.events.clear()


@pytest.fixture(autouse=True)
def fresh_db():
    """Each test gets a completely fresh, fully migrated in-memory database."""
    session_module.reset_engine()
    init_db()
    yield
    session_module.reset_engine()


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def recorder(bus):
    return EventRecorder(bus)


@pytest.fixture
def bare_sm(bus):
    """StateManager on an empty database (no campaign selected)."""
    return StateManager(bus=bus)


@pytest.fixture
def sm(bare_sm, recorder):
    """StateManager with the default campaign selected; recorder starts empty."""
    bare_sm.ensure_campaign_exists()
    recorder.clear()
    return bare_sm


@pytest.fixture
def thresholds():
    return DamageThresholds(minor=3, major=6, severe=10)


@pytest.fixture
def client():
    """FastAPI TestClient with a fresh cached StateManager and event bus."""
    from fastapi.testclient import TestClient

    from api.deps import reset_state_manager
    from api.main import app
    from daggerboard.core.events import reset_event_bus

    reset_state_manager()
    reset_event_bus()
    with TestClient(app) as c:
        yield c
    reset_state_manager()
    reset_event_bus()
