# tests/conftest.py
import os
from datetime import datetime, timedelta, timezone

# must be set before app.main builds its module-level app
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.core.database import build_engine, build_session_factory, init_db
from app.main import create_app
from app.ticket.services import TicketStore


class TickingClock:
    """Returns a strictly increasing UTC time on every call."""

    def __init__(self, start: datetime | None = None, step: timedelta = timedelta(seconds=1)):
        self.now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now += self.step
        return current


@pytest.fixture
def settings():
    return Settings(DATABASE_URL="sqlite://", PERSISTENCE_RETRY_DELAY=0)


@pytest.fixture
def session_factory(settings):
    engine = build_engine(settings)
    init_db(engine)
    yield build_session_factory(engine)
    engine.dispose()


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def store(session_factory, clock):
    return TicketStore(session_factory, clock=clock, retry_delay=0)


@pytest.fixture
def client(settings, store):
    with TestClient(create_app(settings, store)) as c:
        yield c


@pytest.fixture
def file_session_factory(tmp_path):
    # separate pooled connections, so a second session can commit mid-transaction
    engine = build_engine(Settings(DATABASE_URL=f"sqlite:///{tmp_path / 'tickets.db'}"))
    init_db(engine)
    yield build_session_factory(engine)
    engine.dispose()
