# tests/conftest.py

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from slotbook import models  # noqa: F401  registers tables
from slotbook.config import Settings, get_settings
from slotbook.db import get_session
from slotbook.hours import day_of_week
from slotbook.main import app
from slotbook.models import WeeklyHour
from slotbook.repository import SQLModelBookingRepository

BUSINESS_ID = "biz-1"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def repo(session):
    return SQLModelBookingRepository(session)


@pytest.fixture
def settings():
    return Settings(
        DATABASE_URL="sqlite://",
        SLOT_MINUTES=30,
        ENFORCE_BUSINESS_HOURS=True,
        ALLOW_PAST_BOOKINGS=False,
    )


@pytest.fixture
def client(session, settings):
    app.dependency_overrides[get_session] = lambda: session
    app.dependency_overrides[get_settings] = lambda: settings
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def open_every_day(repo):
    """Business open 09:00-17:00 all week."""
    rows = [
        WeeklyHour(business_id=BUSINESS_ID, day_of_week=d, open_time="09:00", close_time="17:00")
        for d in range(7)
    ]
    return repo.replace_weekly_hours(BUSINESS_ID, rows)


@pytest.fixture
def tomorrow():
    return date.today() + timedelta(days=1)


@pytest.fixture
def next_weekday():
    """Return a future date (after today) falling on the given 0=Sunday weekday."""
    def _next(dow: int) -> date:
        candidate = date.today() + timedelta(days=1)
        while day_of_week(candidate) != dow:
            candidate += timedelta(days=1)
        return candidate
    return _next
