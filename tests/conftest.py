# pylint: disable=redefined-outer-name
from collections import deque
from datetime import datetime, timedelta, timezone

import fakeredis
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, clear_mappers

from case_events.adapters import orm, redis_adapter
from case_events.adapters.facts import AbstractFactSource
from case_events.service_layer.unit_of_work import SqlAlchemyUnitOfWork


class FakeFactSource(AbstractFactSource):
    """Deterministic fact source: scripted picks, incrementing ids and test dates."""

    def __init__(self, picks=None):
        self.picks = deque(picks or [])
        self.next_id = 1
        self.base_test_date = datetime(2020, 3, 1, 9, 0, tzinfo=timezone.utc)
        self.calls = 0

    def script(self, *picks):
        """Queue the next values returned by pick()."""
        self.picks.extend(picks)

    def pick(self, options):
        if not self.picks:
            return options[0]
        choice = self.picks.popleft()
        if choice not in options:
            raise AssertionError(f"Scripted pick {choice} not in {options}")
        return choice

    def case_id(self) -> int:
        case_id = self.next_id
        self.next_id += 1
        return case_id

    def date_of_birth(self) -> datetime:
        return datetime(1985, 6, 15, tzinfo=timezone.utc)

    def test_date(self) -> datetime:
        # Each new case event is tested one hour after the previous one
        self.calls += 1
        return self.base_test_date + timedelta(hours=self.calls)

    def full_name(self) -> str:
        return f"Test Person {self.next_id}"

    def location(self) -> str:
        return "Springfield, IL"


@pytest.fixture
def sqlite_session_factory():
    """Create SQLite in-memory database for fast testing."""
    engine = create_engine("sqlite:///:memory:")
    orm.metadata.create_all(engine)
    orm.start_mappers()

    yield sessionmaker(bind=engine, expire_on_commit=False)

    clear_mappers()
    engine.dispose()


@pytest.fixture
def fake_facts():
    return FakeFactSource()


@pytest.fixture
def uow(sqlite_session_factory, fake_facts):
    return SqlAlchemyUnitOfWork(sqlite_session_factory, facts_impl=fake_facts)


@pytest.fixture
def redis_client(monkeypatch):
    """Replace the module-level Redis client with an in-process fake."""
    client = fakeredis.FakeRedis()
    monkeypatch.setattr(redis_adapter, "_client", client)
    return client
