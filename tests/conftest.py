"""
Pytest configuration and fixtures.

The Flask app binds to FITPLAN_DATABASE_URL at import time, so it is
pointed at a throwaway SQLite file before anything imports database.py.
Store tests get their own in-memory engine per test.
"""
import os
import sys
import tempfile

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

_tmpdir = tempfile.mkdtemp(prefix="fitplan-tests-")
os.environ["FITPLAN_DATABASE_URL"] = f"sqlite:///{os.path.join(_tmpdir, 'app.db')}"

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from errors import StoreUnavailable
from event_store import WorkoutEventStore
from models import init_db


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def store(session_factory):
    return WorkoutEventStore(session_factory)


@pytest.fixture
def broken_store(tmp_path):
    """A store whose database file can never be opened."""
    engine = create_engine(f"sqlite:///{tmp_path / 'missing' / 'nope.db'}")
    yield WorkoutEventStore(sessionmaker(bind=engine))
    engine.dispose()


class FlakyStore:
    """Wraps a real store; writes fail while `down` is True."""

    def __init__(self, store):
        self.store = store
        self.down = False

    def load_snapshot(self, user_id):
        return self.store.load_snapshot(user_id)

    def _check(self):
        if self.down:
            raise StoreUnavailable("store is down")

    def set_completed(self, user_id, day, workout_type=None):
        self._check()
        return self.store.set_completed(user_id, day, workout_type)

    def set_missed(self, user_id, day, workout_type=None):
        self._check()
        return self.store.set_missed(user_id, day, workout_type)

    def set_day_one(self, user_id, day):
        self._check()
        return self.store.set_day_one(user_id, day)

    def clear_day_one(self, user_id):
        self._check()
        return self.store.clear_day_one(user_id)

    def add_measurement(self, user_id, day, body_fat_percentage, weight_kg=None):
        self._check()
        return self.store.add_measurement(user_id, day, body_fat_percentage, weight_kg)


@pytest.fixture
def flaky_store(store):
    return FlakyStore(store)


@pytest.fixture
def client():
    from app import app

    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client
