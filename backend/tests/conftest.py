# Set test environment before any application or db imports.
import os

os.environ["TESTING"] = "true"
os.environ["TESTING_DATABASE_URL"] = "sqlite:///:memory:"
os.environ["RUN_MIGRATIONS_ON_STARTUP"] = "false"
os.environ["SEED_DEMO_LOCATIONS"] = "false"

import itertools

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from db import SessionLocal, get_db
from directory_core.cache import InMemoryCache
from directory_core.location_service import LocationService
from directory_core.status import LocationStatus
from main import app
from models import Base
from models.location import Location  # noqa: F401 - register with Base
from repositories.location_repository import create_location


def _get_engine():
    """Engine used by the app (in-memory when TESTING=true)."""
    return SessionLocal.kw["bind"]


@pytest.fixture(scope="session")
def engine():
    """One in-memory engine per test run; create tables once."""
    eng = _get_engine()
    Base.metadata.create_all(eng)
    return eng


@pytest.fixture
def db_session(engine):
    """Function-scoped session; each test runs in a transaction that is rolled back."""
    connection = engine.connect()
    trans = connection.begin()
    session = Session(bind=connection)
    session.begin_nested()
    try:
        yield session
    finally:
        session.close()
        if trans.is_active:
            trans.rollback()
        connection.close()


def _override_get_db(session):
    """Return a generator that yields the given session (for dependency override)."""
    def override():
        yield session
    return override


@pytest.fixture
def client(db_session):
    """API test client; overrides get_db to use the test db_session, cleared on teardown."""
    app.dependency_overrides[get_db] = _override_get_db(db_session)
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def cache():
    """Fresh in-memory cache per test."""
    return InMemoryCache()


@pytest.fixture
def service(cache):
    """LocationService over the per-test cache (no session events installed)."""
    return LocationService(cache)


@pytest.fixture
def make_location(db_session):
    """
    Factory: create and commit a location with sensible defaults.
    Default title/address never contain the words used by search tests.
    """
    counter = itertools.count(1)

    def _make(**overrides):
        n = next(counter)
        fields = {
            "title": f"Place {n:03d}",
            "address": f"Via Esempio {n}, Roma",
            "latitude": 41.9,
            "longitude": 12.5,
            "description": "Sample description",
            "status": LocationStatus.Active,
        }
        fields.update(overrides)
        return create_location(db_session, **fields)

    return _make
