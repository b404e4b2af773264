import copy
import os
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Ensure background jobs stay disabled during tests
os.environ.setdefault("ENABLE_BACKGROUND_JOBS", "false")

from cineshelf.database import Base
from cineshelf.main import app
from cineshelf.models import ContentCache  # noqa: F401
from cineshelf.services.cache_store import ContentCacheStore
from cineshelf.services.cached_fetcher import CachedFetcher
from cineshelf.services.tmdb_service import TMDBService
from cineshelf.utils.dependencies import get_cache_store, get_tmdb_service

SQLALCHEMY_DATABASE_URL = "sqlite://"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

NOW = datetime(2025, 1, 15, 12, 0, 0)


class FakeClock:
    """Callable clock that only moves when told to"""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


class FakeTMDBClient:
    """Records every upstream call and answers with canned payloads"""

    def __init__(self, responses=None):
        self.responses = responses or {}
        self.calls = []
        self.error = None

    def get(self, endpoint, params=None):
        self.calls.append((endpoint, params))
        if self.error is not None:
            raise self.error
        payload = self.responses.get(endpoint, {"endpoint": endpoint, "page": (params or {}).get("page")})
        return copy.deepcopy(payload)

    def close(self):
        pass


@pytest.fixture
def db_session():
    """Provide a clean database session for each test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fake_client():
    return FakeTMDBClient()


@pytest.fixture
def store(db_session):
    return ContentCacheStore(TestingSessionLocal)


@pytest.fixture
def fetcher(fake_client, store, clock):
    return CachedFetcher(fake_client, store, clock=clock)


@pytest.fixture
def tmdb_service(fake_client, fetcher):
    return TMDBService(fake_client, fetcher)


@pytest.fixture
def client(tmdb_service, store):
    """FastAPI test client wired to the fake upstream and the test database."""
    app.dependency_overrides[get_tmdb_service] = lambda: tmdb_service
    app.dependency_overrides[get_cache_store] = lambda: store

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.pop(get_tmdb_service, None)
    app.dependency_overrides.pop(get_cache_store, None)


@pytest.fixture
def server_error_client(tmdb_service, store):
    """Like ``client``, but unhandled errors come back as responses instead of being re-raised."""
    app.dependency_overrides[get_tmdb_service] = lambda: tmdb_service
    app.dependency_overrides[get_cache_store] = lambda: store

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    app.dependency_overrides.pop(get_tmdb_service, None)
    app.dependency_overrides.pop(get_cache_store, None)
