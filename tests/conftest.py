# tests/conftest.py

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from tasksync.db.config import enable_sqlite_foreign_keys, get_session
from tasksync.db.init import init_db
from tasksync.main import app
from tasksync.models.user import User
from tasksync.routers.deps import get_cache, get_logger
from tasksync.services.cache import ResponseCache
from tasksync.services.share_service import ShareService
from tasksync.services.sync_service import SyncService
from tasksync.services.task_service import TaskService
from tasksync.utils.logger import get_logger as build_logger


class FakeClock:
    """Manually advanced monotonic clock for cache expiry tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def engine():
    """Fresh in-memory database per test, with SQLite FK enforcement on."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def logger():
    return build_logger("tasksync-tests", "DEBUG")


@pytest.fixture()
def cache(clock, logger) -> ResponseCache:
    return ResponseCache(ttl_seconds=60, clock=clock, logger=logger)


@pytest.fixture()
def tasks(session, cache, logger) -> TaskService:
    return TaskService(session, cache, logger)


@pytest.fixture()
def sync(session, cache, logger) -> SyncService:
    return SyncService(session, cache, logger)


@pytest.fixture()
def shares(session, cache, logger) -> ShareService:
    return ShareService(session, cache, logger)


@pytest.fixture()
def make_user(session):
    def _make(username: str) -> User:
        user = User(username=username, password_hash="not-a-real-hash")
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make


@pytest.fixture()
def alice(make_user) -> User:
    return make_user("alice")


@pytest.fixture()
def bob(make_user) -> User:
    return make_user("bob")


@pytest.fixture()
def carol(make_user) -> User:
    return make_user("carol")


@pytest.fixture()
def client(engine, cache, logger):
    """HTTP client bound to the test database and cache, without app startup."""

    def override_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_cache] = lambda: cache
    app.dependency_overrides[get_logger] = lambda: logger
    yield TestClient(app)
    app.dependency_overrides.clear()
