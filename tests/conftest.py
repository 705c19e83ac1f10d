# tests/conftest.py
from __future__ import annotations

import os
import random
from collections.abc import Callable, Generator, Iterator
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")

from frenzy_stage.api.v1.dependencies import get_chat_hub_dep, get_fishing_rng
from frenzy_stage.db.session import Base
from frenzy_stage.db.session import get_db as app_get_session
from frenzy_stage.main import app as fastapi_app
from frenzy_stage.services.connection import ChatHub
from frenzy_stage.services.message_store import MessageStore
from frenzy_stage.services.rate_limit import RateLimiter
from frenzy_stage.services.sessions import SessionRegistry
from frenzy_stage.services.transport import next_connection_id

TEST_DB_URL = "sqlite://"


class RecordingConnection:
    """Connection double that keeps every event it is sent."""

    def __init__(self, accept: bool = True) -> None:
        self.connection_id = next_connection_id()
        self.events: list[tuple[str, Any]] = []
        self.accept = accept

    def send(self, event: str, data: Any) -> bool:
        if not self.accept:
            return False
        self.events.append((event, data))
        return True

    def of(self, event: str) -> list[Any]:
        """Return payloads of every ``event`` received so far."""
        return [data for name, data in self.events if name == event]

    def names(self) -> list[str]:
        return [name for name, _ in self.events]

    def clear(self) -> None:
        self.events.clear()


class FakeClock:
    """Manually advanced clock for rate-limit tests."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ScriptedRandom(random.Random):
    """Random source that replays preset draws, then falls back to seeded output."""

    def __init__(self, draws: list[float] | None = None, choice_index: int = 0) -> None:
        super().__init__(1234)
        self.draws = list(draws or [])
        self.choice_index = choice_index

    def random(self) -> float:
        if self.draws:
            return self.draws.pop(0)
        return super().random()

    def choice(self, seq: Any) -> Any:
        return seq[self.choice_index]


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    TestingSession = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = TestingSession()
    session.begin_nested()

    @event.listens_for(session, "after_transaction_end")
    def restart_savepoint(sess: Session, trans) -> None:  # pragma: no cover - SQLAlchemy internals
        if trans.nested and not getattr(trans._parent, "nested", False):
            session.begin_nested()

    try:
        yield session
    finally:
        event.remove(session, "after_transaction_end", restart_savepoint)
        session.close()

        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # pysqlite does not roll back committed savepoints; wipe what the test wrote.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def chat_hub(app: FastAPI, clock: FakeClock) -> Iterator[ChatHub]:
    """A fresh hub per test, also served to the API in place of the singleton."""
    hub = ChatHub(
        registry=SessionRegistry(),
        store=MessageStore(max_history=1000),
        limiter=RateLimiter(window_seconds=60, max_messages=30, clock=clock),
        history_replay=50,
    )
    app.dependency_overrides[get_chat_hub_dep] = lambda: hub
    try:
        yield hub
    finally:
        app.dependency_overrides.pop(get_chat_hub_dep, None)


@pytest.fixture()
def fishing_rng(app: FastAPI) -> Iterator[ScriptedRandom]:
    rng = ScriptedRandom()
    app.dependency_overrides[get_fishing_rng] = lambda: rng
    try:
        yield rng
    finally:
        app.dependency_overrides.pop(get_fishing_rng, None)


@pytest.fixture()
def make_connection() -> Callable[..., RecordingConnection]:
    return RecordingConnection


@pytest.fixture()
def client(app: FastAPI, chat_hub: ChatHub) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client
