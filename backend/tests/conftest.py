import os

# Before any guildboard import: settings and the module engine read DATABASE_URL once
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from apscheduler.schedulers.background import BackgroundScheduler
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from guildboard.api.deps import get_now, get_registry
from guildboard.db.base import Base
from guildboard.db.session import get_db, get_session_factory
from guildboard.main import app
from guildboard.models.room import Room  # noqa: F401
from guildboard.services.board_session import SessionRegistry

from tests.helpers import WEDNESDAY


@pytest.fixture
def engine(tmp_path):
    eng = create_engine(
        f"sqlite:///{tmp_path / 'board.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def scheduler():
    sched = BackgroundScheduler()
    sched.start()
    yield sched
    sched.shutdown(wait=False)


@pytest.fixture
def registry(scheduler):
    return SessionRegistry(scheduler, debounce_seconds=0.05)


@pytest.fixture
def client(session_factory, registry):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_registry] = lambda: registry
    app.dependency_overrides[get_now] = lambda: WEDNESDAY
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()

