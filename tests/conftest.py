from __future__ import annotations

import os
from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["OVERDUE_SWEEP_ENABLED"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"

from custody_desk.core.clock import FixedClock  # noqa: E402
from custody_desk.database import Base, enable_sqlite_savepoints, get_db  # noqa: E402
import custody_desk.models  # noqa: E402,F401


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_savepoints(engine)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture()
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def clock():
    return FixedClock(datetime(2024, 1, 5, 9, 0, tzinfo=timezone.utc))


@pytest.fixture()
def client(session_factory, clock):
    from fastapi.testclient import TestClient

    from custody_desk.core.clock import get_clock
    from custody_desk.main import app

    def _get_test_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_test_db
    app.dependency_overrides[get_clock] = lambda: clock

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
