from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

ROOT = Path(__file__).resolve().parent
sys.path.append(str(ROOT))

os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["DATABASE_WRITE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["AUTH_SECRET"] = "test-secret-key"
# Cheap Argon2 parameters keep password tests fast.
os.environ["ARGON2_TIME_COST"] = "1"
os.environ["ARGON2_MEMORY_COST"] = "1024"
os.environ["ARGON2_PARALLELISM"] = "1"
os.environ.pop("CRON_SECRET", None)

from mercylink.database import Base, get_read_db, get_write_db  # noqa: E402
from mercylink import models  # noqa: E402,F401
from mercylink.security import SessionUser, encode_session_token  # noqa: E402


@pytest.fixture()
def db_session():
    # StaticPool + check_same_thread=False so TestClient's worker thread
    # sees the same in-memory database as the test body.
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
    )
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture()
def client(db_session):
    from fastapi.testclient import TestClient

    from mercylink.main import app

    def _override_db():
        yield db_session

    app.dependency_overrides[get_write_db] = _override_db
    app.dependency_overrides[get_read_db] = _override_db
    try:
        with TestClient(app, raise_server_exceptions=False) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def login_as(client):
    """Return a helper that attaches a signed session cookie for a user."""

    def _login(user) -> None:
        token = encode_session_token(SessionUser.from_user(user))
        client.cookies.set("session", token)

    return _login
