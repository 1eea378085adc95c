"""Pytest configuration and fixtures."""

import os

# Keep app startup from creating tables in a real database file.
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.models.audio_record import AudioRecord  # noqa: F401
from app.models.like import LikeFact  # noqa: F401
from app.models.post import Post  # noqa: F401
from app.models.user import User  # noqa: F401
from app.services import audio_store as audio_store_module
from app.services import transcription_client as transcription_client_module
from app.services.audio_store import AudioStore
from app.services.user import UserService


@pytest.fixture(name="db_session")
def db_session_fixture():
    """Create an in-memory SQLite database for tests."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(name="audio_store", autouse=True)
def audio_store_fixture(tmp_path, monkeypatch):
    """Store audio under a per-test temp directory."""
    store = AudioStore(tmp_path / "audio")
    monkeypatch.setattr(audio_store_module, "_audio_store", store)
    return store


@pytest.fixture(autouse=True)
def reset_transcription_client(monkeypatch):
    """Drop any cached provider client between tests."""
    monkeypatch.setattr(transcription_client_module, "_transcription_client", None)


@pytest.fixture(name="client")
def client_fixture(db_session: Session):
    """Create a test client with overridden DB dependency and disabled rate limiting."""
    from app.rate_limit import limiter
    from app.routers import posts as posts_module
    from main import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    # Point background transcription at the test DB session
    posts_module._session_factory = lambda: db_session

    app.dependency_overrides[get_db] = override_get_db
    limiter.enabled = False
    with TestClient(app) as c:
        yield c
    limiter.enabled = True
    app.dependency_overrides.clear()
    posts_module._session_factory = None


def _create_user(db_session: Session, username: str, name: str) -> dict:
    user = UserService().create_user(db_session, username, name, f"{username}@example.com")
    return {"user_id": user.id, "username": user.username, "name": user.name}


@pytest.fixture(name="test_user")
def test_user_fixture(db_session: Session):
    """Create a test user and return its identifying data."""
    return _create_user(db_session, "maria", "Maria Silva")


@pytest.fixture(name="other_user")
def other_user_fixture(db_session: Session):
    """A second user for like and ownership tests."""
    return _create_user(db_session, "joao", "Joao Souza")
