"""
Pytest fixtures for the story service tests.

Every test gets a fresh in-memory SQLite database wired into the app through
dependency overrides, and a bcrypt hasher at the minimum allowed cost so the
suite stays fast.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from story_platform.story_platform.story_service import models  # noqa: F401
from story_platform.story_platform.story_service.config import settings
from story_platform.story_platform.story_service.db import Base, get_db
from story_platform.story_platform.story_service.dependencies import get_password_hasher
from story_platform.story_platform.story_service.main import app
from story_platform.story_platform.story_service.passwords import MIN_ROUNDS, PasswordHasher
from story_platform.story_platform.story_service.store import (
    SQLAlchemyCredentialStore,
    SQLAlchemyStoryStore,
)
from story_platform.story_platform.story_service.tokens import TokenIssuer


@pytest.fixture(scope="session")
def hasher():
    return PasswordHasher(rounds=MIN_ROUNDS)


@pytest.fixture
def issuer():
    return TokenIssuer(settings.JWT_SECRET)


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def credential_store(db):
    return SQLAlchemyCredentialStore(db)


@pytest.fixture
def story_store(db):
    return SQLAlchemyStoryStore(db)


@pytest.fixture
def client(session_factory, hasher):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_password_hasher] = lambda: hasher
    # No context manager: the lifespan would create tables in the configured database
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def register_user(client):
    def _register(email="a@x.com", username="alice", password="s3cret", **extra):
        payload = {"email": email, "username": username, "password": password, **extra}
        resp = client.post("/users/register", json=payload)
        assert resp.status_code == 200, resp.text
        return resp.json()
    return _register


@pytest.fixture
def login_token(client):
    def _login(email="a@x.com", password="s3cret"):
        resp = client.post("/users/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.text
        return resp.json()["token"]
    return _login
