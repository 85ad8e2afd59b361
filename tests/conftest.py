"""Shared fixtures: an in-memory database behind a fresh app per test."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from stock_service.api.app import create_app
from stock_service.config import Settings
from stock_service.db.database import create_session_factory, init_db

ACCESS_SECRET = "test-access-secret"
REFRESH_SECRET = "test-refresh-secret"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        access_token_secret=ACCESS_SECRET,
        refresh_token_secret=REFRESH_SECRET,
        public_files_path=str(tmp_path / "public"),
    )


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def app(settings, session_factory):
    return create_app(settings, session_factory)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def registration():
    return {
        "firstName": "Ada",
        "lastName": "Lovelace",
        "email": "ada@example.com",
        "password": "analytical-engine",
        "password2": "analytical-engine",
        "timezone": "Europe/London",
        "profileImageUrl": "images/ada.png",
    }


@pytest.fixture
def registered(client, registration):
    """Register the default user and return the response body."""
    response = client.post("/users/register", json=registration)
    assert response.status_code == 200, response.text
    return response.json()["response"]


@pytest.fixture
def auth_headers(registered):
    return {"Authorization": f"Bearer {registered['auth']['accessToken']}"}
