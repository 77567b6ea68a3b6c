"""Shared fixtures: a migrated temporary database, services and an API client."""

import pytest
from fastapi.testclient import TestClient

from fast_memos.app.core.config import Settings
from fast_memos.app.core.db import Database, init_db
from fast_memos.app.main import create_app
from fast_memos.app.services.memo_service import MemoService
from fast_memos.app.services.user_service import UserService


@pytest.fixture
def db(tmp_path):
    """Create a migrated disk-backed database for testing."""
    database = Database(str(tmp_path / "test.db"))
    init_db(database)
    return database


@pytest.fixture
def users(db):
    return UserService(db)


@pytest.fixture
def memos(db):
    return MemoService(db)


@pytest.fixture
def alice(users):
    return users.register("alice", "password123")


@pytest.fixture
def bob(users):
    return users.register("bob", "password456")


@pytest.fixture
def app_settings(tmp_path):
    return Settings(
        database_url=str(tmp_path / "api.db"),
        secret_key="test-secret",
        log_level="WARNING",
    )


@pytest.fixture
def client(app_settings):
    app = create_app(app_settings)
    # Entering the context runs the lifespan handler, which applies migrations.
    with TestClient(app) as c:
        yield c


@pytest.fixture
def login(client):
    """Register a user through the API and return bearer headers for it."""

    def _login(username="memouser", password="password123"):
        resp = client.post("/api/v1/auth/register", json={"username": username, "password": password})
        assert resp.status_code == 201, resp.text
        resp = client.post("/api/v1/auth/login", json={"username": username, "password": password})
        assert resp.status_code == 200, resp.text
        token = resp.json()["token"]
        assert token
        return {"Authorization": f"Bearer {token}"}

    return _login
