"""
Shared fixtures.  The environment is set before any app module is
imported because ``config.settings`` and ``main`` build objects at import.
"""

import os

os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient

from auth.jwt import TokenIssuer
from config.settings import Settings
from database.memory import InMemoryTodoStore, InMemoryUserStore

TEST_SECRET = "test-secret"


@pytest.fixture
def settings():
    return Settings(jwt_secret=TEST_SECRET, storage_backend="memory", bcrypt_rounds=4)


@pytest.fixture
def tokens():
    return TokenIssuer(TEST_SECRET)


@pytest.fixture
def user_store():
    return InMemoryUserStore()


@pytest.fixture
def todo_store():
    return InMemoryTodoStore()


@pytest.fixture
def client(settings, user_store, todo_store):
    from main import create_app

    app = create_app(settings, user_store=user_store, todo_store=todo_store)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def register_and_login(client):
    """Factory: register + login, returning Authorization headers and the login body."""

    def _register_and_login(email="a@x.com", password="pw1", first="a", last="b"):
        resp = client.post(
            "/api/auth/register",
            json={"firstName": first, "lastName": last, "email": email, "password": password},
        )
        assert resp.status_code == 201, resp.text
        resp = client.post("/api/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.text
        body = resp.json()
        return {"Authorization": f"Bearer {body['token']}"}, body

    return _register_and_login
