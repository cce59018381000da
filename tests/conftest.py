"""
Shared fixtures.

Seed data mirrors a small real deployment: two users, each logged in
once, each owning one todo.
"""

from dataclasses import dataclass

import pytest
from fastapi.testclient import TestClient

from todo_api.api.app import create_app
from todo_api.auth import CredentialStore, TokenService
from todo_api.config import Settings
from todo_api.services import TodoService
from todo_api.storage import create_local_storage


# =============================================================================
# Services
# =============================================================================


@pytest.fixture
def settings():
    """Fast, isolated settings (cheap hashing, no Sentry)."""
    return Settings(
        environment="test",
        jwt_secret_key="test-secret-key-that-is-long-enough-for-hs256",
        password_hash_iterations=1_000,
        sentry_dsn="",
    )


@pytest.fixture
def storage():
    return create_local_storage()


@pytest.fixture
def credentials(storage, settings):
    return CredentialStore(storage, settings)


@pytest.fixture
def tokens(settings, credentials):
    return TokenService(settings, credentials)


@pytest.fixture
def todo_service(storage):
    return TodoService(storage)


# =============================================================================
# HTTP
# =============================================================================


@dataclass
class SeedUser:
    id: str
    email: str
    password: str
    token: str
    todo_id: str
    todo_text: str


@pytest.fixture
def client(settings, storage):
    return TestClient(create_app(settings=settings, storage=storage))


def _seed_user(client: TestClient, email: str, password: str, text: str) -> SeedUser:
    res = client.post("/users", json={"email": email, "password": password})
    assert res.status_code == 200
    token = res.headers["x-auth"]

    todo = client.post("/todos", json={"text": text}, headers={"x-auth": token})
    assert todo.status_code == 200

    return SeedUser(
        id=res.json()["_id"],
        email=email,
        password=password,
        token=token,
        todo_id=todo.json()["_id"],
        todo_text=text,
    )


@pytest.fixture
def users(client):
    """Two registered users, each with one token and one todo."""
    return [
        _seed_user(client, "andrew@example.com", "userOnePass", "First test todo"),
        _seed_user(client, "jen@example.com", "userTwoPass", "Second test todo"),
    ]

