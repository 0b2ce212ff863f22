"""Shared fixtures: an app over in-memory storage and a few helpers."""

import pytest
from fastapi.testclient import TestClient

from finance_tracker.api import create_app
from finance_tracker.config import AuthSettings
from finance_tracker.orchestrator import create_app_components


TEST_AUTH_SETTINGS = AuthSettings(secret_key="test-secret-key", bcrypt_rounds=4)


@pytest.fixture
def auth_settings() -> AuthSettings:
    return TEST_AUTH_SETTINGS


@pytest.fixture
def components(auth_settings):
    return create_app_components(storage_backend="memory", auth_settings=auth_settings)


@pytest.fixture
def client(components):
    with TestClient(create_app(components)) as test_client:
        yield test_client


def register(client: TestClient, name: str = "Alice", email: str = "alice@example.com",
             password: str = "secret123") -> dict:
    """Register a user and return auth headers plus the response body."""
    response = client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": password},
    )
    assert response.status_code == 201, response.text
    body = response.json()
    return {
        "headers": {"Authorization": f"Bearer {body['token']}"},
        "user": body["user"],
        "token": body["token"],
    }


@pytest.fixture
def alice(client):
    return register(client)


@pytest.fixture
def bob(client):
    return register(client, name="Bob", email="bob@example.com")


@pytest.fixture
def register_user(client):
    """register() bound to the test client."""
    def _register(**kwargs) -> dict:
        return register(client, **kwargs)
    return _register
