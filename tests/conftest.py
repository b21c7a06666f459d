"""Shared pytest fixtures for GalaxyERP test suites."""

from __future__ import annotations

from collections.abc import Generator

from fastapi.testclient import TestClient
from loguru import logger
import pytest

from galaxyerp.application.config import (
    AppConfig,
    DatabaseSettings,
    JWTSettings,
    LogSettings,
    SecuritySettings,
    load_config,
)
from galaxyerp.main import create_app

API_PREFIX = "/api/v1"
TEST_PASSWORD = "Secret123"


@pytest.fixture
def config() -> AppConfig:
    """In-memory database, fast hashing and no log files."""
    return load_config(
        "test",
        database=DatabaseSettings(url="sqlite+aiosqlite:///:memory:"),
        jwt=JWTSettings(secret="test-secret"),
        security=SecuritySettings(bcrypt_rounds=4),
        log=LogSettings(level="DEBUG", enable_console=False, enable_file=False),
    )


@pytest.fixture
def app(config: AppConfig):
    return create_app(config)


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    """Provide an API test client with the application lifespan running."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def log_records(app) -> Generator[list[dict], None, None]:
    """Capture loguru records emitted while the test runs."""
    records: list[dict] = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)


@pytest.fixture
def register_user(client: TestClient):
    """Factory registering a user and returning the token payload."""

    def factory(username: str = "alice", email: str | None = None) -> dict:
        response = client.post(
            f"{API_PREFIX}/auth/register",
            json={
                "username": username,
                "email": email or f"{username}@example.com",
                "password": TEST_PASSWORD,
                "first_name": "Alice",
                "last_name": "Zhang",
            },
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return factory


@pytest.fixture
def auth_headers(register_user) -> dict[str, str]:
    data = register_user()
    return {"Authorization": f"Bearer {data['token']}"}


@pytest.fixture
def create_account(client: TestClient, auth_headers: dict[str, str]):
    """Factory creating an account and returning its data."""

    def factory(code: str, name: str | None = None, account_type: str = "asset", **extra) -> dict:
        response = client.post(
            f"{API_PREFIX}/accounting/accounts",
            json={"code": code, "name": name or f"科目{code}", "account_type": account_type, **extra},
            headers=auth_headers,
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return factory
