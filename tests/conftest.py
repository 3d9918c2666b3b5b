"""Pytest configuration and fixtures shared across all test modules.

TESTING must be set before ``app.core.config`` is imported so that no
.env file leaks developer configuration into the test run.
"""

import os
from typing import Callable
from unittest.mock import Mock

import pytest

os.environ["TESTING"] = "true"
os.environ["APP_ENV"] = "testing"
os.environ.pop("DATABASE_URL", None)
os.environ.pop("GITHUB_TOKEN", None)
os.environ.setdefault("APP_ADMIN_API_KEYS", "test-admin-key-123")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.adapters.rate_limit.in_memory import InMemoryAttemptRateLimiter  # noqa: E402
from app.adapters.storage.in_memory import InMemoryStorage  # noqa: E402
from app.core.app_factory import create_app  # noqa: E402
from app.core.config import (  # noqa: E402
    AppSettings,
    DatabaseSettings,
    GitHubSettings,
    LogSettings,
    Settings,
)

VALID_SUBMISSION = {"name": "Ann", "email": "a@b.com", "message": "Hi"}


def build_settings(**app_overrides) -> Settings:
    """Settings independent of the developer's environment."""

    app_values = {
        "contact_rate_limit_attempts": 3,
        "contact_rate_limit_window_seconds": 60,
        "trust_forwarded_for": True,
        "admin_api_keys": "test-admin-key-123",
    }
    app_values.update(app_overrides)
    return Settings(
        app=AppSettings(**app_values),
        database=DatabaseSettings(url=None),
        log=LogSettings(level="WARNING"),
        github=GitHubSettings(token=None),
    )


@pytest.fixture
def clock() -> Mock:
    """Controllable time source starting at t=1000s."""
    return Mock(return_value=1000.0)


@pytest.fixture
def limiter(clock: Mock) -> InMemoryAttemptRateLimiter:
    return InMemoryAttemptRateLimiter(max_attempts=3, window_seconds=60, clock=clock)


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def app(storage: InMemoryStorage, limiter: InMemoryAttemptRateLimiter) -> FastAPI:
    return create_app(build_settings(), storage=storage, rate_limiter=limiter)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture
def post_contact(client: TestClient) -> Callable:
    """POST /api/contact as a given client address."""

    def _post(payload=None, ip: str = "203.0.113.10", **kwargs):
        body = VALID_SUBMISSION if payload is None else payload
        return client.post(
            "/api/contact",
            json=body,
            headers={"X-Forwarded-For": ip},
            **kwargs,
        )

    return _post


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    return build_settings


@pytest.fixture
def valid_submission() -> dict:
    return dict(VALID_SUBMISSION)
