"""Tests for global exception handlers.

Every error type must map to its status code and the
``{"success": false, "message": ...}`` envelope, without leaking internals.
"""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.core.errors import (
    AppError,
    AuthenticationAppError,
    GitHubAppError,
    RateLimitAppError,
    StorageAppError,
    StoreUnavailableError,
    ValidationAppError,
)
from app.core.exception_handlers import general_exception_handler, setup_exception_handlers


@pytest.fixture
def app_with_handlers() -> FastAPI:
    app = FastAPI()
    setup_exception_handlers(app)
    return app


@pytest.fixture
def client(app_with_handlers: FastAPI) -> TestClient:
    return TestClient(app_with_handlers)


def _raise_on(app: FastAPI, path: str, exc: Exception) -> None:
    @app.get(path)
    async def _endpoint():
        raise exc


class TestAppErrorHandler:
    def test_validation_error_returns_400_with_errors(
        self, client: TestClient, app_with_handlers: FastAPI
    ) -> None:
        _raise_on(
            app_with_handlers,
            "/validation",
            ValidationAppError(
                code="invalid_form_data",
                message="Invalid form data",
                details={"errors": [{"field": "name", "message": "Field is required"}]},
            ),
        )

        response = client.get("/validation")

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "message": "Invalid form data",
            "errors": [{"field": "name", "message": "Field is required"}],
        }

    def test_rate_limit_error_returns_429_with_headers(
        self, client: TestClient, app_with_handlers: FastAPI
    ) -> None:
        _raise_on(
            app_with_handlers,
            "/throttled",
            RateLimitAppError(
                code="rate_limit_exceeded",
                message="Too many submissions. Please try again in a minute.",
                details={"retry_after": 42, "limit": 3, "context": {"reset_at": 1060, "remaining": 0}},
            ),
        )

        response = client.get("/throttled")

        assert response.status_code == 429
        assert response.json() == {
            "success": False,
            "message": "Too many submissions. Please try again in a minute.",
        }
        assert response.headers["Retry-After"] == "42"
        assert response.headers["X-RateLimit-Reset"] == "1060"

    @pytest.mark.parametrize(
        "exc",
        [
            StorageAppError(code="submission_store_failed", message="Internal server error"),
            StoreUnavailableError(code="database_unavailable", message="Internal server error"),
        ],
    )
    def test_storage_errors_return_500(
        self, client: TestClient, app_with_handlers: FastAPI, exc: AppError
    ) -> None:
        _raise_on(app_with_handlers, "/storage", exc)

        response = client.get("/storage")

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Internal server error"}

    def test_authentication_error_returns_403(
        self, client: TestClient, app_with_handlers: FastAPI
    ) -> None:
        _raise_on(
            app_with_handlers,
            "/auth",
            AuthenticationAppError(code="invalid_api_key", message="Invalid or missing API key"),
        )

        response = client.get("/auth")

        assert response.status_code == 403
        assert response.json()["message"] == "Invalid or missing API key"

    @pytest.mark.parametrize(
        "code,status",
        [("github_api_error", 502), ("github_not_configured", 500)],
    )
    def test_github_errors(
        self, client: TestClient, app_with_handlers: FastAPI, code: str, status: int
    ) -> None:
        _raise_on(app_with_handlers, f"/github-{code}", GitHubAppError(code=code, message="GitHub failed"))

        response = client.get(f"/github-{code}")

        assert response.status_code == status
        assert response.json()["success"] is False


class TestGeneralExceptionHandler:
    def test_unexpected_exception_handler_registered(self, app_with_handlers: FastAPI) -> None:
        assert Exception in app_with_handlers.exception_handlers
        assert AppError in app_with_handlers.exception_handlers

    def test_general_exception_handler_hides_details(self) -> None:
        request = AsyncMock()
        request.url.path = "/api/contact"
        request.method = "POST"

        exc = RuntimeError("database connection failed: password=hunter2")
        response = asyncio.run(general_exception_handler(request, exc))

        data = json.loads(bytes(response.body).decode())
        assert response.status_code == 500
        assert data == {"success": False, "message": "Internal server error"}
        assert "hunter2" not in bytes(response.body).decode()
        assert "RuntimeError" not in bytes(response.body).decode()

    def test_multiple_handler_setups_does_not_fail(self) -> None:
        app = FastAPI()
        setup_exception_handlers(app)
        setup_exception_handlers(app)

        assert AppError in app.exception_handlers
