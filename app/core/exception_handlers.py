"""Global exception handlers for consistent error responses.

Every failure is rendered as ``{"success": false, "message": ...}``, plus
``errors`` for validation failures. Status codes by error type:

- ValidationAppError → 400
- AuthenticationAppError → 403
- RateLimitAppError → 429 (with Retry-After / X-RateLimit-* headers)
- StorageAppError → 500 (generic message; detail only in logs)
- GitHubAppError → 502 (500 when the integration is not configured)
- Unexpected Exception → 500
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.errors import (
    AppError,
    AuthenticationAppError,
    GitHubAppError,
    RateLimitAppError,
    StorageAppError,
    ValidationAppError,
)
from app.core.logging import get_request_id
from app.core.rate_limit import build_rate_limit_headers

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Internal server error"


def _status_for(exc: AppError) -> int:
    if isinstance(exc, ValidationAppError):
        return 400
    if isinstance(exc, AuthenticationAppError):
        return 403
    if isinstance(exc, RateLimitAppError):
        return 429
    if isinstance(exc, GitHubAppError):
        return 500 if exc.code == "github_not_configured" else 502
    if isinstance(exc, StorageAppError):
        return 500
    return 400


def _include_rate_limit_headers(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None)
    if settings is None:
        return True
    return settings.app.rate_limit_include_headers


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render a domain error.

    Client-side outcomes (4xx) are expected and logged at info; server-side
    failures are logged at error. The message is always the error's own
    client-safe message.

    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).

    Returns:
        JSONResponse with the mapped status code.
    """
    status_code = _status_for(exc)

    log_extra = {
        "error_code": exc.code,
        "status_code": status_code,
        "request_path": request.url.path,
        "request_id": get_request_id(),
    }
    if status_code >= 500:
        logger.error("app_error_handled", extra=log_extra)
    else:
        logger.info("app_error_handled", extra=log_extra)

    content: dict = {"success": False, "message": exc.message}
    if isinstance(exc, ValidationAppError):
        content["errors"] = exc.errors

    headers = None
    if isinstance(exc, RateLimitAppError) and _include_rate_limit_headers(request):
        headers = build_rate_limit_headers(exc)

    return JSONResponse(status_code=status_code, content=content, headers=headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Keep framework errors (404, 405, ...) in the same envelope."""

    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors.

    Logs the detail server-side and returns a generic message; no stack
    traces or exception text reach the client.
    """
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
            "request_id": get_request_id(),
        },
    )

    return JSONResponse(
        status_code=500,
        content={"success": False, "message": GENERIC_ERROR_MESSAGE},
    )


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(StarletteHTTPException)(http_exception_handler)
    app.exception_handler(Exception)(general_exception_handler)
