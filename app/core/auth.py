"""Admin API key check for operational endpoints.

Only the repository bootstrap endpoint is guarded. Site visitors never
authenticate; the contact form is public.
"""

from __future__ import annotations

import hmac
import logging
from typing import Annotated

from fastapi import Header, Request

from app.core.config import AppSettings
from app.core.errors import AuthenticationAppError
from app.core.logging import hash_identifier

logger = logging.getLogger(__name__)


def parse_api_keys(keys_string: str | None) -> set[str]:
    """Parse comma-separated API keys into a set.

    Examples:
        >>> sorted(parse_api_keys("key1, key2 ,key3 "))
        ['key1', 'key2', 'key3']
        >>> parse_api_keys(None)
        set()
    """
    if not keys_string:
        return set()
    return {key.strip() for key in keys_string.split(",") if key.strip()}


def validate_admin_key(provided_key: str | None, app_settings: AppSettings) -> None:
    """Check ``provided_key`` against the configured admin keys.

    Args:
        provided_key: Value of the X-API-Key header, if any.
        app_settings: Settings holding the key list and the on/off switch.

    Raises:
        AuthenticationAppError: If the key is missing, wrong, or no keys are
            configured while the check is enabled.
    """
    if not app_settings.admin_api_key_required:
        return

    valid_keys = parse_api_keys(app_settings.admin_api_keys)
    if not valid_keys:
        logger.error("auth.admin_keys_not_configured")
        raise AuthenticationAppError(
            code="api_keys_not_configured",
            message="Admin authentication is enabled but no keys are configured",
            details={"hint": "Set APP_ADMIN_API_KEYS or disable with APP_ADMIN_API_KEY_REQUIRED=false"},
        )

    if not provided_key:
        logger.warning("auth.missing_key")
        raise AuthenticationAppError(
            code="missing_api_key",
            message="Missing API key. Provide X-API-Key header.",
        )

    if not any(hmac.compare_digest(provided_key, key) for key in valid_keys):
        logger.warning(
            "auth.invalid_key",
            extra={"api_key_hash": hash_identifier(provided_key)},
        )
        raise AuthenticationAppError(
            code="invalid_api_key",
            message="Invalid or missing API key",
        )


async def verify_admin_key(
    request: Request,
    x_api_key: Annotated[str | None, Header(alias="X-API-Key")] = None,
) -> None:
    """FastAPI dependency guarding admin routes.

    Usage:
        @router.post("/github/push", dependencies=[Depends(verify_admin_key)])
    """
    validate_admin_key(x_api_key, request.app.state.settings.app)
