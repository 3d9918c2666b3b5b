"""HTTP-side helpers for the contact rate limiter.

The limiter itself lives in ``app.adapters.rate_limit`` and is consulted by
the intake service. This module resolves the client address the limiter is
keyed on and renders throttling headers.
"""

from __future__ import annotations

from fastapi import Request

from app.core.config import AppSettings
from app.core.errors import RateLimitAppError


def resolve_client_id(request: Request, app_settings: AppSettings) -> str | None:
    """Return the caller's network address, or None if it cannot be determined.

    With ``trust_forwarded_for`` enabled the first ``X-Forwarded-For`` hop wins;
    only enable it behind a proxy that overwrites the header.
    """

    if app_settings.trust_forwarded_for:
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            first_hop = forwarded.split(",")[0].strip()
            if first_hop:
                return first_hop

    return request.client.host if request.client else None


def build_rate_limit_headers(exc: RateLimitAppError) -> dict[str, str]:
    """Headers attached to a 429 response."""

    details = exc.details or {}
    context = details.get("context", {})
    headers = {"Retry-After": str(exc.retry_after or 0)}
    if "limit" in details:
        headers["X-RateLimit-Limit"] = str(details["limit"])
    if "remaining" in context:
        headers["X-RateLimit-Remaining"] = str(context["remaining"])
    if "reset_at" in context:
        headers["X-RateLimit-Reset"] = str(context["reset_at"])
    return headers
