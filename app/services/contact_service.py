"""Contact form intake: rate limiting, validation and persistence.

Stages run in a fixed order and any failure ends the request:

1. Rate limit check on the caller's address. It runs before validation, so
   malformed submissions still use up an attempt.
2. Payload validation and normalization.
3. Persistence through the configured storage backend.
"""

from __future__ import annotations

import logging
from typing import Any

from app.adapters.rate_limit.base import AbstractRateLimiter
from app.adapters.storage.base import AbstractStorage
from app.core.errors import RateLimitAppError, StorageAppError
from app.core.logging import hash_identifier
from app.schemas.contact import ContactSubmission
from app.services.contact_validation import validate_contact_submission

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT = "unknown"

RATE_LIMIT_MESSAGE = "Too many submissions. Please try again in a minute."
STORE_FAILURE_MESSAGE = "Internal server error"


class ContactIntakeService:
    """Accepts contact form submissions on behalf of the HTTP layer."""

    def __init__(
        self,
        *,
        storage: AbstractStorage,
        rate_limiter: AbstractRateLimiter | None,
    ) -> None:
        """Wire the service to its collaborators.

        Args:
            storage: Backend that persists accepted submissions.
            rate_limiter: Per-client limiter, or None to disable throttling.
        """
        self.storage = storage
        self.rate_limiter = rate_limiter

    def _check_rate_limit(self, client_id: str) -> None:
        if self.rate_limiter is None:
            return

        decision = self.rate_limiter.admit(client_id)
        if decision.allowed:
            logger.debug(
                "rate_limit.allowed",
                extra={
                    "client_hash": hash_identifier(client_id),
                    "remaining": decision.remaining,
                },
            )
            return

        logger.info(
            "rate_limit.denied",
            extra={
                "client_hash": hash_identifier(client_id),
                "limit": decision.limit,
                "retry_after_s": decision.retry_after_seconds,
            },
        )
        raise RateLimitAppError(
            code="rate_limit_exceeded",
            message=RATE_LIMIT_MESSAGE,
            details={
                "retry_after": decision.retry_after_seconds or 0,
                "limit": decision.limit,
                "context": {"reset_at": decision.reset_at, "remaining": decision.remaining},
            },
        )

    async def submit(self, client_id: str | None, payload: Any) -> ContactSubmission:
        """Run a submission through the intake pipeline.

        Args:
            client_id: Caller's network address; None or empty falls back to
                the shared "unknown" bucket.
            payload: Decoded request body.

        Returns:
            ContactSubmission: The stored record.

        Raises:
            RateLimitAppError: The caller exhausted its attempts.
            ValidationAppError: The payload is malformed.
            StorageAppError: Persistence failed (generic message only).
        """
        if not client_id:
            logger.debug("contact.client_unknown")
            client_id = UNKNOWN_CLIENT

        self._check_rate_limit(client_id)

        submission = validate_contact_submission(payload)

        try:
            stored = await self.storage.insert_contact_submission(submission)
        except Exception as exc:
            logger.error(
                "storage.insert_failed",
                extra={
                    "backend": self.storage.backend_name,
                    "error_type": type(exc).__name__,
                },
            )
            raise StorageAppError(
                code="submission_store_failed",
                message=STORE_FAILURE_MESSAGE,
            ) from exc

        logger.info(
            "contact.accepted",
            extra={
                "submission_id": stored.id,
                "backend": self.storage.backend_name,
                "has_company": stored.company is not None,
            },
        )
        return stored
