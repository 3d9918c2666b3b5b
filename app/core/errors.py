"""Application-level exception types.

Domain errors raised by services and adapters. The HTTP layer maps each class
to a status code in ``app.core.exception_handlers``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class FieldProblem(TypedDict):
    """A single field-level validation problem."""

    field: str
    message: str


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    hint: str
    errors: list[FieldProblem]
    retry_after: int
    limit: int
    status_code: int
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message, safe to show to clients.
        details: Optional structured details.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when client input fails validation."""

    @property
    def errors(self) -> list[FieldProblem]:
        return list((self.details or {}).get("errors", []))


class RateLimitAppError(AppError):
    """Raised when a client exceeded its submission budget."""

    @property
    def retry_after(self) -> int | None:
        return (self.details or {}).get("retry_after")


class StorageAppError(AppError):
    """Raised when persisting or reading records fails."""


class StoreUnavailableError(StorageAppError):
    """Raised by the relational store when no database was configured."""


class AuthenticationAppError(AppError):
    """Raised when admin authentication fails."""


class GitHubAppError(AppError):
    """Raised when the repository host call fails or is not configured."""
