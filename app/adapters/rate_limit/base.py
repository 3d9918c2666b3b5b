"""Rate limiter interfaces.

The intake service depends on this abstraction, not the concrete map-backed
implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of an admission check.

    Attributes:
        allowed: Whether the attempt may proceed.
        limit: Max admitted attempts per window.
        remaining: Attempts left in the current window (0 when denied).
        reset_at: UNIX epoch seconds when the client's window lapses.
        retry_after_seconds: Suggested wait when denied, None when allowed.
    """

    allowed: bool
    limit: int
    remaining: int
    reset_at: int
    retry_after_seconds: int | None


class AbstractRateLimiter(ABC):
    """Interface for per-client rate limiters."""

    @abstractmethod
    def admit(self, client_id: str) -> RateLimitDecision:
        """Record an attempt for ``client_id`` and decide whether it is allowed."""
        raise NotImplementedError
