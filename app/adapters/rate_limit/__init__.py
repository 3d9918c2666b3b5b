"""Rate limiting adapters.

The contact endpoint starts with an in-memory limiter; the abstract interface
leaves room for a shared store later without touching the service layer.
"""

from app.adapters.rate_limit.base import AbstractRateLimiter, RateLimitDecision
from app.adapters.rate_limit.in_memory import AttemptEntry, InMemoryAttemptRateLimiter

__all__ = [
    "AbstractRateLimiter",
    "AttemptEntry",
    "InMemoryAttemptRateLimiter",
    "RateLimitDecision",
]
