"""In-memory attempt-window rate limiter.

Notes:
- Per-process only: restarts lose state and multiple workers each keep their
  own map.
- Thread-safe: a lock guards the map; no method awaits while holding it.
"""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable

from app.adapters.rate_limit.base import AbstractRateLimiter, RateLimitDecision


@dataclass
class AttemptEntry:
    attempts: int
    last_attempt: float


class InMemoryAttemptRateLimiter(AbstractRateLimiter):
    """Counts attempts per client, resetting once a window passes since the last one.

    A client is admitted up to ``max_attempts`` times while each attempt follows
    the previous admitted one by less than ``window_seconds``. Denied attempts
    leave the entry untouched, so denial never extends the lockout. Entries idle
    for more than twice the window are swept on every call.
    """

    def __init__(
        self,
        *,
        max_attempts: int = 3,
        window_seconds: float = 60,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the limiter.

        Args:
            max_attempts: Admitted attempts per window.
            window_seconds: Window length in seconds.
            clock: Time source returning UNIX seconds.

        Raises:
            ValueError: If max_attempts or window_seconds are invalid.
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")

        self._max_attempts = max_attempts
        self._window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.RLock()
        self._entries: dict[str, AttemptEntry] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get_entry(self, client_id: str) -> AttemptEntry | None:
        """Return a copy of the stored entry, for diagnostics."""
        with self._lock:
            entry = self._entries.get(client_id)
            if entry is None:
                return None
            return AttemptEntry(attempts=entry.attempts, last_attempt=entry.last_attempt)

    def admit(self, client_id: str) -> RateLimitDecision:
        """Record an attempt for ``client_id`` and decide whether it is allowed.

        Args:
            client_id: Client network identifier (e.g. source IP).

        Returns:
            RateLimitDecision for this attempt.

        Raises:
            ValueError: If client_id is empty.
        """
        if not client_id:
            raise ValueError("client_id must be a non-empty string")

        now = self._clock()

        with self._lock:
            entry = self._entries.get(client_id)

            if entry is None:
                entry = AttemptEntry(attempts=1, last_attempt=now)
                self._entries[client_id] = entry
                decision = self._allowed(entry)
            elif now - entry.last_attempt >= self._window_seconds:
                entry.attempts = 1
                entry.last_attempt = now
                decision = self._allowed(entry)
            elif entry.attempts < self._max_attempts:
                entry.attempts += 1
                entry.last_attempt = now
                decision = self._allowed(entry)
            else:
                decision = self._denied(entry, now)

            self._sweep_locked(now)

        return decision

    def sweep(self) -> int:
        """Remove idle entries now; returns how many were dropped."""
        with self._lock:
            return self._sweep_locked(self._clock())

    def _sweep_locked(self, now: float) -> int:
        horizon = 2 * self._window_seconds
        stale = [k for k, e in self._entries.items() if now - e.last_attempt > horizon]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def _reset_at(self, entry: AttemptEntry) -> int:
        return int(math.ceil(entry.last_attempt + self._window_seconds))

    def _allowed(self, entry: AttemptEntry) -> RateLimitDecision:
        return RateLimitDecision(
            allowed=True,
            limit=self._max_attempts,
            remaining=max(0, self._max_attempts - entry.attempts),
            reset_at=self._reset_at(entry),
            retry_after_seconds=None,
        )

    def _denied(self, entry: AttemptEntry, now: float) -> RateLimitDecision:
        wait = entry.last_attempt + self._window_seconds - now
        return RateLimitDecision(
            allowed=False,
            limit=self._max_attempts,
            remaining=0,
            reset_at=self._reset_at(entry),
            retry_after_seconds=max(1, int(math.ceil(wait))),
        )
