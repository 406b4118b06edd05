"""Reusable in-memory rate limiter.

One instance lives on ``app.state`` and throttles login attempts per client
IP. Counts are per process; a replicated deployment throttles per replica.
"""

from __future__ import annotations

import time
from collections import defaultdict

from fastapi import HTTPException, status


class InMemoryRateLimiter:
    """Sliding-window in-memory rate limiter keyed by an arbitrary string."""

    def __init__(self, window_seconds: int = 60, max_attempts: int = 5) -> None:
        self._window = window_seconds
        self._max = max_attempts
        self._attempts: dict[str, list[float]] = defaultdict(list)

    def check(self, key: str) -> None:
        """Raise HTTP 429 if *key* has exceeded *max_attempts* in the window."""
        now = time.monotonic()
        attempts = [t for t in self._attempts[key] if now - t < self._window]
        self._attempts[key] = attempts
        if len(attempts) >= self._max:
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail=f"Too many attempts. Try again in {self._window} seconds.",
            )
        attempts.append(now)

    def reset(self, key: str) -> None:
        self._attempts.pop(key, None)
