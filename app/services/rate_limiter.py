"""
Simple in-memory rate limiter for auth endpoints.
"""

import time
from collections import defaultdict, deque
from threading import Lock

from app.settings import settings


class RateLimiter:
    """Sliding one-minute window per key."""

    def __init__(self, requests_per_minute: int = 10):
        self.requests_per_minute = requests_per_minute
        self.window_seconds = 60
        self._requests: dict[str, deque[float]] = defaultdict(deque)
        self._lock = Lock()

    def is_allowed(self, key: str) -> bool:
        """Record a request for `key` and report whether it is within the limit."""
        now = time.monotonic()
        window_start = now - self.window_seconds

        with self._lock:
            requests = self._requests[key]
            while requests and requests[0] <= window_start:
                requests.popleft()

            if len(requests) >= self.requests_per_minute:
                return False

            requests.append(now)
            return True

    def reset(self) -> None:
        with self._lock:
            self._requests.clear()


auth_rate_limiter = RateLimiter(requests_per_minute=settings.rate_limit_auth_per_minute)
