import math
import time

from limits import RateLimitItemPerSecond
from limits.storage import MemoryStorage
from limits.strategies import FixedWindowRateLimiter as _FixedWindowStrategy
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded as LoginRateLimitExceeded

from app.config import settings
from app.exceptions import RateLimitExceeded

# Per-route limits (login endpoints)
limiter = Limiter(key_func=get_remote_address)


class FixedWindowRateLimiter:
    """Fixed-window request counter keyed by client identifier.

    The first request from a key opens a window of ``window_seconds``; every
    request inside it counts against ``max_requests``. Expired windows are
    evicted by the memory storage's expiry timer.
    """

    def __init__(
        self,
        max_requests: int = 100,
        window_seconds: int = 15 * 60,
        storage: MemoryStorage | None = None,
        namespace: str = "public-api",
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.namespace = namespace
        self.storage = storage or MemoryStorage()
        self._strategy = _FixedWindowStrategy(self.storage)
        self._item = RateLimitItemPerSecond(max_requests, window_seconds)

    @classmethod
    def from_settings(cls) -> "FixedWindowRateLimiter":
        return cls(
            max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
            window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
        )

    def retry_after(self, key: str) -> int:
        reset_time = self._strategy.get_window_stats(self._item, self.namespace, key).reset_time
        return max(1, math.ceil(reset_time - time.time()))

    def hit(self, key: str) -> None:
        """Count one request for ``key``; raises RateLimitExceeded past the limit."""
        if not self._strategy.hit(self._item, self.namespace, key):
            raise RateLimitExceeded(retry_after=self.retry_after(key))

    def remaining(self, key: str) -> int:
        return self._strategy.get_window_stats(self._item, self.namespace, key).remaining

    def reset(self) -> None:
        self.storage.reset()


__all__ = [
    "limiter",
    "FixedWindowRateLimiter",
    "LoginRateLimitExceeded",
    "RateLimitExceeded",
]
