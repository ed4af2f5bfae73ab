from __future__ import annotations

import time
from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict


@dataclass
class RateLimitResult:
    allowed: bool
    retry_after: float


class RateLimiter:
    """Sliding-window limiter: at most ``max_calls`` hits per key per period."""

    def __init__(
        self,
        max_calls: int,
        period_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_calls = max_calls
        self.period_seconds = period_seconds
        self._clock = clock
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)

    def configure(self, max_calls: int, period_seconds: float) -> None:
        self.max_calls = max_calls
        self.period_seconds = period_seconds
        self._hits.clear()

    def allow(self, key: str) -> RateLimitResult:
        now = self._clock()
        window = self._hits[key]
        while window and now - window[0] >= self.period_seconds:
            window.popleft()
        if len(window) >= self.max_calls:
            return RateLimitResult(False, max(self.period_seconds - (now - window[0]), 0))
        window.append(now)
        return RateLimitResult(True, 0)


rate_limiter = RateLimiter(max_calls=5, period_seconds=10)
