"""
In-process fixed-window rate limiter.

State lives in this process only. Deployments running several API
processes get one independent budget per process.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional, Tuple

from finai.app.services.rate_limiter import (
    DEFAULT_BUDGETS,
    RATE_LIMITED_MESSAGE,
    BucketBudget,
    IRateLimiter,
    RateLimitBucket,
    RateLimitState,
)
from finai.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)

SWEEP_THRESHOLD = 10_000


@dataclass
class _Window:
    consumed: int
    resets_at: float


class MemoryRateLimiter(IRateLimiter):
    """
    Fixed-window limiter keyed by (bucket, key).

    The window opens on the first consumption and closes window_seconds
    later, at which point the full budget is available again.
    """

    def __init__(
        self,
        budgets: Optional[Mapping[RateLimitBucket, BucketBudget]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.budgets: Dict[RateLimitBucket, BucketBudget] = dict(DEFAULT_BUDGETS)
        if budgets:
            self.budgets.update(budgets)
        self._clock = clock
        self._windows: Dict[Tuple[RateLimitBucket, str], _Window] = {}
        self._lock = threading.Lock()

    def consume(self, bucket: RateLimitBucket, key: str) -> Result[RateLimitState]:
        budget = self.budgets[bucket]

        with self._lock:
            now = self._clock()
            window = self._windows.get((bucket, key))

            if len(self._windows) > SWEEP_THRESHOLD:
                self._sweep(now)

            if window is None or now >= window.resets_at:
                window = _Window(consumed=0, resets_at=now + budget.window_seconds)
                self._windows[(bucket, key)] = window

            if window.consumed >= budget.points:
                logger.warning(f"Rate limit exceeded: bucket={bucket.value}")
                return Return.err(Error("RATE_LIMITED", RATE_LIMITED_MESSAGE))

            window.consumed += 1
            return Return.ok(
                RateLimitState(
                    remaining=budget.points - window.consumed,
                    resets_at=window.resets_at,
                )
            )

    def _sweep(self, now: float) -> None:
        expired = [k for k, w in self._windows.items() if now >= w.resets_at]
        for k in expired:
            del self._windows[k]
