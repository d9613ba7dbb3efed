from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from finai.libs.result import Result


@dataclass(frozen=True)
class BucketBudget:
    points: int
    window_seconds: int


class RateLimitBucket(str, Enum):
    """Independent limiter instances, one per concern"""

    auth_ip = "auth_ip"
    auth_account = "auth_account"
    verification_ip = "verification_ip"
    api_ip = "api_ip"


DEFAULT_BUDGETS = {
    RateLimitBucket.auth_ip: BucketBudget(points=5, window_seconds=900),
    RateLimitBucket.auth_account: BucketBudget(points=10, window_seconds=3600),
    RateLimitBucket.verification_ip: BucketBudget(points=3, window_seconds=900),
    RateLimitBucket.api_ip: BucketBudget(points=60, window_seconds=60),
}

RATE_LIMITED_MESSAGE = "Too many requests. Please try again later."


@dataclass(frozen=True)
class RateLimitState:
    """Bucket state after a successful consumption"""

    remaining: int
    resets_at: float


class IRateLimiter(ABC):
    """Fixed-window point budget per (bucket, key)"""

    @abstractmethod
    def consume(self, bucket: RateLimitBucket, key: str) -> Result[RateLimitState]:
        """
        Consume one point for key in bucket.

        Returns Error(RATE_LIMITED) once the window's budget is spent.
        """
        pass
