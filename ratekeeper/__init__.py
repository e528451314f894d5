"""Per-key rate limiting algorithms.

Five interchangeable admission-control strategies share one contract,
``admit(key, timestamp_ms) -> bool``. Timestamps are always supplied by the
caller, so the limiters are deterministic and easy to drive from tests.
"""

from ratekeeper.adapters.rate_limit import (
    AbstractRateLimiter,
    FixedWindowLimiter,
    LeakyBucketLimiter,
    SlidingWindowCounterLimiter,
    SlidingWindowLogLimiter,
    TokenBucketLimiter,
    create_rate_limiter,
)
from ratekeeper.core.config import LimiterSettings, LogSettings, load_settings
from ratekeeper.core.errors import AppError, ConfigurationError
from ratekeeper.core.logging import configure_logging

__all__ = [
    "AbstractRateLimiter",
    "AppError",
    "ConfigurationError",
    "FixedWindowLimiter",
    "LeakyBucketLimiter",
    "LimiterSettings",
    "LogSettings",
    "SlidingWindowCounterLimiter",
    "SlidingWindowLogLimiter",
    "TokenBucketLimiter",
    "configure_logging",
    "create_rate_limiter",
    "load_settings",
]
