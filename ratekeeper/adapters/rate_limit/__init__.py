"""Rate limiting algorithms.

Five strategies behind one interface, ``AbstractRateLimiter.admit``. Pick one
directly or let ``create_rate_limiter`` build it from settings.
"""

from ratekeeper.adapters.rate_limit.base import AbstractRateLimiter
from ratekeeper.adapters.rate_limit.factory import SUPPORTED_ALGORITHMS, create_rate_limiter
from ratekeeper.adapters.rate_limit.fixed_window import FixedWindowLimiter
from ratekeeper.adapters.rate_limit.leaky_bucket import LeakyBucketLimiter
from ratekeeper.adapters.rate_limit.sliding_window_counter import SlidingWindowCounterLimiter
from ratekeeper.adapters.rate_limit.sliding_window_log import SlidingWindowLogLimiter
from ratekeeper.adapters.rate_limit.token_bucket import TokenBucketLimiter

__all__ = [
    "AbstractRateLimiter",
    "FixedWindowLimiter",
    "LeakyBucketLimiter",
    "SUPPORTED_ALGORITHMS",
    "SlidingWindowCounterLimiter",
    "SlidingWindowLogLimiter",
    "TokenBucketLimiter",
    "create_rate_limiter",
]
