"""Factory for creating rate limiter instances from configuration."""

from ratekeeper.adapters.rate_limit.base import AbstractRateLimiter
from ratekeeper.adapters.rate_limit.fixed_window import FixedWindowLimiter
from ratekeeper.adapters.rate_limit.leaky_bucket import LeakyBucketLimiter
from ratekeeper.adapters.rate_limit.sliding_window_counter import SlidingWindowCounterLimiter
from ratekeeper.adapters.rate_limit.sliding_window_log import SlidingWindowLogLimiter
from ratekeeper.adapters.rate_limit.token_bucket import TokenBucketLimiter
from ratekeeper.core.config import LimiterSettings, load_settings
from ratekeeper.core.errors import ConfigurationError

SUPPORTED_ALGORITHMS = (
    "fixed_window",
    "sliding_window_log",
    "sliding_window_counter",
    "token_bucket",
    "leaky_bucket",
)


def create_rate_limiter(limiter_settings: LimiterSettings | None = None) -> AbstractRateLimiter:
    """Factory function to instantiate a limiter for the configured algorithm.

    Resolves LIMITER_* settings with load_settings() unless explicit
    settings are passed. Each call returns a new, independent
    limiter with its own state table.

    Returns:
        AbstractRateLimiter: Configured limiter instance.

    Raises:
        ConfigurationError: If the algorithm is unknown or its parameters are invalid,
            or if settings read from the environment cannot be parsed.
    """
    cfg = limiter_settings or load_settings().limiter
    algorithm = cfg.algorithm.strip().lower()

    if algorithm == "fixed_window":
        return FixedWindowLimiter(
            window_size_ms=cfg.window_size_ms,
            max_requests=cfg.max_requests,
        )

    if algorithm == "sliding_window_log":
        return SlidingWindowLogLimiter(
            window_size_ms=cfg.window_size_ms,
            max_requests=cfg.max_requests,
        )

    if algorithm == "sliding_window_counter":
        return SlidingWindowCounterLimiter(
            window_size_ms=cfg.window_size_ms,
            max_requests=cfg.max_requests,
        )

    if algorithm == "token_bucket":
        return TokenBucketLimiter(
            capacity=cfg.capacity,
            refill_rate_per_second=cfg.refill_rate_per_second,
        )

    if algorithm == "leaky_bucket":
        return LeakyBucketLimiter(
            capacity=cfg.capacity,
            leak_rate_per_second=cfg.leak_rate_per_second,
        )

    raise ConfigurationError(
        code="limiter_unknown_algorithm",
        message=(
            f"Unknown rate limit algorithm: '{cfg.algorithm}'. "
            f"Supported algorithms: {', '.join(SUPPORTED_ALGORITHMS)}"
        ),
        details={"parameter": "algorithm", "actual_value": cfg.algorithm},
    )
