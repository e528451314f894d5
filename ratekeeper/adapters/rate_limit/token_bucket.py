"""Token bucket rate limiter.

Tokens refill continuously at ``refill_rate_per_second`` up to ``capacity``;
each admitted request spends one token. Allows bursts up to ``capacity`` while
holding the long-run average to the refill rate.
"""

from __future__ import annotations

from dataclasses import dataclass

from ratekeeper.adapters.rate_limit.base import (
    FLOAT_TOLERANCE,
    AbstractRateLimiter,
    require_positive_number,
)


@dataclass
class _BucketState:
    tokens: float
    last_refill_ms: int


class TokenBucketLimiter(AbstractRateLimiter):
    """Rate limiter using a token bucket per key.

    A new key starts with a full bucket. Every call refills by the time
    elapsed since the previous call and advances the refill clock, whether or
    not a token is spent. Fractional tokens carry over, so rates below one
    token per second still admit once enough time has accumulated.
    """

    algorithm = "token_bucket"

    def __init__(self, *, capacity: float, refill_rate_per_second: float) -> None:
        """Initialize the token bucket limiter.

        Args:
            capacity: Maximum tokens a bucket holds (also the burst size).
            refill_rate_per_second: Tokens added per second of elapsed time.

        Raises:
            ConfigurationError: If capacity or refill_rate_per_second are invalid.
        """
        super().__init__()
        self._capacity = require_positive_number(self.algorithm, "capacity", capacity)
        self._refill_rate = require_positive_number(
            self.algorithm, "refill_rate_per_second", refill_rate_per_second
        )
        self._state_by_key: dict[str, _BucketState] = {}
        self._log_created(capacity=capacity, refill_rate_per_second=refill_rate_per_second)

    def _refill(self, state: _BucketState, timestamp_ms: int) -> None:
        elapsed_ms = max(0, timestamp_ms - state.last_refill_ms)
        state.tokens = min(self._capacity, state.tokens + elapsed_ms * self._refill_rate / 1000)
        state.last_refill_ms = max(state.last_refill_ms, timestamp_ms)

    def _admit_locked(self, key: str, timestamp_ms: int) -> bool:
        state = self._state_by_key.get(key)
        if state is None:
            state = _BucketState(tokens=self._capacity, last_refill_ms=timestamp_ms)
            self._state_by_key[key] = state
        else:
            self._refill(state, timestamp_ms)

        # A balance within FLOAT_TOLERANCE of one counts as a whole token
        if state.tokens + FLOAT_TOLERANCE >= 1:
            state.tokens = max(0.0, state.tokens - 1)
            return True

        return False

    def _is_decayed(self, state: _BucketState, timestamp_ms: int) -> bool:
        elapsed_ms = max(0, timestamp_ms - state.last_refill_ms)
        refilled = state.tokens + elapsed_ms * self._refill_rate / 1000
        return refilled + FLOAT_TOLERANCE >= self._capacity
