"""Leaky bucket rate limiter.

Each key has a logical queue that drains at ``leak_rate_per_second``. A
request is admitted if it fits in the queue; once the queue holds
``capacity`` requests, further ones are rejected until enough have leaked.

Only whole units leak, and the leak clock advances only when at least one
unit has drained. Sub-unit progress between calls is therefore discarded
each time the clock moves. Calls at irregular, sub-unit spacing leak more
slowly than a continuous accrual would.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ratekeeper.adapters.rate_limit.base import (
    FLOAT_TOLERANCE,
    AbstractRateLimiter,
    require_positive_number,
)


@dataclass
class _QueueState:
    queue_size: int
    last_leak_ms: int


class LeakyBucketLimiter(AbstractRateLimiter):
    """Rate limiter using a leaky bucket (queue depth counter) per key."""

    algorithm = "leaky_bucket"

    def __init__(self, *, capacity: float, leak_rate_per_second: float) -> None:
        """Initialize the leaky bucket limiter.

        Args:
            capacity: Maximum queued requests per key.
            leak_rate_per_second: Queued requests drained per second.

        Raises:
            ConfigurationError: If capacity or leak_rate_per_second are invalid.
        """
        super().__init__()
        self._capacity = require_positive_number(self.algorithm, "capacity", capacity)
        self._leak_rate = require_positive_number(
            self.algorithm, "leak_rate_per_second", leak_rate_per_second
        )
        self._state_by_key: dict[str, _QueueState] = {}
        self._log_created(capacity=capacity, leak_rate_per_second=leak_rate_per_second)

    def _leaked_since(self, state: _QueueState, timestamp_ms: int) -> int:
        elapsed_ms = max(0, timestamp_ms - state.last_leak_ms)
        return math.floor(elapsed_ms * self._leak_rate / 1000 + FLOAT_TOLERANCE)

    def _admit_locked(self, key: str, timestamp_ms: int) -> bool:
        state = self._state_by_key.get(key)
        if state is None:
            self._state_by_key[key] = _QueueState(queue_size=1, last_leak_ms=timestamp_ms)
            return True

        leaked = self._leaked_since(state, timestamp_ms)
        if leaked > 0:
            state.queue_size = max(0, state.queue_size - leaked)
            state.last_leak_ms = timestamp_ms

        if state.queue_size < self._capacity:
            state.queue_size += 1
            return True

        return False

    def _is_decayed(self, state: _QueueState, timestamp_ms: int) -> bool:
        return state.queue_size - self._leaked_since(state, timestamp_ms) <= 0
