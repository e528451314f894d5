"""Sliding-window log rate limiter.

Keeps the timestamps of admitted requests per key and counts those inside the
trailing window. Exact, at the cost of O(max_requests) memory per key.
"""

from __future__ import annotations

from collections import deque

from ratekeeper.adapters.rate_limit.base import AbstractRateLimiter, require_positive_int


class SlidingWindowLogLimiter(AbstractRateLimiter):
    """Rate limiter counting admitted requests in ``(now - window, now]``.

    A stored timestamp exactly ``window_size_ms`` old has expired, which
    matches the half-open boundary of the fixed-window variant. Rejected
    requests are never logged, so a key holds at most ``max_requests``
    timestamps.
    """

    algorithm = "sliding_window_log"

    def __init__(self, *, window_size_ms: int, max_requests: int) -> None:
        super().__init__()
        self._window_size_ms = require_positive_int(self.algorithm, "window_size_ms", window_size_ms)
        self._max_requests = require_positive_int(self.algorithm, "max_requests", max_requests)
        self._state_by_key: dict[str, deque[int]] = {}
        self._log_created(window_size_ms=window_size_ms, max_requests=max_requests)

    def _admit_locked(self, key: str, timestamp_ms: int) -> bool:
        log = self._state_by_key.get(key)
        if log is None:
            log = deque()
            self._state_by_key[key] = log
        elif log and timestamp_ms < log[-1]:
            timestamp_ms = log[-1]

        cutoff = timestamp_ms - self._window_size_ms
        while log and log[0] <= cutoff:
            log.popleft()

        if len(log) < self._max_requests:
            log.append(timestamp_ms)
            return True

        return False

    def _is_decayed(self, state: deque[int], timestamp_ms: int) -> bool:
        return not state or state[-1] <= timestamp_ms - self._window_size_ms
