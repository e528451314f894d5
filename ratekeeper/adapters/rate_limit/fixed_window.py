"""Fixed-window rate limiter.

Notes:
- O(1) time and memory per key.
- Windows are half-open ``[start, start + window_size_ms)``.
- A burst straddling a boundary can admit up to ``2 * max_requests`` within
  one rolling window; that is the algorithm's accepted trade-off.
"""

from __future__ import annotations

from dataclasses import dataclass

from ratekeeper.adapters.rate_limit.base import AbstractRateLimiter, require_positive_int


@dataclass
class _WindowState:
    window_start: int
    count: int


class FixedWindowLimiter(AbstractRateLimiter):
    """Rate limiter using a fixed time window per key.

    Limits requests per key within aligned windows of time (e.g., 100 requests
    per 60_000 ms window starting at multiples of 60_000).
    """

    algorithm = "fixed_window"

    def __init__(self, *, window_size_ms: int, max_requests: int) -> None:
        """Initialize the fixed-window limiter.

        Args:
            window_size_ms: Size of the fixed window in milliseconds.
            max_requests: Maximum admitted requests per key per window.

        Raises:
            ConfigurationError: If window_size_ms or max_requests are invalid.
        """
        super().__init__()
        self._window_size_ms = require_positive_int(self.algorithm, "window_size_ms", window_size_ms)
        self._max_requests = require_positive_int(self.algorithm, "max_requests", max_requests)
        self._state_by_key: dict[str, _WindowState] = {}
        self._log_created(window_size_ms=window_size_ms, max_requests=max_requests)

    def _get_window_start(self, timestamp_ms: int) -> int:
        return (timestamp_ms // self._window_size_ms) * self._window_size_ms

    def _admit_locked(self, key: str, timestamp_ms: int) -> bool:
        window_start = self._get_window_start(timestamp_ms)
        state = self._state_by_key.get(key)

        # Earlier windows than the stored one are charged to the stored window.
        if state is None or window_start > state.window_start:
            self._state_by_key[key] = _WindowState(window_start=window_start, count=1)
            return True

        if state.count < self._max_requests:
            state.count += 1
            return True

        return False

    def _is_decayed(self, state: _WindowState, timestamp_ms: int) -> bool:
        return state.window_start + self._window_size_ms <= timestamp_ms
