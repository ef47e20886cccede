"""Fixed-window request counter keyed by client address.

The counter store is owned by the :class:`RateLimiter` instance (one per
application, held on ``app.state``) rather than by this module, and expired
windows are evicted by a periodic sweep.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class RateWindow:
    count: int
    reset_at: float


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    retry_after: float = 0.0


class RateLimiter:
    """Allow ``max_requests`` per ``window_seconds`` for each key.

    Args:
        max_requests: Requests allowed per window.
        window_seconds: Window length.
        store: Counter store; a fresh dict when omitted.
        clock: Monotonic time source in seconds.
        sweep_interval: Seconds between evictions of expired windows
            (defaults to the window length).
    """

    def __init__(
        self,
        max_requests: int = 100,
        window_seconds: float = 60.0,
        *,
        store: dict[str, RateWindow] | None = None,
        clock: Callable[[], float] = time.monotonic,
        sweep_interval: float | None = None,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._store = store if store is not None else {}
        self._clock = clock
        self._sweep_interval = sweep_interval if sweep_interval is not None else window_seconds
        self._next_sweep = clock() + self._sweep_interval

    def __len__(self) -> int:
        return len(self._store)

    def hit(self, key: str) -> RateLimitDecision:
        """Count one request for ``key`` and decide whether it may proceed."""
        now = self._clock()
        if now >= self._next_sweep:
            self.sweep(now)

        window = self._store.get(key)
        if window is None or now > window.reset_at:
            self._store[key] = RateWindow(count=1, reset_at=now + self.window_seconds)
            return RateLimitDecision(allowed=True)

        if window.count >= self.max_requests:
            return RateLimitDecision(allowed=False, retry_after=window.reset_at - now)

        window.count += 1
        return RateLimitDecision(allowed=True)

    def sweep(self, now: float | None = None) -> int:
        """Drop expired windows. Returns how many were removed."""
        now = self._clock() if now is None else now
        expired = [key for key, window in self._store.items() if now > window.reset_at]
        for key in expired:
            del self._store[key]
        self._next_sweep = now + self._sweep_interval
        if expired:
            logger.debug("Evicted %d expired rate-limit windows", len(expired))
        return len(expired)
