"""Rate limit state shared by every request made with one client or token.

The server is the source of truth: response headers and 429 payloads
overwrite local values. The only local bookkeeping is an optimistic
decrement after each dispatch, so a burst of concurrent callers sees
capacity shrink before the first response arrives.

All reads and writes go through a threading.Lock that is never held
across an await, so one state may be shared by clients on different
threads or event loops.
"""

import threading
import time
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitSnapshot:
    limit: int
    remaining: int
    reset_at: float  # epoch seconds


class RateLimitState:
    """Mutable {limit, remaining, reset_at} guarded by a lock."""

    def __init__(self, limit: int = 1, remaining: int = 1, reset_at: float | None = None):
        self._limit = limit
        self._remaining = max(0, remaining)
        self._reset_at = time.time() if reset_at is None else reset_at
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        snap = self.snapshot()
        return (
            f"RateLimitState(limit={snap.limit}, remaining={snap.remaining}, "
            f"reset_at={snap.reset_at})"
        )

    def snapshot(self) -> RateLimitSnapshot:
        """Consistent view of all three fields."""
        with self._lock:
            return RateLimitSnapshot(self._limit, self._remaining, self._reset_at)

    def wait_time(self, now: float) -> float:
        """Seconds to wait before a request may be sent at `now`.

        Zero while capacity remains or once the reset instant has passed.
        """
        with self._lock:
            if self._remaining > 0 or now >= self._reset_at:
                return 0.0
            return self._reset_at - now

    def apply_headers(
        self,
        remaining: int | None = None,
        limit: int | None = None,
        reset_at: float | None = None,
    ) -> None:
        """Update the fields a response reported; None leaves a field untouched."""
        with self._lock:
            if remaining is not None:
                self._remaining = max(0, remaining)
            if limit is not None:
                self._limit = limit
            if reset_at is not None:
                self._reset_at = reset_at

    def apply_rejection(self, limit: int, remaining: int, reset_at: float) -> None:
        """Overwrite everything with the server's view from a 429 payload."""
        with self._lock:
            self._limit = limit
            self._remaining = max(0, remaining)
            self._reset_at = reset_at

    def consume(self) -> int:
        """Optimistically spend one request. Returns the new remaining count."""
        with self._lock:
            if self._remaining > 0:
                self._remaining -= 1
            return self._remaining
