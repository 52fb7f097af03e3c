"""Registry of rate limit state keyed by API token.

ZEIT applies its limits per token, so clients built from the same token
should wait on the same state. Sharing is opt-in: a client only uses a
registry that is handed to it, otherwise it keeps its own isolated state.
"""

import threading
from functools import lru_cache

from zeit.ratelimit.state import RateLimitState


class RateLimitRegistry:
    """Maps token -> RateLimitState, creating entries on first use."""

    def __init__(self):
        self._states: dict[str, RateLimitState] = {}
        self._lock = threading.Lock()

    def get(self, token: str, now: float | None = None) -> RateLimitState:
        """Get or create the state for a token.

        `now` seeds reset_at of a newly created state (defaults to time.time()).
        An existing state is returned unchanged.
        """
        with self._lock:
            state = self._states.get(token)
            if state is None:
                state = RateLimitState(reset_at=now)
                self._states[token] = state
            return state

    def discard(self, token: str) -> None:
        """Forget a token's state. Unknown tokens are ignored."""
        with self._lock:
            self._states.pop(token, None)

    def __contains__(self, token: str) -> bool:
        with self._lock:
            return token in self._states

    def __len__(self) -> int:
        with self._lock:
            return len(self._states)


@lru_cache
def shared_registry() -> RateLimitRegistry:
    """Process-wide registry for callers that opt in to sharing."""
    return RateLimitRegistry()
