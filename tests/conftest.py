"""Shared fixtures for the ZEIT client test suite."""

import os

import httpx
import pytest

from zeit.config.settings import get_settings
from zeit.ratelimit.state import RateLimitState
from zeit.transport.gateway import RequestGateway

BASE_URL = "https://zeit.api.test"
TEST_TOKEN = "test-token-123"
START = 1_700_000_000.0


class FakeClock:
    """Deterministic clock; sleep() records the delay and advances time."""

    def __init__(self, start: float = START):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class ScriptedTransport:
    """Mock transport handler replaying a fixed list of responses or exceptions."""

    def __init__(self, responses):
        self._responses = list(responses)
        self.requests: list[httpx.Request] = []
        self.on_request = None  # optional hook called with each request

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.on_request is not None:
            self.on_request(request)
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def rate_limit_headers(remaining=None, limit=None, reset=None) -> dict:
    headers = {}
    if remaining is not None:
        headers["X-RateLimit-Remaining"] = str(remaining)
    if limit is not None:
        headers["X-RateLimit-Limit"] = str(limit)
    if reset is not None:
        headers["X-RateLimit-Reset"] = str(int(reset))
    return headers


def rejection_response(total: int, remaining: int, reset: float) -> httpx.Response:
    return httpx.Response(429, json={
        "error": {
            "code": "rate_limited",
            "message": "Rate limit exceeded",
            "limit": {"total": total, "remaining": remaining, "reset": int(reset)},
        },
    })


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_gateway(clock):
    """Factory fixture: gateway over a scripted transport.

    Usage:
        gateway, transport = make_gateway([httpx.Response(200)], state=...)
    """
    def _make(responses, state: RateLimitState | None = None, team: str | None = None):
        transport = ScriptedTransport(responses)
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(transport))
        gateway = RequestGateway(
            TEST_TOKEN,
            base_url=BASE_URL,
            team=team,
            state=state if state is not None else RateLimitState(reset_at=clock()),
            http_client=http_client,
            clock=clock,
            sleep=clock.sleep,
        )
        return gateway, transport

    return _make


@pytest.fixture
def override_settings(monkeypatch):
    """Factory fixture: run with exactly the given ZEIT_* env vars.

    Any other ZEIT_* variable from the surrounding environment is removed,
    so unset fields fall back to their defaults.

        override_settings(ZEIT_API_TOKEN="tok", ZEIT_TEAM_ID="team_1")
    """
    def _override(**env):
        for key in [k for k in os.environ if k.startswith("ZEIT_")]:
            monkeypatch.delenv(key)
        for key, value in env.items():
            monkeypatch.setenv(key.upper(), str(value))
        get_settings.cache_clear()

    yield _override

    get_settings.cache_clear()
