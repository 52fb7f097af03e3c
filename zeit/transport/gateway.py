"""Request gateway: every ZEIT API call goes through RequestGateway.send.

Per logical call:
    throttle (sleep while remaining == 0 and reset is ahead)
    -> dispatch
    -> 429?  apply the server's limit payload and go back to throttle
    -> else  spend one request locally, apply X-RateLimit-* headers, return

Transport failures are surfaced immediately and never retried. 429s are
retried without an attempt cap, always waiting exactly the reset delta the
server reported; a server that never grants capacity will starve the call,
so callers that cannot tolerate that should pass a deadline.
"""

import asyncio
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

import httpx

from zeit.config.settings import DEFAULT_BASE_URL
from zeit.errors import RateLimitDecodeError, ThrottleTimeoutError, TransportError
from zeit.logging.structured import generate_request_id, get_logger, request_id_var
from zeit.ratelimit.feedback import RateLimitRejection, parse_rate_limit_headers, parse_rejection
from zeit.ratelimit.state import RateLimitState

logger = get_logger("gateway")

STATUS_TOO_MANY_REQUESTS = 429
TEAM_QUERY_PARAM = "teamId"


class RequestGateway:
    """Authenticated, rate-limited access to the ZEIT REST API."""

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        team: str | None = None,
        state: RateLimitState | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: httpx.Timeout | None = None,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._token = token
        self._base_url = base_url.rstrip("/")
        self._team = team or None
        self._state = state if state is not None else RateLimitState(reset_at=clock())
        self._client = http_client
        self._owns_client = http_client is None
        self._timeout = timeout or httpx.Timeout(60.0, connect=10.0)
        self._clock = clock
        self._sleep = sleep
        self.dispatch_count = 0

    @property
    def state(self) -> RateLimitState:
        return self._state

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def team(self) -> str | None:
        return self._team

    @team.setter
    def team(self, team: str | None) -> None:
        self._team = team or None

    def _get_client(self) -> httpx.AsyncClient:
        if self._owns_client and (self._client is None or self._client.is_closed):
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    def _build_request(
        self,
        client: httpx.AsyncClient,
        method: str,
        path: str,
        body: dict | list | None,
        params: dict | None,
    ) -> httpx.Request:
        url = f"{self._base_url}/{path.lstrip('/')}"
        headers = {"Authorization": f"Bearer {self._token}"}
        query = dict(params or {})
        if self._team:
            query[TEAM_QUERY_PARAM] = self._team

        if body is None:
            return client.build_request(method, url, headers=headers, params=query)

        headers["Content-Type"] = "application/json"
        return client.build_request(method, url, headers=headers, params=query, json=body)

    async def send(
        self,
        method: str,
        path: str,
        body: dict | list | None = None,
        params: dict | None = None,
        deadline: float | None = None,
    ) -> httpx.Response:
        """Perform one logical API call and return the streamed response.

        Args:
            method: HTTP method.
            path: Endpoint path relative to the base URL, e.g. "v4/domains".
            body: JSON body, if any.
            params: Extra query parameters. teamId is added automatically.
            deadline: Max seconds this call may spend waiting for rate-limit
                capacity. None waits as long as the server asks.

        Returns:
            The httpx.Response with its body unread. The caller owns it and
            must close it (see `request` for a context-managed variant).

        Raises:
            TransportError: The request could not be sent or answered.
            RateLimitDecodeError: A 429 body did not carry usable limits.
            ThrottleTimeoutError: Waiting for capacity would pass `deadline`.
        """
        # Keep a caller-provided request id, otherwise scope a fresh one to this call
        rid_token = None if request_id_var.get() else request_id_var.set(generate_request_id())
        try:
            return await self._send(method, path, body, params, deadline)
        finally:
            if rid_token is not None:
                request_id_var.reset(rid_token)

    async def _send(
        self,
        method: str,
        path: str,
        body: dict | list | None,
        params: dict | None,
        deadline: float | None,
    ) -> httpx.Response:
        client = self._get_client()
        started = self._clock()

        while True:
            await self._throttle(method, path, started, deadline)

            request = self._build_request(client, method, path, body, params)
            response = await self._dispatch(client, request)

            if response.status_code == STATUS_TOO_MANY_REQUESTS:
                rejection = await self._read_rejection(response)
                self._state.apply_rejection(rejection.limit, rejection.remaining, rejection.reset_at)
                logger.warning(
                    "Rate limit rejection, retrying after reset",
                    extra={"event_data": {
                        "method": method,
                        "path": path,
                        "error_code": rejection.code,
                        "rate_limit": rejection.limit,
                        "rate_limit_remaining": rejection.remaining,
                        "rate_limit_reset": rejection.reset_at,
                    }},
                )
                continue

            self._state.consume()
            feedback = parse_rate_limit_headers(response.headers)
            self._state.apply_headers(
                remaining=feedback.remaining,
                limit=feedback.limit,
                reset_at=feedback.reset_at,
            )
            return response

    @asynccontextmanager
    async def request(
        self,
        method: str,
        path: str,
        body: dict | list | None = None,
        params: dict | None = None,
        deadline: float | None = None,
    ) -> AsyncIterator[httpx.Response]:
        """Like `send`, but closes the response when the block exits."""
        response = await self.send(method, path, body=body, params=params, deadline=deadline)
        try:
            yield response
        finally:
            await response.aclose()

    async def _throttle(self, method: str, path: str, started: float, deadline: float | None) -> None:
        """Sleep until the rate limit window resets, if it is exhausted."""
        now = self._clock()
        delay = self._state.wait_time(now)
        if delay <= 0:
            return

        if deadline is not None:
            waited = now - started
            if waited + delay > deadline:
                raise ThrottleTimeoutError(waited=waited, wait_needed=delay, deadline=deadline)

        logger.warning(
            "Rate limit hit, waiting",
            extra={"event_data": {"method": method, "path": path, "wait_seconds": round(delay, 3)}},
        )
        await self._sleep(delay)

    async def _dispatch(self, client: httpx.AsyncClient, request: httpx.Request) -> httpx.Response:
        self.dispatch_count += 1
        started = time.perf_counter()
        try:
            response = await client.send(request, stream=True)
        except httpx.TransportError as e:
            logger.error(
                "Transport failure",
                extra={"event_data": {
                    "method": request.method,
                    "url": str(request.url),
                    "error": type(e).__name__,
                }},
            )
            raise TransportError(request.method, str(request.url), str(e) or type(e).__name__) from e

        logger.debug(
            "Request dispatched",
            extra={"event_data": {
                "method": request.method,
                "url": str(request.url),
                "status": response.status_code,
                "latency_ms": round((time.perf_counter() - started) * 1000, 2),
            }},
        )
        return response

    async def _read_rejection(self, response: httpx.Response) -> RateLimitRejection:
        """Consume and release a 429 body, then decode its limit payload."""
        try:
            await response.aread()
        except httpx.TransportError as e:
            raise TransportError(
                response.request.method, str(response.request.url), str(e) or type(e).__name__
            ) from e
        finally:
            await response.aclose()

        try:
            payload = response.json()
        except ValueError as e:
            raise RateLimitDecodeError("body is not JSON") from e
        return parse_rejection(payload)

    async def close(self) -> None:
        """Close the HTTP client if this gateway created it."""
        if self._owns_client and self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        if self._owns_client:
            self._client = None
