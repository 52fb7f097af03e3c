"""ZEIT API client — entry point bundling the gateway and endpoint groups."""

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import httpx

from zeit.api.dns import DNSAPI
from zeit.api.domains import DomainsAPI
from zeit.api.models import Domain, DomainPrice, Record
from zeit.config.settings import DEFAULT_BASE_URL, Settings, get_settings
from zeit.ratelimit.registry import RateLimitRegistry, shared_registry
from zeit.ratelimit.state import RateLimitState
from zeit.transport.gateway import RequestGateway


@dataclass
class ClientConfig:
    token: str
    base_url: str = DEFAULT_BASE_URL
    team: str | None = None  # the only field that changes after construction


class ZeitClient:
    """Async client for the ZEIT domains and DNS API.

    Rate limit state is private to the client unless a registry is passed,
    in which case every client built with the same token and registry waits
    on the same state.

    Usage:
        async with ZeitClient(token) as client:
            domains = await client.list_all_domains()
    """

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        team: str | None = None,
        registry: RateLimitRegistry | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: httpx.Timeout | None = None,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._config = ClientConfig(token=token, base_url=base_url, team=team or None)
        state = registry.get(token, now=clock()) if registry is not None else RateLimitState(reset_at=clock())
        self._gateway = RequestGateway(
            token,
            base_url=base_url,
            team=self._config.team,
            state=state,
            http_client=http_client,
            timeout=timeout,
            clock=clock,
            sleep=sleep,
        )
        self.domains = DomainsAPI(self._gateway)
        self.dns = DNSAPI(self._gateway)

    @classmethod
    def from_settings(cls, settings: Settings | None = None, **kwargs) -> "ZeitClient":
        """Build a client from ZEIT_* environment settings."""
        settings = settings or get_settings()
        if settings.share_rate_limits:
            kwargs.setdefault("registry", shared_registry())
        kwargs.setdefault("timeout", httpx.Timeout(settings.request_timeout, connect=settings.connect_timeout))
        return cls(
            settings.api_token,
            base_url=settings.api_base_url,
            team=settings.team,
            **kwargs,
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def gateway(self) -> RequestGateway:
        return self._gateway

    @property
    def rate_limit(self) -> RateLimitState:
        return self._gateway.state

    @property
    def team(self) -> str | None:
        return self._config.team

    @team.setter
    def team(self, team: str | None) -> None:
        self.set_team(team)

    def set_team(self, team: str | None) -> None:
        """Scope every following request to a team. None or "" clears it."""
        self._config.team = team or None
        self._gateway.team = self._config.team

    async def close(self) -> None:
        await self._gateway.close()

    async def __aenter__(self) -> "ZeitClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # --- Domains ---

    async def list_all_domains(self) -> list[Domain]:
        return await self.domains.list_all_domains()

    async def add_domain(self, name: str) -> Domain:
        return await self.domains.add_domain(name)

    async def transfer_in_domain(self, name: str, auth_code: str, expected_price: int) -> Domain:
        return await self.domains.transfer_in_domain(name, auth_code, expected_price)

    async def verify_domain(self, name: str) -> Domain:
        return await self.domains.verify_domain(name)

    async def get_domain(self, name: str) -> Domain:
        return await self.domains.get_domain(name)

    async def remove_domain(self, name: str) -> str:
        return await self.domains.remove_domain(name)

    async def check_domain_availability(self, name: str) -> bool:
        return await self.domains.check_domain_availability(name)

    async def check_domain_price(self, name: str) -> DomainPrice:
        return await self.domains.check_domain_price(name)

    async def buy_domain(self, name: str, expected_price: int) -> None:
        await self.domains.buy_domain(name, expected_price)

    # --- DNS ---

    async def list_dns_records(self, domain: str) -> list[Record]:
        return await self.dns.list_dns_records(domain)

    async def create_dns_record(self, domain: str, record: Record | None) -> str:
        return await self.dns.create_dns_record(domain, record)

    async def remove_dns_record(self, domain: str, record_id: str) -> None:
        await self.dns.remove_dns_record(domain, record_id)
