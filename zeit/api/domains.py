"""Domain endpoints (v4/domains)."""

from zeit.api.models import Domain, DomainPrice
from zeit.api.responses import object_list, raise_for_status, read_json, read_object, unwrap
from zeit.errors import APIError, GetError, ResponseDecodeError, VerificationError
from zeit.transport.gateway import RequestGateway

DOMAINS_PATH = "v4/domains"


class DomainsAPI:
    """Register, verify, buy and remove domains."""

    def __init__(self, gateway: RequestGateway):
        self._gateway = gateway

    async def list_all_domains(self) -> list[Domain]:
        async with self._gateway.request("GET", DOMAINS_PATH) as response:
            await raise_for_status(response)
            payload = await read_object(response)
        return [Domain.from_dict(d) for d in object_list(payload, "domains")]

    async def add_domain(self, name: str) -> Domain:
        """Add a domain to the account, either external or bought through ZEIT."""
        async with self._gateway.request("POST", DOMAINS_PATH, body={"name": name}) as response:
            await raise_for_status(response)
            payload = await read_json(response)
        return Domain.from_dict(unwrap(payload, "domain"))

    async def transfer_in_domain(self, name: str, auth_code: str, expected_price: int) -> Domain:
        """Start a transfer of a domain from an external registrar."""
        body = {
            "method": "transfer-in",
            "name": name,
            "authCode": auth_code,
            "expectedPrice": expected_price,
        }
        async with self._gateway.request("POST", DOMAINS_PATH, body=body) as response:
            await raise_for_status(response)
            payload = await read_json(response)
        return Domain.from_dict(unwrap(payload, "domain"))

    async def verify_domain(self, name: str) -> Domain:
        """Check the domain's nameservers or TXT verification record.

        Raises:
            VerificationError: Neither check passed. The error carries the
                expected nameservers and TXT record.
        """
        async with self._gateway.request("POST", f"{DOMAINS_PATH}/{name}/verify") as response:
            await raise_for_status(response, VerificationError)
            payload = await read_json(response)
        return Domain.from_dict(unwrap(payload, "domain"))

    async def get_domain(self, name: str) -> Domain:
        async with self._gateway.request("GET", f"{DOMAINS_PATH}/{name}") as response:
            await raise_for_status(response, GetError)
            payload = await read_json(response)
        return Domain.from_dict(unwrap(payload, "domain"))

    async def remove_domain(self, name: str) -> str:
        """Remove a domain. Returns the uid of the removed domain."""
        async with self._gateway.request("DELETE", f"{DOMAINS_PATH}/{name}") as response:
            await raise_for_status(response)
            payload = await read_object(response)
        return payload.get("uid", "")

    async def check_domain_availability(self, name: str) -> bool:
        async with self._gateway.request(
            "GET", f"{DOMAINS_PATH}/status", params={"name": name}
        ) as response:
            await raise_for_status(response)
            payload = await read_object(response)
        return bool(payload.get("available", False))

    async def check_domain_price(self, name: str) -> DomainPrice:
        """Price and registration period (years) for buying a domain."""
        async with self._gateway.request(
            "GET", f"{DOMAINS_PATH}/price", params={"name": name}
        ) as response:
            await raise_for_status(response)
            payload = await read_object(response)
        try:
            return DomainPrice(price=int(payload["price"]), period=int(payload["period"]))
        except (KeyError, TypeError, ValueError) as e:
            raise ResponseDecodeError(f"Invalid price response: {payload!r}") from e

    async def buy_domain(self, name: str, expected_price: int) -> None:
        """Buy a domain. Fails if the current price differs from expected_price."""
        body = {"name": name, "expectedPrice": expected_price}
        async with self._gateway.request("POST", f"{DOMAINS_PATH}/buy", body=body) as response:
            await raise_for_status(response, APIError)
