"""DNS record endpoints (v2/domains/<domain>/records)."""

from zeit.api.models import Record, RecordType
from zeit.api.responses import object_list, raise_for_status, read_error_payload, read_object
from zeit.errors import (
    ERROR_NIL_RECORD,
    ERROR_ORIGIN,
    APIError,
    ConflictError,
    InvalidRecordError,
)
from zeit.logging.structured import get_logger
from zeit.transport.gateway import RequestGateway

logger = get_logger("dns")


def _records_path(domain: str) -> str:
    return f"v2/domains/{domain}/records"


class DNSAPI:
    """List, create and remove DNS records of a domain."""

    def __init__(self, gateway: RequestGateway):
        self._gateway = gateway

    async def list_dns_records(self, domain: str) -> list[Record]:
        async with self._gateway.request("GET", _records_path(domain)) as response:
            await raise_for_status(response)
            payload = await read_object(response)
        return [Record.from_dict(r) for r in object_list(payload, "records")]

    async def create_dns_record(self, domain: str, record: Record | None) -> str:
        """Create a record and return its uid.

        The zone origin is the empty name, not "@". Trailing dots on the
        value are stripped.

        Raises:
            InvalidRecordError: record is None or named "@" (nothing is sent).
            ConflictError: The record clashes with existing ones (409).
            APIError: Any other failure, including invalid values (400).
        """
        if record is None:
            raise InvalidRecordError(ERROR_NIL_RECORD)
        if record.name == "@":
            raise InvalidRecordError(ERROR_ORIGIN)

        record_type = record.type.value if isinstance(record.type, RecordType) else record.type
        body = {
            "name": record.name,
            "type": record_type,
            "value": record.get_value().removesuffix("."),
        }

        async with self._gateway.request("POST", _records_path(domain), body=body) as response:
            if response.status_code == 409:
                payload = await read_error_payload(response)
                logger.info(
                    "DNS record conflict",
                    extra={"event_data": {
                        "domain": domain,
                        "record_name": record.name,
                        "record_type": record_type,
                        "record_value": record.get_value(),
                    }},
                )
                raise ConflictError.from_payload(response.status_code, payload)
            await raise_for_status(response, APIError)
            payload = await read_object(response)
        return payload.get("uid", "")

    async def remove_dns_record(self, domain: str, record_id: str) -> None:
        async with self._gateway.request("DELETE", f"{_records_path(domain)}/{record_id}") as response:
            await raise_for_status(response)
