"""Data shapes returned by the domains and DNS endpoints."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from zeit.api.timestamps import optional_ms_timestamp


class RecordType(str, Enum):
    A = "A"
    AAAA = "AAAA"
    ALIAS = "ALIAS"
    CAA = "CAA"
    CNAME = "CNAME"
    MX = "MX"
    SRV = "SRV"
    TXT = "TXT"


@dataclass
class User:
    id: str = ""
    username: str = ""
    email: str = ""
    customer_id: str = ""

    @classmethod
    def from_dict(cls, data: dict | None) -> "User":
        data = data or {}
        return cls(
            id=data.get("id", ""),
            username=data.get("username", ""),
            email=data.get("email", ""),
            customer_id=data.get("customerId", ""),
        )


@dataclass
class Alias:
    id: str = ""
    alias: str = ""
    created: datetime | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "Alias":
        return cls(
            id=data.get("id", ""),
            alias=data.get("alias", ""),
            created=optional_ms_timestamp(data.get("created")),
        )


@dataclass
class Cert:
    id: str = ""
    cns: list[str] = field(default_factory=list)
    created: datetime | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "Cert":
        return cls(
            id=data.get("id", ""),
            cns=data.get("cns") or [],
            created=optional_ms_timestamp(data.get("created")),
        )


@dataclass
class Domain:
    id: str = ""
    name: str = ""
    service_type: str = ""
    ns_verified_at: datetime | None = None
    txt_verified_at: datetime | None = None
    cdn_enabled: bool = False
    created_at: datetime | None = None
    expires_at: datetime | None = None
    bought_at: datetime | None = None
    verified_record: str = ""
    verified: bool = False
    nameservers: list[str] = field(default_factory=list)
    intended_nameservers: list[str] = field(default_factory=list)
    creator: User = field(default_factory=User)
    suffix: bool = False
    aliases: list[Alias] = field(default_factory=list)
    certs: list[Cert] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "Domain":
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            service_type=data.get("serviceType", ""),
            ns_verified_at=optional_ms_timestamp(data.get("nsVerifiedAt")),
            txt_verified_at=optional_ms_timestamp(data.get("txtVerifiedAt")),
            cdn_enabled=bool(data.get("cdnEnabled", False)),
            created_at=optional_ms_timestamp(data.get("createdAt")),
            expires_at=optional_ms_timestamp(data.get("expiresAt")),
            bought_at=optional_ms_timestamp(data.get("boughtAt")),
            verified_record=data.get("verifiedRecord", ""),
            verified=bool(data.get("verified", False)),
            nameservers=data.get("nameservers") or [],
            intended_nameservers=data.get("intendedNameservers") or [],
            creator=User.from_dict(data.get("creator")),
            suffix=bool(data.get("suffix", False)),
            aliases=[Alias.from_dict(a) for a in data.get("aliases") or []],
            certs=[Cert.from_dict(c) for c in data.get("certs") or []],
        )


@dataclass
class DomainPrice:
    price: int
    period: int  # years


@dataclass
class Record:
    type: str = ""
    name: str = ""
    value: str = ""
    id: str = ""
    slug: str = ""
    creator: str = ""
    created: datetime | None = None
    updated: datetime | None = None
    mx_priority: str = ""
    srv_priority: str = ""

    def get_value(self) -> str:
        """Record value as the API expects it; MX and SRV carry their priority first."""
        if self.type == RecordType.SRV:
            return f"{self.srv_priority} {self.value}"
        if self.type == RecordType.MX:
            return f"{self.mx_priority} {self.value}"
        return self.value

    @classmethod
    def from_dict(cls, data: dict) -> "Record":
        # Priorities arrive as numbers from the API; keep them as strings
        mx_priority = data.get("mxPriority")
        srv_priority = data.get("priority")
        return cls(
            type=data.get("type", ""),
            name=data.get("name", ""),
            value=data.get("value", ""),
            id=data.get("id", ""),
            slug=data.get("slug", ""),
            creator=data.get("creator", ""),
            created=optional_ms_timestamp(data.get("created")),
            updated=optional_ms_timestamp(data.get("updated")),
            mx_priority="" if mx_priority is None else str(mx_priority),
            srv_priority="" if srv_priority is None else str(srv_priority),
        )
