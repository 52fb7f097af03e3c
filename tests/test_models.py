"""Tests for zeit/api/models.py and zeit/api/timestamps.py."""

from datetime import datetime, timezone

import pytest

from zeit.api.models import Domain, Record, RecordType
from zeit.api.timestamps import optional_ms_timestamp, parse_ms_timestamp
from zeit.errors import TimestampError


class TestParseMsTimestamp:

    @pytest.mark.parametrize("seconds", [0, 10, 127, 32767, 3000000, 123456789, 1000000000, 2**31 - 1, 2**31])
    def test_round_trips_whole_seconds(self, seconds):
        parsed = parse_ms_timestamp(seconds * 1000)
        assert int(parsed.timestamp()) == seconds
        assert parsed.tzinfo is timezone.utc

    def test_keeps_milliseconds(self):
        assert parse_ms_timestamp(1500).microsecond == 500_000

    def test_numeric_string(self):
        assert parse_ms_timestamp("1000") == datetime(1970, 1, 1, 0, 0, 1, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", [-1000, 10_000_000_000_000_000 * 1000, 2**63 - 1, "abc", None, True, 1.5e300])
    def test_invalid(self, value):
        with pytest.raises(TimestampError):
            parse_ms_timestamp(value)

    def test_optional_none(self):
        assert optional_ms_timestamp(None) is None


class TestRecordGetValue:

    def test_plain_value(self):
        assert Record(type=RecordType.A, name="foo", value="1.1.1.1").get_value() == "1.1.1.1"

    def test_mx_prefixes_priority(self):
        record = Record(type=RecordType.MX, value="aspmx.l.google.com", mx_priority="10")
        assert record.get_value() == "10 aspmx.l.google.com"

    def test_srv_prefixes_priority(self):
        record = Record(type="SRV", value="20 5000 sip.example.com.", srv_priority="10")
        assert record.get_value() == "10 20 5000 sip.example.com."

    def test_from_dict(self):
        record = Record.from_dict({
            "id": "rec_1",
            "slug": "foo-a",
            "type": "MX",
            "name": "",
            "value": "mail.example.com",
            "creator": "user_1",
            "created": 1000,
            "updated": None,
            "mxPriority": 10,
        })
        assert record.id == "rec_1"
        assert record.mx_priority == "10"
        assert record.srv_priority == ""
        assert record.created == datetime(1970, 1, 1, 0, 0, 1, tzinfo=timezone.utc)
        assert record.updated is None
        assert record.get_value() == "10 mail.example.com"


class TestDomainFromDict:

    def test_full_payload(self):
        domain = Domain.from_dict({
            "id": "dom_1",
            "name": "example.com",
            "serviceType": "zeit.world",
            "nsVerifiedAt": None,
            "txtVerifiedAt": 2000,
            "cdnEnabled": True,
            "createdAt": 1000,
            "verified": True,
            "nameservers": ["ns1.zeit.world"],
            "intendedNameservers": ["a.zeit-world.net"],
            "creator": {"id": "u1", "username": "kochie", "email": "k@example.com", "customerId": "c1"},
            "aliases": [{"id": "a1", "alias": "www.example.com", "created": 3000}],
            "certs": [{"id": "c1", "cns": ["example.com"], "created": 4000}],
        })
        assert domain.name == "example.com"
        assert domain.service_type == "zeit.world"
        assert domain.ns_verified_at is None
        assert domain.txt_verified_at.second == 2
        assert domain.cdn_enabled is True
        assert domain.creator.customer_id == "c1"
        assert domain.aliases[0].alias == "www.example.com"
        assert domain.certs[0].cns == ["example.com"]

    def test_empty_payload_uses_defaults(self):
        domain = Domain.from_dict({})
        assert domain.id == ""
        assert domain.nameservers == []
        assert domain.creator.username == ""
