"""ZEIT encodes timestamps as integer milliseconds since the Unix epoch."""

from datetime import datetime, timedelta, timezone

from zeit.errors import TimestampError

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def parse_ms_timestamp(value) -> datetime:
    """Convert a millisecond epoch (int or numeric string) to an aware UTC datetime."""
    if isinstance(value, bool):
        raise TimestampError(f"couldn't parse time: {value!r}")
    try:
        millis = int(value)
    except (TypeError, ValueError):
        raise TimestampError(f"couldn't parse time: {value!r}")
    if millis < 0:
        raise TimestampError(f"couldn't parse time: {value!r}")
    try:
        return _EPOCH + timedelta(milliseconds=millis)
    except OverflowError:
        raise TimestampError(f"timestamp out of range: {value!r}")


def optional_ms_timestamp(value) -> datetime | None:
    """Like parse_ms_timestamp, but None (JSON null or absent) stays None."""
    if value is None:
        return None
    return parse_ms_timestamp(value)
