"""Decoding of rate limit feedback from ZEIT responses.

Two channels:
- X-RateLimit-Remaining / X-RateLimit-Limit / X-RateLimit-Reset headers on
  every response. Decoding is lenient: a missing or malformed value simply
  yields None and the prior state is kept.
- The JSON body of a 429 response. Decoding is strict: without a known
  reset instant the gateway cannot safely retry, so a bad payload raises.
"""

from collections.abc import Mapping
from dataclasses import dataclass

import httpx

from zeit.errors import RateLimitDecodeError

HEADER_REMAINING = "X-RateLimit-Remaining"
HEADER_LIMIT = "X-RateLimit-Limit"
HEADER_RESET = "X-RateLimit-Reset"


@dataclass(frozen=True)
class RateLimitHeaders:
    remaining: int | None = None
    limit: int | None = None
    reset_at: float | None = None  # epoch seconds


@dataclass(frozen=True)
class RateLimitRejection:
    code: str
    message: str
    limit: int
    remaining: int
    reset_at: float  # epoch seconds


def _parse_non_negative_int(raw: str | None) -> int | None:
    # ASCII decimal digits only; int() also accepts "1_0", "+3" and non-ASCII digits
    if raw is None:
        return None
    raw = raw.strip()
    if not (raw.isascii() and raw.isdigit()):
        return None
    return int(raw)


def parse_rate_limit_headers(headers: Mapping[str, str]) -> RateLimitHeaders:
    """Read the X-RateLimit-* headers. Lookup is case-insensitive."""
    headers = httpx.Headers(headers)
    reset = _parse_non_negative_int(headers.get(HEADER_RESET))
    return RateLimitHeaders(
        remaining=_parse_non_negative_int(headers.get(HEADER_REMAINING)),
        limit=_parse_non_negative_int(headers.get(HEADER_LIMIT)),
        reset_at=float(reset) if reset is not None else None,
    )


def _lookup(obj: dict, key: str):
    """Case-insensitive key lookup ("total" matches "Total")."""
    if key in obj:
        return obj[key]
    lowered = key.lower()
    for k, v in obj.items():
        if isinstance(k, str) and k.lower() == lowered:
            return v
    raise KeyError(key)


def _require_int(obj: dict, key: str) -> int:
    try:
        value = _lookup(obj, key)
    except KeyError:
        raise RateLimitDecodeError(f"missing limit.{key}")
    # bool is an int subclass but never a valid count
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise RateLimitDecodeError(f"limit.{key} is not a number: {value!r}")
    return int(value)


def parse_rejection(payload) -> RateLimitRejection:
    """Decode a 429 body of the form
    {"error": {"code", "message", "limit": {"total", "remaining", "reset"}}}.
    """
    if not isinstance(payload, dict):
        raise RateLimitDecodeError("body is not a JSON object")
    error = payload.get("error")
    if not isinstance(error, dict):
        raise RateLimitDecodeError("missing error object")
    try:
        limit = _lookup(error, "limit")
    except KeyError:
        raise RateLimitDecodeError("missing error.limit object")
    if not isinstance(limit, dict):
        raise RateLimitDecodeError("error.limit is not an object")

    total = _require_int(limit, "total")
    remaining = _require_int(limit, "remaining")
    reset = _require_int(limit, "reset")
    if reset < 0:
        raise RateLimitDecodeError(f"negative reset timestamp: {reset}")

    return RateLimitRejection(
        code=str(error.get("code", "")),
        message=str(error.get("message", "")),
        limit=total,
        remaining=max(0, remaining),
        reset_at=float(reset),
    )
