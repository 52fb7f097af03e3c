"""Exceptions raised by the ZEIT client.

Rate-limit rejections (HTTP 429) are absorbed by the request gateway and
never surface here; everything else propagates to the caller.
"""

ERROR_ORIGIN = "zeit API does not use `@` to represent the origin, use empty string instead"
ERROR_NIL_RECORD = "record is None"


class ZeitError(Exception):
    """Base class for all client errors."""

    def __init__(self, message: str = "ZEIT client error"):
        self.message = message
        super().__init__(message)


class TransportError(ZeitError):
    """The request never produced an HTTP response (connect failure, timeout).

    Not retried by the gateway. The underlying httpx exception is kept as
    ``__cause__``.
    """

    def __init__(self, method: str, url: str, detail: str):
        self.method = method
        self.url = url
        super().__init__(f"{method} {url} failed: {detail}")


class RateLimitDecodeError(ZeitError):
    """A 429 response body could not be decoded into reset bounds."""

    def __init__(self, detail: str):
        super().__init__(f"Malformed rate limit response: {detail}")


class ThrottleTimeoutError(ZeitError):
    """Waiting for rate-limit capacity would overrun the caller's deadline."""

    def __init__(self, waited: float, wait_needed: float, deadline: float):
        self.waited = waited
        self.wait_needed = wait_needed
        self.deadline = deadline
        super().__init__(
            f"Rate limit wait of {wait_needed:.2f}s exceeds deadline "
            f"(waited {waited:.2f}s, deadline={deadline:.2f}s)"
        )


class ResponseDecodeError(ZeitError):
    """A successful response carried a body that is not the expected JSON."""


class APIError(ZeitError):
    """Error reported by the ZEIT API.

    Carries the HTTP status and the ``{"error": {"code", "message"}}``
    fields when the body had them.
    """

    def __init__(self, status_code: int, code: str = "", message: str = ""):
        self.status_code = status_code
        self.code = code
        super().__init__(message or f"HTTP {status_code}")

    @classmethod
    def from_payload(cls, status_code: int, payload: dict | None, **extra):
        error = (payload or {}).get("error") or {}
        return cls(
            status_code,
            code=error.get("code", ""),
            message=error.get("message", ""),
            **extra,
        )


class ConflictError(APIError):
    """A DNS record conflicts with existing records (HTTP 409)."""

    def __init__(self, status_code: int, code: str = "", message: str = "",
                 old_id: str = "", old_ids: list[str] | None = None):
        self.old_id = old_id
        self.old_ids = old_ids or []
        super().__init__(status_code, code, message)

    @classmethod
    def from_payload(cls, status_code: int, payload: dict | None, **extra):
        error = (payload or {}).get("error") or {}
        return super().from_payload(
            status_code,
            payload,
            old_id=error.get("oldId", ""),
            old_ids=error.get("oldIds") or [],
        )


class GetError(APIError):
    """A domain lookup failed."""

    def __init__(self, status_code: int, code: str = "", message: str = "", name: str = ""):
        self.name = name
        super().__init__(status_code, code, message)

    @classmethod
    def from_payload(cls, status_code: int, payload: dict | None, **extra):
        error = (payload or {}).get("error") or {}
        return super().from_payload(status_code, payload, name=error.get("name", ""))


class VerificationError(APIError):
    """Domain verification failed; carries the expected nameservers and TXT record."""

    def __init__(self, status_code: int, code: str = "", message: str = "", name: str = "",
                 ns_verification: dict | None = None, txt_verification: dict | None = None):
        self.name = name
        self.ns_verification = ns_verification or {}
        self.txt_verification = txt_verification or {}
        super().__init__(status_code, code, message)

    @classmethod
    def from_payload(cls, status_code: int, payload: dict | None, **extra):
        error = (payload or {}).get("error") or {}
        return super().from_payload(
            status_code,
            payload,
            name=error.get("name", ""),
            ns_verification=error.get("nsVerification") or {},
            txt_verification=error.get("txtVerification") or {},
        )


class InvalidRecordError(ZeitError, ValueError):
    """A DNS record was rejected before any request was sent."""


class TimestampError(ZeitError, ValueError):
    """A millisecond epoch timestamp could not be decoded."""
