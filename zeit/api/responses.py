"""Helpers shared by the endpoint wrappers for reading gateway responses."""

import httpx

from zeit.errors import APIError, ResponseDecodeError


async def read_json(response: httpx.Response):
    """Read the full body and decode it. An empty body decodes to None."""
    await response.aread()
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError as e:
        raise ResponseDecodeError(
            f"Invalid JSON in {response.status_code} response from {response.request.url}"
        ) from e


async def read_error_payload(response: httpx.Response) -> dict | None:
    """Decode an error body, tolerating bodies that are not JSON objects."""
    try:
        payload = await read_json(response)
    except ResponseDecodeError:
        return None
    return payload if isinstance(payload, dict) else None


async def raise_for_status(response: httpx.Response, error_cls: type[APIError] = APIError) -> None:
    """Raise `error_cls` decoded from the body when the status is not 200 OK."""
    if response.status_code == httpx.codes.OK:
        return
    payload = await read_error_payload(response)
    if not isinstance((payload or {}).get("error"), dict):
        # No structured error body: fall back to the status line
        raise error_cls(response.status_code, message=f"{response.status_code} {response.reason_phrase}")
    raise error_cls.from_payload(response.status_code, payload)


def unwrap(payload, key: str) -> dict:
    """Return payload[key] when the body is wrapped as {key: {...}}, else the body itself."""
    if not isinstance(payload, dict):
        raise ResponseDecodeError(f"Expected a JSON object, got {type(payload).__name__}")
    inner = payload.get(key)
    if isinstance(inner, dict):
        return inner
    return payload


async def read_object(response: httpx.Response) -> dict:
    """Read a success body that must be a JSON object. An empty body reads as {}."""
    payload = await read_json(response)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ResponseDecodeError(f"Expected a JSON object, got {type(payload).__name__}")
    return payload


def object_list(payload: dict, key: str) -> list[dict]:
    """payload[key] as a list of JSON objects; a missing or null key is an empty list."""
    items = payload.get(key)
    if items is None:
        return []
    if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
        raise ResponseDecodeError(f"Expected {key!r} to be a list of objects")
    return items
