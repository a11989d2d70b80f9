"""Response shaping.

Every call produces a :class:`RawResponse`, which is then shaped into one of
three caller-facing forms selected by :class:`ResponseType`:

| Type | Result | Non-2xx |
|------|--------|---------|
| `FULL` | `FullResponse` (status, headers, body, raw bytes, request) | returned as-is |
| `NORMAL` | full decoded body (`data`, `sync`, `next_page`, ...) | raises |
| `DATA` | only the `data` value (`{}` when absent) | raises |
"""

import json
from dataclasses import dataclass
from enum import IntEnum
from typing import Any

import httpx

from asana_client_core.errors.exceptions import APIError
from asana_client_core.errors.handler import raise_for_status
from asana_client_core.request import CallDescriptor


class ResponseType(IntEnum):
    """Selects the shape of a call's return value."""

    FULL = 1
    NORMAL = 2
    DATA = 3


def decode_body(content: bytes) -> Any | None:
    """Decode a JSON body; an empty body decodes to ``{}``, garbage to ``None``."""
    if not content.strip():
        return {}
    try:
        return json.loads(content)
    except (ValueError, UnicodeDecodeError):
        return None


@dataclass(frozen=True)
class RawResponse:
    """Transport-level response, decoded once."""

    status_code: int
    reason_phrase: str
    headers: httpx.Headers
    content: bytes
    body: Any | None

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> "RawResponse":
        """Snapshot a fully read ``httpx.Response``."""
        return cls(
            status_code=response.status_code,
            reason_phrase=response.reason_phrase,
            headers=httpx.Headers(response.headers),
            content=response.content,
            body=decode_body(response.content),
        )

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class FullResponse:
    """The ``FULL`` shape: raw response plus the call that produced it."""

    raw: RawResponse
    request: CallDescriptor | None = None

    @property
    def status_code(self) -> int:
        return self.raw.status_code

    @property
    def reason_phrase(self) -> str:
        return self.raw.reason_phrase

    @property
    def headers(self) -> httpx.Headers:
        return self.raw.headers

    @property
    def body(self) -> Any | None:
        return self.raw.body

    @property
    def raw_body(self) -> bytes:
        return self.raw.content

    @property
    def is_success(self) -> bool:
        return self.raw.is_success


def shape_response(
    raw: RawResponse,
    response_type: ResponseType = ResponseType.DATA,
    request: CallDescriptor | None = None,
) -> Any:
    """Shape a raw response for the caller.

    Args:
        raw: Response to shape
        response_type: Requested shape
        request: Originating call, attached to FULL results and errors

    Returns:
        `FullResponse`, the decoded body, or its `data` value

    Raises:
        APIError subclass: For non-2xx responses unless FULL was requested,
            or when a 2xx body is not valid JSON
    """
    if response_type == ResponseType.FULL:
        return FullResponse(raw=raw, request=request)

    raise_for_status(raw, request)

    body = raw.body
    if body is None:
        raise APIError(
            "Invalid JSON response from Asana API.",
            status_code=raw.status_code,
            response=raw,
            request=request,
        )

    if response_type == ResponseType.NORMAL:
        return body

    if isinstance(body, dict):
        return body.get("data", {})
    return {}
