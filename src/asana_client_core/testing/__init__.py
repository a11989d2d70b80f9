"""Testing utilities for code built on asana-client-core.

Response factories and a recording handler for ``httpx.MockTransport``, so
clients can be exercised without the network.

Example:
    ```python
    from asana_client_core.testing import RecordingHandler, create_envelope, create_test_client


    async def test_get_task():
        handler = RecordingHandler(httpx.Response(200, json=create_envelope({"gid": "1"})))
        async with create_test_client(handler) as client:
            assert await client.fetch_data("GET", "tasks/1") == {"gid": "1"}
        assert handler.requests[0].url.path == "/api/1.0/tasks/1"
    ```
"""

from collections.abc import Callable
from typing import Any

import httpx

from asana_client_core.client import AsanaApiClient

ReplayItem = httpx.Response | Exception | Callable[[httpx.Request], httpx.Response]


def create_envelope(
    data: Any = None,
    *,
    sync: str | None = None,
    next_offset: str | None = None,
    **extra: Any,
) -> dict[str, Any]:
    """Build a success envelope: ``{"data": ..., "sync"?: ..., "next_page"?: ...}``."""
    body: dict[str, Any] = {"data": {} if data is None else data}
    if sync is not None:
        body["sync"] = sync
    if next_offset is not None:
        body["next_page"] = {"offset": next_offset, "path": f"?offset={next_offset}", "uri": None}
    body.update(extra)
    return body


def create_error_body(message: str, help: str | None = None) -> dict[str, Any]:
    error: dict[str, Any] = {"message": message}
    if help is not None:
        error["help"] = help
    return {"errors": [error]}


def create_error_response(
    status_code: int,
    message: str = "Something went wrong",
    *,
    help: str | None = None,
    headers: dict[str, str] | None = None,
    **extra_body: Any,
) -> httpx.Response:
    """Build an error response carrying the ``{"errors": [...]}`` envelope."""
    body = create_error_body(message, help)
    body.update(extra_body)
    return httpx.Response(status_code, json=body, headers=headers)


class RecordingHandler:
    """Mock transport handler replaying canned responses and recording requests.

    Each request is recorded as it was sent and consumes the next item; the
    last item repeats once the queue is down to it. An item is a response, an
    exception to raise, or a callable taking the request.
    """

    def __init__(self, *responses: ReplayItem):
        if not responses:
            raise ValueError("At least one response is required")
        self._responses = list(responses)
        self.requests: list[httpx.Request] = []

    @property
    def call_count(self) -> int:
        return len(self.requests)

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        # Snapshot, since auth flows mutate and re-send the same request object
        self.requests.append(
            httpx.Request(request.method, request.url, headers=request.headers.copy(), content=request.content)
        )
        item = self._responses.pop(0) if len(self._responses) > 1 else self._responses[0]

        if isinstance(item, Exception):
            raise item
        if isinstance(item, httpx.Response):
            # Fresh copy, since a response object is consumed by the client
            return httpx.Response(item.status_code, headers=item.headers, content=item.content)
        return item(request)


def create_test_client(handler: Callable, **kwargs: Any) -> AsanaApiClient:
    """Client wired to ``httpx.MockTransport(handler)`` with no retry delay."""
    kwargs.setdefault("access_token", "test-token")
    kwargs.setdefault("retry_backoff", 0.0)
    return AsanaApiClient(transport=httpx.MockTransport(handler), **kwargs)


__all__ = [
    "RecordingHandler",
    "create_envelope",
    "create_error_body",
    "create_error_response",
    "create_test_client",
]
