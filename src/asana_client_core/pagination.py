"""Offset pagination over listing calls.

Listing endpoints return ``next_page: {"offset": ...}`` while more results
exist. `Paginator` reissues the same call with that offset merged into the
query until the service stops returning one. Page size is whatever the
service (or the caller's ``limit``) decides.

Example:
    ```python
    pages = client.paginate("GET", "tasks", RequestOptions(query={"project": gid, "limit": 50}))

    async for page in pages:
        for task in page["data"]:
            ...

    # or, flattened
    async for task in client.paginate("GET", "tasks", options).items():
        ...
    ```
"""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any

from asana_client_core.errors.exceptions import LocalValidationError
from asana_client_core.request import CallDescriptor
from asana_client_core.response import FullResponse, ResponseType

logger = logging.getLogger(__name__)

SendFunc = Callable[[CallDescriptor, ResponseType], Awaitable[Any]]


def _envelope(page: Any) -> Any:
    return page.body if isinstance(page, FullResponse) else page


def next_page_offset(page: Any) -> str | None:
    """Return the continuation token of a NORMAL or FULL page, if any."""
    body = _envelope(page)
    if not isinstance(body, dict):
        return None
    next_page = body.get("next_page")
    if not isinstance(next_page, dict):
        return None
    return next_page.get("offset") or None


def page_items(page: Any) -> list[Any]:
    body = _envelope(page)
    data = body.get("data", []) if isinstance(body, dict) else []
    return data if isinstance(data, list) else [data]


class Paginator:
    """Lazy, forward-only sequence of pages.

    Args:
        send: Coroutine function dispatching a call with a response type
        call: The listing call; its own ``offset`` (if any) is the first page
        response_type: NORMAL or FULL, since DATA drops ``next_page``
    """

    def __init__(self, send: SendFunc, call: CallDescriptor, response_type: ResponseType = ResponseType.NORMAL):
        if response_type == ResponseType.DATA:
            raise LocalValidationError("Pagination requires the NORMAL or FULL response type")

        self._send = send
        self._call = call
        self._response_type = response_type
        self._next_offset = call.query_value("offset")
        self._exhausted = False

    @classmethod
    def continue_from(
        cls,
        send: SendFunc,
        call: CallDescriptor,
        page: Any,
        response_type: ResponseType = ResponseType.NORMAL,
    ) -> "Paginator":
        """Continue after an already fetched first ``page`` of ``call``."""
        paginator = cls(send, call, response_type)
        paginator._advance(page)
        return paginator

    @property
    def has_next(self) -> bool:
        return not self._exhausted

    def _advance(self, page: Any) -> None:
        self._next_offset = next_page_offset(page)
        if self._next_offset is None:
            self._exhausted = True

    async def fetch_page(self, offset: str | None) -> Any:
        """Fetch the page for ``offset`` without moving the paginator."""
        call = self._call if offset is None else self._call.with_query(offset=offset)
        return await self._send(call, self._response_type)

    async def next(self) -> Any | None:
        """Fetch the next page, or return None once the last page was read."""
        if self._exhausted:
            return None

        page = await self.fetch_page(self._next_offset)
        self._advance(page)
        logger.debug(f"Fetched page of {self._call.path}, more pages: {not self._exhausted}")
        return page

    def __aiter__(self) -> "Paginator":
        return self

    async def __anext__(self) -> Any:
        page = await self.next()
        if page is None:
            raise StopAsyncIteration
        return page

    async def items(self) -> AsyncIterator[Any]:
        """Iterate over the ``data`` elements of every remaining page."""
        async for page in self:
            for item in page_items(page):
                yield item
