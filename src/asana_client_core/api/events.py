"""Events endpoint and sync-token handling.

The first request for a resource carries no sync token; the service answers
412 with a fresh token and no events. Later requests pass the last token and
get the events since then plus a new token. A token that expired also yields
412 with a fresh token, which means events were missed.

The token must be persisted after every call, whatever its outcome.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from asana_client_core.client import AsanaApiClient
from asana_client_core.errors.exceptions import PreconditionFailedError
from asana_client_core.request import RequestOptions
from asana_client_core.response import ResponseType
from asana_client_core.validation import validate_gid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EventBatch:
    """Events received since a sync token, and the token for the next call."""

    sync_token: str | None
    events: list[dict[str, Any]] = field(default_factory=list)
    has_more: bool = False


class EventsApiService:
    def __init__(self, client: AsanaApiClient):
        self.client = client

    async def get_events(
        self,
        resource_gid: str,
        sync_token: str | None = None,
        options: Mapping[str, Any] | None = None,
        response_type: ResponseType = ResponseType.NORMAL,
    ) -> Any:
        """Fetch events for a resource.

        Defaults to the NORMAL shape: the ``sync`` token sits next to
        ``data`` in the envelope, so DATA would lose it.
        """
        validate_gid(resource_gid, "Resource GID")

        query = dict(options or {})
        query["resource"] = resource_gid
        if sync_token is not None:
            query["sync"] = sync_token

        return await self.client.request("GET", "events", RequestOptions(query=query), response_type)

    async def fetch_changes(self, resource_gid: str, sync_token: str | None = None) -> EventBatch:
        """Fetch events since ``sync_token`` as an `EventBatch`.

        Without a token this starts a sync and returns an empty batch holding
        the first token.

        Raises:
            PreconditionFailedError: If ``sync_token`` expired; the fresh
                token is on the exception's ``sync_token``
        """
        try:
            body = await self.get_events(resource_gid, sync_token)
        except PreconditionFailedError as e:
            if sync_token is not None:
                logger.warning(f"Sync token for resource {resource_gid} expired, events were missed")
                raise
            return EventBatch(sync_token=e.sync_token)

        return EventBatch(
            sync_token=body.get("sync"),
            events=list(body.get("data") or []),
            has_more=bool(body.get("has_more", False)),
        )
