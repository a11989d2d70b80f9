"""Asana API client: the execution core every resource call goes through.

A call is built into a `CallDescriptor`, sent through an ``httpx.AsyncClient``
whose auth flow attaches (and on 401 refreshes) the bearer token and whose
transport retries rate-limited or transiently failed requests once, then
shaped into the requested `ResponseType`.

Example:
    ```python
    from asana_client_core import AsanaApiClient, RequestOptions, ResponseType

    async with AsanaApiClient.from_env() as client:
        me = await client.fetch_data("GET", "users/me")

        task = await client.request(
            "GET", "tasks/1200000000000001", RequestOptions(query={"opt_fields": ["name", "completed"]})
        )

        async for task in client.paginate("GET", "tasks", RequestOptions(query={"project": gid})).items():
            ...
    ```
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

import httpx

from asana_client_core.auth.bearer import BearerTokenAuth
from asana_client_core.auth.credentials import CredentialResolver
from asana_client_core.auth.exceptions import CredentialNotFoundError
from asana_client_core.auth.provider import StaticTokenProvider, TokenProvider
from asana_client_core.batch import BatchAction, BatchResult, build_batch_call, unpack_batch_results, validate_actions
from asana_client_core.config import DEFAULT_BASE_URL, DEFAULT_RETRY_BACKOFF, DEFAULT_TIMEOUT, ClientSettings
from asana_client_core.errors.exceptions import APIError, ClientError, PreconditionFailedError
from asana_client_core.errors.handler import translate_transport_error
from asana_client_core.pagination import Paginator
from asana_client_core.request import CallDescriptor, RequestOptions, build_call, open_request
from asana_client_core.response import FullResponse, RawResponse, ResponseType, shape_response
from asana_client_core.transport import create_transport_stack

logger = logging.getLogger(__name__)


class AsanaApiClient:
    """Authenticated, retrying client for the Asana REST API.

    Args:
        access_token: Personal access token or OAuth2 access token
        token_provider: Token source, instead of ``access_token`` (e.g. a
            refreshable `OAuth2TokenProvider`)
        base_url: API root
        timeout: Request timeout in seconds
        retry_backoff: Delay before the retry when no Retry-After is given
        transport: Innermost transport (tests inject ``httpx.MockTransport``)
    """

    def __init__(
        self,
        access_token: str | None = None,
        *,
        token_provider: TokenProvider | None = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        retry_backoff: float = DEFAULT_RETRY_BACKOFF,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if token_provider is None:
            if not access_token:
                raise CredentialNotFoundError("An access token or token provider is required")
            token_provider = StaticTokenProvider(access_token)

        self.token_provider = token_provider
        self._http = httpx.AsyncClient(
            base_url=base_url,
            auth=BearerTokenAuth(token_provider),
            transport=create_transport_stack(wrapped_transport=transport, backoff=retry_backoff),
            headers={"Accept": "application/json"},
            timeout=timeout,
        )

    @classmethod
    def from_settings(
        cls, settings: ClientSettings, *, transport: httpx.AsyncBaseTransport | None = None
    ) -> "AsanaApiClient":
        return cls(
            token_provider=settings.token_provider(),
            base_url=settings.base_url,
            timeout=settings.timeout,
            retry_backoff=settings.retry_backoff,
            transport=transport,
        )

    @classmethod
    def from_env(
        cls,
        resolver: CredentialResolver | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        **overrides: Any,
    ) -> "AsanaApiClient":
        """Create a client from ``ASANA_*`` environment variables and .env files."""
        return cls.from_settings(ClientSettings.from_env(resolver, **overrides), transport=transport)

    async def __aenter__(self) -> "AsanaApiClient":
        await self._http.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self._http.__aexit__(exc_type, exc_val, exc_tb)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def request(
        self,
        method: str,
        path: str,
        options: RequestOptions | None = None,
        response_type: ResponseType = ResponseType.DATA,
    ) -> Any:
        """Build, send and shape one call.

        Args:
            method: HTTP verb
            path: Path relative to the base URL, identifiers already validated
            options: Query, JSON or multipart options
            response_type: Shape of the return value

        Returns:
            `FullResponse`, the decoded body, or its ``data`` value

        Raises:
            APIError subclass: For remote failures (see `raise_for_status`)
        """
        return await self.send(build_call(method, path, options), response_type)

    async def fetch_full(self, method: str, path: str, options: RequestOptions | None = None) -> FullResponse:
        return await self.request(method, path, options, ResponseType.FULL)

    async def fetch_normal(self, method: str, path: str, options: RequestOptions | None = None) -> Any:
        return await self.request(method, path, options, ResponseType.NORMAL)

    async def fetch_data(self, method: str, path: str, options: RequestOptions | None = None) -> Any:
        return await self.request(method, path, options, ResponseType.DATA)

    async def send(self, call: CallDescriptor, response_type: ResponseType = ResponseType.DATA) -> Any:
        """Send an already built call and shape the response."""
        raw = await self._execute(call)
        try:
            return shape_response(raw, response_type, call)
        except PreconditionFailedError as e:
            # 412 carries the sync token callers use to (re)start an events sync
            logger.debug(f"API request needs a new sync token: {e}")
            raise
        except ClientError as e:
            logger.warning(f"API request failed: {e}")
            raise
        except APIError as e:
            logger.error(f"API request failed: {e}")
            raise

    def paginate(
        self,
        method: str,
        path: str,
        options: RequestOptions | None = None,
        response_type: ResponseType = ResponseType.NORMAL,
    ) -> Paginator:
        """Page through a listing call lazily; nothing is sent until iterated."""
        return Paginator(self.send, build_call(method, path, options), response_type)

    async def batch(
        self,
        actions: Sequence[BatchAction | Mapping[str, Any]],
        query: Mapping[str, Any] | None = None,
    ) -> list[BatchResult]:
        """Run several actions in a single batch call.

        Returns:
            One `BatchResult` per action, in action order

        Raises:
            LocalValidationError: If the action list is malformed (nothing is sent)
            APIError subclass: If the batch call itself fails
        """
        validated = validate_actions(actions)
        call = build_batch_call(validated, query)
        data = await self.send(call, ResponseType.DATA)
        return unpack_batch_results(data, len(validated), call)

    async def _execute(self, call: CallDescriptor) -> RawResponse:
        """Perform the network call for ``call``.

        Raises:
            TransientNetworkError: On timeouts or connection failures that
                persisted through the retry
            AuthenticationError: If the access token could not be refreshed
            OSError: If a multipart file cannot be opened
        """
        logger.debug(f"Making API request {call.method} {call.path}")

        try:
            with open_request(self._http, call) as request:
                response = await self._http.send(request)
        except httpx.TransportError as e:
            error = translate_transport_error(e, call)
            logger.error(f"API request failed: {error}")
            raise error from e

        logger.debug(f"API request {call.method} {call.path} returned {response.status_code}")
        return RawResponse.from_httpx(response)
