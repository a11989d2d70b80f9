"""httpx authentication flow for bearer tokens."""

import logging
from collections.abc import AsyncGenerator

import httpx

from asana_client_core.auth.provider import TokenProvider

logger = logging.getLogger(__name__)


class BearerTokenAuth(httpx.Auth):
    """Attach the provider's token and recover once from a 401.

    When the service answers 401 and the provider can refresh, the token is
    refreshed and the request is sent exactly once more. A second 401 is
    returned to the client, which surfaces it as `AuthenticationError`.
    """

    def __init__(self, provider: TokenProvider):
        self._provider = provider

    def sync_auth_flow(self, request: httpx.Request):
        raise RuntimeError("BearerTokenAuth requires httpx.AsyncClient")

    async def async_auth_flow(self, request: httpx.Request) -> AsyncGenerator[httpx.Request, httpx.Response]:
        token = await self._provider.get_token()
        request.headers["Authorization"] = f"Bearer {token}"

        response = yield request

        if response.status_code != 401 or not self._provider.can_refresh:
            return

        logger.warning(f"Request {request.method} {request.url} got 401, refreshing access token")
        token = await self._provider.refresh(stale_token=token)
        request.headers["Authorization"] = f"Bearer {token}"

        yield request
