"""Access token providers.

A provider hands out the current bearer token and, for OAuth2, refreshes it
with the refresh token and client credentials. The credential is the only
state shared between concurrent calls, so refreshes are serialized: at most
one refresh request is in flight, and every caller that waited on it gets the
same outcome: the new token, or the refresh error.

Example:
    ```python
    from asana_client_core.auth.provider import Credential, OAuth2TokenProvider

    provider = OAuth2TokenProvider(
        Credential(access_token="...", refresh_token="...", expires_at=expiry),
        client_id="1200000000000000",
        client_secret="...",
    )
    token = await provider.get_token()
    ```
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import httpx

from asana_client_core.auth.exceptions import TokenRefreshError

logger = logging.getLogger(__name__)


@dataclass
class Credential:
    """OAuth2 credential state."""

    access_token: str
    expires_at: datetime | None = None
    refresh_token: str | None = None

    def is_expired(self, leeway: float = 0.0) -> bool:
        """True once ``expires_at`` is within ``leeway`` seconds (never if unknown)."""
        if self.expires_at is None:
            return False
        return datetime.now(UTC) + timedelta(seconds=leeway) >= self.expires_at


class TokenProvider(ABC):
    """Base class for bearer token sources."""

    @property
    def can_refresh(self) -> bool:
        return False

    @abstractmethod
    async def get_token(self) -> str:
        """Return the token to send with the next request."""

    async def refresh(self, stale_token: str | None = None) -> str:
        raise TokenRefreshError("This credential cannot be refreshed")


class StaticTokenProvider(TokenProvider):
    """Fixed token, e.g. a personal access token."""

    def __init__(self, access_token: str):
        self._access_token = access_token

    async def get_token(self) -> str:
        return self._access_token


class OAuth2TokenProvider(TokenProvider):
    """OAuth2 access token with refresh-token renewal.

    Args:
        credential: Initial credential
        client_id: OAuth2 application client id
        client_secret: OAuth2 application client secret
        token_url: Token endpoint
        redirect_uri: Redirect URI registered for the application, if the
            endpoint requires it on refresh
        transport: Transport for the token endpoint (tests inject a mock)
        timeout: Token request timeout in seconds
        expiry_leeway: Refresh this many seconds before the recorded expiry
    """

    DEFAULT_TOKEN_URL = "https://app.asana.com/-/oauth_token"

    def __init__(
        self,
        credential: Credential,
        *,
        client_id: str,
        client_secret: str,
        token_url: str = DEFAULT_TOKEN_URL,
        redirect_uri: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 30.0,
        expiry_leeway: float = 60.0,
    ) -> None:
        self._credential = credential
        self._lock = asyncio.Lock()
        self._refresh_attempts = 0
        self._last_refresh_error: TokenRefreshError | None = None
        self.client_id = client_id
        self.client_secret = client_secret
        self.token_url = token_url
        self.redirect_uri = redirect_uri
        self._transport = transport
        self._timeout = timeout
        self.expiry_leeway = expiry_leeway

    @property
    def can_refresh(self) -> bool:
        return bool(self._credential.refresh_token)

    async def get_token(self) -> str:
        credential = self._credential
        if self.can_refresh and credential.is_expired(self.expiry_leeway):
            logger.info("Access token expired, refreshing")
            return await self.refresh(stale_token=credential.access_token)
        return credential.access_token

    async def refresh(self, stale_token: str | None = None) -> str:
        """Refresh the access token, once per stale token.

        Args:
            stale_token: The token the caller found invalid. If another caller
                already replaced it, the current token is returned without a
                new refresh. ``None`` forces a refresh.

        Returns:
            The current access token after refresh

        Raises:
            TokenRefreshError: If there is no refresh token or the token
                endpoint rejects the request (also raised to callers that
                waited on that rejected refresh)
        """
        attempt = self._refresh_attempts
        async with self._lock:
            current = self._credential
            if stale_token is not None and current.access_token != stale_token:
                logger.debug("Access token already refreshed by a concurrent call")
                return current.access_token

            # Callers that queued behind a refresh share its outcome
            if attempt != self._refresh_attempts:
                error = self._last_refresh_error
                if error is None:
                    return current.access_token
                raise TokenRefreshError(str(error), status_code=error.status_code) from error

            if not current.refresh_token:
                raise TokenRefreshError("No refresh token available")

            self._refresh_attempts += 1
            try:
                self._credential = await self._request_new_credential(current.refresh_token)
            except TokenRefreshError as e:
                logger.warning(f"Access token refresh failed: {e}")
                self._last_refresh_error = e
                raise

            self._last_refresh_error = None
            return self._credential.access_token

    async def _request_new_credential(self, refresh_token: str) -> Credential:
        form = {
            "grant_type": "refresh_token",
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "refresh_token": refresh_token,
        }
        if self.redirect_uri:
            form["redirect_uri"] = self.redirect_uri

        async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
            try:
                response = await client.post(self.token_url, data=form)
            except httpx.TransportError as e:
                raise TokenRefreshError(f"Token refresh request failed: {e!r}") from e

        if not response.is_success:
            raise TokenRefreshError(
                f"Token refresh failed with HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise TokenRefreshError("Token endpoint returned invalid JSON") from e

        access_token = payload.get("access_token") if isinstance(payload, dict) else None
        if not access_token:
            raise TokenRefreshError("Token endpoint response has no access_token")

        expires_in = payload.get("expires_in")
        expires_at = datetime.now(UTC) + timedelta(seconds=float(expires_in)) if expires_in else None

        logger.info("Refreshed OAuth2 access token (***)")

        return Credential(
            access_token=access_token,
            expires_at=expires_at,
            refresh_token=payload.get("refresh_token") or refresh_token,
        )
