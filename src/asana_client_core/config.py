"""Client configuration resolved from arguments, the environment and .env files.

| Setting | Environment variable | Default |
|---------|----------------------|---------|
| access_token | `ASANA_ACCESS_TOKEN` | required |
| refresh_token | `ASANA_REFRESH_TOKEN` | - |
| client_id | `ASANA_CLIENT_ID` | - |
| client_secret | `ASANA_CLIENT_SECRET` | - |
| base_url | `ASANA_BASE_URL` | `https://app.asana.com/api/1.0` |
| timeout | `ASANA_TIMEOUT` | 30 seconds |
| retry_backoff | `ASANA_RETRY_BACKOFF` | 1 second |

A refreshable OAuth2 provider is used when the refresh token and both client
credentials are available; otherwise the access token is used as-is.
"""

from dataclasses import dataclass

from asana_client_core.auth.credentials import CredentialResolver
from asana_client_core.auth.exceptions import CredentialNotFoundError
from asana_client_core.auth.provider import Credential, OAuth2TokenProvider, StaticTokenProvider, TokenProvider

DEFAULT_BASE_URL = "https://app.asana.com/api/1.0"
DEFAULT_TIMEOUT = 30.0
DEFAULT_RETRY_BACKOFF = 1.0


@dataclass(frozen=True)
class ClientSettings:
    access_token: str | None = None
    refresh_token: str | None = None
    client_id: str | None = None
    client_secret: str | None = None
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    retry_backoff: float = DEFAULT_RETRY_BACKOFF

    @classmethod
    def from_env(
        cls,
        resolver: CredentialResolver | None = None,
        *,
        access_token: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ) -> "ClientSettings":
        """Resolve settings; explicit arguments win over the environment."""
        resolver = resolver or CredentialResolver()
        return cls(
            access_token=resolver.resolve(value=access_token, env_var_name="ASANA_ACCESS_TOKEN"),
            refresh_token=resolver.resolve(env_var_name="ASANA_REFRESH_TOKEN"),
            client_id=resolver.resolve(env_var_name="ASANA_CLIENT_ID", mask_in_logs=False),
            client_secret=resolver.resolve(env_var_name="ASANA_CLIENT_SECRET"),
            base_url=resolver.resolve(
                value=base_url, env_var_name="ASANA_BASE_URL", default=DEFAULT_BASE_URL, mask_in_logs=False
            ),
            timeout=resolver.resolve_float(value=timeout, env_var_name="ASANA_TIMEOUT", default=DEFAULT_TIMEOUT),
            retry_backoff=resolver.resolve_float(env_var_name="ASANA_RETRY_BACKOFF", default=DEFAULT_RETRY_BACKOFF),
        )

    def token_provider(self) -> TokenProvider:
        """Build the token provider these settings describe.

        Raises:
            CredentialNotFoundError: If no access token is configured
        """
        if not self.access_token:
            raise CredentialNotFoundError("Asana access token not configured", env_var_name="ASANA_ACCESS_TOKEN")

        if self.refresh_token and self.client_id and self.client_secret:
            return OAuth2TokenProvider(
                Credential(access_token=self.access_token, refresh_token=self.refresh_token),
                client_id=self.client_id,
                client_secret=self.client_secret,
                timeout=self.timeout,
            )

        return StaticTokenProvider(self.access_token)
