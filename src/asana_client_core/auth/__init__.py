"""Authentication components.

This module provides:
- Multi-source credential resolution (value → env → .env → default)
- Token providers (static personal access token, refreshable OAuth2)
- An httpx auth flow that attaches the bearer token and refreshes on 401

Example:
    ```python
    from asana_client_core.auth import CredentialResolver, StaticTokenProvider

    resolver = CredentialResolver()
    provider = StaticTokenProvider(resolver.resolve(env_var_name="ASANA_ACCESS_TOKEN", required=True))
    ```
"""

from asana_client_core.auth.bearer import BearerTokenAuth
from asana_client_core.auth.credentials import CredentialResolver
from asana_client_core.auth.exceptions import (
    CredentialError,
    CredentialFileError,
    CredentialNotFoundError,
    TokenRefreshError,
)
from asana_client_core.auth.provider import Credential, OAuth2TokenProvider, StaticTokenProvider, TokenProvider

__all__ = [
    "BearerTokenAuth",
    "Credential",
    "CredentialError",
    "CredentialFileError",
    "CredentialNotFoundError",
    "CredentialResolver",
    "OAuth2TokenProvider",
    "StaticTokenProvider",
    "TokenProvider",
    "TokenRefreshError",
]
