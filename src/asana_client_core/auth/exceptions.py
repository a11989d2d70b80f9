"""Custom exceptions for credential resolution and token refresh.

Example:
    ```python
    from asana_client_core.auth.exceptions import CredentialNotFoundError

    if not access_token:
        raise CredentialNotFoundError("Access token not found", env_var_name="ASANA_ACCESS_TOKEN")
    ```
"""

from asana_client_core.errors.exceptions import AsanaError, AuthenticationError


class CredentialError(AsanaError):
    """Base exception for credential configuration errors.

    All credential-specific exceptions inherit from this class,
    making it easy to catch any credential-related error.
    """

    pass


class CredentialNotFoundError(CredentialError):
    """Raised when a required credential cannot be resolved.

    Attributes:
        env_var_name: The environment variable name that was checked (if any).

    Example:
        ```python
        try:
            token = resolver.resolve(env_var_name="ASANA_ACCESS_TOKEN", required=True)
        except CredentialNotFoundError as e:
            print(f"Missing credential: {e.env_var_name}")
        ```
    """

    def __init__(self, message: str, env_var_name: str | None = None):
        super().__init__(message)
        self.env_var_name = env_var_name


class CredentialFileError(CredentialError):
    """Raised when a credential file cannot be read."""

    pass


class TokenRefreshError(AuthenticationError):
    """Raised when an OAuth2 access token cannot be refreshed.

    This is an `AuthenticationError`, so callers handling authentication
    failures see refresh failures too.
    """

    pass
