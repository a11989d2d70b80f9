"""Structured exceptions for local and remote API errors."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from asana_client_core.errors.models import ErrorDetail
    from asana_client_core.request import CallDescriptor
    from asana_client_core.response import RawResponse


class AsanaError(Exception):
    """Base exception for everything raised by this library."""

    pass


class LocalValidationError(AsanaError, ValueError):
    """Invalid input detected before any network call.

    Raised for malformed identifiers, missing required fields and malformed
    batch action lists. Never retried.
    """

    pass


class APIError(AsanaError):
    """Base exception for remote-originated errors."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response: "RawResponse | None" = None,
        request: "CallDescriptor | None" = None,
        errors: "list[ErrorDetail] | None" = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response = response
        self.request = request
        self.errors = errors if errors is not None else []


class ClientError(APIError):
    """4xx client errors."""

    pass


class AuthenticationError(ClientError):
    """401 Unauthorized, after any credential refresh was exhausted."""

    pass


class PreconditionFailedError(ClientError):
    """412 Precondition Failed, typically an expired events sync token.

    The fresh token issued with the error is kept on ``sync_token`` so the
    caller can resume syncing.
    """

    def __init__(self, message: str, sync_token: str | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.sync_token = sync_token


class RateLimitedError(ClientError):
    """429 Too Many Requests, still rate limited after the retry."""

    def __init__(self, message: str, retry_after: float | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class RemoteValidationError(ClientError):
    """Any other 4xx rejected by the remote service."""

    pass


class BadRequestError(RemoteValidationError):
    """400 Bad Request."""

    pass


class ForbiddenError(RemoteValidationError):
    """403 Forbidden."""

    pass


class NotFoundError(RemoteValidationError):
    """404 Not Found."""

    pass


class ConflictError(RemoteValidationError):
    """409 Conflict."""

    pass


class ServerError(APIError):
    """5xx server errors."""

    pass


class TransientNetworkError(APIError):
    """Timeout or connection failure that persisted through the retry."""

    pass
