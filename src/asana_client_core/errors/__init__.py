"""Error taxonomy and error-envelope handling for the Asana API."""

from asana_client_core.errors.exceptions import (
    APIError,
    AsanaError,
    AuthenticationError,
    BadRequestError,
    ClientError,
    ConflictError,
    ForbiddenError,
    LocalValidationError,
    NotFoundError,
    PreconditionFailedError,
    RateLimitedError,
    RemoteValidationError,
    ServerError,
    TransientNetworkError,
)
from asana_client_core.errors.handler import parse_retry_after, raise_for_status, translate_transport_error
from asana_client_core.errors.models import ErrorDetail

__all__ = [
    "APIError",
    "AsanaError",
    "AuthenticationError",
    "BadRequestError",
    "ClientError",
    "ConflictError",
    "ErrorDetail",
    "ForbiddenError",
    "LocalValidationError",
    "NotFoundError",
    "PreconditionFailedError",
    "RateLimitedError",
    "RemoteValidationError",
    "ServerError",
    "TransientNetworkError",
    "parse_retry_after",
    "raise_for_status",
    "translate_transport_error",
]
