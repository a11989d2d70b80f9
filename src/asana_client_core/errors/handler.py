"""Translation of failed responses and transport failures into typed errors."""

from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from typing import TYPE_CHECKING

import httpx

from asana_client_core.errors.exceptions import (
    APIError,
    AuthenticationError,
    BadRequestError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    PreconditionFailedError,
    RateLimitedError,
    RemoteValidationError,
    ServerError,
    TransientNetworkError,
)
from asana_client_core.errors.models import ErrorDetail

if TYPE_CHECKING:
    from asana_client_core.request import CallDescriptor
    from asana_client_core.response import RawResponse


def parse_retry_after(value: str | None) -> float | None:
    """Parse a Retry-After header value.

    Supports both formats:
    - Delay-seconds: "120" (integer seconds)
    - HTTP-date: "Wed, 21 Oct 2015 07:28:00 GMT"

    Args:
        value: Raw header value

    Returns:
        Delay in seconds, or None if missing, negative or invalid
    """
    if not value:
        return None

    try:
        delay = float(value)
        return delay if delay >= 0 else None
    except ValueError:
        pass

    try:
        retry_date = parsedate_to_datetime(value)
        delay = (retry_date - datetime.now(UTC)).total_seconds()
        return delay if delay >= 0 else None
    except (ValueError, TypeError):
        return None


def _build_message(raw: "RawResponse", request: "CallDescriptor | None", errors: list[ErrorDetail]) -> str:
    if errors:
        detail = errors[0].to_exception_message()
    else:
        detail = raw.text[:200]

    prefix = f"HTTP {raw.status_code}"
    if raw.reason_phrase:
        prefix += f" {raw.reason_phrase}"
    if request is not None:
        prefix = f"{request.method} {request.path} resulted in {prefix}"

    return f"{prefix}: {detail}" if detail else prefix


def raise_for_status(raw: "RawResponse", request: "CallDescriptor | None" = None) -> None:
    """Raise the typed exception for a non-2xx response.

    Parses the ``{"errors": [...]}`` envelope if present, otherwise falls back
    to the start of the response text.

    Args:
        raw: Response to classify
        request: Originating call, kept on the exception for diagnostics

    Raises:
        APIError subclass based on status code
    """
    if raw.is_success:
        return

    status_code = raw.status_code
    errors = ErrorDetail.list_from_body(raw.body)
    message = _build_message(raw, request, errors)

    exception_map = {
        400: BadRequestError,
        401: AuthenticationError,
        403: ForbiddenError,
        404: NotFoundError,
        409: ConflictError,
        412: PreconditionFailedError,
        429: RateLimitedError,
    }

    if status_code in exception_map:
        exc_class = exception_map[status_code]
    elif 400 <= status_code < 500:
        exc_class = RemoteValidationError
    elif 500 <= status_code < 600:
        exc_class = ServerError
    else:
        exc_class = APIError

    common = {
        "status_code": status_code,
        "response": raw,
        "request": request,
        "errors": errors,
    }

    if exc_class is RateLimitedError:
        raise RateLimitedError(message, retry_after=parse_retry_after(raw.headers.get("retry-after")), **common)

    if exc_class is PreconditionFailedError:
        sync_token = raw.body.get("sync") if isinstance(raw.body, dict) else None
        raise PreconditionFailedError(message, sync_token=sync_token, **common)

    raise exc_class(message, **common)


def translate_transport_error(exc: httpx.TransportError, request: "CallDescriptor | None" = None) -> APIError:
    """Map an httpx transport exception to a typed error.

    Timeouts, network failures and servers dropping the connection become
    `TransientNetworkError`; anything else at the transport level (malformed
    requests, unsupported schemes) is a plain `APIError`.
    """
    target = f"{request.method} {request.path}" if request is not None else "request"

    if isinstance(exc, (httpx.TimeoutException, httpx.NetworkError, httpx.RemoteProtocolError)):
        return TransientNetworkError(f"{target} failed: {exc!r}", request=request)

    return APIError(f"{target} failed: {exc!r}", request=request)

