"""Tests for structured API exceptions."""

import httpx
import pytest

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
from asana_client_core.errors.models import ErrorDetail
from asana_client_core.request import build_call
from asana_client_core.response import RawResponse


@pytest.mark.unit
def test_api_error_instantiation():
    """Test APIError can be instantiated with all attributes."""
    raw = RawResponse.from_httpx(httpx.Response(500))
    call = build_call("GET", "tasks/1")
    detail = ErrorDetail(message="Server Error")

    error = APIError(message="Test error", status_code=500, response=raw, request=call, errors=[detail])

    assert str(error) == "Test error"
    assert error.status_code == 500
    assert error.response is raw
    assert error.request is call
    assert error.errors == [detail]


@pytest.mark.unit
def test_api_error_defaults():
    error = APIError("Test error")

    assert error.status_code is None
    assert error.response is None
    assert error.request is None
    assert error.errors == []


@pytest.mark.unit
def test_exception_inheritance():
    """Test exception inheritance chain."""
    assert issubclass(APIError, AsanaError)
    assert issubclass(LocalValidationError, AsanaError)

    # Local failures are never remote ones
    assert not issubclass(LocalValidationError, APIError)
    assert issubclass(LocalValidationError, ValueError)

    for exc_class in (AuthenticationError, PreconditionFailedError, RateLimitedError, RemoteValidationError):
        assert issubclass(exc_class, ClientError)

    for exc_class in (BadRequestError, ForbiddenError, NotFoundError, ConflictError):
        assert issubclass(exc_class, RemoteValidationError)

    assert issubclass(ServerError, APIError)
    assert issubclass(TransientNetworkError, APIError)
    assert not issubclass(ServerError, ClientError)


@pytest.mark.unit
def test_rate_limited_error_retry_after():
    error = RateLimitedError("slow down", retry_after=30, status_code=429)

    assert error.retry_after == 30
    assert error.status_code == 429


@pytest.mark.unit
def test_precondition_failed_carries_sync_token():
    error = PreconditionFailedError(
        "sync token expired", sync_token="de4774f6915eae04714ca93bb2f5ee81", status_code=412
    )

    assert error.sync_token == "de4774f6915eae04714ca93bb2f5ee81"
    assert PreconditionFailedError("x").sync_token is None
