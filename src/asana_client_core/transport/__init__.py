"""Transport layer components.

Transport layers wrap an httpx async transport to add behaviour below the
client, where it applies to every request regardless of the call site.

Modules:
    retry: Retry-once on rate limiting and transient network failures

Example:
    ```python
    from asana_client_core.transport import create_transport_stack

    transport = create_transport_stack(backoff=0.5)
    ```
"""

import httpx

from asana_client_core.transport.retry import RetryOnceTransport


def create_transport_stack(
    *,
    wrapped_transport: httpx.AsyncBaseTransport | None = None,
    max_retries: int = 1,
    backoff: float = 1.0,
    max_backoff: float = 60.0,
) -> RetryOnceTransport:
    """Build the transport used by `AsanaApiClient`.

    Args:
        wrapped_transport: Innermost transport (default: a new ``httpx.AsyncHTTPTransport``)
        max_retries: Retry attempts on 429 and network failures
        backoff: Fixed delay when the service gives no Retry-After
        max_backoff: Upper bound for any delay

    Returns:
        Retry transport wrapping ``wrapped_transport``
    """
    return RetryOnceTransport(
        wrapped_transport=wrapped_transport or httpx.AsyncHTTPTransport(),
        max_retries=max_retries,
        backoff=backoff,
        max_backoff=max_backoff,
    )


__all__ = ["RetryOnceTransport", "create_transport_stack"]
