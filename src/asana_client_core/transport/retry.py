"""Retry transport for the Asana API.

`RetryOnceTransport` retries a request exactly once (by default) when the
service answers 429 or the connection times out or resets. Every method is
retried, POST included. All other status codes pass through untouched.

| Condition | Retried | Delay |
|-----------|---------|-------|
| 429 Too Many Requests | ✅ once, all methods | `Retry-After` (capped), else fixed backoff |
| Timeout / connection reset / server disconnect | ✅ once, all methods | fixed backoff |
| 5xx, other 4xx | ❌ | - |

## Example

```python
from asana_client_core.transport.retry import RetryOnceTransport
import httpx

retry_transport = RetryOnceTransport(
    wrapped_transport=httpx.AsyncHTTPTransport(),
    backoff=1.0,
    max_backoff=60,
)

async with httpx.AsyncClient(transport=retry_transport) as client:
    response = await client.get("https://app.asana.com/api/1.0/users/me")
```
"""

import asyncio
import logging

import httpx

from asana_client_core.errors.handler import parse_retry_after

logger = logging.getLogger(__name__)


class RetryOnceTransport(httpx.AsyncBaseTransport):
    """Retry transport for rate limiting and transient network failures.

    Args:
        wrapped_transport: The underlying transport to wrap
        max_retries: Maximum number of retry attempts (default: 1)
        backoff: Fixed delay in seconds when no Retry-After is given (default: 1.0)
        max_backoff: Upper bound for any delay in seconds (default: 60)

    Example:
        ```python
        transport = RetryOnceTransport(
            wrapped_transport=httpx.AsyncHTTPTransport(),
            backoff=0.5,
        )
        ```
    """

    RETRY_STATUS_CODES: frozenset[int] = frozenset([429])

    # Timeouts, connection resets and dropped keep-alive connections
    RETRY_EXCEPTIONS: tuple[type[Exception], ...] = (
        httpx.TimeoutException,
        httpx.NetworkError,
        httpx.RemoteProtocolError,
    )

    def __init__(
        self,
        *,
        wrapped_transport: httpx.AsyncBaseTransport,
        max_retries: int = 1,
        backoff: float = 1.0,
        max_backoff: float = 60.0,
    ) -> None:
        self._wrapped_transport = wrapped_transport
        self.max_retries = max_retries
        self.backoff = backoff
        self.max_backoff = max_backoff

    async def __aenter__(self):
        """Enter async context, delegating to wrapped transport."""
        await self._wrapped_transport.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Exit async context, delegating to wrapped transport."""
        return await self._wrapped_transport.__aexit__(exc_type, exc_val, exc_tb)

    async def aclose(self) -> None:
        await self._wrapped_transport.aclose()

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        """Handle request with retry logic for rate limiting and network failures.

        Args:
            request: The HTTP request to send

        Returns:
            HTTP response (after the retry if needed)

        Raises:
            httpx.TimeoutException, httpx.NetworkError, httpx.RemoteProtocolError:
                If the failure persists after the last retry
        """
        retries = 0

        while True:
            try:
                response = await self._wrapped_transport.handle_async_request(request)
            except self.RETRY_EXCEPTIONS as e:
                if retries >= self.max_retries:
                    raise

                retries += 1
                delay = self._calculate_backoff_delay()

                logger.warning(
                    f"Request {request.method} {request.url} failed with {e!r}, "
                    f"retrying in {delay}s (attempt {retries}/{self.max_retries})"
                )

                await asyncio.sleep(delay)
                continue

            should_retry, delay = self._should_retry_with_delay(response, retries)
            if not should_retry:
                return response

            retries += 1
            await response.aclose()

            logger.warning(
                f"Request {request.method} {request.url} failed with {response.status_code}, "
                f"retrying in {delay}s (attempt {retries}/{self.max_retries})"
            )

            await asyncio.sleep(delay)

    def _should_retry_with_delay(self, response: httpx.Response, current_retries: int) -> tuple[bool, float]:
        """Determine if request should be retried and calculate delay.

        Args:
            response: The HTTP response received
            current_retries: Number of retries attempted so far

        Returns:
            Tuple of (should_retry, delay_in_seconds)
        """
        if current_retries >= self.max_retries:
            return False, 0.0

        if response.status_code not in self.RETRY_STATUS_CODES:
            return False, 0.0

        delay = parse_retry_after(response.headers.get("Retry-After"))
        if delay is None:
            return True, self._calculate_backoff_delay()
        return True, min(delay, self.max_backoff)

    def _calculate_backoff_delay(self) -> float:
        """Fixed backoff, capped at max_backoff."""
        return min(self.backoff, self.max_backoff)
