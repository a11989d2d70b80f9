"""Asana Client Core - HTTP execution core for the Asana REST API.

This library provides the shared machinery behind every Asana resource call:
- Request building with query, JSON and multipart bodies
- Bearer authentication with serialized OAuth2 token refresh
- Retry-once on rate limiting and transient network failures
- FULL / NORMAL / DATA response shaping
- Offset pagination, events sync tokens and batch requests
- A typed error taxonomy separating local from remote failures

Example:
    ```python
    from asana_client_core import AsanaApiClient
    from asana_client_core.api import TaskApiService

    async with AsanaApiClient.from_env() as client:
        tasks = TaskApiService(client)
        task = await tasks.get_task("1200000000000001", {"opt_fields": ["name", "due_on"]})
    ```
"""

from asana_client_core.client import AsanaApiClient
from asana_client_core.config import ClientSettings
from asana_client_core.request import CallDescriptor, FieldPart, FilePart, RequestOptions
from asana_client_core.response import FullResponse, RawResponse, ResponseType

__version__ = "0.1.0"

__all__ = [
    "AsanaApiClient",
    "CallDescriptor",
    "ClientSettings",
    "FieldPart",
    "FilePart",
    "FullResponse",
    "RawResponse",
    "RequestOptions",
    "ResponseType",
    "__version__",
]
