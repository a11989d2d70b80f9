"""Batch endpoint."""

from collections.abc import Mapping, Sequence
from typing import Any

from asana_client_core.batch import BatchAction, BatchResult
from asana_client_core.client import AsanaApiClient


class BatchApiService:
    def __init__(self, client: AsanaApiClient):
        self.client = client

    async def create_batch_request(
        self,
        actions: Sequence[BatchAction | Mapping[str, Any]],
        options: Mapping[str, Any] | None = None,
    ) -> list[BatchResult]:
        """Submit up to the service's limit of actions in one request.

        Example:
            ```python
            results = await batch.create_batch_request(
                [
                    {"relative_path": "/tasks/123", "method": "get"},
                    {"relative_path": "/tasks/456", "method": "put", "data": {"completed": True}},
                ]
            )
            failed = [r for r in results if not r.ok]
            ```
        """
        return await self.client.batch(actions, options)
