"""Task endpoints."""

from collections.abc import Mapping, Sequence
from typing import Any

from asana_client_core.client import AsanaApiClient
from asana_client_core.pagination import Paginator
from asana_client_core.request import RequestOptions
from asana_client_core.response import ResponseType
from asana_client_core.validation import (
    validate_at_least_one_field,
    validate_gid,
    validate_required_fields,
)


class TaskApiService:
    def __init__(self, client: AsanaApiClient):
        self.client = client

    async def get_tasks(
        self, options: Mapping[str, Any] | None = None, response_type: ResponseType = ResponseType.DATA
    ) -> Any:
        """List tasks filtered by ``project``, ``section``, ``tag`` or ``assignee``/``workspace``."""
        return await self.client.request("GET", "tasks", RequestOptions(query=options), response_type)

    def iter_tasks(self, options: Mapping[str, Any] | None = None) -> Paginator:
        """Page through `get_tasks` results."""
        return self.client.paginate("GET", "tasks", RequestOptions(query=options))

    async def get_task(
        self,
        task_gid: str,
        options: Mapping[str, Any] | None = None,
        response_type: ResponseType = ResponseType.DATA,
    ) -> Any:
        validate_gid(task_gid, "Task GID")
        return await self.client.request("GET", f"tasks/{task_gid}", RequestOptions(query=options), response_type)

    async def create_task(
        self,
        data: Mapping[str, Any],
        options: Mapping[str, Any] | None = None,
        response_type: ResponseType = ResponseType.DATA,
    ) -> Any:
        validate_at_least_one_field(data, ["workspace", "parent", "projects"], "task creation")
        return await self.client.request(
            "POST", "tasks", RequestOptions(query=options, json={"data": dict(data)}), response_type
        )

    async def update_task(
        self,
        task_gid: str,
        data: Mapping[str, Any],
        options: Mapping[str, Any] | None = None,
        response_type: ResponseType = ResponseType.DATA,
    ) -> Any:
        validate_gid(task_gid, "Task GID")
        return await self.client.request(
            "PUT", f"tasks/{task_gid}", RequestOptions(query=options, json={"data": dict(data)}), response_type
        )

    async def delete_task(self, task_gid: str, response_type: ResponseType = ResponseType.DATA) -> Any:
        validate_gid(task_gid, "Task GID")
        return await self.client.request("DELETE", f"tasks/{task_gid}", response_type=response_type)

    async def add_followers(
        self,
        task_gid: str,
        followers: Sequence[str],
        options: Mapping[str, Any] | None = None,
        response_type: ResponseType = ResponseType.DATA,
    ) -> Any:
        validate_gid(task_gid, "Task GID")
        return await self.client.request(
            "POST",
            f"tasks/{task_gid}/addFollowers",
            RequestOptions(query=options, json={"data": {"followers": list(followers)}}),
            response_type,
        )

    async def remove_followers(
        self,
        task_gid: str,
        followers: Sequence[str],
        options: Mapping[str, Any] | None = None,
        response_type: ResponseType = ResponseType.DATA,
    ) -> Any:
        validate_gid(task_gid, "Task GID")
        return await self.client.request(
            "POST",
            f"tasks/{task_gid}/removeFollowers",
            RequestOptions(query=options, json={"data": {"followers": list(followers)}}),
            response_type,
        )

    async def set_parent(
        self,
        task_gid: str,
        data: Mapping[str, Any],
        options: Mapping[str, Any] | None = None,
        response_type: ResponseType = ResponseType.DATA,
    ) -> Any:
        """Move a task under ``data["parent"]``, optionally positioned with ``insert_after``/``insert_before``."""
        validate_gid(task_gid, "Task GID")
        validate_required_fields(data, ["parent"], "setting a task parent")
        return await self.client.request(
            "POST",
            f"tasks/{task_gid}/setParent",
            RequestOptions(query=options, json={"data": dict(data)}),
            response_type,
        )
