"""Attachment endpoints, including multipart uploads."""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from asana_client_core.client import AsanaApiClient
from asana_client_core.errors.exceptions import LocalValidationError
from asana_client_core.request import FieldPart, FilePart, RequestOptions
from asana_client_core.response import ResponseType
from asana_client_core.validation import validate_gid


class AttachmentApiService:
    def __init__(self, client: AsanaApiClient):
        self.client = client

    async def get_attachment(
        self,
        attachment_gid: str,
        options: Mapping[str, Any] | None = None,
        response_type: ResponseType = ResponseType.DATA,
    ) -> Any:
        validate_gid(attachment_gid, "Attachment GID")
        return await self.client.request(
            "GET", f"attachments/{attachment_gid}", RequestOptions(query=options), response_type
        )

    async def get_attachments_for_object(
        self,
        parent_gid: str,
        options: Mapping[str, Any] | None = None,
        response_type: ResponseType = ResponseType.DATA,
    ) -> Any:
        validate_gid(parent_gid, "Parent GID")
        query = {"parent": parent_gid, **(options or {})}
        return await self.client.request("GET", "attachments", RequestOptions(query=query), response_type)

    async def upload_attachment(
        self,
        parent_gid: str,
        file_path: str | Path,
        options: Mapping[str, Any] | None = None,
        response_type: ResponseType = ResponseType.DATA,
    ) -> Any:
        """Upload a file from disk to a task, project or project brief.

        The file is opened only for the duration of the request.

        Raises:
            LocalValidationError: If the parent GID is malformed or the file
                does not exist
        """
        validate_gid(parent_gid, "Parent GID")
        path = Path(file_path)
        if not path.is_file():
            raise LocalValidationError(f"File at '{path}' does not exist or is not readable")

        return await self._upload(parent_gid, FilePart.from_path("file", path), options, response_type)

    async def upload_attachment_from_contents(
        self,
        parent_gid: str,
        file_contents: bytes | str,
        file_name: str,
        options: Mapping[str, Any] | None = None,
        response_type: ResponseType = ResponseType.DATA,
    ) -> Any:
        """Upload in-memory content as an attachment named ``file_name``."""
        validate_gid(parent_gid, "Parent GID")
        return await self._upload(
            parent_gid, FilePart.from_bytes("file", file_contents, file_name), options, response_type
        )

    async def delete_attachment(self, attachment_gid: str, response_type: ResponseType = ResponseType.DATA) -> Any:
        validate_gid(attachment_gid, "Attachment GID")
        return await self.client.request("DELETE", f"attachments/{attachment_gid}", response_type=response_type)

    async def _upload(
        self,
        parent_gid: str,
        file_part: FilePart,
        options: Mapping[str, Any] | None,
        response_type: ResponseType,
    ) -> Any:
        request_options = RequestOptions(query=options, multipart=[file_part, FieldPart("parent", parent_gid)])
        return await self.client.request("POST", "attachments", request_options, response_type)
