"""Tests for the attachment endpoints."""

import httpx
import pytest

from asana_client_core.api import AttachmentApiService
from asana_client_core.errors import LocalValidationError
from asana_client_core.testing import RecordingHandler, create_envelope, create_test_client


@pytest.fixture
def handler():
    return RecordingHandler(httpx.Response(200, json=create_envelope({"gid": "9000", "name": "report.txt"})))


@pytest.fixture
async def attachments(handler):
    async with create_test_client(handler) as client:
        yield AttachmentApiService(client)


class TestUpload:
    @pytest.mark.unit
    async def test_upload_from_path(self, attachments, handler, tmp_path):
        file_path = tmp_path / "report.txt"
        file_path.write_bytes(b"numbers")

        attachment = await attachments.upload_attachment("1200", file_path, {"opt_fields": "name"})

        assert attachment == {"gid": "9000", "name": "report.txt"}
        request = handler.requests[0]
        assert request.method == "POST"
        assert request.url.path == "/api/1.0/attachments"
        assert request.url.params["opt_fields"] == "name"
        body = request.content
        assert b'name="file"; filename="report.txt"' in body
        assert b"numbers" in body
        assert body.index(b'name="file"') < body.index(b'name="parent"')

    @pytest.mark.unit
    async def test_path_and_contents_produce_same_parts(self, attachments, handler, tmp_path):
        file_path = tmp_path / "report.txt"
        file_path.write_bytes(b"numbers")

        await attachments.upload_attachment("1200", file_path)
        await attachments.upload_attachment_from_contents("1200", b"numbers", "report.txt")

        def strip_boundary(request):
            boundary = request.headers["Content-Type"].split("boundary=")[1].encode()
            return request.content.replace(boundary, b"BOUNDARY")

        assert strip_boundary(handler.requests[0]) == strip_boundary(handler.requests[1])

    @pytest.mark.unit
    async def test_missing_file(self, attachments, handler, tmp_path):
        with pytest.raises(LocalValidationError, match="does not exist"):
            await attachments.upload_attachment("1200", tmp_path / "missing.txt")

        assert handler.call_count == 0

    @pytest.mark.unit
    async def test_invalid_parent(self, attachments, handler):
        with pytest.raises(LocalValidationError):
            await attachments.upload_attachment_from_contents("parent", b"x", "x.txt")

        assert handler.call_count == 0


class TestReads:
    @pytest.mark.unit
    async def test_get_attachment(self, attachments, handler):
        await attachments.get_attachment("9000")

        assert handler.requests[0].url.path == "/api/1.0/attachments/9000"

    @pytest.mark.unit
    async def test_get_attachments_for_object(self, attachments, handler):
        await attachments.get_attachments_for_object("1200", {"limit": 5})

        params = handler.requests[0].url.params
        assert params["parent"] == "1200"
        assert params["limit"] == "5"

    @pytest.mark.unit
    async def test_delete_attachment(self, attachments, handler):
        await attachments.delete_attachment("9000")

        assert handler.requests[0].method == "DELETE"
