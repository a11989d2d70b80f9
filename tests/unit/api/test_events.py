"""Tests for the events endpoint and sync tokens."""

import logging

import httpx
import pytest

from asana_client_core.api import EventBatch, EventsApiService
from asana_client_core.errors import LocalValidationError, PreconditionFailedError
from asana_client_core.testing import RecordingHandler, create_envelope, create_error_response, create_test_client

SYNC_ERROR = (
    "Sync token invalid or too old. If you are attempting to keep resources in sync, "
    "you must fetch the full dataset for this query now and use the new sync token for the next sync."
)


def _sync_required(token: str) -> httpx.Response:
    return create_error_response(412, SYNC_ERROR, sync=token)


class TestGetEvents:
    @pytest.mark.unit
    async def test_passes_resource_and_sync(self):
        handler = RecordingHandler(httpx.Response(200, json=create_envelope([], sync="t2")))

        async with create_test_client(handler) as client:
            body = await EventsApiService(client).get_events("1200", "t1", {"opt_fields": "type"})

        assert body["sync"] == "t2"
        params = handler.requests[0].url.params
        assert handler.requests[0].url.path == "/api/1.0/events"
        assert params["resource"] == "1200"
        assert params["sync"] == "t1"
        assert params["opt_fields"] == "type"

    @pytest.mark.unit
    async def test_first_call_has_no_sync_param(self):
        handler = RecordingHandler(_sync_required("t1"))

        async with create_test_client(handler) as client:
            with pytest.raises(PreconditionFailedError) as exc_info:
                await EventsApiService(client).get_events("1200")

        assert "sync" not in handler.requests[0].url.params
        assert exc_info.value.sync_token == "t1"

    @pytest.mark.unit
    async def test_invalid_resource(self):
        handler = RecordingHandler(httpx.Response(200))

        async with create_test_client(handler) as client:
            with pytest.raises(LocalValidationError):
                await EventsApiService(client).get_events("project-1")

        assert handler.call_count == 0


class TestFetchChanges:
    @pytest.mark.unit
    async def test_sync_round_trip(self):
        handler = RecordingHandler(
            _sync_required("t1"),
            httpx.Response(
                200, json=create_envelope([{"type": "task", "action": "changed"}], sync="t2", has_more=True)
            ),
            httpx.Response(200, json=create_envelope([], sync="t2")),
        )

        async with create_test_client(handler) as client:
            events = EventsApiService(client)
            first = await events.fetch_changes("1200")
            second = await events.fetch_changes("1200", first.sync_token)
            third = await events.fetch_changes("1200", second.sync_token)

        assert first == EventBatch(sync_token="t1")
        assert second.events == [{"type": "task", "action": "changed"}]
        assert second.has_more
        assert second.sync_token == "t2"
        assert third == EventBatch(sync_token="t2")
        assert [r.url.params.get("sync") for r in handler.requests] == [None, "t1", "t2"]

    @pytest.mark.unit
    async def test_expired_token_raises_with_fresh_token(self, caplog):
        handler = RecordingHandler(_sync_required("fresh"))

        async with create_test_client(handler) as client:
            with caplog.at_level(logging.WARNING, logger="asana_client_core.api.events"):
                with pytest.raises(PreconditionFailedError) as exc_info:
                    await EventsApiService(client).fetch_changes("1200", "expired")

        assert exc_info.value.sync_token == "fresh"
        assert exc_info.value.status_code == 412
        assert "events were missed" in caplog.text

    @pytest.mark.unit
    async def test_starting_a_sync_logs_no_warning(self, caplog):
        handler = RecordingHandler(_sync_required("t1"))

        async with create_test_client(handler) as client:
            with caplog.at_level(logging.DEBUG):
                batch = await EventsApiService(client).fetch_changes("1200")

        assert batch.sync_token == "t1"
        assert [r for r in caplog.records if r.levelno >= logging.WARNING] == []
