"""Resource services bound to an `AsanaApiClient`."""

from asana_client_core.api.attachments import AttachmentApiService
from asana_client_core.api.batch import BatchApiService
from asana_client_core.api.events import EventBatch, EventsApiService
from asana_client_core.api.tasks import TaskApiService

__all__ = [
    "AttachmentApiService",
    "BatchApiService",
    "EventBatch",
    "EventsApiService",
    "TaskApiService",
]
