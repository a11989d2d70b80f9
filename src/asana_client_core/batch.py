"""Batch API aggregation.

Packs several independent calls into one ``POST /batch`` and unpacks one
result per action, in action order. A failed action only shows up in its own
`BatchResult`; only a failure of the batch call itself raises.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from asana_client_core.errors.exceptions import APIError, LocalValidationError
from asana_client_core.errors.models import ErrorDetail
from asana_client_core.request import CallDescriptor, RequestOptions, build_call

BATCH_PATH = "batch"


@dataclass(frozen=True)
class BatchAction:
    """One sub-request of a batch call."""

    relative_path: str
    method: str
    data: Mapping[str, Any] | None = None
    options: Mapping[str, Any] | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"relative_path": self.relative_path, "method": self.method}
        if self.data is not None:
            payload["data"] = dict(self.data)
        if self.options is not None:
            payload["options"] = dict(self.options)
        return payload


@dataclass(frozen=True)
class BatchResult:
    """Outcome of one batch action."""

    status_code: int
    headers: Mapping[str, Any]
    body: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def data(self) -> Any:
        return self.body.get("data") if isinstance(self.body, dict) else None

    @property
    def errors(self) -> list[ErrorDetail]:
        return ErrorDetail.list_from_body(self.body)


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def validate_actions(actions: Sequence[BatchAction | Mapping[str, Any]]) -> list[BatchAction]:
    """Validate and normalize batch actions before any network call.

    Args:
        actions: `BatchAction` objects or mappings with ``relative_path``,
            ``method`` and optional ``data``/``options``

    Returns:
        The actions as `BatchAction` objects, in order

    Raises:
        LocalValidationError: If the list is empty, an entry is not a mapping,
            or an entry lacks a non-blank ``relative_path`` or ``method``
    """
    if not actions:
        raise LocalValidationError("Actions list must not be empty for batch request.")

    validated = []
    for index, action in enumerate(actions):
        if isinstance(action, Mapping):
            action = BatchAction(
                relative_path=action.get("relative_path"),
                method=action.get("method"),
                data=action.get("data"),
                options=action.get("options"),
            )
        elif not isinstance(action, BatchAction):
            raise LocalValidationError(f"Each action must be a mapping, invalid action at index {index}.")

        missing = [name for name in ("relative_path", "method") if _is_blank(getattr(action, name))]
        if missing:
            raise LocalValidationError(f"Action at index {index} is missing required field(s): {', '.join(missing)}")

        validated.append(action)

    return validated


def build_batch_call(actions: Sequence[BatchAction], query: Mapping[str, Any] | None = None) -> CallDescriptor:
    body = {"data": {"actions": [action.to_payload() for action in actions]}}
    return build_call("POST", BATCH_PATH, RequestOptions(query=query, json=body))


def unpack_batch_results(data: Any, expected_count: int, call: CallDescriptor | None = None) -> list[BatchResult]:
    """Turn the batch response ``data`` array into results.

    Raises:
        APIError: If the payload is not a list with one entry per action
    """
    if not isinstance(data, list) or len(data) != expected_count:
        received = len(data) if isinstance(data, list) else type(data).__name__
        raise APIError(
            f"Batch response does not match request: expected {expected_count} results, got {received}",
            request=call,
        )

    results = []
    for entry in data:
        entry = entry if isinstance(entry, dict) else {}
        results.append(
            BatchResult(
                status_code=int(entry.get("status_code", 0)),
                headers=entry.get("headers") or {},
                body=entry.get("body"),
            )
        )
    return results
