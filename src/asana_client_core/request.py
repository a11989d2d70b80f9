"""Request building for Asana API calls.

A logical call is captured as an immutable :class:`CallDescriptor` built from
a verb, a path and a :class:`RequestOptions` bag. The descriptor is rendered
into an ``httpx.Request`` only at dispatch time by :func:`open_request`, which
owns any file handles it opens for multipart uploads.

Example:
    ```python
    from asana_client_core.request import FieldPart, FilePart, RequestOptions, build_call

    call = build_call(
        "POST",
        "attachments",
        RequestOptions(
            multipart=[
                FilePart.from_path("file", "./report.pdf"),
                FieldPart("parent", "1200000000000001"),
            ]
        ),
    )
    ```
"""

import logging
from collections.abc import Iterator, Mapping, Sequence
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any
from urllib.parse import quote

import httpx

from asana_client_core.errors.exceptions import LocalValidationError

logger = logging.getLogger(__name__)

SUPPORTED_METHODS: frozenset[str] = frozenset(["GET", "POST", "PUT", "DELETE"])


@dataclass(frozen=True)
class FieldPart:
    """Plain form field of a multipart body."""

    name: str
    value: str


@dataclass(frozen=True)
class FilePart:
    """File field of a multipart body.

    Content comes either from a file on disk (opened at dispatch time) or from
    an in-memory buffer. Both render to the same wire bytes for the same
    filename and content.
    """

    name: str
    filename: str
    path: Path | None = None
    content: bytes | None = None
    content_type: str | None = None

    @classmethod
    def from_path(
        cls,
        name: str,
        path: str | Path,
        *,
        filename: str | None = None,
        content_type: str | None = None,
    ) -> "FilePart":
        path = Path(path)
        return cls(name=name, filename=filename or path.name, path=path, content_type=content_type)

    @classmethod
    def from_bytes(
        cls,
        name: str,
        content: bytes | str,
        filename: str,
        *,
        content_type: str | None = None,
    ) -> "FilePart":
        if isinstance(content, str):
            content = content.encode("utf-8")
        return cls(name=name, filename=filename, content=content, content_type=content_type)

    def open(self, stack: ExitStack) -> tuple:
        """Return an httpx file tuple, registering any opened file on ``stack``."""
        if self.path is not None:
            fileobj: Any = stack.enter_context(self.path.open("rb"))
        else:
            fileobj = self.content if self.content is not None else b""

        if self.content_type:
            return (self.filename, fileobj, self.content_type)
        return (self.filename, fileobj)


MultipartPart = FieldPart | FilePart


@dataclass(frozen=True)
class RequestOptions:
    """Options recognised when building a call.

    Attributes:
        query: Query parameters. ``None`` values are dropped, booleans are sent
            as ``true``/``false`` and sequences are comma-joined.
        json: JSON request body.
        multipart: Ordered multipart parts. Mutually exclusive with ``json``.
        headers: Extra request headers, for forward-compatible remote features
            (e.g. ``Asana-Enable``).
    """

    query: Mapping[str, Any] | None = None
    json: Any = None
    multipart: Sequence[MultipartPart] | None = None
    headers: Mapping[str, str] | None = None

    def __post_init__(self) -> None:
        if self.multipart and self.json is not None:
            raise LocalValidationError("A request cannot carry both a JSON body and multipart parts.")


@dataclass(frozen=True)
class CallDescriptor:
    """Immutable description of one logical API call."""

    method: str
    path: str
    query: tuple[tuple[str, str], ...] = ()
    json: Any = None
    multipart: tuple[MultipartPart, ...] = ()
    headers: tuple[tuple[str, str], ...] = ()

    @property
    def url_path(self) -> str:
        """Path relative to the API base URL, each segment percent-encoded."""
        segments = self.path.strip("/").split("/")
        return "/".join(quote(segment, safe="") for segment in segments)

    def with_query(self, **params: Any) -> "CallDescriptor":
        """Return a copy with ``params`` merged into the query (replacing same keys)."""
        merged = dict(self.query)
        merged.update(_encode_query(params))
        return replace(self, query=tuple(merged.items()))

    def query_value(self, key: str) -> str | None:
        return dict(self.query).get(key)

    def to_dict(self) -> dict[str, Any]:
        """Diagnostic view of the call, safe to log or return to callers."""
        result: dict[str, Any] = {
            "method": self.method,
            "path": self.path,
            "query": dict(self.query),
        }
        if self.json is not None:
            result["json"] = self.json
        if self.multipart:
            result["multipart"] = [
                {"name": part.name, "filename": part.filename}
                if isinstance(part, FilePart)
                else {"name": part.name, "value": part.value}
                for part in self.multipart
            ]
        return result


def _encode_query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple, set, frozenset)):
        return ",".join(_encode_query_value(item) for item in value)
    return str(value)


def _encode_query(query: Mapping[str, Any] | None) -> list[tuple[str, str]]:
    if not query:
        return []
    return [(str(key), _encode_query_value(value)) for key, value in query.items() if value is not None]


def build_call(method: str, path: str, options: RequestOptions | None = None) -> CallDescriptor:
    """Build a call descriptor.

    Identifiers in ``path`` are assumed to be validated already. Building never
    performs I/O; problems such as an unreadable file surface at dispatch.

    Args:
        method: HTTP verb (GET, POST, PUT or DELETE)
        path: Path relative to the API base URL, e.g. ``tasks/123``
        options: Query, body and header options

    Returns:
        Immutable call descriptor
    """
    options = options or RequestOptions()
    method = method.upper()
    if method not in SUPPORTED_METHODS:
        logger.debug(f"Building call with non-standard method {method}")

    return CallDescriptor(
        method=method,
        path=path,
        query=tuple(_encode_query(options.query)),
        json=options.json,
        multipart=tuple(options.multipart or ()),
        headers=tuple((options.headers or {}).items()),
    )


@contextmanager
def open_request(
    client: httpx.AsyncClient,
    call: CallDescriptor,
    *,
    boundary: str | None = None,
) -> Iterator[httpx.Request]:
    """Render ``call`` into an ``httpx.Request`` for ``client``.

    Files opened for multipart parts are closed when the context exits,
    whether the request succeeded or failed.

    Args:
        client: Client whose base URL and default headers apply
        call: Descriptor to render
        boundary: Fixed multipart boundary (random if omitted)

    Yields:
        The request, ready to send

    Raises:
        OSError: If a file part cannot be opened
    """
    with ExitStack() as stack:
        headers = dict(call.headers)
        kwargs: dict[str, Any] = {}

        if call.multipart:
            kwargs["files"] = [
                (part.name, part.open(stack)) if isinstance(part, FilePart) else (part.name, (None, part.value))
                for part in call.multipart
            ]
            if boundary:
                headers["Content-Type"] = f"multipart/form-data; boundary={boundary}"
        elif call.json is not None:
            kwargs["json"] = call.json

        yield client.build_request(
            call.method,
            call.url_path,
            params=list(call.query),
            headers=headers or None,
            **kwargs,
        )
