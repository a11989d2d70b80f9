"""Models for the Asana error envelope."""

from dataclasses import dataclass
from typing import Any


@dataclass
class ErrorDetail:
    """One entry of an ``{"errors": [...]}`` response body.

    See: https://developers.asana.com/docs/errors
    """

    message: str | None = None  # Human-readable explanation
    help: str | None = None  # Pointer to documentation or next steps
    phrase: str | None = None  # Random phrase identifying a 500 for support

    # Any additional fields from the API
    extensions: dict[str, Any] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ErrorDetail":
        standard_fields = {"message", "help", "phrase"}
        extensions = {k: v for k, v in data.items() if k not in standard_fields}
        return cls(
            message=data.get("message"),
            help=data.get("help"),
            phrase=data.get("phrase"),
            extensions=extensions if extensions else None,
        )

    @classmethod
    def list_from_body(cls, body: Any) -> list["ErrorDetail"]:
        """Parse the error list from a decoded response body.

        Args:
            body: Decoded JSON body (may be None or any JSON value)

        Returns:
            Parsed error entries; empty if the body is not an error envelope
        """
        if not isinstance(body, dict):
            return []

        errors = body.get("errors")
        if not isinstance(errors, list):
            return []

        return [cls.from_dict(item) for item in errors if isinstance(item, dict)]

    def to_exception_message(self) -> str:
        """Convert the error entry to an exception message."""
        lines = []

        if self.message:
            lines.append(self.message)

        if self.help:
            lines.append(self.help)

        if self.phrase:
            lines.append(f"Phrase: {self.phrase}")

        return "\n".join(lines) if lines else "Unknown API error"
