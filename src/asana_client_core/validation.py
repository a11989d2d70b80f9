"""Input checks run before a call is built.

All failures raise `LocalValidationError` and happen before any network I/O.
"""

import re
from collections.abc import Iterable, Mapping
from typing import Any

from asana_client_core.errors.exceptions import LocalValidationError

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def validate_gid(gid: str, parameter_name: str) -> None:
    """Check that ``gid`` is a non-empty numeric string.

    Raises:
        LocalValidationError: If the GID is empty or not numeric
    """
    trimmed = gid.strip() if isinstance(gid, str) else ""
    if not trimmed:
        raise LocalValidationError(f"{parameter_name} must be a non-empty string.")
    if not trimmed.isdigit():
        raise LocalValidationError(f"{parameter_name} must be a numeric string.")


def validate_user_gid(user_gid: str) -> None:
    """Accept a numeric GID, ``me`` or an email address."""
    trimmed = user_gid.strip() if isinstance(user_gid, str) else ""
    if not trimmed:
        raise LocalValidationError("User GID must be a non-empty string.")
    if trimmed == "me" or trimmed.isdigit() or _EMAIL_PATTERN.match(trimmed):
        return
    raise LocalValidationError('User GID must be a numeric string, "me", or a valid email address.')


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_required_fields(data: Mapping[str, Any], required_fields: Iterable[str], context: str) -> None:
    """Check that every field in ``required_fields`` is present and not blank.

    Raises:
        LocalValidationError: Listing every missing field
    """
    missing = [field for field in required_fields if _is_blank(data.get(field))]
    if missing:
        raise LocalValidationError(f"Missing required field(s) for {context}: {', '.join(missing)}")


def validate_at_least_one_field(data: Mapping[str, Any], fields: Iterable[str], context: str) -> None:
    fields = list(fields)
    if any(not _is_blank(data.get(field)) for field in fields):
        return
    raise LocalValidationError(
        f"At least one of the following fields is required for {context}: {', '.join(fields)}"
    )


def validate_gid_list(gids: Iterable[str], parameter_name: str) -> None:
    gids = list(gids)
    if not gids:
        raise LocalValidationError(f"{parameter_name} must be a non-empty list.")
    for index, gid in enumerate(gids):
        validate_gid(gid, f"{parameter_name}[{index}]")
