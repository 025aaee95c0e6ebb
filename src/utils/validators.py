"""Validation helpers shared by services and handlers."""

import re
from typing import Any, Mapping

from pydantic import BaseModel

from utils.error_handling import InvalidPayloadError

ID_PATTERN = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}",
    re.IGNORECASE,
)


def is_valid_id(value: Any) -> bool:
    """Check a value against the 8-4-4-4-12 hex identifier format."""
    return isinstance(value, str) and ID_PATTERN.fullmatch(value) is not None


def ensure_valid_id(value: Any, message: str = "Invalid UUID") -> None:
    """Raise InvalidPayloadError unless value is a well-formed identifier."""
    if not is_valid_id(value):
        raise InvalidPayloadError(message)


def is_valid_payload(payload: Any) -> bool:
    """
    Shallow payload check: a structured value with at least one field.

    Field types and string emptiness are not inspected.
    """
    if isinstance(payload, BaseModel):
        return len(payload.model_dump()) > 0
    if isinstance(payload, Mapping):
        return len(payload) > 0
    return False


def ensure_valid_payload(payload: Any) -> None:
    """Raise InvalidPayloadError unless the payload passes the shallow check."""
    if not is_valid_payload(payload):
        raise InvalidPayloadError("Invalid payload")
