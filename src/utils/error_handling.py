"""Custom exceptions and helpers for consistent error results."""

from typing import Dict


class AppError(Exception):
    """Base class for application errors."""

    kind = "InternalError"

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def to_dict(self) -> Dict[str, str]:
        """Render as the ``{Kind: message}`` variant used on the wire."""
        return {self.kind: self.message}


class NotFoundError(AppError):
    """Raised when an identifier is absent from its store."""

    kind = "NotFound"

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, status_code=404)


class InvalidPayloadError(AppError):
    """Raised for malformed identifiers and empty or absent payloads."""

    kind = "InvalidPayload"

    def __init__(self, message: str = "Invalid payload"):
        super().__init__(message, status_code=422)


class InternalError(AppError):
    """Reserved for unexpected host failures."""

    kind = "InternalError"

    def __init__(self, message: str = "Internal error"):
        super().__init__(message, status_code=500)


def not_found(entity: str, entity_id: str) -> NotFoundError:
    """Build the standard NotFound error for an entity id."""
    return NotFoundError(f"{entity} with id={entity_id} not found")
