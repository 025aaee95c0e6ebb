"""Result envelope returned by every service operation."""

from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, TypeVar

from pydantic import BaseModel

from utils.error_handling import AppError

T = TypeVar("T")


def _to_plain(value: Any) -> Any:
    """Turn models (and lists of them) into JSON-ready values."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, list):
        return [_to_plain(item) for item in value]
    return value


@dataclass
class Result(Generic[T]):
    """Either a success value or an AppError, never both."""

    value: Optional[T] = None
    error: Optional[AppError] = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: AppError) -> "Result[T]":
        return cls(error=error)

    @property
    def is_ok(self) -> bool:
        return self.error is None

    @property
    def error_kind(self) -> Optional[str]:
        return self.error.kind if self.error else None

    def unwrap(self) -> T:
        """Return the success value or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.value

    def to_dict(self) -> Dict[str, Any]:
        """Render as ``{"Ok": value}`` or ``{"Err": {Kind: message}}``."""
        if self.error is not None:
            return {"Err": self.error.to_dict()}
        return {"Ok": _to_plain(self.value)}
