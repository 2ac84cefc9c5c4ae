"""Result type shared by use cases

Use cases never raise business failures to their callers; they return
``Return.ok(value)`` or ``Return.err(Error(...))`` and let the outer layer
decide how to render the error.
"""

from typing import Any, Dict, Generic, Optional, TypeVar
from pydantic import BaseModel, Field

T = TypeVar("T")


class Error(BaseModel):
    """Machine-readable failure returned by a use case"""

    code: str = Field(..., description="Stable error code (e.g. INSUFFICIENT_FUNDS)")
    message: str = Field(..., description="Human readable message")
    reason: Optional[str] = Field(default=None, description="Internal cause, for logs")
    details: Dict[str, Any] = Field(default_factory=dict, description="Structured context")


class Result(Generic[T]):
    __slots__ = ("value", "error")

    def __init__(self, value: Optional[T] = None, error: Optional[Error] = None):
        self.value = value
        self.error = error

    def is_ok(self) -> bool:
        return self.error is None

    def is_err(self) -> bool:
        return self.error is not None

    def __repr__(self) -> str:
        if self.is_ok():
            return f"Result.ok({self.value!r})"
        return f"Result.err({self.error!r})"


class Return:
    @staticmethod
    def ok(value: T) -> Result[T]:
        return Result(value=value)

    @staticmethod
    def err(error: Error) -> Result[Any]:
        return Result(error=error)
