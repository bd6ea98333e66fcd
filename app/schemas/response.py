from typing import Any, Dict, Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Uniform envelope for every response of the API."""

    success: bool
    message: str
    data: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, message: str, data: T) -> "ApiResponse[T]":
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, message: str, error: Optional[str] = None) -> "ApiResponse[Any]":
        return cls(success=False, message=message, error=error)

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)
