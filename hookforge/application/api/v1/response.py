from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope shared by all JSON endpoints."""

    success: bool = True
    data: T | None = None
    errors: list[str] | None = None
