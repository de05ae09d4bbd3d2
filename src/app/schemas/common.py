"""Response envelope shared by every endpoint."""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope: ``{"success": true, "message": ..., "data": ...}``.

    Failures use the same ``success``/``message`` keys and are rendered by the
    exception handlers in ``core.exceptions``.
    """

    success: bool = True
    message: str | None = None
    data: T | None = None

