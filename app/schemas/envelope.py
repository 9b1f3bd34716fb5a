"""Uniform response envelope returned by every endpoint."""

from __future__ import annotations

from math import ceil
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        pages = ceil(total / limit) if limit else 0
        return cls(page=page, limit=limit, total=total, pages=pages)


class Envelope(BaseModel, Generic[T]):
    """
    {success, data, message, error, pagination}; unset keys are null.

    Error bodies are built by error_body and carry only success and error.
    """

    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None
    error: Optional[str] = None
    pagination: Optional[Pagination] = None


def error_body(error: str) -> dict[str, Any]:
    return {"success": False, "error": error}
