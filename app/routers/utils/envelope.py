"""Helpers building the response envelope."""

from __future__ import annotations

from typing import Any, Optional

from fastapi_pagination import Page

from app.schemas.envelope import Pagination


def ok(
    data: Any = None,
    *,
    message: Optional[str] = None,
    pagination: Optional[Pagination] = None,
) -> dict[str, Any]:
    body: dict[str, Any] = {"success": True, "data": data}
    if message is not None:
        body["message"] = message
    if pagination is not None:
        body["pagination"] = pagination
    return body


def pagination_of(page: Page) -> Pagination:
    return Pagination.build(page=page.page, limit=page.size, total=page.total)
