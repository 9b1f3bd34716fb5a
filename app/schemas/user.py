"""Pydantic schemas for users as they appear inside messages."""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from pydantic import BaseModel


class UserSummary(BaseModel):
    """Public user fields embedded in messages and conversations."""

    id: UUID
    name: str
    avatar: Optional[str] = None

    model_config = {"from_attributes": True}
