"""Pydantic schemas for messages, conversations and polling."""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.constants.messages import MESSAGE_MAX_LENGTH
from app.schemas.user import UserSummary

# -----------------------------------------------------------------------------
# Message schemas
# -----------------------------------------------------------------------------


class MessageCreate(BaseModel):
    """Schema for sending a message. The sender is the authenticated user."""

    recipient: UUID
    content: str = Field(..., max_length=MESSAGE_MAX_LENGTH)
    item: Optional[UUID] = None


class MessageRead(BaseModel):
    """Message for API responses."""

    id: int
    sender_id: UUID
    recipient_id: UUID
    content: str
    item_id: Optional[UUID] = None
    read: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class MessageDetail(MessageRead):
    """Message with sender and recipient expanded."""

    sender: Optional[UserSummary] = None
    recipient: Optional[UserSummary] = None


# -----------------------------------------------------------------------------
# Conversation schemas (derived, never stored)
# -----------------------------------------------------------------------------


class ConversationRead(BaseModel):
    """Latest message and unread count for one pair of users."""

    pair_key: str
    participants: list[UUID]
    other_user: Optional[UserSummary] = None
    last_message: MessageRead
    unread_count: int = 0
    item_id: Optional[UUID] = None


# -----------------------------------------------------------------------------
# Read state and polling
# -----------------------------------------------------------------------------


class UnreadCountRead(BaseModel):
    total: int
    by_conversation: dict[UUID, int] = Field(default_factory=dict)


class MarkConversationReadResult(BaseModel):
    updated: int


class CheckNewRead(BaseModel):
    """Answer to a poll: whether anything arrived after `since`, and the next watermark."""

    has_new: bool
    count: int
    messages: list[MessageRead] = Field(default_factory=list)
    last_checked: Optional[datetime] = None
