"""Who may read, delete or mark a message read."""

from __future__ import annotations

from uuid import UUID

from app.exceptions import AuthorizationError
from app.models.message import Message


def can_access(message: Message, user_id: UUID) -> bool:
    return user_id == message.sender_id or user_id == message.recipient_id


def can_mark_read(message: Message, user_id: UUID) -> bool:
    return user_id == message.recipient_id


def ensure_can_access(message: Message, user_id: UUID, action: str = "access") -> None:
    """Raise AuthorizationError unless `user_id` sent or received the message."""
    if not can_access(message, user_id):
        raise AuthorizationError(f"Not authorized to {action} this message")


def ensure_can_mark_read(message: Message, user_id: UUID) -> None:
    if not can_mark_read(message, user_id):
        raise AuthorizationError("Only the recipient can mark this message as read")
