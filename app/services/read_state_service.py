"""Read state of messages: mark read, and count what is still unread."""

from __future__ import annotations

from typing import Dict, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.access_guard import ensure_can_mark_read
from app.exceptions import ValidationError
from app.infra.logging_config import get_logger
from app.models.message import Message
from app.models.mixins import utcnow
from app.services.message_service import MessageService
from app.utils.db.errors import storage_guard

logger = get_logger("read_state")


class ReadStateService:
    """
    Moves messages from unread to read, never back.

    Transitions are conditional updates (``WHERE read IS false``), so
    concurrent or repeated calls converge without locking.
    """

    def __init__(
        self,
        db: Session,
        message_service: Optional[MessageService] = None,
    ) -> None:
        self.db = db
        self._message_svc = message_service or MessageService(db)

    def mark_read(self, message_id: int, requester_id: UUID) -> Message:
        """Mark one message read. Only its recipient may; repeating is a no-op."""
        message = self._message_svc.get_message(message_id)
        ensure_can_mark_read(message, requester_id)
        with storage_guard(self.db, "mark_read"):
            updated = (
                self.db.query(Message)
                .filter(Message.id == message_id, Message.read.is_(False))
                .update(
                    {Message.read: True, Message.updated_at: utcnow()},
                    synchronize_session=False,
                )
            )
            self.db.commit()
            self.db.refresh(message)
        if updated:
            logger.info("Message %s marked read by %s", message_id, requester_id)
        return message

    def mark_conversation_read(self, user_id: UUID, other_user_id: UUID) -> int:
        """
        Mark every unread message from other_user_id to user_id read.

        Runs as a single UPDATE statement, so readers see all of the pair's
        messages flip together. Returns the number of messages that changed.
        """
        if user_id == other_user_id:
            raise ValidationError("A conversation needs two different users")
        with storage_guard(self.db, "mark_conversation_read"):
            updated = (
                self.db.query(Message)
                .filter(
                    Message.recipient_id == user_id,
                    Message.sender_id == other_user_id,
                    Message.read.is_(False),
                )
                .update(
                    {Message.read: True, Message.updated_at: utcnow()},
                    synchronize_session=False,
                )
            )
            self.db.commit()
        # Loaded instances may still hold read=False
        self.db.expire_all()
        logger.info(
            "Conversation with %s marked read by %s (%d messages)",
            other_user_id,
            user_id,
            updated,
        )
        return updated

    def unread_count(self, user_id: UUID) -> int:
        """Number of unread messages addressed to the user."""
        with storage_guard(self.db, "unread_count"):
            return (
                self.db.query(func.count(Message.id))
                .filter(Message.recipient_id == user_id, Message.read.is_(False))
                .scalar()
            ) or 0

    def unread_by_conversation(self, user_id: UUID) -> Dict[UUID, int]:
        """Unread counts keyed by the conversation partner's id."""
        with storage_guard(self.db, "unread_by_conversation"):
            rows = (
                self.db.query(Message.sender_id, func.count(Message.id))
                .filter(Message.recipient_id == user_id, Message.read.is_(False))
                .group_by(Message.sender_id)
                .all()
            )
        return {sender_id: count for sender_id, count in rows}
