"""
Message store: send, fetch, delete and list messages.

Messages are immutable once written; the read flag is handled by
ReadStateService. Every operation validates and authorizes before touching
storage, and storage outages surface as TransientError.
"""

from __future__ import annotations

from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Query, Session

from app.constants.messages import MESSAGE_MAX_LENGTH
from app.core.access_guard import ensure_can_access
from app.core.pair_key import build_pair_key
from app.exceptions import NotFoundError, ValidationError
from app.infra.logging_config import get_logger
from app.models.message import Message
from app.services.item_service import ItemService
from app.services.user_service import UserService
from app.utils.db.errors import storage_guard

logger = get_logger("message_store")


def validate_content(content: Optional[str]) -> str:
    """
    Enforce 1..MESSAGE_MAX_LENGTH characters on the content as given.

    Whitespace-only content counts as empty. The text is returned unchanged.
    """
    if content is None or not content.strip():
        raise ValidationError("Message content cannot be empty")
    if len(content) > MESSAGE_MAX_LENGTH:
        raise ValidationError(
            f"Message content cannot be longer than {MESSAGE_MAX_LENGTH} characters"
        )
    return content


class MessageService:
    """Append-only ledger of direct messages."""

    def __init__(
        self,
        db: Session,
        user_service: Optional[UserService] = None,
        item_service: Optional[ItemService] = None,
    ) -> None:
        self.db = db
        self._user_svc = user_service or UserService(db)
        self._item_svc = item_service or ItemService(db)

    def send(
        self,
        sender_id: UUID,
        recipient_id: UUID,
        content: str,
        item_id: Optional[UUID] = None,
    ) -> Message:
        """Persist a new unread message from sender to recipient."""
        text = validate_content(content)
        if sender_id == recipient_id:
            raise ValidationError("You cannot send a message to yourself")
        with storage_guard(self.db, "send"):
            if self._user_svc.get_active_user(recipient_id) is None:
                raise NotFoundError(f"User {recipient_id} not found")
            if item_id is not None:
                self._item_svc.require_item(item_id)
            message = Message(
                sender_id=sender_id,
                recipient_id=recipient_id,
                pair_key=build_pair_key(sender_id, recipient_id),
                content=text,
                item_id=item_id,
                read=False,
            )
            self.db.add(message)
            self.db.commit()
            self.db.refresh(message)
        logger.info(
            "Message %s sent from %s to %s", message.id, sender_id, recipient_id
        )
        return message

    def get_message(self, message_id: int) -> Message:
        """Fetch a message by id or raise NotFoundError."""
        with storage_guard(self.db, "get_message"):
            message = self.db.query(Message).filter(Message.id == message_id).first()
        if message is None:
            raise NotFoundError(f"Message {message_id} not found")
        return message

    def get_message_for_user(self, message_id: int, user_id: UUID) -> Message:
        """Fetch a message the user sent or received."""
        message = self.get_message(message_id)
        ensure_can_access(message, user_id, action="view")
        return message

    def delete(self, message_id: int, requester_id: UUID) -> None:
        """Permanently remove a message for both participants."""
        message = self.get_message(message_id)
        ensure_can_access(message, requester_id, action="delete")
        with storage_guard(self.db, "delete"):
            self.db.delete(message)
            self.db.commit()
        logger.info("Message %s deleted by %s", message_id, requester_id)

    def list_for_user_query(self, user_id: UUID) -> Query[Message]:
        """Messages the user sent or received, newest first (for pagination)."""
        return (
            self.db.query(Message)
            .filter(or_(Message.sender_id == user_id, Message.recipient_id == user_id))
            .order_by(Message.created_at.desc(), Message.id.desc())
        )

    def list_for_user(
        self,
        user_id: UUID,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[Message], int]:
        """Return one page of the user's messages and the total count."""
        page, limit = max(page, 1), max(limit, 1)
        query = self.list_for_user_query(user_id)
        with storage_guard(self.db, "list_for_user"):
            total = query.order_by(None).count()
            items = query.offset((page - 1) * limit).limit(limit).all()
        return items, total

    def list_unread_query(self, user_id: UUID) -> Query[Message]:
        return (
            self.db.query(Message)
            .filter(Message.recipient_id == user_id, Message.read.is_(False))
            .order_by(Message.created_at.desc(), Message.id.desc())
        )

    def list_unread(self, user_id: UUID) -> List[Message]:
        """Unread messages addressed to the user, newest first."""
        with storage_guard(self.db, "list_unread"):
            return self.list_unread_query(user_id).all()
