"""
Conversations derived from the message ledger.

There is no conversation table. A conversation is every message sharing a
pair_key; listing picks the newest message of each pair with a window
function over the (pair_key, created_at) index, and counts the caller's
unread messages of that pair in the same statement so the row is consistent
with concurrent read-state updates.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Query, Session, aliased

from app.core.pair_key import build_pair_key, other_participant, split_pair_key
from app.exceptions import NotFoundError, ValidationError
from app.models.message import Message
from app.models.user import User
from app.services.user_service import UserService
from app.utils.db.errors import storage_guard


@dataclass
class Conversation:
    pair_key: str
    participants: Tuple[UUID, UUID]
    other_user_id: UUID
    last_message: Message
    unread_count: int
    other_user: Optional[User] = None


class ConversationService:
    def __init__(
        self,
        db: Session,
        user_service: Optional[UserService] = None,
    ) -> None:
        self.db = db
        self._user_svc = user_service or UserService(db)

    def _latest_per_pair_query(self, user_id: UUID) -> Query:
        ranked = (
            select(
                Message.id.label("id"),
                func.row_number()
                .over(
                    partition_by=Message.pair_key,
                    order_by=(Message.created_at.desc(), Message.id.desc()),
                )
                .label("position"),
            )
            .where(or_(Message.sender_id == user_id, Message.recipient_id == user_id))
            .subquery()
        )
        unread = aliased(Message)
        unread_count = (
            select(func.count(unread.id))
            .where(
                unread.pair_key == Message.pair_key,
                unread.recipient_id == user_id,
                unread.read.is_(False),
            )
            .correlate(Message)
            .scalar_subquery()
        )
        return (
            self.db.query(Message, unread_count.label("unread_count"))
            .join(ranked, Message.id == ranked.c.id)
            .filter(ranked.c.position == 1)
            .order_by(Message.created_at.desc(), Message.id.desc())
        )

    def list_conversations(self, user_id: UUID) -> List[Conversation]:
        """One entry per conversation partner, most recent activity first."""
        with storage_guard(self.db, "list_conversations"):
            rows = self._latest_per_pair_query(user_id).all()
            other_ids = [other_participant(m.pair_key, user_id) for m, _ in rows]
            users = self._user_svc.get_users_by_ids(other_ids)
        conversations = []
        for (message, unread_count), other_id in zip(rows, other_ids):
            conversations.append(
                Conversation(
                    pair_key=message.pair_key,
                    participants=split_pair_key(message.pair_key),
                    other_user_id=other_id,
                    last_message=message,
                    unread_count=int(unread_count or 0),
                    other_user=users.get(other_id),
                )
            )
        return conversations

    def get_conversation_query(
        self, user_id: UUID, other_user_id: UUID
    ) -> Query[Message]:
        """Messages between the two users in reading order (for pagination)."""
        if user_id == other_user_id:
            raise ValidationError("A conversation needs two different users")
        with storage_guard(self.db, "get_conversation"):
            if self._user_svc.get_user(other_user_id) is None:
                raise NotFoundError(f"User {other_user_id} not found")
        return (
            self.db.query(Message)
            .filter(Message.pair_key == build_pair_key(user_id, other_user_id))
            .order_by(Message.created_at.asc(), Message.id.asc())
        )

    def get_conversation(
        self,
        user_id: UUID,
        other_user_id: UUID,
        page: int = 1,
        limit: int = 50,
    ) -> Tuple[List[Message], int]:
        """Return one page of the conversation, oldest first, and the total count."""
        page, limit = max(page, 1), max(limit, 1)
        query = self.get_conversation_query(user_id, other_user_id)
        with storage_guard(self.db, "get_conversation"):
            total = query.order_by(None).count()
            items = query.offset((page - 1) * limit).limit(limit).all()
        return items, total
