"""Cheap change detection for clients polling for new messages."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy import exists
from sqlalchemy.orm import Session

from app.models.message import Message
from app.utils.db.errors import storage_guard


def as_utc(value: datetime) -> datetime:
    """Interpret naive timestamps as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass
class PollResult:
    has_new: bool
    last_checked: Optional[datetime]
    messages: List[Message] = field(default_factory=list)


class NotificationService:
    """
    Answers "did anything arrive since T" from the (recipient_id, created_at) index.

    Reads go through the same session that committed the send, so a message is
    visible to the very next poll.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def has_new_since(self, user_id: UUID, since: datetime) -> bool:
        with storage_guard(self.db, "has_new_since"):
            return bool(
                self.db.query(
                    exists().where(
                        Message.recipient_id == user_id,
                        Message.created_at > as_utc(since),
                    )
                ).scalar()
            )

    def check_new(self, user_id: UUID, since: Optional[datetime] = None) -> PollResult:
        """
        Return inbound messages newer than `since` (all of them when None).

        `last_checked` is the newest `created_at` among the returned messages,
        or `since` itself when nothing came back. It never runs ahead of the
        rows this query saw, so a send stamped before a later poll but
        committed after this one is still newer than the watermark.
        """
        query = self.db.query(Message).filter(Message.recipient_id == user_id)
        if since is not None:
            query = query.filter(Message.created_at > as_utc(since))
        with storage_guard(self.db, "check_new"):
            messages = query.order_by(
                Message.created_at.desc(), Message.id.desc()
            ).all()
        watermark = messages[0].created_at if messages else since
        last_checked = as_utc(watermark) if watermark is not None else None
        return PollResult(
            has_new=bool(messages), last_checked=last_checked, messages=messages
        )
