"""
Message model: one row per direct message between two users.

The table is an append-only ledger. Conversations are not stored; they are the
groups of rows sharing a pair_key, the canonical key of the two participants.
"""

from __future__ import annotations

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import relationship

from app.db import Base
from app.models.mixins import TimestampMixin


class Message(Base, TimestampMixin):
    """
    Directed message from sender to recipient, optionally about an item.

    Only `read` (and `updated_at`) ever change after insert, and `read` only
    goes from False to True. The integer id grows with insertion order and
    breaks ties between equal created_at values.
    """

    __tablename__ = "messages"

    __table_args__ = (
        CheckConstraint("sender_id <> recipient_id", name="ck_messages_not_self"),
        Index("ix_messages_pair_key_created", "pair_key", "created_at"),
        Index("ix_messages_recipient_created", "recipient_id", "created_at"),
        Index("ix_messages_recipient_read", "recipient_id", "read"),
        Index(
            "ix_messages_sender_recipient_created",
            "sender_id",
            "recipient_id",
            "created_at",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    sender_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    recipient_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    pair_key = Column(String(80), nullable=False)
    content = Column(Text, nullable=False)
    item_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("items.id", ondelete="SET NULL"),
        nullable=True,
    )
    read = Column(Boolean, nullable=False, default=False)

    sender = relationship("User", foreign_keys=[sender_id])
    recipient = relationship("User", foreign_keys=[recipient_id])
    item = relationship("Item")
