"""Item model: the catalog listing a message may refer to."""

from __future__ import annotations

import uuid

from sqlalchemy import Boolean, Column, ForeignKey, String, Uuid
from sqlalchemy.orm import relationship

from app.db import Base
from app.models.mixins import TimestampMixin


class Item(Base, TimestampMixin):
    """Only the reference surface messaging needs; search lives in the catalog service."""

    __tablename__ = "items"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(100), nullable=False)
    owner_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    available = Column(Boolean, nullable=False, default=True)

    owner = relationship("User")
