"""User model: the marketplace account a message is sent from or to."""

from __future__ import annotations

import uuid

from sqlalchemy import Boolean, Column, String, Uuid

from app.db import Base
from app.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """Participant identity. Profile and credentials live with the identity service."""

    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(50), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    avatar = Column(String(512), nullable=True, default="default-avatar.png")
    is_active = Column(Boolean, nullable=False, default=True)
