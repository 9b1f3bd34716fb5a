"""User lookups for message participants."""

from __future__ import annotations

from typing import Iterable, Dict, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.models.user import User


class UserService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get_user(self, user_id: UUID) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_active_user(self, user_id: UUID) -> Optional[User]:
        """Fetch a user that may send or receive messages."""
        return (
            self.db.query(User)
            .filter(User.id == user_id, User.is_active.is_(True))
            .first()
        )

    def get_users_by_ids(self, user_ids: Iterable[UUID]) -> Dict[UUID, User]:
        ids = set(user_ids)
        if not ids:
            return {}
        users = self.db.query(User).filter(User.id.in_(ids)).all()
        return {u.id: u for u in users}
