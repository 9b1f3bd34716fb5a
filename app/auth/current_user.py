"""Resolve the authenticated user forwarded by the identity gateway."""

from __future__ import annotations

from uuid import UUID

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from app.config import get_settings
from app.db import get_db
from app.models.user import User
from app.services.user_service import UserService


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
) -> User:
    """FastAPI dependency returning the caller. The identity header is trusted as-is."""
    header = get_settings().user_id_header
    raw = request.headers.get(header)
    if not raw:
        raise HTTPException(status_code=401, detail="Not authenticated")
    try:
        user_id = UUID(raw)
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid user identity")
    user = UserService(db).get_active_user(user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Unknown or inactive user")
    return user
