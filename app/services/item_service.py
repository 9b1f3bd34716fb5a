"""Catalog lookups needed before a message may cite an item."""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.exceptions import NotFoundError
from app.models.item import Item


class ItemService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get_item(self, item_id: UUID) -> Optional[Item]:
        return self.db.query(Item).filter(Item.id == item_id).first()

    def require_item(self, item_id: UUID) -> Item:
        """Fetch an item or raise NotFoundError."""
        item = self.get_item(item_id)
        if item is None:
            raise NotFoundError(f"Item {item_id} not found")
        return item
