from app.models.item import Item
from app.models.message import Message
from app.models.user import User

__all__ = [
    "Item",
    "Message",
    "User",
]
