from app.services.conversation_service import ConversationService
from app.services.item_service import ItemService
from app.services.message_service import MessageService
from app.services.notification_service import NotificationService
from app.services.read_state_service import ReadStateService
from app.services.user_service import UserService

__all__ = [
    "ConversationService",
    "ItemService",
    "MessageService",
    "NotificationService",
    "ReadStateService",
    "UserService",
]
