from fastapi import Depends
from sqlalchemy.orm import Session

from app.db import get_db
from app.services.conversation_service import ConversationService
from app.services.message_service import MessageService
from app.services.notification_service import NotificationService
from app.services.read_state_service import ReadStateService


def get_message_service(db: Session = Depends(get_db)) -> MessageService:
    return MessageService(db)


def get_conversation_service(db: Session = Depends(get_db)) -> ConversationService:
    return ConversationService(db)


def get_read_state_service(db: Session = Depends(get_db)) -> ReadStateService:
    return ReadStateService(db)


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    return NotificationService(db)
