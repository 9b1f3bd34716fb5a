"""Messages API: send, list, conversations, read state, polling, delete."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi_pagination import Params
from fastapi_pagination.ext.sqlalchemy import paginate

from app.auth.current_user import get_current_user
from app.config import get_settings
from app.infra.redis_client import get_redis_client
from app.models.user import User
from app.routers.utils.dependencies import (
    get_conversation_service,
    get_message_service,
    get_notification_service,
    get_read_state_service,
)
from app.routers.utils.envelope import ok, pagination_of
from app.schemas.envelope import Envelope
from app.schemas.message import (
    CheckNewRead,
    ConversationRead,
    MarkConversationReadResult,
    MessageCreate,
    MessageDetail,
    MessageRead,
    UnreadCountRead,
)
from app.schemas.user import UserSummary
from app.services.conversation_service import Conversation, ConversationService
from app.services.message_service import MessageService
from app.services.notification_service import NotificationService
from app.services.read_state_service import ReadStateService
from app.utils.rate_limit import check_message_rate_limit

messages_router = APIRouter(prefix="/api/v1/messages", tags=["messages"])


def _conversation_to_read(c: Conversation) -> ConversationRead:
    return ConversationRead(
        pair_key=c.pair_key,
        participants=list(c.participants),
        other_user=UserSummary.model_validate(c.other_user) if c.other_user else None,
        last_message=MessageRead.model_validate(c.last_message),
        unread_count=c.unread_count,
        item_id=c.last_message.item_id,
    )


@messages_router.get("", response_model=Envelope[list[MessageDetail]])
def list_my_messages(
    params: Params = Depends(),
    current_user: User = Depends(get_current_user),
    svc: MessageService = Depends(get_message_service),
) -> dict[str, Any]:
    """List messages the caller sent or received, newest first."""
    page = paginate(svc.list_for_user_query(current_user.id), params=params)
    items = [MessageDetail.model_validate(m) for m in page.items]
    return ok(
        items,
        message=None if items else "No messages found",
        pagination=pagination_of(page),
    )


@messages_router.post("", response_model=Envelope[MessageDetail], status_code=201)
def send_message(
    data: MessageCreate,
    current_user: User = Depends(get_current_user),
    svc: MessageService = Depends(get_message_service),
) -> dict[str, Any]:
    """Send a message to another user, optionally about an item."""
    settings = get_settings()
    if not check_message_rate_limit(
        current_user.id,
        get_redis_client(),
        settings.message_rate_limit_per_user_per_minute,
    ):
        raise HTTPException(
            status_code=429,
            detail="Too many messages, please try again in a minute",
        )
    message = svc.send(current_user.id, data.recipient, data.content, data.item)
    return ok(MessageDetail.model_validate(message))


@messages_router.get("/unread", response_model=Envelope[list[MessageDetail]])
def list_unread_messages(
    current_user: User = Depends(get_current_user),
    svc: MessageService = Depends(get_message_service),
) -> dict[str, Any]:
    """List unread messages addressed to the caller."""
    items = [MessageDetail.model_validate(m) for m in svc.list_unread(current_user.id)]
    return ok(items, message=None if items else "No unread messages")


@messages_router.get("/unread-count", response_model=Envelope[UnreadCountRead])
def get_unread_count(
    current_user: User = Depends(get_current_user),
    svc: ReadStateService = Depends(get_read_state_service),
) -> dict[str, Any]:
    """Badge count: total unread and unread per conversation partner."""
    return ok(
        UnreadCountRead(
            total=svc.unread_count(current_user.id),
            by_conversation=svc.unread_by_conversation(current_user.id),
        )
    )


@messages_router.get("/check-new", response_model=Envelope[CheckNewRead])
def check_new_messages(
    since: Optional[datetime] = Query(
        None, description="Watermark returned by the previous poll (last_checked)"
    ),
    last_checked: Optional[datetime] = Query(
        None, alias="lastChecked", description="Same as since, under its legacy name"
    ),
    current_user: User = Depends(get_current_user),
    svc: NotificationService = Depends(get_notification_service),
) -> dict[str, Any]:
    """Poll for messages received after `since` (or `lastChecked`)."""
    result = svc.check_new(current_user.id, since or last_checked)
    return ok(
        CheckNewRead(
            has_new=result.has_new,
            count=len(result.messages),
            messages=[MessageRead.model_validate(m) for m in result.messages],
            last_checked=result.last_checked,
        )
    )


@messages_router.get("/conversations", response_model=Envelope[list[ConversationRead]])
def list_conversations(
    current_user: User = Depends(get_current_user),
    svc: ConversationService = Depends(get_conversation_service),
) -> dict[str, Any]:
    """One entry per conversation partner with the latest message and unread count."""
    rows = [_conversation_to_read(c) for c in svc.list_conversations(current_user.id)]
    return ok(rows, message=None if rows else "No conversations found")


@messages_router.get(
    "/conversations/{user_id}", response_model=Envelope[list[MessageDetail]]
)
def get_conversation(
    user_id: UUID,
    params: Params = Depends(),
    mark_read: bool = Query(False, description="Mark received messages read first"),
    current_user: User = Depends(get_current_user),
    svc: ConversationService = Depends(get_conversation_service),
    read_svc: ReadStateService = Depends(get_read_state_service),
) -> dict[str, Any]:
    """Messages exchanged with `user_id`, oldest first."""
    query = svc.get_conversation_query(current_user.id, user_id)
    if mark_read:
        read_svc.mark_conversation_read(current_user.id, user_id)
    page = paginate(query, params=params)
    items = [MessageDetail.model_validate(m) for m in page.items]
    return ok(
        items,
        message=None if items else "No messages in this conversation",
        pagination=pagination_of(page),
    )


@messages_router.put(
    "/conversations/{user_id}/read",
    response_model=Envelope[MarkConversationReadResult],
)
def mark_conversation_read(
    user_id: UUID,
    current_user: User = Depends(get_current_user),
    svc: ReadStateService = Depends(get_read_state_service),
) -> dict[str, Any]:
    """Mark everything `user_id` sent to the caller as read."""
    updated = svc.mark_conversation_read(current_user.id, user_id)
    return ok(MarkConversationReadResult(updated=updated))


@messages_router.get("/{message_id}", response_model=Envelope[MessageDetail])
def get_message(
    message_id: int,
    current_user: User = Depends(get_current_user),
    svc: MessageService = Depends(get_message_service),
) -> dict[str, Any]:
    """Get a message the caller sent or received."""
    message = svc.get_message_for_user(message_id, current_user.id)
    return ok(MessageDetail.model_validate(message))


@messages_router.put("/{message_id}/read", response_model=Envelope[MessageDetail])
def mark_message_read(
    message_id: int,
    current_user: User = Depends(get_current_user),
    svc: ReadStateService = Depends(get_read_state_service),
) -> dict[str, Any]:
    """Mark a received message as read."""
    message = svc.mark_read(message_id, current_user.id)
    return ok(MessageDetail.model_validate(message))


@messages_router.delete("/{message_id}", response_model=Envelope[dict])
def delete_message(
    message_id: int,
    current_user: User = Depends(get_current_user),
    svc: MessageService = Depends(get_message_service),
) -> dict[str, Any]:
    """Delete a message for both participants."""
    svc.delete(message_id, current_user.id)
    return ok({})
