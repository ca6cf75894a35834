"""
Message endpoints for API v1.
"""

from fastapi import APIRouter, Depends, Query, status

from tourisma_api.app.core.exceptions import TourismaError, http_error
from tourisma_api.app.core.security import get_current_user
from tourisma_api.app.core.store import DataStore, get_store
from tourisma_api.app.schemas.message import MessageCreate, MessageSent, ReadReceipt
from tourisma_api.app.schemas.user import UnreadCount, User
from tourisma_api.app.services.conversation_service import ConversationService


router = APIRouter()


@router.post("/", response_model=MessageSent, status_code=status.HTTP_201_CREATED)
async def send_message(
    data: MessageCreate,
    current_user: User = Depends(get_current_user),
    store: DataStore = Depends(get_store),
) -> MessageSent:
    """Send a message; the conversation is created or updated as needed.

    ``conversation`` is ``null`` when neither user owns a partner.
    """
    try:
        message, conversation = ConversationService(store).deliver(
            current_user.id, data.receiver_id, data.content, data.conversation_id
        )
    except TourismaError as e:
        raise http_error(e) from e
    return MessageSent(message=message, conversation=conversation)


@router.get("/unread-count", response_model=UnreadCount)
async def unread_count(
    current_user: User = Depends(get_current_user),
    store: DataStore = Depends(get_store),
) -> UnreadCount:
    return UnreadCount(unread=ConversationService(store).get_unread_messages_count(current_user.id))


@router.post("/read", response_model=ReadReceipt)
async def mark_read(
    sender_id: str = Query(..., description="Mark messages from this user as read"),
    current_user: User = Depends(get_current_user),
    store: DataStore = Depends(get_store),
) -> ReadReceipt:
    return ReadReceipt(marked=ConversationService(store).mark_messages_as_read(current_user.id, sender_id))
