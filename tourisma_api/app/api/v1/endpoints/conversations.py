"""
Conversation endpoints for API v1.

The conversation list depends on the role of the caller: clients see
their threads, partners their client-side threads plus those of the
partners they own, admins the support inbox.  Opening a thread marks
the counterpart's messages as read.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from tourisma_api.app.core.exceptions import TourismaError, http_error
from tourisma_api.app.core.security import get_current_user, require_roles
from tourisma_api.app.core.store import DataStore, get_store
from tourisma_api.app.schemas.message import (
    Conversation,
    ConversationView,
    Message,
    ReadReceipt,
    WelcomeRequest,
)
from tourisma_api.app.schemas.user import User, UserRole
from tourisma_api.app.services.conversation_service import ConversationService


router = APIRouter()


@router.get("/", response_model=List[ConversationView])
async def list_conversations(
    current_user: User = Depends(get_current_user),
    store: DataStore = Depends(get_store),
) -> List[ConversationView]:
    return ConversationService(store).conversations_for_user(current_user)


@router.post("/welcome", response_model=Conversation, status_code=status.HTTP_201_CREATED)
async def start_with_welcome(
    data: WelcomeRequest,
    current_user: User = Depends(require_roles(UserRole.CLIENT)),
    store: DataStore = Depends(get_store),
) -> Conversation:
    """Contact the partner offering an experience.

    The partner greets the client automatically, once per experience.
    """
    service = ConversationService(store)
    try:
        conversation_id = service.contact_about_experience(current_user.id, data.experience_id)
    except TourismaError as e:
        raise http_error(e) from e
    return service.get_conversation(conversation_id)


@router.post("/support", response_model=Conversation)
async def open_support_chat(
    current_user: User = Depends(require_roles(UserRole.CLIENT, UserRole.PARTNER)),
    store: DataStore = Depends(get_store),
) -> Conversation:
    try:
        return ConversationService(store).initialize_support_chat(current_user)
    except TourismaError as e:
        raise http_error(e) from e


@router.get("/{conversation_id}/messages", response_model=List[Message])
async def read_thread(
    conversation_id: str,
    current_user: User = Depends(get_current_user),
    store: DataStore = Depends(get_store),
) -> List[Message]:
    try:
        return ConversationService(store).open_thread(current_user, conversation_id)
    except TourismaError as e:
        raise http_error(e) from e


@router.post("/{conversation_id}/read", response_model=ReadReceipt)
async def mark_conversation_read(
    conversation_id: str,
    current_user: User = Depends(get_current_user),
    store: DataStore = Depends(get_store),
) -> ReadReceipt:
    """Mark the counterpart's messages in a conversation as read."""
    service = ConversationService(store)
    try:
        conversation = service.get_conversation_or_404(conversation_id)
        service.ensure_participant(current_user, conversation)
    except TourismaError as e:
        raise http_error(e) from e
    return ReadReceipt(marked=service.mark_conversation_as_read(current_user, conversation))


@router.delete("/{conversation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_conversation(
    conversation_id: str,
    current_user: User = Depends(get_current_user),
    store: DataStore = Depends(get_store),
) -> None:
    """Close (delete) a conversation.  Its messages are kept."""
    service = ConversationService(store)
    try:
        service.ensure_participant(current_user, service.get_conversation_or_404(conversation_id))
        service.close_conversation(conversation_id)
    except TourismaError as e:
        raise http_error(e) from e
