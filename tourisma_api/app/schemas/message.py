"""
Pydantic models for conversations, messages and message templates.

A conversation is the unique thread between one client user and one
partner.  Every message records the pair it belongs to
(``client_id``/``partner_id``) so threads never have to be re-derived
from user/partner ownership; messages that could not be attached to a
pair keep both fields ``None``.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from .partner import Partner
from .user import User


class Message(BaseModel):
    id: str
    sender_id: str
    receiver_id: str
    content: str
    timestamp: datetime
    read: bool = False
    client_id: Optional[str] = None
    partner_id: Optional[str] = None


class Conversation(BaseModel):
    id: str
    client_id: str
    partner_id: str
    last_message: str
    last_message_date: datetime


class MessageCreate(BaseModel):
    """Schema for sending a message.

    ``conversation_id`` pins the message to an existing thread; without
    it the thread is resolved from the sender and receiver.
    """

    receiver_id: str
    content: str = Field(..., min_length=1)
    conversation_id: Optional[str] = None


class ConversationView(Conversation):
    """A conversation as listed on a dashboard, with the viewer's unread count."""

    partner: Optional[Partner] = None
    client: Optional[User] = None
    unread: int = 0


class WelcomeRequest(BaseModel):
    experience_id: str = Field(..., min_length=1)


class ReadReceipt(BaseModel):
    marked: int


class MessageTemplate(BaseModel):
    key: str
    content: str


class MessageTemplateUpdate(BaseModel):
    content: str = Field(..., min_length=1)


class MessageSent(BaseModel):
    """Result of sending a message: the message and its conversation, if any."""

    message: Message
    conversation: Optional[Conversation] = None
