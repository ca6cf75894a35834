"""
Business logic for conversations and messages.

A conversation is the single thread between one client user and one
partner.  Users exchange messages by user id, so sending a message has
to work out which (client, partner) pair it belongs to:

* with an explicit ``conversation_id`` the pair of that conversation is
  used, provided sender and receiver are its participants;
* otherwise every partner owned by the receiver gives a candidate
  ``(client=sender, partner)`` and every partner owned by the sender a
  candidate ``(client=receiver, partner)``.  A candidate that already
  has a conversation wins, then the first receiver-side candidate, then
  the first sender-side one.

When neither user owns a partner the message is still stored but
belongs to no conversation ("orphaned").

The service also creates the automatic welcome messages (per
experience and for the support chat) and tracks read state.
"""

import logging
from typing import List, Optional, Tuple

from ..core.exceptions import NotFoundError, PermissionDeniedError, ValidationFailedError
from ..core.store import DataStore
from ..schemas.message import Conversation, ConversationView, Message
from ..schemas.partner import Partner
from ..schemas.user import User, UserRole
from .experience_service import ExperienceService
from .message_service import (
    EXPERIENCE_WELCOME,
    SUPPORT_WELCOME_CLIENT,
    SUPPORT_WELCOME_PARTNER,
    TemplateService,
)
from .partner_service import PartnerService
from .user_service import UserService

logger = logging.getLogger(__name__)

Pair = Tuple[str, str]


class ConversationService:
    """Service for message threads and read state."""

    def __init__(self, store: DataStore) -> None:
        self.store = store
        self.partners = PartnerService(store)
        self.experiences = ExperienceService(store)
        self.users = UserService(store)
        self.templates = TemplateService(store)

    # Lookups

    def find_conversation(self, client_id: str, partner_id: str) -> Optional[Conversation]:
        return next(
            (c for c in self.store.conversations if c.client_id == client_id and c.partner_id == partner_id),
            None,
        )

    def get_conversation(self, conversation_id: str) -> Optional[Conversation]:
        return next((c for c in self.store.conversations if c.id == conversation_id), None)

    def get_conversation_or_404(self, conversation_id: str) -> Conversation:
        conversation = self.get_conversation(conversation_id)
        if conversation is None:
            raise NotFoundError(f"Conversation {conversation_id} not found")
        return conversation

    def participants(self, conversation: Conversation) -> Pair:
        """User ids on both ends of a conversation: ``(client, partner owner)``."""
        partner = self.partners.get_partner(conversation.partner_id)
        return conversation.client_id, partner.user_id if partner else None

    def ensure_participant(self, user: User, conversation: Conversation) -> None:
        if user.role == UserRole.ADMIN:
            return
        if user.id not in self.participants(conversation):
            raise PermissionDeniedError(f"User {user.id} is not part of conversation {conversation.id}")

    def get_thread(self, conversation: Conversation) -> List[Message]:
        messages = [
            m
            for m in self.store.messages
            if m.client_id == conversation.client_id and m.partner_id == conversation.partner_id
        ]
        messages.sort(key=lambda m: m.timestamp)
        return messages

    # Sending

    def _resolve_pair(self, sender_id: str, receiver_id: str, conversation_id: Optional[str]) -> Optional[Pair]:
        if conversation_id is not None:
            conversation = self.get_conversation_or_404(conversation_id)
            if {sender_id, receiver_id} != set(self.participants(conversation)):
                raise ValidationFailedError(
                    f"Users {sender_id} and {receiver_id} are not the participants of {conversation_id}"
                )
            return conversation.client_id, conversation.partner_id

        receiver_side = [(sender_id, p.id) for p in self.partners.list_partners_for_user(receiver_id)]
        sender_side = [(receiver_id, p.id) for p in self.partners.list_partners_for_user(sender_id)]
        candidates = receiver_side + sender_side
        for pair in candidates:
            if self.find_conversation(*pair) is not None:
                return pair
        return candidates[0] if candidates else None

    def _touch(self, pair: Pair, message: Message) -> Conversation:
        conversation = self.find_conversation(*pair)
        if conversation is None:
            conversation = Conversation(
                id=self.store.new_id("c"),
                client_id=pair[0],
                partner_id=pair[1],
                last_message=message.content,
                last_message_date=message.timestamp,
            )
            self.store.conversations.append(conversation)
            logger.info("Conversation %s opened between %s and %s", conversation.id, *pair)
        else:
            conversation.last_message = message.content
            conversation.last_message_date = message.timestamp
        return conversation

    def deliver(
        self,
        sender_id: str,
        receiver_id: str,
        content: str,
        conversation_id: Optional[str] = None,
    ) -> Tuple[Message, Optional[Conversation]]:
        """Store a message and upsert its conversation.

        Returns the message and the conversation it was filed under, or
        ``None`` for an orphaned message.
        """
        content = (content or "").strip()
        if not content:
            raise ValidationFailedError("Message content cannot be empty")
        if sender_id == receiver_id:
            raise ValidationFailedError("Cannot send a message to yourself")
        self.users.get_user_or_404(receiver_id)
        pair = self._resolve_pair(sender_id, receiver_id, conversation_id)

        message = Message(
            id=self.store.new_id("m"),
            sender_id=sender_id,
            receiver_id=receiver_id,
            content=content,
            timestamp=self.store.now(),
            read=False,
        )
        if pair is not None:
            message.client_id, message.partner_id = pair
        self.store.messages.append(message)

        if pair is None:
            logger.warning("Message %s from %s to %s has no conversation", message.id, sender_id, receiver_id)
            return message, None
        conversation = self._touch(pair, message)
        logger.info("Message %s sent from %s to %s in %s", message.id, sender_id, receiver_id, conversation.id)
        return message, conversation

    def send_message(
        self,
        sender_id: str,
        receiver_id: str,
        content: str,
        conversation_id: Optional[str] = None,
    ) -> Optional[Conversation]:
        return self.deliver(sender_id, receiver_id, content, conversation_id)[1]

    # Automatic messages

    def initiate_conversation_with_welcome_message(
        self,
        client_id: str,
        partner_id: str,
        experience_title: str,
    ) -> str:
        """Open the client/partner thread with a welcome from the partner.

        The welcome is skipped when the partner already sent the client
        a message mentioning ``experience_title``, so repeated calls add
        nothing.  Returns the conversation id.
        """
        partner = self.partners.get_partner_or_404(partner_id)
        self.users.get_user_or_404(client_id)
        conversation = self.find_conversation(client_id, partner_id)
        text = self.templates.render(EXPERIENCE_WELCOME, experience_title=experience_title)
        now = self.store.now()
        if conversation is None:
            conversation = Conversation(
                id=self.store.new_id("c"),
                client_id=client_id,
                partner_id=partner_id,
                last_message=text,
                last_message_date=now,
            )
            self.store.conversations.append(conversation)

        already_welcomed = any(
            m.sender_id == partner.user_id and m.receiver_id == client_id and experience_title in m.content
            for m in self.store.messages
        )
        if not already_welcomed:
            self.store.messages.append(
                Message(
                    id=self.store.new_id("m"),
                    sender_id=partner.user_id,
                    receiver_id=client_id,
                    content=text,
                    timestamp=now,
                    read=False,
                    client_id=client_id,
                    partner_id=partner_id,
                )
            )
            conversation.last_message = text
            conversation.last_message_date = now
            logger.info("Welcome message for %r sent to %s by %s", experience_title, client_id, partner_id)
        return conversation.id

    def contact_about_experience(self, client_id: str, experience_id: str) -> str:
        """Welcome ``client_id`` on behalf of the partner offering ``experience_id``."""
        experience = self.experiences.get_visible_experience_or_404(experience_id)
        return self.initiate_conversation_with_welcome_message(client_id, experience.partner_id, experience.title)

    def initialize_support_chat(self, user: User) -> Conversation:
        """Make sure ``user`` has a conversation with platform support.

        The first call creates ``c_support_<user id>`` at the top of the
        conversation list with a greeting from the support account;
        later calls return the existing conversation unchanged.
        """
        support = self.partners.get_support_partner()
        if user.role == UserRole.ADMIN or user.id == support.user_id:
            raise ValidationFailedError("Administrators have no support chat")
        existing = self.find_conversation(user.id, support.id)
        if existing is not None:
            return existing

        if user.role == UserRole.PARTNER:
            own = self.partners.get_partner_by_user_id(user.id)
            text = self.templates.render(SUPPORT_WELCOME_PARTNER, name=own.company_name if own else user.name)
        else:
            text = self.templates.render(SUPPORT_WELCOME_CLIENT, name=user.name)
        now = self.store.now()
        conversation = Conversation(
            id=f"c_support_{user.id}",
            client_id=user.id,
            partner_id=support.id,
            last_message=text,
            last_message_date=now,
        )
        self.store.conversations.insert(0, conversation)
        self.store.messages.append(
            Message(
                id=self.store.new_id("m"),
                sender_id=support.user_id,
                receiver_id=user.id,
                content=text,
                timestamp=now,
                read=False,
                client_id=user.id,
                partner_id=support.id,
            )
        )
        logger.info("Support chat %s created for %s", conversation.id, user.id)
        return conversation

    def close_conversation(self, conversation_id: str) -> None:
        """Delete a conversation.  Its messages are kept."""
        conversation = self.get_conversation_or_404(conversation_id)
        self.store.conversations.remove(conversation)
        logger.info("Conversation %s closed", conversation_id)

    # Read state

    def mark_messages_as_read(self, user_id: str, other_user_id: str) -> int:
        """Mark every message sent by ``other_user_id`` to ``user_id`` as read."""
        marked = 0
        for m in self.store.messages:
            if m.receiver_id == user_id and m.sender_id == other_user_id and not m.read:
                m.read = True
                marked += 1
        if marked:
            logger.info("Marked %s messages from %s to %s as read", marked, other_user_id, user_id)
        return marked

    def get_unread_messages_count(self, user_id: str) -> int:
        return sum(1 for m in self.store.messages if m.receiver_id == user_id and not m.read)

    def mark_conversation_as_read(self, viewer: User, conversation: Conversation) -> int:
        """Mark the messages ``viewer`` received in ``conversation`` as read.

        Only the client and the partner's owner have anything to read;
        an admin looking at someone else's thread marks nothing.
        """
        if viewer.id not in self.participants(conversation):
            return 0
        marked = 0
        for m in self.store.messages:
            if (
                m.client_id == conversation.client_id
                and m.partner_id == conversation.partner_id
                and m.receiver_id == viewer.id
                and not m.read
            ):
                m.read = True
                marked += 1
        if marked:
            logger.info("Marked %s messages in %s as read for %s", marked, conversation.id, viewer.id)
        return marked

    def open_thread(self, viewer: User, conversation_id: str) -> List[Message]:
        """Return a thread for ``viewer`` and mark the counterpart's messages read."""
        conversation = self.get_conversation_or_404(conversation_id)
        self.ensure_participant(viewer, conversation)
        self.mark_conversation_as_read(viewer, conversation)
        return self.get_thread(conversation)

    # Dashboard views

    def _unread_in(self, conversation: Conversation, viewer_id: str) -> int:
        return sum(
            1
            for m in self.store.messages
            if m.client_id == conversation.client_id
            and m.partner_id == conversation.partner_id
            and m.receiver_id == viewer_id
            and not m.read
        )

    def _view(self, conversation: Conversation, viewer_id: str) -> ConversationView:
        return ConversationView(
            **conversation.model_dump(),
            partner=self.partners.get_partner(conversation.partner_id),
            client=self.users.get_user(conversation.client_id),
            unread=self._unread_in(conversation, viewer_id),
        )

    def conversations_for_client(self, client_id: str) -> List[ConversationView]:
        """Threads where the user is the client side, support first."""
        return [self._view(c, client_id) for c in self.store.conversations if c.client_id == client_id]

    def conversations_for_partner(self, partner_id: str, viewer_id: str) -> List[ConversationView]:
        return [self._view(c, viewer_id) for c in self.store.conversations if c.partner_id == partner_id]

    def support_conversations(self, admin_id: str) -> List[ConversationView]:
        return self.conversations_for_partner(self.partners.support_partner_id, admin_id)

    def conversations_for_user(self, user: User) -> List[ConversationView]:
        """Conversation list of the dashboard matching ``user``'s role."""
        if user.role == UserRole.ADMIN:
            return self.support_conversations(user.id)
        views = self.conversations_for_client(user.id)
        if user.role == UserRole.PARTNER:
            owned: List[Partner] = self.partners.list_partners_for_user(user.id)
            for partner in owned:
                views.extend(self.conversations_for_partner(partner.id, user.id))
        return views
