"""Message domain service."""

from datetime import datetime
from typing import Optional
from uuid import uuid4

import logfire

from forum.config import MessagingSettings
from forum.domain.error import ForbiddenError, InvalidArgumentError, NotFoundError
from forum.domain.model import ConversationSummary, Message, User
from forum.domain.repository import MessageRepository
from forum.domain.value import (
    MessageId,
    MessageType,
    PreferenceChannel,
    ThreadId,
    UserId,
)

from .base import Service
from .user_service import UserService


class MessageService(Service):
    """Domain service for direct messages between two users."""

    def __init__(
        self,
        message_repository: MessageRepository,
        user_service: UserService,
        messaging_settings: MessagingSettings,
    ) -> None:
        """Initialize message service.

        Args:
            message_repository: Message repository
            user_service: User domain service
            messaging_settings: Content and paging limits
        """
        self.message_repository = message_repository
        self.user_service = user_service
        self.settings = messaging_settings

    async def validate_recipient(self, sender_id: UserId, receiver_id: UserId) -> User:
        """Check that ``sender_id`` may message ``receiver_id``.

        Args:
            sender_id: Sending user
            receiver_id: Intended recipient

        Returns:
            The recipient

        Raises:
            NotFoundError: If the recipient does not exist
            ForbiddenError: If the recipient has chat turned off
        """
        receiver = await self.user_service.get_by_id(receiver_id)
        if not receiver.notification_prefs.allows(PreferenceChannel.CHAT):
            logfire.info(
                "Message refused, recipient has chat disabled",
                sender_id=str(sender_id),
                receiver_id=str(receiver_id),
            )
            raise ForbiddenError("User has disabled chat messages")
        return receiver

    async def create_message(
        self,
        sender_id: UserId,
        receiver_id: UserId,
        content: str,
        thread_id: Optional[ThreadId] = None,
        message_type: MessageType = MessageType.TEXT,
    ) -> Message:
        """Persist a new message.

        The recipient must already have been validated.

        Raises:
            InvalidArgumentError: If content is blank or too long
        """
        content = content.strip()
        if not content:
            raise InvalidArgumentError("Message content cannot be empty")
        if len(content) > self.settings.content_max_length:
            raise InvalidArgumentError(
                f"Message content exceeds {self.settings.content_max_length} characters"
            )

        message = Message(
            id=MessageId(uuid4()),
            sender_id=sender_id,
            receiver_id=receiver_id,
            content=content,
            thread_id=thread_id,
            message_type=message_type,
            created_at=datetime.now(),
        )
        saved = await self.message_repository.save(message)
        logfire.info(
            "Message created",
            message_id=str(saved.id),
            sender_id=str(sender_id),
            receiver_id=str(receiver_id),
        )
        return saved

    async def get_conversation(
        self,
        viewer_id: UserId,
        counterpart_id: UserId,
        limit: int,
        offset: int = 0,
    ) -> tuple[list[Message], int]:
        """Read a page of the conversation with ``counterpart_id``.

        Reading marks every unread message from the counterpart to the
        viewer as read. The page is the newest ``limit`` messages after
        ``offset``, returned oldest first.

        Returns:
            Tuple of (page oldest first, total visible)
        """
        with logfire.span(
            "message_service.get_conversation",
            viewer_id=str(viewer_id),
            counterpart_id=str(counterpart_id),
        ):
            await self.user_service.get_by_id(counterpart_id)

            marked = await self.message_repository.mark_conversation_read(
                sender_id=counterpart_id, receiver_id=viewer_id, read_at=datetime.now()
            )
            if marked:
                logfire.debug("Conversation marked read", count=marked)

            page = await self.message_repository.find_conversation(
                viewer_id, counterpart_id, limit=limit, offset=offset
            )
            total = await self.message_repository.count_conversation(
                viewer_id, counterpart_id
            )
            return list(reversed(page)), total

    async def mark_read(self, message_id: MessageId, viewer_id: UserId) -> Message:
        """Mark a single message read.

        Raises:
            NotFoundError: If no such message was addressed to the viewer
        """
        message = await self.message_repository.mark_read(
            message_id, viewer_id, datetime.now()
        )
        if message is None:
            raise NotFoundError("Message", str(message_id))
        return message

    async def delete_for_user(self, message_id: MessageId, user_id: UserId) -> Message:
        """Hide a message from one party.

        The message stays visible to the other party until they hide it too.

        Raises:
            NotFoundError: If the message does not exist or is already hidden
            ForbiddenError: If the user is not a party to the message
        """
        message = await self.message_repository.find_by_id(message_id)
        if message is None or message.is_deleted:
            raise NotFoundError("Message", str(message_id))
        if not message.involves(user_id):
            logfire.warn(
                "Message delete by non-party",
                message_id=str(message_id),
                user_id=str(user_id),
            )
            raise ForbiddenError("Not authorized to delete this message")

        saved = await self.message_repository.hide_for(message_id, user_id)
        if saved is None:
            # Already hidden by this user
            return await self.message_repository.find_by_id(message_id) or message
        logfire.info(
            "Message hidden",
            message_id=str(message_id),
            user_id=str(user_id),
            is_deleted=saved.is_deleted,
        )
        return saved

    async def unread_count(self, user_id: UserId) -> int:
        return await self.message_repository.count_unread(user_id)

    async def list_conversations(self, user_id: UserId) -> list[ConversationSummary]:
        return await self.message_repository.find_conversations(user_id)
