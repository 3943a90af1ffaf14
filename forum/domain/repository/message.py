"""Message repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from forum.domain.model.message import ConversationSummary, Message
from forum.domain.value import MessageId, UserId


class MessageRepository(ABC):
    """Repository for direct messages.

    Conversation queries are always made from one party's point of view
    (``viewer_id``) and exclude messages that party has hidden.
    """

    @abstractmethod
    async def find_by_id(self, message_id: MessageId) -> Optional[Message]:
        """Find a message by ID.

        Args:
            message_id: The message's unique identifier

        Returns:
            The message if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, message: Message) -> Message:
        """Save a message (create or update).

        Args:
            message: The message to save

        Returns:
            The saved message
        """
        pass

    @abstractmethod
    async def hide_for(
        self, message_id: MessageId, user_id: UserId
    ) -> Optional[Message]:
        """Add ``user_id`` to a message's deletion marks in one atomic step.

        ``is_deleted`` is set once both parties are marked. Other fields,
        read state included, are left untouched.

        Returns:
            The updated message, None if the message does not exist, the
            user is not a party, or they had already hidden it
        """
        pass

    @abstractmethod
    async def find_conversation(
        self,
        viewer_id: UserId,
        counterpart_id: UserId,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Message]:
        """List messages between two users, newest first.

        Args:
            viewer_id: User reading the conversation
            counterpart_id: The other party
            limit: Maximum number to return
            offset: Number to skip

        Returns:
            Page of messages visible to the viewer
        """
        pass

    @abstractmethod
    async def count_conversation(
        self, viewer_id: UserId, counterpart_id: UserId
    ) -> int:
        """Count messages between two users visible to the viewer."""
        pass

    @abstractmethod
    async def mark_conversation_read(
        self, sender_id: UserId, receiver_id: UserId, read_at: datetime
    ) -> int:
        """Mark every unread message from sender to receiver read.

        Returns:
            Number of messages updated
        """
        pass

    @abstractmethod
    async def mark_read(
        self, message_id: MessageId, receiver_id: UserId, read_at: datetime
    ) -> Optional[Message]:
        """Mark one message read, scoped to its receiver.

        Returns:
            The updated message, None if no such message for that receiver
        """
        pass

    @abstractmethod
    async def count_unread(self, receiver_id: UserId) -> int:
        """Count unread, non-deleted messages addressed to a user."""
        pass

    @abstractmethod
    async def find_conversations(self, viewer_id: UserId) -> list[ConversationSummary]:
        """Summarize each conversation of a user, most recent first.

        Args:
            viewer_id: User whose conversations to list

        Returns:
            One summary per counterpart
        """
        pass
