"""In-memory message repository for testing."""

from datetime import datetime
from typing import Optional

from forum.domain.model.message import ConversationSummary, Message
from forum.domain.repository.message import MessageRepository
from forum.domain.value import MessageId, UserId


class InMemoryMessageRepository(MessageRepository):
    """In-memory implementation of MessageRepository for testing."""

    def __init__(self) -> None:
        self._messages: dict[MessageId, Message] = {}

    async def find_by_id(self, message_id: MessageId) -> Optional[Message]:
        """Find a message by ID."""
        return self._messages.get(message_id)

    async def save(self, message: Message) -> Message:
        """Save or update a message."""
        self._messages[message.id] = message
        return message

    async def hide_for(
        self, message_id: MessageId, user_id: UserId
    ) -> Optional[Message]:
        """Mark a message hidden for one party."""
        message = self._messages.get(message_id)
        if (
            message is None
            or not message.involves(user_id)
            or user_id in message.deleted_by
        ):
            return None
        hidden = message.hidden_by(user_id)
        self._messages[message_id] = hidden
        return hidden

    async def find_conversation(
        self,
        viewer_id: UserId,
        counterpart_id: UserId,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Message]:
        """List messages between two users, newest first."""
        return self._conversation(viewer_id, counterpart_id)[offset : offset + limit]

    async def count_conversation(
        self, viewer_id: UserId, counterpart_id: UserId
    ) -> int:
        """Count messages between two users visible to the viewer."""
        return len(self._conversation(viewer_id, counterpart_id))

    async def mark_conversation_read(
        self, sender_id: UserId, receiver_id: UserId, read_at: datetime
    ) -> int:
        """Mark every unread message from sender to receiver read."""
        updated = 0
        for message in list(self._messages.values()):
            if (
                message.sender_id == sender_id
                and message.receiver_id == receiver_id
                and not message.read
                and not message.is_deleted
            ):
                self._messages[message.id] = message.model_copy(
                    update={"read": True, "read_at": read_at}
                )
                updated += 1
        return updated

    async def mark_read(
        self, message_id: MessageId, receiver_id: UserId, read_at: datetime
    ) -> Optional[Message]:
        """Mark one message read, scoped to its receiver."""
        message = self._messages.get(message_id)
        if (
            message is None
            or message.receiver_id != receiver_id
            or not message.visible_to(receiver_id)
        ):
            return None
        if not message.read:
            message = message.model_copy(update={"read": True, "read_at": read_at})
            self._messages[message_id] = message
        return message

    async def count_unread(self, receiver_id: UserId) -> int:
        """Count unread, non-deleted messages addressed to a user."""
        return sum(
            1
            for message in self._messages.values()
            if message.receiver_id == receiver_id
            and not message.read
            and message.visible_to(receiver_id)
        )

    async def find_conversations(self, viewer_id: UserId) -> list[ConversationSummary]:
        """Summarize each conversation of a user, most recent first."""
        latest: dict[UserId, Message] = {}
        unread: dict[UserId, int] = {}
        for message in reversed(self._messages.values()):
            if not message.visible_to(viewer_id):
                continue
            counterpart = message.counterpart_of(viewer_id)
            current = latest.get(counterpart)
            if current is None or message.created_at > current.created_at:
                latest[counterpart] = message
            if message.receiver_id == viewer_id and not message.read:
                unread[counterpart] = unread.get(counterpart, 0) + 1

        summaries = [
            ConversationSummary(
                counterpart_id=counterpart,
                last_message=message,
                unread_count=unread.get(counterpart, 0),
            )
            for counterpart, message in latest.items()
        ]
        summaries.sort(key=lambda s: s.last_message.created_at, reverse=True)
        return summaries

    def _conversation(self, viewer_id: UserId, counterpart_id: UserId) -> list[Message]:
        messages = [
            message
            for message in reversed(self._messages.values())
            if message.visible_to(viewer_id)
            and message.counterpart_of(viewer_id) == counterpart_id
        ]
        messages.sort(key=lambda message: message.created_at, reverse=True)
        return messages
