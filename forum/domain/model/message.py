"""Direct message entity.

Messages are never physically removed while either party can still see
them. Each party hides a message locally by adding themselves to
``deleted_by``; once both have, the message is inert (``is_deleted``).
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from forum.domain.model.common import DomainModel
from forum.domain.value import MessageId, MessageType, ThreadId, UserId


class Message(DomainModel):
    """Direct message between two users."""

    id: MessageId
    sender_id: UserId
    receiver_id: UserId
    # Max length is MessagingSettings.content_max_length
    content: str = Field(min_length=1)
    thread_id: Optional[ThreadId] = None
    message_type: MessageType = MessageType.TEXT
    read: bool = False
    read_at: Optional[datetime] = None
    deleted_by: list[UserId] = Field(default_factory=list)
    is_deleted: bool = False
    created_at: datetime = Field(default_factory=datetime.now)

    def involves(self, user_id: UserId) -> bool:
        return user_id in (self.sender_id, self.receiver_id)

    def visible_to(self, user_id: UserId) -> bool:
        """Whether ``user_id`` is a party that has not hidden this message."""
        return (
            self.involves(user_id)
            and not self.is_deleted
            and user_id not in self.deleted_by
        )

    def counterpart_of(self, user_id: UserId) -> UserId:
        return self.receiver_id if user_id == self.sender_id else self.sender_id

    def hidden_by(self, user_id: UserId) -> "Message":
        """Return a copy with ``user_id`` added to the deletion marks."""
        if user_id in self.deleted_by:
            return self
        deleted_by = [*self.deleted_by, user_id]
        both_hidden = {self.sender_id, self.receiver_id} <= set(deleted_by)
        return self.model_copy(
            update={"deleted_by": deleted_by, "is_deleted": both_hidden}
        )


class ConversationSummary(DomainModel):
    """Latest visible message with one counterpart and the unread tally."""

    counterpart_id: UserId
    last_message: Message
    unread_count: int = Field(default=0, ge=0)
