"""Domain events that may produce notifications.

Events are plain facts about something that already happened. The
notification emitter decides who, if anyone, hears about them.
"""

from typing import Annotated, Literal, Optional, Union
from uuid import UUID

from pydantic import Field

from forum.domain.model.common import DomainModel
from forum.domain.value import (
    CommentId,
    MessageId,
    ThreadId,
    UserId,
    VotableType,
)


class UpvotedEvent(DomainModel):
    """A thread or comment received a first-time upvote."""

    kind: Literal["upvoted"] = "upvoted"
    entity_kind: VotableType
    entity_id: UUID
    owner_id: UserId
    actor_id: UserId
    thread_id: ThreadId  # The thread itself, or the comment's thread
    entity_title: Optional[str] = None


class CommentedEvent(DomainModel):
    """A comment was posted on a thread, possibly as a reply."""

    kind: Literal["commented"] = "commented"
    thread_owner_id: UserId
    parent_owner_id: Optional[UserId] = None  # Set for nested replies
    actor_id: UserId
    actor_name: str
    thread_id: ThreadId
    comment_id: CommentId
    thread_title: str


class MentionedEvent(DomainModel):
    """A user was mentioned in a comment (or in the thread body)."""

    kind: Literal["mentioned"] = "mentioned"
    mentioned_user_id: UserId
    actor_id: UserId
    actor_name: str
    thread_id: ThreadId
    comment_id: Optional[CommentId] = None  # None for thread mentions
    thread_title: str


class MessageSentEvent(DomainModel):
    """A direct message was persisted."""

    kind: Literal["message_sent"] = "message_sent"
    receiver_id: UserId
    sender_id: UserId
    message_id: MessageId
    sender_name: str
    sender_username: str


DomainEvent = Annotated[
    Union[UpvotedEvent, CommentedEvent, MentionedEvent, MessageSentEvent],
    Field(discriminator="kind"),
]
