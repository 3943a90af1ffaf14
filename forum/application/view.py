"""Read models shared by the REST API and the realtime channel.

A message pushed over the socket must look exactly like the one the
REST API returns, so both paths build it through ``MessageView``.
"""

from datetime import datetime
from typing import Iterable, Optional

from pydantic import BaseModel

from forum.domain.model import ConversationSummary, Message, Notification, User
from forum.domain.service import UserService
from forum.domain.value import MessageType, NotificationType, UserId


class UserSummary(BaseModel):
    """Minimal public identity of a user."""

    id: str
    username: str
    name: str
    avatar_url: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "UserSummary":
        return cls(
            id=str(user.id),
            username=str(user.username),
            name=user.name,
            avatar_url=user.avatar_url,
        )


class MessageView(BaseModel):
    """A direct message with its sender summary."""

    id: str
    sender_id: str
    receiver_id: str
    content: str
    thread_id: Optional[str] = None
    message_type: MessageType
    read: bool
    read_at: Optional[datetime] = None
    created_at: datetime
    sender: Optional[UserSummary] = None

    @classmethod
    def from_message(
        cls, message: Message, sender: Optional[User] = None
    ) -> "MessageView":
        return cls(
            id=str(message.id),
            sender_id=str(message.sender_id),
            receiver_id=str(message.receiver_id),
            content=message.content,
            thread_id=str(message.thread_id) if message.thread_id else None,
            message_type=message.message_type,
            read=message.read,
            read_at=message.read_at,
            created_at=message.created_at,
            sender=UserSummary.from_user(sender) if sender else None,
        )


class NotificationView(BaseModel):
    """A notification as shown to its recipient."""

    id: str
    type: NotificationType
    title: str
    body: str
    thread_id: Optional[str] = None
    comment_id: Optional[str] = None
    message_id: Optional[str] = None
    actor_id: Optional[str] = None
    action_url: Optional[str] = None
    read: bool
    read_at: Optional[datetime] = None
    created_at: datetime

    @classmethod
    def from_notification(cls, notification: Notification) -> "NotificationView":
        context = notification.context
        return cls(
            id=str(notification.id),
            type=notification.type,
            title=notification.title,
            body=notification.body,
            thread_id=context.thread_id,
            comment_id=context.comment_id,
            message_id=context.message_id,
            actor_id=context.actor_id,
            action_url=context.action_url,
            read=notification.read,
            read_at=notification.read_at,
            created_at=notification.created_at,
        )


class ConversationView(BaseModel):
    """One conversation in the inbox."""

    user: Optional[UserSummary] = None
    last_message: MessageView
    unread_count: int


async def message_views(
    user_service: UserService, messages: Iterable[Message]
) -> list[MessageView]:
    """Build views for a batch of messages with one user lookup."""
    messages = list(messages)
    users = await user_service.get_by_ids(message.sender_id for message in messages)
    return [
        MessageView.from_message(message, users.get(message.sender_id))
        for message in messages
    ]


async def conversation_views(
    user_service: UserService, summaries: Iterable[ConversationSummary]
) -> list[ConversationView]:
    """Build inbox entries for a batch of conversations with one user lookup."""
    summaries = list(summaries)
    wanted: list[UserId] = []
    for summary in summaries:
        wanted.append(summary.counterpart_id)
        wanted.append(summary.last_message.sender_id)
    users = await user_service.get_by_ids(wanted)

    views = []
    for summary in summaries:
        counterpart = users.get(summary.counterpart_id)
        views.append(
            ConversationView(
                user=UserSummary.from_user(counterpart) if counterpart else None,
                last_message=MessageView.from_message(
                    summary.last_message, users.get(summary.last_message.sender_id)
                ),
                unread_count=summary.unread_count,
            )
        )
    return views
