"""Domain value objects for the forum."""

from forum.domain.value.identifiers import (
    CommentId,
    MessageId,
    NotificationId,
    ThreadId,
    UserId,
    VoteId,
)
from forum.domain.value.types import (
    MessageType,
    NotificationContext,
    NotificationHint,
    NotificationPreferences,
    NotificationType,
    PreferenceChannel,
    Username,
    VotableType,
    VoteDirection,
    VoteTransitionKind,
)

__all__ = [
    # Identifiers
    "UserId",
    "ThreadId",
    "CommentId",
    "VoteId",
    "NotificationId",
    "MessageId",
    # Types
    "VoteDirection",
    "VotableType",
    "VoteTransitionKind",
    "NotificationHint",
    "NotificationType",
    "PreferenceChannel",
    "NotificationPreferences",
    "NotificationContext",
    "MessageType",
    "Username",
]
