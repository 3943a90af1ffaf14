"""Domain value objects for the forum.

Value objects are immutable and defined by their values, not identity.
Every field that the document store kept as a free-form string is a
closed enum here.
"""

import re
from enum import Enum

from pydantic import field_validator

from forum.domain.value.common import RootValueObject, ValueObject


class VoteDirection(str, Enum):
    """Direction of a vote."""

    UP = "up"
    DOWN = "down"

    @property
    def opposite(self) -> "VoteDirection":
        return VoteDirection.DOWN if self is VoteDirection.UP else VoteDirection.UP


class VotableType(str, Enum):
    """Type of entity that can be voted on."""

    THREAD = "thread"
    COMMENT = "comment"


class VoteTransitionKind(str, Enum):
    """What applying a vote did to the voter's record."""

    CAST = "cast"  # no prior vote, record created
    RETRACT = "retract"  # same direction again, record removed
    FLIP = "flip"  # opposite direction, record updated in place


class NotificationHint(str, Enum):
    """Signal from the vote ledger on whether a notification should follow."""

    NONE = "none"
    EMIT_UPVOTE = "emit_upvote"


class NotificationType(str, Enum):
    """Kind of notification."""

    THREAD_REPLY = "thread_reply"
    COMMENT_REPLY = "comment_reply"
    THREAD_UPVOTE = "thread_upvote"
    COMMENT_UPVOTE = "comment_upvote"
    THREAD_BOOKMARK = "thread_bookmark"
    NEW_MESSAGE = "new_message"
    THREAD_MENTION = "thread_mention"
    COMMENT_MENTION = "comment_mention"
    SYSTEM = "system"
    NEWSLETTER = "newsletter"

    @property
    def preference_channel(self) -> "PreferenceChannel | None":
        """Preference flag that gates this type, None if it is never gated."""
        return _GATED_TYPES.get(self)


class PreferenceChannel(str, Enum):
    """Notification preference flags on a user profile."""

    NEWSLETTER = "newsletter"
    CHAT = "chat"
    REPLIES = "replies"
    MENTIONS = "mentions"


_GATED_TYPES: dict[NotificationType, PreferenceChannel] = {
    NotificationType.NEW_MESSAGE: PreferenceChannel.CHAT,
    NotificationType.NEWSLETTER: PreferenceChannel.NEWSLETTER,
}


class MessageType(str, Enum):
    """Kind of direct message payload."""

    TEXT = "text"
    FILE = "file"
    IMAGE = "image"


class Username(RootValueObject[str]):
    """Public username, unique per user.

    Used in chat deep links (``/chat?user=<username>``), so it must be
    URL-safe.
    """

    @field_validator("root")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """Validate username format."""
        if not re.match(r"^[A-Za-z0-9_.-]{1,50}$", v):
            raise ValueError(
                "Username must be 1-50 characters of letters, digits, '.', '_' or '-'"
            )
        return v


class NotificationPreferences(ValueObject):
    """Per-user notification switches. Everything is on by default."""

    newsletter: bool = True
    chat: bool = True
    replies: bool = True
    mentions: bool = True

    def allows(self, channel: PreferenceChannel) -> bool:
        return bool(getattr(self, channel.value))


class NotificationContext(ValueObject):
    """References carried by a notification.

    ``action_url`` is a deep link the client can navigate to without
    any further lookup.
    """

    thread_id: str | None = None
    comment_id: str | None = None
    message_id: str | None = None
    actor_id: str | None = None
    action_url: str | None = None
