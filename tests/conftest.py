"""Test configuration and factories."""

from uuid import uuid4

from forum.domain.model import Comment, Thread, User
from forum.domain.value import (
    CommentId,
    NotificationPreferences,
    ThreadId,
    UserId,
    Username,
)


def make_user(
    username: str | None = None,
    name: str | None = None,
    **prefs: bool,
) -> User:
    """Build a user with a unique username.

    Args:
        username: Username (random if omitted)
        name: Display name (defaults to the username)
        **prefs: Notification preference overrides, e.g. ``chat=False``
    """
    user_id = UserId(uuid4())
    username = username or f"user_{user_id.hex[:8]}"
    return User(
        id=user_id,
        username=Username(username),
        name=name or username,
        notification_prefs=NotificationPreferences(**prefs),
    )


def make_thread(owner: User, title: str = "Looking for a postdoc", **fields) -> Thread:
    return Thread(id=ThreadId(uuid4()), title=title, owner_id=owner.id, **fields)


def make_comment(
    thread: Thread,
    owner: User,
    body: str = "Interesting!",
    parent: Comment | None = None,
    mentions: list[User] | None = None,
) -> Comment:
    return Comment(
        id=CommentId(uuid4()),
        thread_id=thread.id,
        owner_id=owner.id,
        body=body,
        parent_id=parent.id if parent else None,
        mentions=[user.id for user in mentions or []],
    )
