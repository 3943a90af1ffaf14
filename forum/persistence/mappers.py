"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict, Optional
from uuid import UUID

from forum.domain.model import Comment, Message, Notification, Thread, User, Vote
from forum.domain.value import (
    CommentId,
    MessageId,
    MessageType,
    NotificationContext,
    NotificationId,
    NotificationPreferences,
    NotificationType,
    ThreadId,
    UserId,
    Username,
    VotableType,
    VoteDirection,
    VoteId,
)


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def _optional_uuid(value: Any) -> Optional[UUID]:
    return _uuid(value) if value is not None else None


def _optional_str(value: Any) -> Optional[str]:
    return str(value) if value is not None else None


def row_to_user(row: Dict[str, Any]) -> User:
    """Convert database row to User domain model.

    Args:
        row: Database row as dict

    Returns:
        User domain model
    """
    return User(
        id=UserId(_uuid(row["id"])),
        username=Username(row["username"]),
        name=row["name"],
        email=row.get("email"),
        avatar_url=row.get("avatar_url"),
        notification_prefs=NotificationPreferences(
            newsletter=row["pref_newsletter"],
            chat=row["pref_chat"],
            replies=row["pref_replies"],
            mentions=row["pref_mentions"],
        ),
        is_active=row["is_active"],
        created_at=row["created_at"],
    )


def user_to_dict(user: User) -> Dict[str, Any]:
    """Convert User domain model to database dict.

    Args:
        user: User domain model

    Returns:
        Dict suitable for database insertion/update
    """
    prefs = user.notification_prefs
    return {
        "id": user.id,
        "username": str(user.username),
        "name": user.name,
        "email": user.email,
        "avatar_url": user.avatar_url,
        "pref_newsletter": prefs.newsletter,
        "pref_chat": prefs.chat,
        "pref_replies": prefs.replies,
        "pref_mentions": prefs.mentions,
        "is_active": user.is_active,
        "created_at": user.created_at,
    }


def row_to_thread(row: Dict[str, Any]) -> Thread:
    """Convert database row to Thread domain model."""
    return Thread(
        id=ThreadId(_uuid(row["id"])),
        title=row["title"],
        owner_id=UserId(_uuid(row["owner_id"])),
        upvote_count=row["upvote_count"],
        downvote_count=row["downvote_count"],
        comment_count=row["comment_count"],
        is_locked=row["is_locked"],
        version=row["version"],
        created_at=row["created_at"],
    )


def thread_to_dict(thread: Thread) -> Dict[str, Any]:
    return thread.model_dump()


def row_to_comment(row: Dict[str, Any]) -> Comment:
    """Convert database row to Comment domain model."""
    return Comment(
        id=CommentId(_uuid(row["id"])),
        thread_id=ThreadId(_uuid(row["thread_id"])),
        owner_id=UserId(_uuid(row["owner_id"])),
        body=row["body"],
        parent_id=(
            CommentId(_uuid(row["parent_id"])) if row.get("parent_id") else None
        ),
        mentions=[UserId(_uuid(m)) for m in row.get("mentions") or []],
        upvote_count=row["upvote_count"],
        downvote_count=row["downvote_count"],
        version=row["version"],
        created_at=row["created_at"],
    )


def comment_to_dict(comment: Comment) -> Dict[str, Any]:
    return comment.model_dump()


def row_to_vote(row: Dict[str, Any]) -> Vote:
    """Convert database row to Vote domain model.

    Args:
        row: Database row as dict

    Returns:
        Vote domain model
    """
    return Vote(
        id=VoteId(_uuid(row["id"])),
        user_id=UserId(_uuid(row["user_id"])),
        votable_type=VotableType(row["votable_type"]),
        votable_id=_uuid(row["votable_id"]),
        direction=VoteDirection(row["direction"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def vote_to_dict(vote: Vote) -> Dict[str, Any]:
    """Convert Vote domain model to database dict.

    Args:
        vote: Vote domain model

    Returns:
        Dict suitable for database insertion
    """
    data = vote.model_dump()
    data["votable_type"] = vote.votable_type.value
    data["direction"] = vote.direction.value
    return data


def row_to_notification(row: Dict[str, Any]) -> Notification:
    """Convert database row to Notification domain model.

    The context columns are flattened in the table and regrouped here.
    """
    return Notification(
        id=NotificationId(_uuid(row["id"])),
        recipient_id=UserId(_uuid(row["recipient_id"])),
        type=NotificationType(row["type"]),
        title=row["title"],
        body=row["body"],
        context=NotificationContext(
            thread_id=_optional_str(row.get("thread_id")),
            comment_id=_optional_str(row.get("comment_id")),
            message_id=_optional_str(row.get("message_id")),
            actor_id=_optional_str(row.get("actor_id")),
            action_url=row.get("action_url"),
        ),
        read=row["read"],
        read_at=row.get("read_at"),
        email_sent=row["email_sent"],
        created_at=row["created_at"],
    )


def notification_to_dict(notification: Notification) -> Dict[str, Any]:
    """Convert Notification domain model to database dict."""
    context = notification.context
    return {
        "id": notification.id,
        "recipient_id": notification.recipient_id,
        "type": notification.type.value,
        "title": notification.title,
        "body": notification.body,
        "thread_id": _optional_uuid(context.thread_id),
        "comment_id": _optional_uuid(context.comment_id),
        "message_id": _optional_uuid(context.message_id),
        "actor_id": _optional_uuid(context.actor_id),
        "action_url": context.action_url,
        "read": notification.read,
        "read_at": notification.read_at,
        "email_sent": notification.email_sent,
        "created_at": notification.created_at,
    }


def row_to_message(row: Dict[str, Any]) -> Message:
    """Convert database row to Message domain model."""
    return Message(
        id=MessageId(_uuid(row["id"])),
        sender_id=UserId(_uuid(row["sender_id"])),
        receiver_id=UserId(_uuid(row["receiver_id"])),
        content=row["content"],
        thread_id=ThreadId(_uuid(row["thread_id"])) if row.get("thread_id") else None,
        message_type=MessageType(row["message_type"]),
        read=row["read"],
        read_at=row.get("read_at"),
        deleted_by=[UserId(_uuid(u)) for u in row.get("deleted_by") or []],
        is_deleted=row["is_deleted"],
        created_at=row["created_at"],
    )


def message_to_dict(message: Message) -> Dict[str, Any]:
    """Convert Message domain model to database dict."""
    data = message.model_dump()
    data["message_type"] = message.message_type.value
    return data
