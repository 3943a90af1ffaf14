"""Notification domain service (the notification emitter)."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Optional
from urllib.parse import quote
from uuid import UUID, uuid4

import logfire

from forum.config import NotificationSettings
from forum.domain.error import NotFoundError
from forum.domain.model import (
    CommentedEvent,
    DomainEvent,
    MentionedEvent,
    MessageSentEvent,
    Notification,
    UpvotedEvent,
)
from forum.domain.repository import NotificationRepository
from forum.domain.value import (
    CommentId,
    NotificationContext,
    NotificationId,
    NotificationType,
    ThreadId,
    UserId,
    VotableType,
)

from .base import Service
from .user_service import UserService


def thread_link(thread_id: UUID) -> str:
    return f"/threads/{thread_id}"


def comment_link(thread_id: UUID, comment_id: UUID) -> str:
    return f"/threads/{thread_id}#comment-{comment_id}"


def chat_link(username: str) -> str:
    return f"/chat?user={quote(username)}"


@dataclass(frozen=True)
class _Draft:
    """A notification the emitter may record, before the gates run."""

    recipient_id: UserId
    actor_id: UserId
    type: NotificationType
    title: str
    body: str
    context: NotificationContext


class NotificationService(Service):
    """Decides which notifications a domain event produces and records them.

    Two gates apply to every candidate notification:

    - self-action never notifies (actor == recipient);
    - gated types (chat messages, newsletters) are only recorded if the
      recipient's preference flag is on, read at emission time.

    Recording is all this service does; realtime delivery happens in the
    application layer.
    """

    def __init__(
        self,
        notification_repository: NotificationRepository,
        user_service: UserService,
        notification_settings: NotificationSettings,
    ) -> None:
        """Initialize notification service.

        Args:
            notification_repository: Notification repository
            user_service: User domain service (preference reads)
            notification_settings: Retention and text limits
        """
        self.notification_repository = notification_repository
        self.user_service = user_service
        self.settings = notification_settings

    async def emit(self, event: DomainEvent) -> list[Notification]:
        """Record the notifications an event produces.

        Args:
            event: Domain event

        Returns:
            Recorded notifications; empty when nobody is notified
        """
        with logfire.span("notification_service.emit", kind=event.kind):
            drafts = await self._drafts_for(event)
            recorded = []
            for draft in drafts:
                notification = await self._record(draft)
                if notification is not None:
                    recorded.append(notification)
            return recorded

    async def notify_mentions(
        self,
        actor_id: UserId,
        actor_name: str,
        thread_id: ThreadId,
        thread_title: str,
        mentioned_user_ids: Iterable[UserId],
        comment_id: Optional[CommentId] = None,
    ) -> list[Notification]:
        """Emit one mention notification per distinct mentioned user.

        The actor and unknown users are skipped without error.

        Args:
            actor_id: Author of the mentioning content
            actor_name: Author display name
            thread_id: Thread the mention lives in
            thread_title: Thread title
            mentioned_user_ids: Mentioned users, duplicates allowed
            comment_id: Mentioning comment, None for a thread mention

        Returns:
            Recorded notifications
        """
        recorded = []
        for user_id in dict.fromkeys(mentioned_user_ids):
            if user_id == actor_id:
                continue
            recorded.extend(
                await self.emit(
                    MentionedEvent(
                        mentioned_user_id=user_id,
                        actor_id=actor_id,
                        actor_name=actor_name,
                        thread_id=thread_id,
                        comment_id=comment_id,
                        thread_title=thread_title,
                    )
                )
            )
        return recorded

    async def list_for_recipient(
        self,
        recipient_id: UserId,
        unread_only: bool = False,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Notification], int]:
        """Page through a recipient's notifications, newest first.

        Returns:
            Tuple of (page, total matching)
        """
        notifications = await self.notification_repository.find_by_recipient(
            recipient_id, unread_only=unread_only, limit=limit, offset=offset
        )
        total = await self.notification_repository.count_by_recipient(
            recipient_id, unread_only=unread_only
        )
        return notifications, total

    async def count_unread(self, recipient_id: UserId) -> int:
        return await self.notification_repository.count_by_recipient(
            recipient_id, unread_only=True
        )

    async def mark_read(
        self, notification_id: NotificationId, recipient_id: UserId
    ) -> Notification:
        """Acknowledge one notification.

        Raises:
            NotFoundError: If the notification does not exist for that recipient
        """
        notification = await self.notification_repository.mark_read(
            notification_id, recipient_id, datetime.now()
        )
        if notification is None:
            raise NotFoundError("Notification", str(notification_id))
        return notification

    async def mark_all_read(self, recipient_id: UserId) -> int:
        updated = await self.notification_repository.mark_all_read(
            recipient_id, datetime.now()
        )
        logfire.info(
            "Notifications marked read", recipient_id=str(recipient_id), count=updated
        )
        return updated

    async def purge_expired(self, now: Optional[datetime] = None) -> int:
        """Delete notifications older than the retention window.

        Args:
            now: Reference time (defaults to the current time)

        Returns:
            Number of notifications deleted
        """
        cutoff = (now or datetime.now()) - timedelta(days=self.settings.retention_days)
        with logfire.span("notification_service.purge_expired", cutoff=cutoff.isoformat()):
            deleted = await self.notification_repository.delete_created_before(cutoff)
            logfire.info("Expired notifications purged", count=deleted)
            return deleted

    async def _drafts_for(self, event: DomainEvent) -> list[_Draft]:
        if isinstance(event, UpvotedEvent):
            return [self._upvote_draft(event)]
        if isinstance(event, CommentedEvent):
            return self._comment_drafts(event)
        if isinstance(event, MentionedEvent):
            # Mentions may name users that do not exist
            if await self.user_service.find_by_id(event.mentioned_user_id) is None:
                logfire.debug(
                    "Mention of unknown user skipped",
                    mentioned_user_id=str(event.mentioned_user_id),
                )
                return []
            return [self._mention_draft(event)]
        if isinstance(event, MessageSentEvent):
            return [self._message_draft(event)]
        raise TypeError(f"Unsupported event: {type(event).__name__}")

    def _upvote_draft(self, event: UpvotedEvent) -> _Draft:
        if event.entity_kind == VotableType.THREAD:
            return _Draft(
                recipient_id=event.owner_id,
                actor_id=event.actor_id,
                type=NotificationType.THREAD_UPVOTE,
                title="Your thread received an upvote",
                body=f'Someone upvoted your thread "{event.entity_title}"',
                context=NotificationContext(
                    thread_id=str(event.thread_id),
                    actor_id=str(event.actor_id),
                    action_url=thread_link(event.thread_id),
                ),
            )
        return _Draft(
            recipient_id=event.owner_id,
            actor_id=event.actor_id,
            type=NotificationType.COMMENT_UPVOTE,
            title="Your comment received an upvote",
            body="Someone upvoted your comment",
            context=NotificationContext(
                thread_id=str(event.thread_id),
                comment_id=str(event.entity_id),
                actor_id=str(event.actor_id),
                action_url=comment_link(event.thread_id, event.entity_id),
            ),
        )

    def _comment_drafts(self, event: CommentedEvent) -> list[_Draft]:
        context = NotificationContext(
            thread_id=str(event.thread_id),
            comment_id=str(event.comment_id),
            actor_id=str(event.actor_id),
            action_url=comment_link(event.thread_id, event.comment_id),
        )
        thread_reply = _Draft(
            recipient_id=event.thread_owner_id,
            actor_id=event.actor_id,
            type=NotificationType.THREAD_REPLY,
            title="New comment on your thread",
            body=f'{event.actor_name} commented on your thread "{event.thread_title}"',
            context=context,
        )
        if event.parent_owner_id is None:
            return [thread_reply]

        comment_reply = _Draft(
            recipient_id=event.parent_owner_id,
            actor_id=event.actor_id,
            type=NotificationType.COMMENT_REPLY,
            title="Reply to your comment",
            body=f"{event.actor_name} replied to your comment",
            context=context,
        )
        if event.parent_owner_id == event.thread_owner_id:
            return [comment_reply]
        return [comment_reply, thread_reply]

    def _mention_draft(self, event: MentionedEvent) -> _Draft:
        if event.comment_id is None:
            return _Draft(
                recipient_id=event.mentioned_user_id,
                actor_id=event.actor_id,
                type=NotificationType.THREAD_MENTION,
                title="You were mentioned in a thread",
                body=f'{event.actor_name} mentioned you in "{event.thread_title}"',
                context=NotificationContext(
                    thread_id=str(event.thread_id),
                    actor_id=str(event.actor_id),
                    action_url=thread_link(event.thread_id),
                ),
            )
        return _Draft(
            recipient_id=event.mentioned_user_id,
            actor_id=event.actor_id,
            type=NotificationType.COMMENT_MENTION,
            title="You were mentioned in a comment",
            body=(
                f"{event.actor_name} mentioned you in a comment on "
                f'"{event.thread_title}"'
            ),
            context=NotificationContext(
                thread_id=str(event.thread_id),
                comment_id=str(event.comment_id),
                actor_id=str(event.actor_id),
                action_url=comment_link(event.thread_id, event.comment_id),
            ),
        )

    def _message_draft(self, event: MessageSentEvent) -> _Draft:
        return _Draft(
            recipient_id=event.receiver_id,
            actor_id=event.sender_id,
            type=NotificationType.NEW_MESSAGE,
            title="New message",
            body=f"{event.sender_name} sent you a message",
            context=NotificationContext(
                message_id=str(event.message_id),
                actor_id=str(event.sender_id),
                action_url=chat_link(event.sender_username),
            ),
        )

    async def _record(self, draft: _Draft) -> Optional[Notification]:
        if draft.recipient_id == draft.actor_id:
            logfire.debug("Self-action notification suppressed", type=draft.type.value)
            return None

        channel = draft.type.preference_channel
        if channel is not None and not await self.user_service.accepts(
            draft.recipient_id, channel
        ):
            logfire.info(
                "Notification suppressed by preference",
                recipient_id=str(draft.recipient_id),
                type=draft.type.value,
                channel=channel.value,
            )
            return None

        notification = Notification(
            id=NotificationId(uuid4()),
            recipient_id=draft.recipient_id,
            type=draft.type,
            title=_clip(draft.title, self.settings.title_max_length),
            body=_clip(draft.body, self.settings.body_max_length),
            context=draft.context,
            created_at=datetime.now(),
        )
        saved = await self.notification_repository.save(notification)
        logfire.info(
            "Notification created",
            notification_id=str(saved.id),
            recipient_id=str(saved.recipient_id),
            type=saved.type.value,
        )
        return saved


def _clip(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."
