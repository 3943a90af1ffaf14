"""In-memory notification repository for testing."""

from datetime import datetime
from typing import Optional

from forum.domain.model.notification import Notification
from forum.domain.repository.notification import NotificationRepository
from forum.domain.value import NotificationId, UserId


class InMemoryNotificationRepository(NotificationRepository):
    """In-memory implementation of NotificationRepository for testing."""

    def __init__(self) -> None:
        self._notifications: dict[NotificationId, Notification] = {}

    async def find_by_id(self, notification_id: NotificationId) -> Optional[Notification]:
        """Find a notification by ID."""
        return self._notifications.get(notification_id)

    async def find_by_recipient(
        self,
        recipient_id: UserId,
        unread_only: bool = False,
        limit: int = 20,
        offset: int = 0,
    ) -> list[Notification]:
        """List a recipient's notifications, newest first."""
        matching = self._matching(recipient_id, unread_only)
        matching.sort(key=lambda n: n.created_at, reverse=True)
        return matching[offset : offset + limit]

    async def count_by_recipient(
        self, recipient_id: UserId, unread_only: bool = False
    ) -> int:
        """Count a recipient's notifications."""
        return len(self._matching(recipient_id, unread_only))

    async def save(self, notification: Notification) -> Notification:
        """Save a notification."""
        self._notifications[notification.id] = notification
        return notification

    async def mark_read(
        self,
        notification_id: NotificationId,
        recipient_id: UserId,
        read_at: datetime,
    ) -> Optional[Notification]:
        """Mark one notification read, scoped to its recipient."""
        notification = self._notifications.get(notification_id)
        if notification is None or notification.recipient_id != recipient_id:
            return None
        if not notification.read:
            notification = notification.model_copy(
                update={"read": True, "read_at": read_at}
            )
            self._notifications[notification_id] = notification
        return notification

    async def mark_all_read(self, recipient_id: UserId, read_at: datetime) -> int:
        """Mark every unread notification of a recipient read."""
        unread = self._matching(recipient_id, unread_only=True)
        for notification in unread:
            self._notifications[notification.id] = notification.model_copy(
                update={"read": True, "read_at": read_at}
            )
        return len(unread)

    async def delete_created_before(self, cutoff: datetime) -> int:
        """Delete notifications created before the cutoff."""
        expired = [n.id for n in self._notifications.values() if n.created_at < cutoff]
        for notification_id in expired:
            del self._notifications[notification_id]
        return len(expired)

    def _matching(self, recipient_id: UserId, unread_only: bool) -> list[Notification]:
        return [
            n
            for n in reversed(self._notifications.values())
            if n.recipient_id == recipient_id and not (unread_only and n.read)
        ]
