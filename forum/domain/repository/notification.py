"""Notification repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from forum.domain.model.notification import Notification
from forum.domain.value import NotificationId, UserId


class NotificationRepository(ABC):
    """Repository for Notification entity."""

    @abstractmethod
    async def find_by_id(self, notification_id: NotificationId) -> Optional[Notification]:
        """Find a notification by ID.

        Args:
            notification_id: The notification's unique identifier

        Returns:
            The notification if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_recipient(
        self,
        recipient_id: UserId,
        unread_only: bool = False,
        limit: int = 20,
        offset: int = 0,
    ) -> list[Notification]:
        """List a recipient's notifications, newest first.

        Args:
            recipient_id: Owner of the notifications
            unread_only: Only return unread notifications
            limit: Maximum number to return
            offset: Number to skip

        Returns:
            Page of notifications
        """
        pass

    @abstractmethod
    async def count_by_recipient(
        self, recipient_id: UserId, unread_only: bool = False
    ) -> int:
        """Count a recipient's notifications.

        Args:
            recipient_id: Owner of the notifications
            unread_only: Only count unread notifications

        Returns:
            Number of notifications
        """
        pass

    @abstractmethod
    async def save(self, notification: Notification) -> Notification:
        """Save a notification (create).

        Args:
            notification: The notification to save

        Returns:
            The saved notification
        """
        pass

    @abstractmethod
    async def mark_read(
        self,
        notification_id: NotificationId,
        recipient_id: UserId,
        read_at: datetime,
    ) -> Optional[Notification]:
        """Mark one notification read, scoped to its recipient.

        Args:
            notification_id: Notification to acknowledge
            recipient_id: Must own the notification
            read_at: Acknowledgment time

        Returns:
            The updated notification, None if not found for that recipient
        """
        pass

    @abstractmethod
    async def mark_all_read(self, recipient_id: UserId, read_at: datetime) -> int:
        """Mark every unread notification of a recipient read.

        Returns:
            Number of notifications updated
        """
        pass

    @abstractmethod
    async def delete_created_before(self, cutoff: datetime) -> int:
        """Delete notifications created before ``cutoff`` (retention sweep).

        Returns:
            Number of notifications deleted
        """
        pass
