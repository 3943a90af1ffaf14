"""Mark notification(s) read use cases."""

from uuid import UUID

from pydantic import BaseModel

from forum.application.usecase.base import BaseUseCase
from forum.application.view import NotificationView
from forum.domain.service import NotificationService
from forum.domain.value import NotificationId, UserId


class MarkNotificationReadRequest(BaseModel):
    """Mark notification read request."""

    notification_id: str  # UUID string
    user_id: str  # User ID from authenticated user


class MarkNotificationReadUseCase(BaseUseCase):
    """Use case for acknowledging one notification."""

    def __init__(self, notification_service: NotificationService) -> None:
        self.notification_service = notification_service

    async def execute(self, request: MarkNotificationReadRequest) -> NotificationView:
        """Mark the notification read.

        Raises:
            NotFoundError: If the caller has no such notification
        """
        notification = await self.notification_service.mark_read(
            NotificationId(UUID(request.notification_id)),
            UserId(UUID(request.user_id)),
        )
        return NotificationView.from_notification(notification)


class MarkAllNotificationsReadRequest(BaseModel):
    user_id: str


class MarkAllNotificationsReadResponse(BaseModel):
    updated: int


class MarkAllNotificationsReadUseCase(BaseUseCase):
    """Use case for acknowledging every unread notification of the caller."""

    def __init__(self, notification_service: NotificationService) -> None:
        self.notification_service = notification_service

    async def execute(
        self, request: MarkAllNotificationsReadRequest
    ) -> MarkAllNotificationsReadResponse:
        updated = await self.notification_service.mark_all_read(
            UserId(UUID(request.user_id))
        )
        return MarkAllNotificationsReadResponse(updated=updated)
