"""List notifications use case."""

from uuid import UUID

from pydantic import BaseModel, Field

from forum.application.usecase.base import BaseUseCase
from forum.application.view import NotificationView
from forum.config import NotificationSettings
from forum.domain.service import NotificationService
from forum.domain.value import UserId


class ListNotificationsRequest(BaseModel):
    """List notifications request."""

    user_id: str  # User ID from authenticated user
    unread_only: bool = False
    page: int = Field(default=1, ge=1)
    limit: int | None = Field(default=None, ge=1)


class ListNotificationsResponse(BaseModel):
    """Page of notifications, newest first."""

    notifications: list[NotificationView]
    page: int
    limit: int
    total: int
    unread_count: int
    has_more: bool


class ListNotificationsUseCase(BaseUseCase):
    """Use case for paging through the caller's notifications."""

    def __init__(
        self,
        notification_service: NotificationService,
        notification_settings: NotificationSettings,
    ) -> None:
        self.notification_service = notification_service
        self.notification_settings = notification_settings

    async def execute(
        self, request: ListNotificationsRequest
    ) -> ListNotificationsResponse:
        user_id = UserId(UUID(request.user_id))
        limit = min(
            request.limit or self.notification_settings.default_page_size,
            self.notification_settings.max_page_size,
        )
        offset = (request.page - 1) * limit

        notifications, total = await self.notification_service.list_for_recipient(
            user_id, unread_only=request.unread_only, limit=limit, offset=offset
        )
        unread_count = await self.notification_service.count_unread(user_id)

        return ListNotificationsResponse(
            notifications=[NotificationView.from_notification(n) for n in notifications],
            page=request.page,
            limit=limit,
            total=total,
            unread_count=unread_count,
            has_more=offset + len(notifications) < total,
        )
