"""Unread notification count use case."""

from uuid import UUID

from pydantic import BaseModel

from forum.application.usecase.base import BaseUseCase
from forum.domain.service import NotificationService
from forum.domain.value import UserId


class GetUnreadNotificationCountRequest(BaseModel):
    user_id: str


class GetUnreadNotificationCountResponse(BaseModel):
    count: int


class GetUnreadNotificationCountUseCase(BaseUseCase):
    def __init__(self, notification_service: NotificationService) -> None:
        self.notification_service = notification_service

    async def execute(
        self, request: GetUnreadNotificationCountRequest
    ) -> GetUnreadNotificationCountResponse:
        count = await self.notification_service.count_unread(
            UserId(UUID(request.user_id))
        )
        return GetUnreadNotificationCountResponse(count=count)
