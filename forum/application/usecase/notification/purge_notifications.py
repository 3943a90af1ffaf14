"""Purge expired notifications use case."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from forum.application.usecase.base import BaseUseCase
from forum.domain.service import NotificationService


class PurgeNotificationsRequest(BaseModel):
    now: Optional[datetime] = None


class PurgeNotificationsResponse(BaseModel):
    deleted: int


class PurgeNotificationsUseCase(BaseUseCase):
    """Use case for the periodic notification retention sweep."""

    def __init__(self, notification_service: NotificationService) -> None:
        self.notification_service = notification_service

    async def execute(
        self, request: PurgeNotificationsRequest
    ) -> PurgeNotificationsResponse:
        deleted = await self.notification_service.purge_expired(request.now)
        return PurgeNotificationsResponse(deleted=deleted)
