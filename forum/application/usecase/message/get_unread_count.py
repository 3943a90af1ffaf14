"""Unread message count use case."""

from uuid import UUID

from pydantic import BaseModel

from forum.application.usecase.base import BaseUseCase
from forum.domain.service import MessageService
from forum.domain.value import UserId


class GetUnreadCountRequest(BaseModel):
    user_id: str


class GetUnreadCountResponse(BaseModel):
    count: int


class GetUnreadCountUseCase(BaseUseCase):
    """Use case for counting unread messages addressed to a user."""

    def __init__(self, message_service: MessageService) -> None:
        self.message_service = message_service

    async def execute(self, request: GetUnreadCountRequest) -> GetUnreadCountResponse:
        count = await self.message_service.unread_count(UserId(UUID(request.user_id)))
        return GetUnreadCountResponse(count=count)
