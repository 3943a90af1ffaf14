"""Get conversation use case."""

from uuid import UUID

from pydantic import BaseModel, Field

from forum.application.usecase.base import BaseUseCase
from forum.application.view import MessageView, message_views
from forum.config import MessagingSettings
from forum.domain.service import MessageService, UserService
from forum.domain.value import UserId


class GetConversationRequest(BaseModel):
    """Get conversation request."""

    viewer_id: str  # User ID from authenticated user
    counterpart_id: str  # UUID string
    page: int = Field(default=1, ge=1)
    limit: int | None = Field(default=None, ge=1)


class GetConversationResponse(BaseModel):
    """Page of a conversation, oldest message first."""

    messages: list[MessageView]
    page: int
    limit: int
    total: int
    has_more: bool


class GetConversationUseCase(BaseUseCase):
    """Use case for reading a conversation; marks incoming messages read."""

    def __init__(
        self,
        message_service: MessageService,
        user_service: UserService,
        messaging_settings: MessagingSettings,
    ) -> None:
        self.message_service = message_service
        self.user_service = user_service
        self.messaging_settings = messaging_settings

    async def execute(self, request: GetConversationRequest) -> GetConversationResponse:
        limit = min(
            request.limit or self.messaging_settings.default_page_size,
            self.messaging_settings.max_page_size,
        )
        offset = (request.page - 1) * limit

        messages, total = await self.message_service.get_conversation(
            viewer_id=UserId(UUID(request.viewer_id)),
            counterpart_id=UserId(UUID(request.counterpart_id)),
            limit=limit,
            offset=offset,
        )

        return GetConversationResponse(
            messages=await message_views(self.user_service, messages),
            page=request.page,
            limit=limit,
            total=total,
            has_more=offset + len(messages) < total,
        )
