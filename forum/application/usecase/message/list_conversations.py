"""List conversations use case."""

from uuid import UUID

from pydantic import BaseModel

from forum.application.usecase.base import BaseUseCase
from forum.application.view import ConversationView, conversation_views
from forum.domain.service import MessageService, UserService
from forum.domain.value import UserId


class ListConversationsRequest(BaseModel):
    """List conversations request."""

    user_id: str  # User ID from authenticated user


class ListConversationsResponse(BaseModel):
    """Inbox, most recent conversation first."""

    conversations: list[ConversationView]


class ListConversationsUseCase(BaseUseCase):
    """Use case for listing a user's conversations."""

    def __init__(
        self, message_service: MessageService, user_service: UserService
    ) -> None:
        self.message_service = message_service
        self.user_service = user_service

    async def execute(
        self, request: ListConversationsRequest
    ) -> ListConversationsResponse:
        summaries = await self.message_service.list_conversations(
            UserId(UUID(request.user_id))
        )
        return ListConversationsResponse(
            conversations=await conversation_views(self.user_service, summaries)
        )
