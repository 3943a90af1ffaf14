"""Delete message use case."""

from uuid import UUID

from pydantic import BaseModel

from forum.application.usecase.base import BaseUseCase
from forum.domain.service import MessageService
from forum.domain.value import MessageId, UserId


class DeleteMessageRequest(BaseModel):
    """Delete message request."""

    message_id: str  # UUID string
    user_id: str  # User ID from authenticated user


class DeleteMessageResponse(BaseModel):
    """Delete message response."""

    message_id: str
    deleted: bool


class DeleteMessageUseCase(BaseUseCase):
    """Use case for hiding a message from the caller's side of a conversation."""

    def __init__(self, message_service: MessageService) -> None:
        self.message_service = message_service

    async def execute(self, request: DeleteMessageRequest) -> DeleteMessageResponse:
        """Hide the message for the caller.

        Raises:
            NotFoundError: If the message does not exist
            ForbiddenError: If the caller is not sender or receiver
        """
        message = await self.message_service.delete_for_user(
            MessageId(UUID(request.message_id)), UserId(UUID(request.user_id))
        )
        return DeleteMessageResponse(message_id=str(message.id), deleted=True)
