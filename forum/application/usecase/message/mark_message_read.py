"""Mark message read use case."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from forum.application.usecase.base import BaseUseCase
from forum.domain.service import MessageService
from forum.domain.value import MessageId, UserId


class MarkMessageReadRequest(BaseModel):
    """Mark message read request."""

    message_id: str  # UUID string
    user_id: str  # User ID from authenticated user (must be the receiver)


class MarkMessageReadResponse(BaseModel):
    """Mark message read response."""

    message_id: str
    read: bool
    read_at: Optional[datetime] = None


class MarkMessageReadUseCase(BaseUseCase):
    """Use case for acknowledging a single received message."""

    def __init__(self, message_service: MessageService) -> None:
        self.message_service = message_service

    async def execute(self, request: MarkMessageReadRequest) -> MarkMessageReadResponse:
        """Mark the message read.

        Raises:
            NotFoundError: If no such message was sent to the user
        """
        message = await self.message_service.mark_read(
            MessageId(UUID(request.message_id)), UserId(UUID(request.user_id))
        )
        return MarkMessageReadResponse(
            message_id=str(message.id), read=message.read, read_at=message.read_at
        )
