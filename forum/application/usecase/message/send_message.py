"""Send message use case."""

from typing import Optional
from uuid import UUID

import logfire
from pydantic import BaseModel

from forum.adapter.realtime import RealtimeHub
from forum.application.delivery import push_message, push_notifications
from forum.application.usecase.base import BaseUseCase
from forum.application.view import MessageView
from forum.domain.model import Message, MessageSentEvent, Notification, User
from forum.domain.service import MessageService, NotificationService, UserService
from forum.domain.value import MessageType, ThreadId, UserId


class SendMessageRequest(BaseModel):
    """Send message request."""

    sender_id: str  # User ID from authenticated user
    receiver_id: str  # UUID string
    content: str
    thread_id: Optional[str] = None
    message_type: MessageType = MessageType.TEXT


class SendMessageUseCase(BaseUseCase):
    """Use case for sending a direct message.

    The message record is the only thing that must succeed. The
    recipient's notification and the realtime push follow it and are
    allowed to fail silently.
    """

    def __init__(
        self,
        message_service: MessageService,
        user_service: UserService,
        notification_service: NotificationService,
        realtime_hub: RealtimeHub,
    ) -> None:
        """Initialize send message use case.

        Args:
            message_service: Message domain service
            user_service: User domain service
            notification_service: Notification emitter
            realtime_hub: Live connection hub
        """
        self.message_service = message_service
        self.user_service = user_service
        self.notification_service = notification_service
        self.realtime_hub = realtime_hub

    async def execute(self, request: SendMessageRequest) -> MessageView:
        """Execute send message flow.

        Steps:
        1. Validate the recipient (exists, accepts chat, not the sender)
        2. Persist the message
        3. Record a new_message notification (best-effort)
        4. Push the message and notification to the recipient (best-effort)

        Returns:
            The message as the REST API and the realtime channel show it

        Raises:
            NotFoundError: If the recipient does not exist
            ForbiddenError: If the recipient has chat disabled
            InvalidArgumentError: If content is invalid
        """
        sender_id = UserId(UUID(request.sender_id))
        receiver_id = UserId(UUID(request.receiver_id))

        with logfire.span(
            "send_message", sender_id=str(sender_id), receiver_id=str(receiver_id)
        ):
            await self.message_service.validate_recipient(sender_id, receiver_id)
            sender = await self.user_service.get_by_id(sender_id)

            message = await self.message_service.create_message(
                sender_id=sender_id,
                receiver_id=receiver_id,
                content=request.content,
                thread_id=ThreadId(UUID(request.thread_id)) if request.thread_id else None,
                message_type=request.message_type,
            )
            view = MessageView.from_message(message, sender)

            notifications = await self._notify(message, sender)
            await push_message(self.realtime_hub, receiver_id, view)
            await push_notifications(self.realtime_hub, notifications)

            return view

    async def _notify(self, message: Message, sender: User) -> list[Notification]:
        event = MessageSentEvent(
            receiver_id=message.receiver_id,
            sender_id=message.sender_id,
            message_id=message.id,
            sender_name=sender.name,
            sender_username=str(sender.username),
        )
        try:
            return await self.notification_service.emit(event)
        except Exception as e:
            logfire.warn(
                "Message notification failed, message kept",
                message_id=str(message.id),
                error=str(e),
            )
            return []
