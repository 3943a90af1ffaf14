"""Notify comment use case.

Hook for the comment CRUD collaborator: called once a comment has been
created, it fans out reply and mention notifications.
"""

from uuid import UUID

import logfire
from pydantic import BaseModel

from forum.adapter.realtime import RealtimeHub
from forum.application.delivery import push_notifications
from forum.application.usecase.base import BaseUseCase
from forum.domain.error import NotFoundError
from forum.domain.model import CommentedEvent
from forum.domain.repository import CommentRepository, ThreadRepository
from forum.domain.service import NotificationService, UserService
from forum.domain.value import CommentId


class NotifyCommentRequest(BaseModel):
    """Notify comment request."""

    comment_id: str  # UUID string of the newly created comment


class NotifyCommentResponse(BaseModel):
    """Number of notifications recorded."""

    notified: int


class NotifyCommentUseCase(BaseUseCase):
    """Use case for reply and mention notifications on a new comment."""

    def __init__(
        self,
        comment_repository: CommentRepository,
        thread_repository: ThreadRepository,
        user_service: UserService,
        notification_service: NotificationService,
        realtime_hub: RealtimeHub,
    ) -> None:
        """Initialize notify comment use case.

        Args:
            comment_repository: Comment repository
            thread_repository: Thread repository
            user_service: User domain service
            notification_service: Notification emitter
            realtime_hub: Live connection hub
        """
        self.comment_repository = comment_repository
        self.thread_repository = thread_repository
        self.user_service = user_service
        self.notification_service = notification_service
        self.realtime_hub = realtime_hub

    async def execute(self, request: NotifyCommentRequest) -> NotifyCommentResponse:
        """Execute comment notification flow.

        Steps:
        1. Load the comment, its thread and (for replies) the parent comment
        2. Emit thread_reply / comment_reply notifications
        3. Emit one mention notification per mentioned user
        4. Push everything recorded to live connections

        Raises:
            NotFoundError: If the comment, its thread or its author is missing
        """
        comment_id = CommentId(UUID(request.comment_id))
        with logfire.span("notify_comment", comment_id=str(comment_id)):
            comment = await self.comment_repository.find_by_id(comment_id)
            if comment is None:
                raise NotFoundError("Comment", str(comment_id))

            thread = await self.thread_repository.find_by_id(comment.thread_id)
            if thread is None:
                raise NotFoundError("Thread", str(comment.thread_id))

            actor = await self.user_service.get_by_id(comment.owner_id)

            parent_owner_id = None
            if comment.parent_id is not None:
                parent = await self.comment_repository.find_by_id(comment.parent_id)
                if parent is not None:
                    parent_owner_id = parent.owner_id

            notifications = await self.notification_service.emit(
                CommentedEvent(
                    thread_owner_id=thread.owner_id,
                    parent_owner_id=parent_owner_id,
                    actor_id=actor.id,
                    actor_name=actor.name,
                    thread_id=thread.id,
                    comment_id=comment.id,
                    thread_title=thread.title,
                )
            )
            notifications.extend(
                await self.notification_service.notify_mentions(
                    actor_id=actor.id,
                    actor_name=actor.name,
                    thread_id=thread.id,
                    thread_title=thread.title,
                    mentioned_user_ids=comment.mentions,
                    comment_id=comment.id,
                )
            )

            await push_notifications(self.realtime_hub, notifications)
            return NotifyCommentResponse(notified=len(notifications))
