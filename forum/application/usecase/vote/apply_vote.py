"""Apply vote use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel

from forum.adapter.realtime import RealtimeHub
from forum.application.delivery import push_notifications
from forum.application.usecase.base import BaseUseCase
from forum.domain.model import UpvotedEvent, VoteOutcome
from forum.domain.service import NotificationService, VoteService
from forum.domain.value import NotificationHint, ThreadId, UserId, VotableType


class ApplyVoteRequest(BaseModel):
    """Apply vote request."""

    votable_type: VotableType
    votable_id: str  # UUID string
    user_id: str  # User ID from authenticated user
    direction: str  # "up" or "down", validated by the vote service


class ApplyVoteResponse(BaseModel):
    """Counters of the voted item after the vote."""

    upvote_count: int
    downvote_count: int


class ApplyVoteUseCase(BaseUseCase):
    """Use case for voting on a thread or comment.

    Voting the same direction twice retracts the vote; voting the other
    direction flips it.
    """

    def __init__(
        self,
        vote_service: VoteService,
        notification_service: NotificationService,
        realtime_hub: RealtimeHub,
    ) -> None:
        """Initialize apply vote use case.

        Args:
            vote_service: Vote domain service
            notification_service: Notification emitter
            realtime_hub: Live connection hub
        """
        self.vote_service = vote_service
        self.notification_service = notification_service
        self.realtime_hub = realtime_hub

    async def execute(self, request: ApplyVoteRequest) -> ApplyVoteResponse:
        """Execute vote flow.

        Steps:
        1. Apply the vote to the ledger (authoritative)
        2. On a first-time upvote, record a notification for the owner
        3. Push the notification to the owner's live connections

        Steps 2 and 3 are best-effort and never fail the vote.

        Raises:
            NotFoundError: If the item does not exist
            InvalidArgumentError: If the direction is invalid
            ConflictError: If concurrent votes could not be reconciled
        """
        user_id = UserId(UUID(request.user_id))
        outcome = await self.vote_service.apply_vote(
            votable_type=request.votable_type,
            votable_id=UUID(request.votable_id),
            user_id=user_id,
            direction=request.direction,
        )

        if outcome.notification_hint == NotificationHint.EMIT_UPVOTE:
            await self._notify_owner(outcome, user_id)

        return ApplyVoteResponse(
            upvote_count=outcome.upvote_count,
            downvote_count=outcome.downvote_count,
        )

    async def _notify_owner(self, outcome: VoteOutcome, actor_id: UserId) -> None:
        event = UpvotedEvent(
            entity_kind=outcome.votable_type,
            entity_id=outcome.votable_id,
            owner_id=outcome.owner_id,
            actor_id=actor_id,
            thread_id=ThreadId(outcome.thread_id),
            entity_title=outcome.title,
        )
        try:
            notifications = await self.notification_service.emit(event)
        except Exception as e:
            logfire.warn(
                "Upvote notification failed",
                votable_id=str(outcome.votable_id),
                error=str(e),
            )
            return
        await push_notifications(self.realtime_hub, notifications)
