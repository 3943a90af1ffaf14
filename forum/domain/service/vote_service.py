"""Vote domain service."""

import asyncio
import random
from typing import Sequence
from uuid import UUID

import logfire

from forum.config import VotingSettings
from forum.domain.error import ConflictError, InvalidArgumentError, NotFoundError
from forum.domain.model import VoteLedger, VoteOutcome
from forum.domain.repository import VoteRepository
from forum.domain.value import UserId, VotableType, VoteDirection

from .base import Service


class VoteService(Service):
    """Domain service for the vote ledger.

    A vote is applied by reading a ledger snapshot, computing the
    transition, and committing it under the snapshot's entity version.
    A lost race re-reads and retries with jittered backoff; only votes
    on the same entity ever contend.
    """

    def __init__(
        self,
        vote_repository: VoteRepository,
        voting_settings: VotingSettings,
    ) -> None:
        """Initialize vote service.

        Args:
            vote_repository: Vote repository
            voting_settings: Retry budget and backoff
        """
        self.vote_repository = vote_repository
        self.voting_settings = voting_settings

    async def apply_vote(
        self,
        votable_type: VotableType,
        votable_id: UUID,
        user_id: UserId,
        direction: VoteDirection | str,
    ) -> VoteOutcome:
        """Cast, retract or flip a user's vote on a thread or comment.

        Args:
            votable_type: Thread or comment
            votable_id: ID of the item
            user_id: Voter
            direction: "up" or "down"

        Returns:
            Counters after the vote, with the notification hint

        Raises:
            NotFoundError: If the item does not exist
            InvalidArgumentError: If direction is not up/down
            ConflictError: If the retry budget ran out
        """
        with logfire.span(
            "vote_service.apply_vote",
            votable_type=votable_type.value,
            votable_id=str(votable_id),
            user_id=str(user_id),
            direction=str(getattr(direction, "value", direction)),
        ):
            ledger = await self._load(votable_type, votable_id, user_id)
            vote_direction = self._parse_direction(direction)

            attempts = self.voting_settings.max_retries
            for attempt in range(attempts):
                if attempt > 0:
                    await asyncio.sleep(self._backoff(attempt))
                    ledger = await self._load(votable_type, votable_id, user_id)

                transition = ledger.transition(user_id, vote_direction)
                if await self.vote_repository.commit(ledger, transition):
                    outcome = VoteOutcome(
                        votable_type=votable_type,
                        votable_id=votable_id,
                        owner_id=ledger.owner_id,
                        thread_id=ledger.thread_id,
                        title=ledger.title,
                        upvote_count=ledger.upvote_count + transition.upvote_delta,
                        downvote_count=ledger.downvote_count
                        + transition.downvote_delta,
                        kind=transition.kind,
                        notification_hint=transition.notification_hint,
                    )
                    logfire.info(
                        "Vote applied",
                        kind=transition.kind.value,
                        upvote_count=outcome.upvote_count,
                        downvote_count=outcome.downvote_count,
                        attempt=attempt + 1,
                    )
                    return outcome

                logfire.debug(
                    "Vote version conflict, retrying",
                    votable_id=str(votable_id),
                    version=ledger.version,
                    attempt=attempt + 1,
                )

            logfire.error(
                "Vote retry budget exhausted",
                votable_type=votable_type.value,
                votable_id=str(votable_id),
                attempts=attempts,
            )
            raise ConflictError(votable_type.value, str(votable_id), attempts)

    async def get_user_votes(
        self,
        user_id: UserId,
        votable_type: VotableType,
        votable_ids: Sequence[UUID],
    ) -> dict[UUID, VoteDirection]:
        """Map each item the user has voted on to the vote's direction.

        Args:
            user_id: Voter
            votable_type: Thread or comment
            votable_ids: Items to check

        Returns:
            Direction per voted item; items without a vote are absent
        """
        if not votable_ids:
            return {}

        votes = await self.vote_repository.find_by_user_and_votables(
            user_id=user_id,
            votable_type=votable_type,
            votable_ids=votable_ids,
        )
        return {vote.votable_id: vote.direction for vote in votes}

    async def _load(
        self, votable_type: VotableType, votable_id: UUID, user_id: UserId
    ) -> VoteLedger:
        ledger = await self.vote_repository.load_ledger(
            votable_type, votable_id, user_id
        )
        if ledger is None:
            logfire.warn(
                "Vote on non-existent item",
                votable_type=votable_type.value,
                votable_id=str(votable_id),
            )
            raise NotFoundError(votable_type.value.capitalize(), str(votable_id))
        return ledger

    @staticmethod
    def _parse_direction(direction: VoteDirection | str) -> VoteDirection:
        try:
            return VoteDirection(direction)
        except ValueError:
            raise InvalidArgumentError(f"Invalid vote direction: {direction!r}")

    def _backoff(self, attempt: int) -> float:
        delay = self.voting_settings.base_delay * (2 ** (attempt - 1))
        delay = min(delay, self.voting_settings.max_delay)
        return delay * random.uniform(0.5, 1.5)
