"""In-memory vote repository for testing."""

import asyncio
from typing import Optional, Sequence, Union
from uuid import UUID

from forum.domain.model import Comment, Thread
from forum.domain.model.vote import Vote, VoteLedger, VoteTransition
from forum.domain.repository.vote import VoteRepository
from forum.domain.value import (
    CommentId,
    ThreadId,
    UserId,
    VotableType,
    VoteId,
    VoteTransitionKind,
)

from .comment import InMemoryCommentRepository
from .thread import InMemoryThreadRepository


class InMemoryVoteRepository(VoteRepository):
    """In-memory implementation of VoteRepository for testing.

    Counters are kept on the threads/comments held by the given
    repositories. ``load_ledger`` yields to the event loop after reading,
    so concurrent voters really do interleave and collide on ``commit``.
    """

    def __init__(
        self,
        thread_repository: InMemoryThreadRepository,
        comment_repository: InMemoryCommentRepository,
    ) -> None:
        self._threads = thread_repository
        self._comments = comment_repository
        self._votes: dict[VoteId, Vote] = {}

    async def find_by_user_and_votable(
        self,
        user_id: UserId,
        votable_type: VotableType,
        votable_id: UUID,
    ) -> Optional[Vote]:
        """Find a vote by user and votable item."""
        for vote in self._votes.values():
            if (
                vote.user_id == user_id
                and vote.votable_type == votable_type
                and vote.votable_id == votable_id
            ):
                return vote
        return None

    async def find_by_votable(
        self,
        votable_type: VotableType,
        votable_id: UUID,
    ) -> list[Vote]:
        """Find all votes for a votable item."""
        return [
            v
            for v in self._votes.values()
            if v.votable_type == votable_type and v.votable_id == votable_id
        ]

    async def find_by_user_and_votables(
        self,
        user_id: UserId,
        votable_type: VotableType,
        votable_ids: Sequence[UUID],
    ) -> list[Vote]:
        """Find a user's votes on multiple items (batch query)."""
        if not votable_ids:
            return []

        wanted = set(votable_ids)
        return [
            v
            for v in self._votes.values()
            if v.user_id == user_id
            and v.votable_type == votable_type
            and v.votable_id in wanted
        ]

    async def load_ledger(
        self,
        votable_type: VotableType,
        votable_id: UUID,
        user_id: UserId,
    ) -> Optional[VoteLedger]:
        """Snapshot the entity and the user's vote."""
        entity = self._entity(votable_type, votable_id)
        if entity is None:
            return None

        if isinstance(entity, Thread):
            thread_id, title = entity.id, entity.title
        else:
            thread_id, title = entity.thread_id, None

        ledger = VoteLedger(
            votable_type=votable_type,
            votable_id=votable_id,
            owner_id=entity.owner_id,
            thread_id=thread_id,
            title=title,
            upvote_count=entity.upvote_count,
            downvote_count=entity.downvote_count,
            version=entity.version,
            current_vote=await self.find_by_user_and_votable(
                user_id, votable_type, votable_id
            ),
        )
        await asyncio.sleep(0)
        return ledger

    async def commit(self, ledger: VoteLedger, transition: VoteTransition) -> bool:
        """Compare-and-set on the entity version; no awaits in between."""
        entity = self._entity(ledger.votable_type, ledger.votable_id)
        if entity is None or entity.version != ledger.version:
            return False

        updated = entity.model_copy(
            update={
                "upvote_count": entity.upvote_count + transition.upvote_delta,
                "downvote_count": entity.downvote_count + transition.downvote_delta,
                "version": entity.version + 1,
            }
        )
        if isinstance(updated, Thread):
            self._threads.put(updated)
        else:
            self._comments.put(updated)

        vote = transition.vote
        if transition.kind == VoteTransitionKind.RETRACT:
            self._votes.pop(vote.id, None)
        else:
            self._votes[vote.id] = vote
        return True

    def _entity(
        self, votable_type: VotableType, votable_id: UUID
    ) -> Optional[Union[Thread, Comment]]:
        if votable_type == VotableType.THREAD:
            return self._threads.get(ThreadId(votable_id))
        return self._comments.get(CommentId(votable_id))
