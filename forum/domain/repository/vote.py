"""Vote repository interface."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence
from uuid import UUID

from forum.domain.model.vote import Vote, VoteLedger, VoteTransition
from forum.domain.value import UserId, VotableType


class VoteRepository(ABC):
    """Repository for vote records and the counters they drive.

    Threads and comments are handled identically, keyed by
    ``votable_type``. Implementations live in the infrastructure layer.
    """

    @abstractmethod
    async def find_by_user_and_votable(
        self,
        user_id: UserId,
        votable_type: VotableType,
        votable_id: UUID,
    ) -> Optional[Vote]:
        """Find a user's vote on a specific item.

        Args:
            user_id: The user's ID
            votable_type: Type of item (thread or comment)
            votable_id: ID of the item

        Returns:
            The vote if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_votable(
        self,
        votable_type: VotableType,
        votable_id: UUID,
    ) -> list[Vote]:
        """Find all votes on a specific item.

        Args:
            votable_type: Type of item (thread or comment)
            votable_id: ID of the item

        Returns:
            List of votes on the item
        """
        pass

    @abstractmethod
    async def find_by_user_and_votables(
        self,
        user_id: UserId,
        votable_type: VotableType,
        votable_ids: Sequence[UUID],
    ) -> list[Vote]:
        """Find a user's votes on multiple items (batch query).

        Args:
            user_id: The user's ID
            votable_type: Type of items (thread or comment)
            votable_ids: List of item IDs to check

        Returns:
            List of votes by the user on the specified items
        """
        pass

    @abstractmethod
    async def load_ledger(
        self,
        votable_type: VotableType,
        votable_id: UUID,
        user_id: UserId,
    ) -> Optional[VoteLedger]:
        """Read the entity's counters, version and the user's current vote.

        Args:
            votable_type: Type of item (thread or comment)
            votable_id: ID of the item
            user_id: The voter

        Returns:
            Ledger snapshot, or None if the entity does not exist
        """
        pass

    @abstractmethod
    async def commit(self, ledger: VoteLedger, transition: VoteTransition) -> bool:
        """Apply a transition if the entity is still at ``ledger.version``.

        The record mutation and both counter deltas are applied as one
        unit, and the entity version is bumped. Nothing is applied when
        the version no longer matches.

        Args:
            ledger: Snapshot the transition was computed from
            transition: Record mutation and counter deltas

        Returns:
            True if applied, False on a version conflict
        """
        pass
