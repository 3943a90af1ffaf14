"""Vote entity and the per-entity vote ledger.

Each user holds at most one vote record per thread or comment. Voting
again in the same direction retracts the vote, voting in the opposite
direction flips it. The entity's up/down counters are a cached
derivation of its records and always move together with them.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from pydantic import Field

from forum.domain.model.common import DomainModel
from forum.domain.value import (
    NotificationHint,
    UserId,
    VotableType,
    VoteDirection,
    VoteId,
    VoteTransitionKind,
)


class Vote(DomainModel):
    """A single user's current direction on one thread or comment.

    Unique per (user, votable); enforced by a database constraint.
    """

    id: VoteId
    user_id: UserId
    votable_type: VotableType
    votable_id: UUID  # ThreadId or CommentId (both are UUIDs)
    direction: VoteDirection
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class VoteTransition(DomainModel):
    """Change to apply to a ledger: the record mutation plus counter deltas."""

    kind: VoteTransitionKind
    vote: Vote  # record to insert (cast), update (flip) or delete (retract)
    upvote_delta: int
    downvote_delta: int
    notification_hint: NotificationHint = NotificationHint.NONE


class VoteLedger(DomainModel):
    """Snapshot of a votable entity's counters and one voter's record.

    ``version`` is the entity version the snapshot was read at; a
    transition computed from it is only valid while the entity is still
    at that version.
    """

    votable_type: VotableType
    votable_id: UUID
    owner_id: UserId
    thread_id: UUID  # The thread itself, or the thread a comment belongs to
    title: Optional[str] = None  # Thread title (comments have none)
    upvote_count: int = Field(ge=0)
    downvote_count: int = Field(ge=0)
    version: int = Field(ge=0)
    current_vote: Optional[Vote] = None

    def transition(self, user_id: UserId, direction: VoteDirection) -> VoteTransition:
        """Compute the effect of ``user_id`` voting ``direction``.

        Only a first-time upvote by someone other than the owner asks for
        a notification; flips, retractions and downvotes never do.
        """
        current = self.current_vote
        if current is not None and current.user_id != user_id:
            raise ValueError("Ledger snapshot belongs to a different voter")

        now = datetime.now()

        if current is None:
            vote = Vote(
                id=VoteId(uuid4()),
                user_id=user_id,
                votable_type=self.votable_type,
                votable_id=self.votable_id,
                direction=direction,
                created_at=now,
                updated_at=now,
            )
            up = direction is VoteDirection.UP
            hint = (
                NotificationHint.EMIT_UPVOTE
                if up and user_id != self.owner_id
                else NotificationHint.NONE
            )
            return VoteTransition(
                kind=VoteTransitionKind.CAST,
                vote=vote,
                upvote_delta=1 if up else 0,
                downvote_delta=0 if up else 1,
                notification_hint=hint,
            )

        if current.direction is direction:
            up = direction is VoteDirection.UP
            return VoteTransition(
                kind=VoteTransitionKind.RETRACT,
                vote=current,
                upvote_delta=-1 if up else 0,
                downvote_delta=0 if up else -1,
            )

        flipped = current.model_copy(update={"direction": direction, "updated_at": now})
        to_up = direction is VoteDirection.UP
        return VoteTransition(
            kind=VoteTransitionKind.FLIP,
            vote=flipped,
            upvote_delta=1 if to_up else -1,
            downvote_delta=-1 if to_up else 1,
        )


class VoteOutcome(DomainModel):
    """Authoritative counters after a vote was applied.

    Carries enough of the voted entity (owner, thread, title) for the
    caller to raise an upvote notification without another read.
    """

    votable_type: VotableType
    votable_id: UUID
    owner_id: UserId
    thread_id: UUID
    title: Optional[str] = None
    upvote_count: int
    downvote_count: int
    kind: VoteTransitionKind
    notification_hint: NotificationHint
