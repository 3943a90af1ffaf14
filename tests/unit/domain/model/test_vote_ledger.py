"""Unit tests for VoteLedger transitions."""

from uuid import uuid4

import pytest

from forum.domain.model import Vote, VoteLedger
from forum.domain.value import (
    NotificationHint,
    UserId,
    VotableType,
    VoteDirection,
    VoteId,
    VoteTransitionKind,
)


def _ledger(owner_id: UserId, current_vote: Vote | None = None, up=3, down=2) -> VoteLedger:
    thread_id = uuid4()
    return VoteLedger(
        votable_type=VotableType.THREAD,
        votable_id=thread_id,
        owner_id=owner_id,
        thread_id=thread_id,
        title="Thread",
        upvote_count=up,
        downvote_count=down,
        version=7,
        current_vote=current_vote,
    )


def _vote(user_id: UserId, ledger: VoteLedger, direction: VoteDirection) -> Vote:
    return Vote(
        id=VoteId(uuid4()),
        user_id=user_id,
        votable_type=ledger.votable_type,
        votable_id=ledger.votable_id,
        direction=direction,
    )


class TestVoteLedgerTransition:
    """Tests for VoteLedger.transition."""

    def test_first_upvote_casts_and_asks_for_notification(self):
        owner, voter = UserId(uuid4()), UserId(uuid4())
        ledger = _ledger(owner)

        transition = ledger.transition(voter, VoteDirection.UP)

        assert transition.kind == VoteTransitionKind.CAST
        assert (transition.upvote_delta, transition.downvote_delta) == (1, 0)
        assert transition.notification_hint == NotificationHint.EMIT_UPVOTE
        assert transition.vote.user_id == voter
        assert transition.vote.direction == VoteDirection.UP

    def test_first_downvote_never_notifies(self):
        ledger = _ledger(UserId(uuid4()))

        transition = ledger.transition(UserId(uuid4()), VoteDirection.DOWN)

        assert (transition.upvote_delta, transition.downvote_delta) == (0, 1)
        assert transition.notification_hint == NotificationHint.NONE

    def test_owner_upvote_does_not_notify(self):
        owner = UserId(uuid4())
        ledger = _ledger(owner)

        transition = ledger.transition(owner, VoteDirection.UP)

        assert transition.kind == VoteTransitionKind.CAST
        assert transition.notification_hint == NotificationHint.NONE

    @pytest.mark.parametrize(
        "direction, deltas",
        [(VoteDirection.UP, (-1, 0)), (VoteDirection.DOWN, (0, -1))],
    )
    def test_same_direction_retracts(self, direction, deltas):
        voter = UserId(uuid4())
        ledger = _ledger(UserId(uuid4()))
        ledger = ledger.model_copy(
            update={"current_vote": _vote(voter, ledger, direction)}
        )

        transition = ledger.transition(voter, direction)

        assert transition.kind == VoteTransitionKind.RETRACT
        assert (transition.upvote_delta, transition.downvote_delta) == deltas
        assert transition.vote == ledger.current_vote
        assert transition.notification_hint == NotificationHint.NONE

    @pytest.mark.parametrize(
        "current, deltas",
        [(VoteDirection.UP, (-1, 1)), (VoteDirection.DOWN, (1, -1))],
    )
    def test_opposite_direction_flips_in_place(self, current, deltas):
        voter = UserId(uuid4())
        ledger = _ledger(UserId(uuid4()))
        existing = _vote(voter, ledger, current)
        ledger = ledger.model_copy(update={"current_vote": existing})

        transition = ledger.transition(voter, current.opposite)

        assert transition.kind == VoteTransitionKind.FLIP
        assert (transition.upvote_delta, transition.downvote_delta) == deltas
        assert transition.vote.id == existing.id
        assert transition.vote.direction == current.opposite
        # Flipping to up is not a first-time upvote
        assert transition.notification_hint == NotificationHint.NONE

    def test_rejects_snapshot_of_another_voter(self):
        ledger = _ledger(UserId(uuid4()))
        ledger = ledger.model_copy(
            update={
                "current_vote": _vote(UserId(uuid4()), ledger, VoteDirection.UP)
            }
        )

        with pytest.raises(ValueError):
            ledger.transition(UserId(uuid4()), VoteDirection.UP)
