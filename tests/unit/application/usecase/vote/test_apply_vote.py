"""Unit tests for ApplyVoteUseCase."""

from uuid import uuid4

import pytest

from forum.adapter.realtime import RealtimeHub, RecordingRealtimeHub
from forum.application.delivery import NEW_NOTIFICATION
from forum.application.usecase.vote import ApplyVoteRequest, ApplyVoteUseCase
from forum.domain.error import InvalidArgumentError, NotFoundError
from forum.domain.model import DomainEvent
from forum.domain.repository import (
    CommentRepository,
    NotificationRepository,
    ThreadRepository,
)
from forum.domain.service import NotificationService, VoteService
from forum.domain.value import NotificationType, VotableType
from tests.conftest import make_comment, make_thread, make_user
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class FailingNotificationService(NotificationService):
    async def emit(self, event: DomainEvent):
        raise RuntimeError("notification store unavailable")


def _request(votable_type, votable_id, user, direction="up") -> ApplyVoteRequest:
    return ApplyVoteRequest(
        votable_type=votable_type,
        votable_id=str(votable_id),
        user_id=str(user.id),
        direction=direction,
    )


class TestApplyVoteUseCase:
    """Tests for ApplyVoteUseCase."""

    @pytest.mark.asyncio
    async def test_upvote_then_retract_notifies_owner_once(self, unit_env):
        """A upvotes B's thread twice: one notification, counters back to zero."""
        use_case = await unit_env.get(ApplyVoteUseCase)
        thread_repo = await unit_env.get(ThreadRepository)
        notification_repo = await unit_env.get(NotificationRepository)
        hub = await unit_env.get(RealtimeHub)

        a, b = make_user(), make_user()
        thread = make_thread(b, title="Open postdoc position")
        await thread_repo.save(thread)

        first = await use_case.execute(_request(VotableType.THREAD, thread.id, a))

        assert (first.upvote_count, first.downvote_count) == (1, 0)
        notifications = await notification_repo.find_by_recipient(b.id)
        assert [n.type for n in notifications] == [NotificationType.THREAD_UPVOTE]

        second = await use_case.execute(_request(VotableType.THREAD, thread.id, a))

        assert (second.upvote_count, second.downvote_count) == (0, 0)
        assert await notification_repo.count_by_recipient(b.id) == 1

        assert isinstance(hub, RecordingRealtimeHub)
        pushed = hub.events_for(b.id, NEW_NOTIFICATION)
        assert len(pushed) == 1
        assert pushed[0].data["type"] == "thread_upvote"

    @pytest.mark.asyncio
    async def test_flip_and_downvote_never_notify(self, unit_env):
        use_case = await unit_env.get(ApplyVoteUseCase)
        comment_repo = await unit_env.get(CommentRepository)
        thread_repo = await unit_env.get(ThreadRepository)
        notification_repo = await unit_env.get(NotificationRepository)

        owner, voter = make_user(), make_user()
        thread = make_thread(make_user())
        comment = make_comment(thread, owner)
        await thread_repo.save(thread)
        await comment_repo.save(comment)

        down = await use_case.execute(
            _request(VotableType.COMMENT, comment.id, voter, "down")
        )
        flipped = await use_case.execute(
            _request(VotableType.COMMENT, comment.id, voter, "up")
        )

        assert (down.upvote_count, down.downvote_count) == (0, 1)
        assert (flipped.upvote_count, flipped.downvote_count) == (1, 0)
        assert await notification_repo.count_by_recipient(owner.id) == 0

    @pytest.mark.asyncio
    async def test_self_upvote_does_not_notify(self, unit_env):
        use_case = await unit_env.get(ApplyVoteUseCase)
        thread_repo = await unit_env.get(ThreadRepository)
        notification_repo = await unit_env.get(NotificationRepository)

        owner = make_user()
        thread = make_thread(owner)
        await thread_repo.save(thread)

        response = await use_case.execute(_request(VotableType.THREAD, thread.id, owner))

        assert response.upvote_count == 1
        assert await notification_repo.count_by_recipient(owner.id) == 0

    @pytest.mark.asyncio
    async def test_notification_failure_does_not_fail_vote(self, unit_env):
        thread_repo = await unit_env.get(ThreadRepository)
        real = await unit_env.get(NotificationService)
        use_case = ApplyVoteUseCase(
            vote_service=await unit_env.get(VoteService),
            notification_service=FailingNotificationService(
                notification_repository=real.notification_repository,
                user_service=real.user_service,
                notification_settings=real.settings,
            ),
            realtime_hub=await unit_env.get(RealtimeHub),
        )

        thread = make_thread(make_user())
        await thread_repo.save(thread)

        response = await use_case.execute(
            _request(VotableType.THREAD, thread.id, make_user())
        )

        assert response.upvote_count == 1
        assert (await thread_repo.find_by_id(thread.id)).upvote_count == 1

    @pytest.mark.asyncio
    async def test_unknown_thread_raises_not_found(self, unit_env):
        use_case = await unit_env.get(ApplyVoteUseCase)

        with pytest.raises(NotFoundError):
            await use_case.execute(_request(VotableType.THREAD, uuid4(), make_user()))

    @pytest.mark.asyncio
    async def test_invalid_direction_raises(self, unit_env):
        use_case = await unit_env.get(ApplyVoteUseCase)
        thread_repo = await unit_env.get(ThreadRepository)
        thread = make_thread(make_user())
        await thread_repo.save(thread)

        with pytest.raises(InvalidArgumentError):
            await use_case.execute(
                _request(VotableType.THREAD, thread.id, make_user(), "sideways")
            )
