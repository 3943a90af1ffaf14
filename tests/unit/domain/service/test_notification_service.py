"""Unit tests for NotificationService."""

from datetime import datetime, timedelta
from uuid import uuid4

import pytest

from forum.domain.error import NotFoundError
from forum.domain.model import (
    CommentedEvent,
    MentionedEvent,
    MessageSentEvent,
    Notification,
    UpvotedEvent,
)
from forum.domain.repository import NotificationRepository, UserRepository
from forum.domain.service import NotificationService
from forum.domain.value import (
    CommentId,
    MessageId,
    NotificationId,
    NotificationType,
    ThreadId,
    UserId,
    VotableType,
)
from tests.conftest import make_user
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


async def _save_users(unit_env, *users):
    user_repo = await unit_env.get(UserRepository)
    for user in users:
        await user_repo.save(user)


def _commented(thread_owner, actor, parent_owner=None) -> CommentedEvent:
    return CommentedEvent(
        thread_owner_id=thread_owner.id,
        parent_owner_id=parent_owner.id if parent_owner else None,
        actor_id=actor.id,
        actor_name=actor.name,
        thread_id=ThreadId(uuid4()),
        comment_id=CommentId(uuid4()),
        thread_title="Cryo-EM facility access",
    )


class TestEmitUpvoted:
    """Upvote notifications."""

    @pytest.mark.asyncio
    async def test_thread_upvote_notifies_owner_with_deep_link(self, unit_env):
        service = await unit_env.get(NotificationService)
        owner, actor = make_user(), make_user()
        thread_id = ThreadId(uuid4())

        notifications = await service.emit(
            UpvotedEvent(
                entity_kind=VotableType.THREAD,
                entity_id=thread_id,
                owner_id=owner.id,
                actor_id=actor.id,
                thread_id=thread_id,
                entity_title="Open PhD positions",
            )
        )

        assert len(notifications) == 1
        notification = notifications[0]
        assert notification.recipient_id == owner.id
        assert notification.type == NotificationType.THREAD_UPVOTE
        assert '"Open PhD positions"' in notification.body
        assert notification.context.action_url == f"/threads/{thread_id}"
        assert notification.context.actor_id == str(actor.id)
        assert notification.read is False

    @pytest.mark.asyncio
    async def test_comment_upvote_links_to_comment(self, unit_env):
        service = await unit_env.get(NotificationService)
        thread_id, comment_id = ThreadId(uuid4()), CommentId(uuid4())

        [notification] = await service.emit(
            UpvotedEvent(
                entity_kind=VotableType.COMMENT,
                entity_id=comment_id,
                owner_id=UserId(uuid4()),
                actor_id=UserId(uuid4()),
                thread_id=thread_id,
            )
        )

        assert notification.type == NotificationType.COMMENT_UPVOTE
        assert notification.context.comment_id == str(comment_id)
        assert (
            notification.context.action_url
            == f"/threads/{thread_id}#comment-{comment_id}"
        )

    @pytest.mark.asyncio
    async def test_self_upvote_is_suppressed(self, unit_env):
        service = await unit_env.get(NotificationService)
        repo = await unit_env.get(NotificationRepository)
        owner = make_user()
        thread_id = ThreadId(uuid4())

        notifications = await service.emit(
            UpvotedEvent(
                entity_kind=VotableType.THREAD,
                entity_id=thread_id,
                owner_id=owner.id,
                actor_id=owner.id,
                thread_id=thread_id,
                entity_title="Mine",
            )
        )

        assert notifications == []
        assert await repo.count_by_recipient(owner.id) == 0


class TestEmitCommented:
    """Reply notifications."""

    @pytest.mark.asyncio
    async def test_top_level_comment_notifies_thread_owner(self, unit_env):
        service = await unit_env.get(NotificationService)
        owner, actor = make_user(), make_user(name="Ada")

        [notification] = await service.emit(_commented(owner, actor))

        assert notification.recipient_id == owner.id
        assert notification.type == NotificationType.THREAD_REPLY
        assert notification.body.startswith("Ada commented on your thread")

    @pytest.mark.asyncio
    async def test_nested_reply_notifies_parent_and_thread_owner(self, unit_env):
        service = await unit_env.get(NotificationService)
        thread_owner, parent_owner, actor = make_user(), make_user(), make_user()

        notifications = await service.emit(
            _commented(thread_owner, actor, parent_owner=parent_owner)
        )

        assert {(n.recipient_id, n.type) for n in notifications} == {
            (parent_owner.id, NotificationType.COMMENT_REPLY),
            (thread_owner.id, NotificationType.THREAD_REPLY),
        }

    @pytest.mark.asyncio
    async def test_reply_to_thread_owner_notifies_once(self, unit_env):
        service = await unit_env.get(NotificationService)
        thread_owner, actor = make_user(), make_user()

        notifications = await service.emit(
            _commented(thread_owner, actor, parent_owner=thread_owner)
        )

        assert [n.type for n in notifications] == [NotificationType.COMMENT_REPLY]

    @pytest.mark.asyncio
    async def test_reply_to_own_comment_only_notifies_thread_owner(self, unit_env):
        service = await unit_env.get(NotificationService)
        thread_owner, actor = make_user(), make_user()

        notifications = await service.emit(
            _commented(thread_owner, actor, parent_owner=actor)
        )

        assert [(n.recipient_id, n.type) for n in notifications] == [
            (thread_owner.id, NotificationType.THREAD_REPLY)
        ]

    @pytest.mark.asyncio
    async def test_commenting_on_own_thread_is_silent(self, unit_env):
        service = await unit_env.get(NotificationService)
        owner = make_user()

        assert await service.emit(_commented(owner, owner)) == []


class TestMentions:
    """Mention notifications."""

    @pytest.mark.asyncio
    async def test_mentions_are_deduplicated_and_skip_actor(self, unit_env):
        service = await unit_env.get(NotificationService)
        actor, alice, bob = make_user(), make_user(), make_user()
        await _save_users(unit_env, actor, alice, bob)
        comment_id = CommentId(uuid4())

        notifications = await service.notify_mentions(
            actor_id=actor.id,
            actor_name=actor.name,
            thread_id=ThreadId(uuid4()),
            thread_title="Benchmarks",
            mentioned_user_ids=[alice.id, bob.id, alice.id, actor.id],
            comment_id=comment_id,
        )

        assert sorted(str(n.recipient_id) for n in notifications) == sorted(
            [str(alice.id), str(bob.id)]
        )
        assert all(n.type == NotificationType.COMMENT_MENTION for n in notifications)
        assert all(n.context.comment_id == str(comment_id) for n in notifications)

    @pytest.mark.asyncio
    async def test_unknown_mentioned_user_is_skipped(self, unit_env):
        service = await unit_env.get(NotificationService)
        actor, alice = make_user(), make_user()
        await _save_users(unit_env, actor, alice)

        notifications = await service.notify_mentions(
            actor_id=actor.id,
            actor_name=actor.name,
            thread_id=ThreadId(uuid4()),
            thread_title="Benchmarks",
            mentioned_user_ids=[UserId(uuid4()), alice.id],
        )

        assert [n.recipient_id for n in notifications] == [alice.id]
        assert notifications[0].type == NotificationType.THREAD_MENTION

    @pytest.mark.asyncio
    async def test_mentions_ignore_reply_preference(self, unit_env):
        """Only chat and newsletter notifications are preference-gated."""
        service = await unit_env.get(NotificationService)
        actor, quiet = make_user(), make_user(mentions=False, replies=False)
        await _save_users(unit_env, actor, quiet)

        notifications = await service.emit(
            MentionedEvent(
                mentioned_user_id=quiet.id,
                actor_id=actor.id,
                actor_name=actor.name,
                thread_id=ThreadId(uuid4()),
                thread_title="Benchmarks",
            )
        )

        assert len(notifications) == 1


class TestEmitMessageSent:
    """New message notifications."""

    @pytest.mark.asyncio
    async def test_message_notification_links_to_chat(self, unit_env):
        service = await unit_env.get(NotificationService)
        sender, receiver = make_user(username="dr.who", name="Doctor"), make_user()
        await _save_users(unit_env, sender, receiver)
        message_id = MessageId(uuid4())

        [notification] = await service.emit(
            MessageSentEvent(
                receiver_id=receiver.id,
                sender_id=sender.id,
                message_id=message_id,
                sender_name=sender.name,
                sender_username=str(sender.username),
            )
        )

        assert notification.type == NotificationType.NEW_MESSAGE
        assert notification.body == "Doctor sent you a message"
        assert notification.context.message_id == str(message_id)
        assert notification.context.action_url == "/chat?user=dr.who"

    @pytest.mark.asyncio
    async def test_chat_preference_off_suppresses(self, unit_env):
        service = await unit_env.get(NotificationService)
        sender, receiver = make_user(), make_user(chat=False)
        await _save_users(unit_env, sender, receiver)

        notifications = await service.emit(
            MessageSentEvent(
                receiver_id=receiver.id,
                sender_id=sender.id,
                message_id=MessageId(uuid4()),
                sender_name=sender.name,
                sender_username=str(sender.username),
            )
        )

        assert notifications == []

    @pytest.mark.asyncio
    async def test_preference_is_read_at_emission_time(self, unit_env):
        service = await unit_env.get(NotificationService)
        user_repo = await unit_env.get(UserRepository)
        sender, receiver = make_user(), make_user()
        await _save_users(unit_env, sender, receiver)
        event = MessageSentEvent(
            receiver_id=receiver.id,
            sender_id=sender.id,
            message_id=MessageId(uuid4()),
            sender_name=sender.name,
            sender_username=str(sender.username),
        )

        assert len(await service.emit(event)) == 1

        await user_repo.save(
            receiver.model_copy(
                update={
                    "notification_prefs": receiver.notification_prefs.model_copy(
                        update={"chat": False}
                    )
                }
            )
        )

        assert await service.emit(event) == []


class TestReadState:
    """Listing and acknowledging notifications."""

    @pytest.mark.asyncio
    async def test_list_count_and_mark_read(self, unit_env):
        service = await unit_env.get(NotificationService)
        owner = make_user()
        for _ in range(3):
            await service.emit(_commented(owner, make_user()))

        page, total = await service.list_for_recipient(owner.id, limit=2)
        assert total == 3
        assert len(page) == 2
        assert page[0].created_at >= page[1].created_at

        read = await service.mark_read(page[0].id, owner.id)
        assert read.read is True
        assert read.read_at is not None
        assert await service.count_unread(owner.id) == 2

        assert await service.mark_all_read(owner.id) == 2
        assert await service.count_unread(owner.id) == 0

    @pytest.mark.asyncio
    async def test_mark_read_of_someone_elses_notification_is_not_found(
        self, unit_env
    ):
        service = await unit_env.get(NotificationService)
        owner = make_user()
        [notification] = await service.emit(_commented(owner, make_user()))

        with pytest.raises(NotFoundError):
            await service.mark_read(notification.id, UserId(uuid4()))

        with pytest.raises(NotFoundError):
            await service.mark_read(NotificationId(uuid4()), owner.id)


class TestPurgeExpired:
    """Retention sweep."""

    @pytest.mark.asyncio
    async def test_deletes_only_notifications_past_retention(self, unit_env):
        service = await unit_env.get(NotificationService)
        repo = await unit_env.get(NotificationRepository)
        recipient = UserId(uuid4())
        now = datetime.now()

        for age_days in (45, 31, 29, 1):
            await repo.save(
                Notification(
                    id=NotificationId(uuid4()),
                    recipient_id=recipient,
                    type=NotificationType.SYSTEM,
                    title="Maintenance",
                    body="Scheduled maintenance",
                    created_at=now - timedelta(days=age_days),
                )
            )

        deleted = await service.purge_expired(now=now)

        assert deleted == 2
        assert await repo.count_by_recipient(recipient) == 2
