"""Unit tests for SendMessageUseCase."""

from uuid import UUID, uuid4

import pytest

from forum.adapter.realtime import RealtimeHub
from forum.application.delivery import NEW_MESSAGE, NEW_NOTIFICATION
from forum.application.usecase.message import (
    GetConversationRequest,
    GetConversationUseCase,
    SendMessageRequest,
    SendMessageUseCase,
)
from forum.domain.error import ForbiddenError, InvalidArgumentError, NotFoundError
from forum.domain.model import DomainEvent
from forum.domain.repository import (
    MessageRepository,
    NotificationRepository,
    UserRepository,
)
from forum.domain.service import MessageService, NotificationService, UserService
from forum.domain.value import MessageId, NotificationType
from tests.conftest import make_user
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class FailingNotificationService(NotificationService):
    async def emit(self, event: DomainEvent):
        raise RuntimeError("notification store unavailable")


class RecordingConnection:
    """Stands in for a WebSocket."""

    def __init__(self) -> None:
        self.frames: list[dict] = []

    async def send_json(self, data) -> None:
        self.frames.append(data)


async def _users(unit_env, *users):
    user_repo = await unit_env.get(UserRepository)
    for user in users:
        await user_repo.save(user)
    return users


class TestSendMessageUseCase:
    """Tests for SendMessageUseCase."""

    @pytest.mark.asyncio
    async def test_persists_notifies_and_pushes(self, unit_env):
        use_case = await unit_env.get(SendMessageUseCase)
        notification_repo = await unit_env.get(NotificationRepository)
        hub = await unit_env.get(RealtimeHub)
        sender, receiver = await _users(
            unit_env, make_user(username="ada", name="Ada"), make_user()
        )
        connection = RecordingConnection()
        await hub.register(receiver.id, connection)

        view = await use_case.execute(
            SendMessageRequest(
                sender_id=str(sender.id),
                receiver_id=str(receiver.id),
                content="Are you still hiring?",
            )
        )

        assert view.content == "Are you still hiring?"
        assert view.sender.username == "ada"

        [notification] = await notification_repo.find_by_recipient(receiver.id)
        assert notification.type == NotificationType.NEW_MESSAGE
        assert notification.context.message_id == view.id

        assert [frame["type"] for frame in connection.frames] == [
            NEW_MESSAGE,
            NEW_NOTIFICATION,
        ]
        assert connection.frames[0]["data"] == view.model_dump(mode="json")

    @pytest.mark.asyncio
    async def test_pushed_message_matches_rest_read(self, unit_env):
        """The realtime payload is the same representation a REST read returns."""
        send = await unit_env.get(SendMessageUseCase)
        get_conversation = await unit_env.get(GetConversationUseCase)
        hub = await unit_env.get(RealtimeHub)
        sender, receiver = await _users(unit_env, make_user(), make_user())
        connection = RecordingConnection()
        await hub.register(receiver.id, connection)

        await send.execute(
            SendMessageRequest(
                sender_id=str(sender.id), receiver_id=str(receiver.id), content="hi"
            )
        )
        conversation = await get_conversation.execute(
            GetConversationRequest(
                viewer_id=str(sender.id), counterpart_id=str(receiver.id)
            )
        )

        assert connection.frames[0]["data"] == conversation.messages[0].model_dump(
            mode="json"
        )

    @pytest.mark.asyncio
    async def test_chat_disabled_rejects_before_any_write(self, unit_env):
        """A messages B who has chat off: Forbidden, nothing persisted."""
        use_case = await unit_env.get(SendMessageUseCase)
        message_repo = await unit_env.get(MessageRepository)
        notification_repo = await unit_env.get(NotificationRepository)
        a, b = await _users(unit_env, make_user(), make_user(chat=False))

        with pytest.raises(ForbiddenError):
            await use_case.execute(
                SendMessageRequest(
                    sender_id=str(a.id), receiver_id=str(b.id), content="hello"
                )
            )

        assert await message_repo.count_conversation(a.id, b.id) == 0
        assert await message_repo.count_conversation(b.id, a.id) == 0
        assert await notification_repo.count_by_recipient(b.id) == 0

    @pytest.mark.asyncio
    async def test_failing_notification_keeps_message(self, unit_env):
        """The message survives a failed notification step for both parties."""
        real = await unit_env.get(NotificationService)
        message_service = await unit_env.get(MessageService)
        hub = await unit_env.get(RealtimeHub)
        use_case = SendMessageUseCase(
            message_service=message_service,
            user_service=await unit_env.get(UserService),
            notification_service=FailingNotificationService(
                notification_repository=real.notification_repository,
                user_service=real.user_service,
                notification_settings=real.settings,
            ),
            realtime_hub=hub,
        )
        sender, receiver = await _users(unit_env, make_user(), make_user())

        view = await use_case.execute(
            SendMessageRequest(
                sender_id=str(sender.id), receiver_id=str(receiver.id), content="hi"
            )
        )

        for viewer, counterpart in ((sender, receiver), (receiver, sender)):
            page, total = await message_service.get_conversation(
                viewer.id, counterpart.id, limit=10
            )
            assert total == 1
            assert str(page[0].id) == view.id

        # The message push still happens; there is nothing to notify about
        assert [e.type for e in hub.events_for(receiver.id)] == [NEW_MESSAGE]

    @pytest.mark.asyncio
    async def test_offline_receiver_still_gets_persisted_message(self, unit_env):
        use_case = await unit_env.get(SendMessageUseCase)
        message_repo = await unit_env.get(MessageRepository)
        sender, receiver = await _users(unit_env, make_user(), make_user())

        view = await use_case.execute(
            SendMessageRequest(
                sender_id=str(sender.id), receiver_id=str(receiver.id), content="hi"
            )
        )

        assert await message_repo.count_unread(receiver.id) == 1
        assert view.read is False

    @pytest.mark.asyncio
    async def test_unknown_receiver_is_not_found(self, unit_env):
        use_case = await unit_env.get(SendMessageUseCase)
        (sender,) = await _users(unit_env, make_user())

        with pytest.raises(NotFoundError):
            await use_case.execute(
                SendMessageRequest(
                    sender_id=str(sender.id), receiver_id=str(uuid4()), content="hi"
                )
            )

    @pytest.mark.asyncio
    async def test_blank_content_is_invalid(self, unit_env):
        use_case = await unit_env.get(SendMessageUseCase)
        sender, receiver = await _users(unit_env, make_user(), make_user())

        with pytest.raises(InvalidArgumentError):
            await use_case.execute(
                SendMessageRequest(
                    sender_id=str(sender.id), receiver_id=str(receiver.id), content=" "
                )
            )

    @pytest.mark.asyncio
    async def test_message_to_self_is_stored_without_notification(self, unit_env):
        use_case = await unit_env.get(SendMessageUseCase)
        message_repo = await unit_env.get(MessageRepository)
        notification_repo = await unit_env.get(NotificationRepository)
        (me,) = await _users(unit_env, make_user())

        view = await use_case.execute(
            SendMessageRequest(
                sender_id=str(me.id), receiver_id=str(me.id), content="note to self"
            )
        )

        stored = await message_repo.find_by_id(MessageId(UUID(view.id)))
        assert stored.content == "note to self"
        assert await notification_repo.find_by_recipient(me.id) == []
