"""Unit tests for conversation reads and message acknowledgement use cases."""

from uuid import uuid4

import pytest

from forum.application.usecase.message import (
    DeleteMessageRequest,
    DeleteMessageUseCase,
    GetConversationRequest,
    GetConversationUseCase,
    GetUnreadCountRequest,
    GetUnreadCountUseCase,
    ListConversationsRequest,
    ListConversationsUseCase,
    MarkMessageReadRequest,
    MarkMessageReadUseCase,
)
from forum.domain.error import ForbiddenError, NotFoundError
from forum.domain.repository import UserRepository
from forum.domain.service import MessageService
from tests.conftest import make_user
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


async def _pair(unit_env):
    user_repo = await unit_env.get(UserRepository)
    alice, bob = make_user(name="Alice"), make_user(name="Bob")
    await user_repo.save(alice)
    await user_repo.save(bob)
    return alice, bob


class TestGetConversationUseCase:
    """Tests for GetConversationUseCase."""

    @pytest.mark.asyncio
    async def test_pages_and_attaches_sender(self, unit_env):
        message_service = await unit_env.get(MessageService)
        use_case = await unit_env.get(GetConversationUseCase)
        alice, bob = await _pair(unit_env)
        for i in range(3):
            await message_service.create_message(alice.id, bob.id, f"m{i}")

        first = await use_case.execute(
            GetConversationRequest(
                viewer_id=str(bob.id), counterpart_id=str(alice.id), limit=2
            )
        )
        second = await use_case.execute(
            GetConversationRequest(
                viewer_id=str(bob.id), counterpart_id=str(alice.id), page=2, limit=2
            )
        )

        assert [m.content for m in first.messages] == ["m1", "m2"]
        assert first.total == 3
        assert first.has_more is True
        assert all(m.sender.name == "Alice" for m in first.messages)
        assert [m.content for m in second.messages] == ["m0"]
        assert second.has_more is False

    @pytest.mark.asyncio
    async def test_limit_is_capped(self, unit_env):
        use_case = await unit_env.get(GetConversationUseCase)
        alice, bob = await _pair(unit_env)

        response = await use_case.execute(
            GetConversationRequest(
                viewer_id=str(alice.id), counterpart_id=str(bob.id), limit=10_000
            )
        )

        assert response.limit == 100


class TestMarkMessageReadUseCase:
    """Tests for MarkMessageReadUseCase."""

    @pytest.mark.asyncio
    async def test_receiver_marks_read(self, unit_env):
        message_service = await unit_env.get(MessageService)
        use_case = await unit_env.get(MarkMessageReadUseCase)
        unread = await unit_env.get(GetUnreadCountUseCase)
        alice, bob = await _pair(unit_env)
        message = await message_service.create_message(alice.id, bob.id, "hi")

        response = await use_case.execute(
            MarkMessageReadRequest(message_id=str(message.id), user_id=str(bob.id))
        )

        assert response.read is True
        assert response.read_at is not None
        assert (await unread.execute(GetUnreadCountRequest(user_id=str(bob.id)))).count == 0

    @pytest.mark.asyncio
    async def test_sender_cannot_mark_read(self, unit_env):
        message_service = await unit_env.get(MessageService)
        use_case = await unit_env.get(MarkMessageReadUseCase)
        alice, bob = await _pair(unit_env)
        message = await message_service.create_message(alice.id, bob.id, "hi")

        with pytest.raises(NotFoundError):
            await use_case.execute(
                MarkMessageReadRequest(
                    message_id=str(message.id), user_id=str(alice.id)
                )
            )


class TestDeleteMessageUseCase:
    """Tests for DeleteMessageUseCase."""

    @pytest.mark.asyncio
    async def test_hides_from_caller_only(self, unit_env):
        message_service = await unit_env.get(MessageService)
        use_case = await unit_env.get(DeleteMessageUseCase)
        list_conversations = await unit_env.get(ListConversationsUseCase)
        alice, bob = await _pair(unit_env)
        message = await message_service.create_message(alice.id, bob.id, "hi")

        response = await use_case.execute(
            DeleteMessageRequest(message_id=str(message.id), user_id=str(alice.id))
        )

        assert response.deleted is True
        alice_inbox = await list_conversations.execute(
            ListConversationsRequest(user_id=str(alice.id))
        )
        bob_inbox = await list_conversations.execute(
            ListConversationsRequest(user_id=str(bob.id))
        )
        assert alice_inbox.conversations == []
        assert [c.user.name for c in bob_inbox.conversations] == ["Alice"]
        assert bob_inbox.conversations[0].unread_count == 1

    @pytest.mark.asyncio
    async def test_stranger_is_forbidden(self, unit_env):
        message_service = await unit_env.get(MessageService)
        use_case = await unit_env.get(DeleteMessageUseCase)
        alice, bob = await _pair(unit_env)
        message = await message_service.create_message(alice.id, bob.id, "hi")

        with pytest.raises(ForbiddenError):
            await use_case.execute(
                DeleteMessageRequest(message_id=str(message.id), user_id=str(uuid4()))
            )
