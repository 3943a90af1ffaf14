"""Unit tests for ConnectionHub."""

import asyncio
from uuid import uuid4

import pytest

from forum.adapter.realtime import ConnectionHub, RealtimeEvent
from forum.domain.value import UserId


class FakeConnection:
    """Collects frames sent to it."""

    def __init__(self) -> None:
        self.frames: list[dict] = []

    async def send_json(self, data) -> None:
        self.frames.append(data)


class BrokenConnection(FakeConnection):
    async def send_json(self, data) -> None:
        raise ConnectionResetError("peer went away")


class StalledConnection(FakeConnection):
    async def send_json(self, data) -> None:
        await asyncio.sleep(10)


def _event(n: int = 0) -> RealtimeEvent:
    return RealtimeEvent(type="new-message", data={"n": n})


class TestPush:
    """Per-user fan-out."""

    @pytest.mark.asyncio
    async def test_push_reaches_every_connection_of_the_user(self):
        hub = ConnectionHub()
        user, other = UserId(uuid4()), UserId(uuid4())
        laptop, phone, bystander = FakeConnection(), FakeConnection(), FakeConnection()
        await hub.register(user, laptop)
        await hub.register(user, phone)
        await hub.register(other, bystander)

        delivered = await hub.push(user, _event())

        assert delivered == 2
        expected = {"type": "new-message", "data": {"n": 0}}
        assert laptop.frames == [expected]
        assert phone.frames == [expected]
        assert bystander.frames == []

    @pytest.mark.asyncio
    async def test_push_without_connections_is_dropped_silently(self):
        hub = ConnectionHub()

        assert await hub.push(UserId(uuid4()), _event()) == 0

    @pytest.mark.asyncio
    async def test_failing_connection_is_unregistered(self):
        hub = ConnectionHub()
        user = UserId(uuid4())
        healthy, broken = FakeConnection(), BrokenConnection()
        await hub.register(user, healthy)
        await hub.register(user, broken)

        delivered = await hub.push(user, _event())

        assert delivered == 1
        assert healthy.frames
        assert hub.connection_count(user) == 1

    @pytest.mark.asyncio
    async def test_slow_connection_times_out_without_blocking_others(self):
        hub = ConnectionHub(send_timeout=0.05)
        user = UserId(uuid4())
        healthy, stalled = FakeConnection(), StalledConnection()
        await hub.register(user, healthy)
        await hub.register(user, stalled)

        delivered = await asyncio.wait_for(hub.push(user, _event()), timeout=1)

        assert delivered == 1
        assert hub.connection_count(user) == 1


class TestRegistry:
    """Register/unregister bookkeeping."""

    @pytest.mark.asyncio
    async def test_unregister_is_idempotent(self):
        hub = ConnectionHub()
        user = UserId(uuid4())
        connection = FakeConnection()
        await hub.register(user, connection)

        await hub.unregister(connection)
        await hub.unregister(connection)

        assert hub.connection_count(user) == 0
        assert await hub.push(user, _event()) == 0

    @pytest.mark.asyncio
    async def test_concurrent_register_and_push_do_not_corrupt(self):
        hub = ConnectionHub()
        user = UserId(uuid4())
        connections = [FakeConnection() for _ in range(50)]

        async def churn(connection):
            await hub.register(user, connection)
            await hub.push(user, _event())
            await hub.unregister(connection)

        await asyncio.gather(*(churn(c) for c in connections))

        assert hub.connection_count(user) == 0
        assert all(c.frames for c in connections)


class TestRooms:
    """Room membership and broadcast."""

    @pytest.mark.asyncio
    async def test_broadcast_reaches_room_members_only(self):
        hub = ConnectionHub()
        member, outsider = FakeConnection(), FakeConnection()
        await hub.register(UserId(uuid4()), member)
        await hub.register(UserId(uuid4()), outsider)
        await hub.join_room(member, "thread:42")

        delivered = await hub.broadcast("thread:42", _event(1))

        assert delivered == 1
        assert member.frames and not outsider.frames
        assert hub.rooms_of(member) == {"thread:42"}

    @pytest.mark.asyncio
    async def test_leave_room_and_disconnect_clear_membership(self):
        hub = ConnectionHub()
        connection = FakeConnection()
        await hub.register(UserId(uuid4()), connection)
        await hub.join_room(connection, "a")
        await hub.join_room(connection, "b")

        await hub.leave_room(connection, "a")
        await hub.leave_room(connection, "a")
        assert hub.rooms_of(connection) == {"b"}

        await hub.unregister(connection)
        assert hub.rooms_of(connection) == set()
        assert await hub.broadcast("b", _event()) == 0

    @pytest.mark.asyncio
    async def test_join_room_requires_registration(self):
        hub = ConnectionHub()

        with pytest.raises(KeyError):
            await hub.join_room(FakeConnection(), "room")
