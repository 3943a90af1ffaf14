"""Live connection registry and best-effort realtime delivery.

A user may hold several connections at once (one per open tab or
device); an event pushed to the user goes to all of them. Connections
can additionally join named rooms and receive room broadcasts.

Delivery is fire-and-forget: nothing is queued for users who are
offline, nothing is retried, and a connection that cannot be written to
within the send timeout is dropped from the registry.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Protocol

import logfire
from pydantic import BaseModel, Field

from forum.domain.value import UserId


class Connection(Protocol):
    """Anything that can receive a JSON frame (e.g. a Starlette WebSocket)."""

    async def send_json(self, data: Any) -> None: ...


class RealtimeEvent(BaseModel):
    """Server-to-client event envelope."""

    type: str
    data: dict[str, Any] = Field(default_factory=dict)


class RealtimeHub(ABC):
    """Registry of live connections with per-user and per-room fan-out."""

    @abstractmethod
    async def register(self, user_id: UserId, connection: Connection) -> None:
        """Bind a connection to a user."""
        pass

    @abstractmethod
    async def unregister(self, connection: Connection) -> None:
        """Remove a connection and all its bindings. Idempotent."""
        pass

    @abstractmethod
    async def join_room(self, connection: Connection, room_id: str) -> None:
        """Subscribe a registered connection to a room."""
        pass

    @abstractmethod
    async def leave_room(self, connection: Connection, room_id: str) -> None:
        """Unsubscribe a connection from a room. Idempotent."""
        pass

    @abstractmethod
    async def push(self, user_id: UserId, event: RealtimeEvent) -> int:
        """Send an event to every connection of a user.

        Never raises; a user with no connections simply misses the event.

        Returns:
            Number of connections the event was delivered to
        """
        pass

    @abstractmethod
    async def broadcast(self, room_id: str, event: RealtimeEvent) -> int:
        """Send an event to every connection in a room.

        Rooms are joined by clients (``join-room``) and published to by
        collaborators with thread-scoped events, such as a live comment
        feed. The message and vote flows address users with ``push``.

        Returns:
            Number of connections the event was delivered to
        """
        pass

    @abstractmethod
    def connection_count(self, user_id: UserId) -> int:
        pass


class ConnectionHub(RealtimeHub):
    """In-process hub for connections held by this server."""

    def __init__(self, send_timeout: float = 5.0) -> None:
        """Initialize the hub.

        Args:
            send_timeout: Seconds allowed for a single send before the
                connection is considered dead
        """
        self.send_timeout = send_timeout
        self._lock = asyncio.Lock()
        self._by_user: dict[UserId, set[Connection]] = {}
        self._owner: dict[Connection, UserId] = {}
        self._rooms: dict[str, set[Connection]] = {}
        self._memberships: dict[Connection, set[str]] = {}

    async def register(self, user_id: UserId, connection: Connection) -> None:
        async with self._lock:
            previous = self._owner.get(connection)
            if previous is not None and previous != user_id:
                self._discard_user_binding(previous, connection)
            self._owner[connection] = user_id
            self._by_user.setdefault(user_id, set()).add(connection)
            count = len(self._by_user[user_id])
        logfire.info(
            "Realtime connection registered",
            user_id=str(user_id),
            connections=count,
        )

    async def unregister(self, connection: Connection) -> None:
        async with self._lock:
            user_id = self._owner.pop(connection, None)
            if user_id is not None:
                self._discard_user_binding(user_id, connection)
            for room_id in self._memberships.pop(connection, set()):
                self._discard_room_binding(room_id, connection)
        if user_id is not None:
            logfire.info("Realtime connection unregistered", user_id=str(user_id))

    async def join_room(self, connection: Connection, room_id: str) -> None:
        async with self._lock:
            if connection not in self._owner:
                raise KeyError("Connection is not registered")
            self._rooms.setdefault(room_id, set()).add(connection)
            self._memberships.setdefault(connection, set()).add(room_id)
        logfire.debug("Connection joined room", room_id=room_id)

    async def leave_room(self, connection: Connection, room_id: str) -> None:
        async with self._lock:
            rooms = self._memberships.get(connection)
            if rooms is not None:
                rooms.discard(room_id)
                if not rooms:
                    del self._memberships[connection]
            self._discard_room_binding(room_id, connection)

    async def push(self, user_id: UserId, event: RealtimeEvent) -> int:
        async with self._lock:
            targets = list(self._by_user.get(user_id, ()))
        if not targets:
            logfire.debug(
                "No live connections, event dropped",
                user_id=str(user_id),
                type=event.type,
            )
            return 0
        return await self._deliver(targets, event)

    async def broadcast(self, room_id: str, event: RealtimeEvent) -> int:
        async with self._lock:
            targets = list(self._rooms.get(room_id, ()))
        if not targets:
            return 0
        return await self._deliver(targets, event)

    def connection_count(self, user_id: UserId) -> int:
        return len(self._by_user.get(user_id, ()))

    def rooms_of(self, connection: Connection) -> set[str]:
        return set(self._memberships.get(connection, ()))

    async def _deliver(self, targets: list[Connection], event: RealtimeEvent) -> int:
        frame = event.model_dump(mode="json")
        results = await asyncio.gather(
            *(self._send(connection, frame) for connection in targets)
        )
        dead = [connection for connection, ok in zip(targets, results) if not ok]
        for connection in dead:
            await self.unregister(connection)
        return len(targets) - len(dead)

    async def _send(self, connection: Connection, frame: dict[str, Any]) -> bool:
        try:
            await asyncio.wait_for(connection.send_json(frame), self.send_timeout)
            return True
        except asyncio.TimeoutError:
            logfire.warn(
                "Realtime send timed out, dropping connection", type=frame["type"]
            )
            return False
        except Exception as e:
            logfire.warn(
                "Realtime send failed, dropping connection",
                type=frame["type"],
                error=str(e),
            )
            return False

    def _discard_user_binding(self, user_id: UserId, connection: Connection) -> None:
        connections = self._by_user.get(user_id)
        if connections is None:
            return
        connections.discard(connection)
        if not connections:
            del self._by_user[user_id]

    def _discard_room_binding(self, room_id: str, connection: Connection) -> None:
        members = self._rooms.get(room_id)
        if members is None:
            return
        members.discard(connection)
        if not members:
            del self._rooms[room_id]


class RecordingRealtimeHub(ConnectionHub):
    """Hub that also records every pushed event, for tests.

    Events are recorded whether or not a connection was live.
    """

    def __init__(self, send_timeout: float = 5.0) -> None:
        super().__init__(send_timeout=send_timeout)
        self.pushed: list[tuple[UserId, RealtimeEvent]] = []
        self.broadcasts: list[tuple[str, RealtimeEvent]] = []

    async def push(self, user_id: UserId, event: RealtimeEvent) -> int:
        self.pushed.append((user_id, event))
        return await super().push(user_id, event)

    async def broadcast(self, room_id: str, event: RealtimeEvent) -> int:
        self.broadcasts.append((room_id, event))
        return await super().broadcast(room_id, event)

    def events_for(
        self, user_id: UserId, event_type: str | None = None
    ) -> list[RealtimeEvent]:
        return [
            event
            for recipient, event in self.pushed
            if recipient == user_id and (event_type is None or event.type == event_type)
        ]
