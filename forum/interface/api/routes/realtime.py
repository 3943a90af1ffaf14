"""Realtime WebSocket endpoint.

Clients connect to ``/ws`` with their JWT (``token`` query parameter or
``auth_token`` cookie). After the handshake the server pushes
``connected`` once the socket is registered, then ``new-message`` and
``new-notification`` events as they happen. The client may send
``join-room``, ``leave-room`` and ``send-message`` frames.
"""

from typing import Any, Literal
from uuid import UUID

import logfire
from dishka import AsyncContainer
from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status
from pydantic import BaseModel, Field, ValidationError

from forum.adapter.realtime import RealtimeEvent, RealtimeHub
from forum.application.usecase.message import SendMessageRequest, SendMessageUseCase
from forum.domain.error import DomainError
from forum.domain.service import JWTService
from forum.domain.value import UserId
from forum.interface.error import status_for

router = APIRouter(tags=["realtime"])

CONNECTED = "connected"
MESSAGE_SENT = "message-sent"
ERROR = "error"


class ClientFrame(BaseModel):
    """Client-to-server frame."""

    type: Literal["join-room", "leave-room", "send-message"]
    data: dict[str, Any] = Field(default_factory=dict)


class _Socket:
    """Hashable handle for a WebSocket held by the hub."""

    def __init__(self, websocket: WebSocket) -> None:
        self.websocket = websocket

    async def send_json(self, data: Any) -> None:
        await self.websocket.send_json(data)


async def _authenticate(
    websocket: WebSocket, container: AsyncContainer
) -> UserId | None:
    token = websocket.query_params.get("token") or websocket.cookies.get("auth_token")
    async with container() as request_container:
        jwt_service = await request_container.get(JWTService)
        user_id = jwt_service.get_user_id_from_token(token)
    try:
        return UserId(UUID(user_id)) if user_id else None
    except ValueError:
        return None


@router.websocket("/ws")
async def realtime(websocket: WebSocket) -> None:
    """Hold a realtime connection open until the client disconnects."""
    container: AsyncContainer = websocket.app.state.dishka_container

    user_id = await _authenticate(websocket, container)
    if user_id is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    hub = await container.get(RealtimeHub)
    connection = _Socket(websocket)
    await hub.register(user_id, connection)
    # Pushes reach this socket from here on
    await connection.send_json(
        RealtimeEvent(type=CONNECTED, data={"user_id": str(user_id)}).model_dump()
    )

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                frame = ClientFrame.model_validate_json(raw)
            except ValidationError as e:
                await _send_error(connection, "Invalid frame", 400, str(e))
                continue
            await _handle(frame, user_id, connection, hub, container)
    except WebSocketDisconnect:
        logfire.info("Realtime client disconnected", user_id=str(user_id))
    finally:
        await hub.unregister(connection)


async def _handle(
    frame: ClientFrame,
    user_id: UserId,
    connection: _Socket,
    hub: RealtimeHub,
    container: AsyncContainer,
) -> None:
    if frame.type in ("join-room", "leave-room"):
        room_id = frame.data.get("room_id")
        if not isinstance(room_id, str) or not room_id:
            await _send_error(connection, "room_id is required", 400)
        elif frame.type == "join-room":
            await hub.join_room(connection, room_id)
        else:
            await hub.leave_room(connection, room_id)
        return

    # send-message: same flow as POST /messages, in its own unit of work
    try:
        request = SendMessageRequest.model_validate(
            {**frame.data, "sender_id": str(user_id)}
        )
        async with container() as request_container:
            use_case = await request_container.get(SendMessageUseCase)
            view = await use_case.execute(request)
    except DomainError as e:
        await _send_error(connection, str(e), status_for(e))
        return
    except ValueError as e:
        # Includes pydantic ValidationError and malformed UUIDs
        await _send_error(connection, "Invalid message", 400, str(e))
        return

    await connection.send_json(
        RealtimeEvent(type=MESSAGE_SENT, data=view.model_dump(mode="json")).model_dump(
            mode="json"
        )
    )


async def _send_error(
    connection: _Socket, message: str, code: int, detail: str | None = None
) -> None:
    logfire.info("Realtime frame rejected", error=message, code=code)
    data: dict[str, Any] = {"message": message, "code": code}
    if detail:
        data["detail"] = detail
    await connection.send_json(RealtimeEvent(type=ERROR, data=data).model_dump())
