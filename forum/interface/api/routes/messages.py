"""Direct message routes."""

from typing import Optional

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, HTTPException, Query, status
from pydantic import BaseModel

from forum.application.usecase.message import (
    DeleteMessageRequest,
    DeleteMessageResponse,
    DeleteMessageUseCase,
    GetConversationRequest,
    GetConversationResponse,
    GetConversationUseCase,
    GetUnreadCountRequest,
    GetUnreadCountResponse,
    GetUnreadCountUseCase,
    ListConversationsRequest,
    ListConversationsResponse,
    ListConversationsUseCase,
    MarkMessageReadRequest,
    MarkMessageReadResponse,
    MarkMessageReadUseCase,
    SendMessageRequest,
    SendMessageUseCase,
)
from forum.application.view import MessageView
from forum.domain.error import DomainError
from forum.domain.service import JWTService
from forum.domain.value import MessageType
from forum.interface.api.auth import require_user_id
from forum.interface.error import to_http_exception

router = APIRouter(prefix="/messages", tags=["messages"], route_class=DishkaRoute)


class SendMessageBody(BaseModel):
    """Send message request body."""

    receiver_id: str
    content: str
    thread_id: Optional[str] = None
    message_type: MessageType = MessageType.TEXT


def _bad_request(e: ValueError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post(
    "", response_model=MessageView, status_code=status.HTTP_201_CREATED
)
async def send_message(
    body: SendMessageBody,
    send_message_use_case: FromDishka[SendMessageUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> MessageView:
    """Send a direct message.

    The recipient also receives a ``new-message`` event on the realtime
    channel if connected. Requires authentication.

    Raises:
        HTTPException: 401, 400 (invalid content),
            403 (recipient has chat disabled), 404 (unknown recipient)
    """
    user_id = require_user_id(jwt_service, auth_token, "send messages")

    try:
        request = SendMessageRequest(
            sender_id=user_id,
            receiver_id=body.receiver_id,
            content=body.content,
            thread_id=body.thread_id,
            message_type=body.message_type,
        )
        return await send_message_use_case.execute(request)
    except DomainError as e:
        raise to_http_exception(e)
    except ValueError as e:
        raise _bad_request(e)


@router.get("/conversations", response_model=ListConversationsResponse)
async def list_conversations(
    list_conversations_use_case: FromDishka[ListConversationsUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> ListConversationsResponse:
    """List the current user's conversations, most recent first."""
    user_id = require_user_id(jwt_service, auth_token, "list conversations")
    return await list_conversations_use_case.execute(
        ListConversationsRequest(user_id=user_id)
    )


@router.get("/unread/count", response_model=GetUnreadCountResponse)
async def get_unread_count(
    get_unread_count_use_case: FromDishka[GetUnreadCountUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> GetUnreadCountResponse:
    user_id = require_user_id(jwt_service, auth_token, "count unread messages")
    return await get_unread_count_use_case.execute(
        GetUnreadCountRequest(user_id=user_id)
    )


@router.get("/{user_id}", response_model=GetConversationResponse)
async def get_conversation(
    user_id: str,
    get_conversation_use_case: FromDishka[GetConversationUseCase],
    jwt_service: FromDishka[JWTService],
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1),
    auth_token: str | None = Cookie(default=None),
) -> GetConversationResponse:
    """Get the conversation with another user, oldest message first.

    Messages the other user sent are marked read as a side effect.

    Args:
        user_id: The other participant
        page: Page number (1-based)
        limit: Page size (capped by configuration)
    """
    viewer_id = require_user_id(jwt_service, auth_token, "read messages")

    try:
        request = GetConversationRequest(
            viewer_id=viewer_id, counterpart_id=user_id, page=page, limit=limit
        )
        return await get_conversation_use_case.execute(request)
    except DomainError as e:
        raise to_http_exception(e)
    except ValueError as e:
        raise _bad_request(e)


@router.put("/{message_id}/read", response_model=MarkMessageReadResponse)
async def mark_message_read(
    message_id: str,
    mark_message_read_use_case: FromDishka[MarkMessageReadUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> MarkMessageReadResponse:
    """Mark a received message as read.

    Raises:
        HTTPException: 401, 404 if the message was not sent to the caller
    """
    user_id = require_user_id(jwt_service, auth_token, "read messages")

    try:
        request = MarkMessageReadRequest(message_id=message_id, user_id=user_id)
        return await mark_message_read_use_case.execute(request)
    except DomainError as e:
        raise to_http_exception(e)
    except ValueError as e:
        raise _bad_request(e)


@router.delete("/{message_id}", response_model=DeleteMessageResponse)
async def delete_message(
    message_id: str,
    delete_message_use_case: FromDishka[DeleteMessageUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> DeleteMessageResponse:
    """Hide a message from the caller's view of the conversation.

    The other participant still sees it.

    Raises:
        HTTPException: 401, 403 (not a participant), 404 (no such message)
    """
    user_id = require_user_id(jwt_service, auth_token, "delete messages")

    try:
        request = DeleteMessageRequest(message_id=message_id, user_id=user_id)
        return await delete_message_use_case.execute(request)
    except DomainError as e:
        raise to_http_exception(e)
    except ValueError as e:
        raise _bad_request(e)
