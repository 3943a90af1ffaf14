"""Notification routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, HTTPException, Query, status

from forum.application.usecase.notification import (
    GetUnreadNotificationCountRequest,
    GetUnreadNotificationCountResponse,
    GetUnreadNotificationCountUseCase,
    ListNotificationsRequest,
    ListNotificationsResponse,
    ListNotificationsUseCase,
    MarkAllNotificationsReadRequest,
    MarkAllNotificationsReadResponse,
    MarkAllNotificationsReadUseCase,
    MarkNotificationReadRequest,
    MarkNotificationReadUseCase,
)
from forum.application.view import NotificationView
from forum.domain.error import DomainError
from forum.domain.service import JWTService
from forum.interface.api.auth import require_user_id
from forum.interface.error import to_http_exception

router = APIRouter(
    prefix="/notifications", tags=["notifications"], route_class=DishkaRoute
)


@router.get("", response_model=ListNotificationsResponse)
async def list_notifications(
    list_notifications_use_case: FromDishka[ListNotificationsUseCase],
    jwt_service: FromDishka[JWTService],
    unread_only: bool = Query(default=False),
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1),
    auth_token: str | None = Cookie(default=None),
) -> ListNotificationsResponse:
    """List the current user's notifications, newest first.

    Args:
        unread_only: Only return unread notifications
        page: Page number (1-based)
        limit: Page size (capped by configuration)
    """
    user_id = require_user_id(jwt_service, auth_token, "view notifications")
    request = ListNotificationsRequest(
        user_id=user_id, unread_only=unread_only, page=page, limit=limit
    )
    return await list_notifications_use_case.execute(request)


@router.get("/unread/count", response_model=GetUnreadNotificationCountResponse)
async def get_unread_notification_count(
    get_unread_count_use_case: FromDishka[GetUnreadNotificationCountUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> GetUnreadNotificationCountResponse:
    user_id = require_user_id(jwt_service, auth_token, "view notifications")
    return await get_unread_count_use_case.execute(
        GetUnreadNotificationCountRequest(user_id=user_id)
    )


@router.put("/read-all", response_model=MarkAllNotificationsReadResponse)
async def mark_all_notifications_read(
    mark_all_read_use_case: FromDishka[MarkAllNotificationsReadUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> MarkAllNotificationsReadResponse:
    """Mark every unread notification of the current user as read."""
    user_id = require_user_id(jwt_service, auth_token, "update notifications")
    return await mark_all_read_use_case.execute(
        MarkAllNotificationsReadRequest(user_id=user_id)
    )


@router.put("/{notification_id}/read", response_model=NotificationView)
async def mark_notification_read(
    notification_id: str,
    mark_read_use_case: FromDishka[MarkNotificationReadUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> NotificationView:
    """Mark one notification as read.

    Raises:
        HTTPException: 401, 404 if it does not exist or belongs to someone else
    """
    user_id = require_user_id(jwt_service, auth_token, "update notifications")

    try:
        request = MarkNotificationReadRequest(
            notification_id=notification_id, user_id=user_id
        )
        return await mark_read_use_case.execute(request)
    except DomainError as e:
        raise to_http_exception(e)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
