"""Notification use cases."""

from .get_unread_notification_count import (
    GetUnreadNotificationCountRequest,
    GetUnreadNotificationCountResponse,
    GetUnreadNotificationCountUseCase,
)
from .list_notifications import (
    ListNotificationsRequest,
    ListNotificationsResponse,
    ListNotificationsUseCase,
)
from .mark_notification_read import (
    MarkAllNotificationsReadRequest,
    MarkAllNotificationsReadResponse,
    MarkAllNotificationsReadUseCase,
    MarkNotificationReadRequest,
    MarkNotificationReadUseCase,
)
from .notify_comment import (
    NotifyCommentRequest,
    NotifyCommentResponse,
    NotifyCommentUseCase,
)
from .purge_notifications import (
    PurgeNotificationsRequest,
    PurgeNotificationsResponse,
    PurgeNotificationsUseCase,
)

__all__ = [
    "GetUnreadNotificationCountRequest",
    "GetUnreadNotificationCountResponse",
    "GetUnreadNotificationCountUseCase",
    "ListNotificationsRequest",
    "ListNotificationsResponse",
    "ListNotificationsUseCase",
    "MarkAllNotificationsReadRequest",
    "MarkAllNotificationsReadResponse",
    "MarkAllNotificationsReadUseCase",
    "MarkNotificationReadRequest",
    "MarkNotificationReadUseCase",
    "NotifyCommentRequest",
    "NotifyCommentResponse",
    "NotifyCommentUseCase",
    "PurgeNotificationsRequest",
    "PurgeNotificationsResponse",
    "PurgeNotificationsUseCase",
]
