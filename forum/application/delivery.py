"""Best-effort delivery of recorded notifications to live connections."""

from typing import Iterable

from forum.adapter.realtime import RealtimeEvent, RealtimeHub
from forum.application.view import MessageView, NotificationView
from forum.domain.model import Notification
from forum.domain.value import UserId

NEW_MESSAGE = "new-message"
NEW_NOTIFICATION = "new-notification"


async def push_notifications(
    realtime_hub: RealtimeHub, notifications: Iterable[Notification]
) -> None:
    """Push each notification to its recipient's live connections."""
    for notification in notifications:
        await realtime_hub.push(
            notification.recipient_id,
            RealtimeEvent(
                type=NEW_NOTIFICATION,
                data=NotificationView.from_notification(notification).model_dump(
                    mode="json"
                ),
            ),
        )


async def push_message(
    realtime_hub: RealtimeHub, receiver_id: UserId, view: MessageView
) -> None:
    await realtime_hub.push(
        receiver_id,
        RealtimeEvent(type=NEW_MESSAGE, data=view.model_dump(mode="json")),
    )
