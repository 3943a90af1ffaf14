"""Notification entity.

Notifications are owned by their recipient. The emitter creates them;
the recipient flips the read flag. A retention sweep removes them after
a fixed window.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from forum.domain.model.common import DomainModel
from forum.domain.value import (
    NotificationContext,
    NotificationId,
    NotificationType,
    UserId,
)


class Notification(DomainModel):
    """Notification entity."""

    id: NotificationId
    recipient_id: UserId
    type: NotificationType
    title: str = Field(min_length=1, max_length=100)
    body: str = Field(min_length=1, max_length=500)
    context: NotificationContext = NotificationContext()
    read: bool = False
    read_at: Optional[datetime] = None
    email_sent: bool = False
    created_at: datetime = Field(default_factory=datetime.now)
