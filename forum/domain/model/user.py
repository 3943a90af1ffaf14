"""User aggregate root.

Registration and credentials are owned by the identity service; the
forum core only reads profiles (display identity and notification
preferences).
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from forum.domain.model.common import DomainModel
from forum.domain.value import NotificationPreferences, UserId, Username


class User(DomainModel):
    """User profile as seen by the voting/messaging core."""

    id: UserId
    username: Username
    name: str = Field(min_length=1, max_length=50)
    email: Optional[str] = None
    avatar_url: Optional[str] = None
    notification_prefs: NotificationPreferences = NotificationPreferences()
    is_active: bool = True
    created_at: datetime = Field(default_factory=datetime.now)
