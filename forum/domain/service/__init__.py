"""Domain services."""

from .base import Service
from .jwt_service import JWTService
from .message_service import MessageService
from .notification_service import NotificationService
from .user_service import UserService
from .vote_service import VoteService

__all__ = [
    "JWTService",
    "MessageService",
    "NotificationService",
    "Service",
    "UserService",
    "VoteService",
]
