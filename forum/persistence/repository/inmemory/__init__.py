"""In-memory repository implementations for testing."""

from .comment import InMemoryCommentRepository
from .message import InMemoryMessageRepository
from .notification import InMemoryNotificationRepository
from .thread import InMemoryThreadRepository
from .user import InMemoryUserRepository
from .vote import InMemoryVoteRepository

__all__ = [
    "InMemoryCommentRepository",
    "InMemoryMessageRepository",
    "InMemoryNotificationRepository",
    "InMemoryThreadRepository",
    "InMemoryUserRepository",
    "InMemoryVoteRepository",
]
