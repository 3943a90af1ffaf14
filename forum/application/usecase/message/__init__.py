"""Message use cases."""

from .delete_message import (
    DeleteMessageRequest,
    DeleteMessageResponse,
    DeleteMessageUseCase,
)
from .get_conversation import (
    GetConversationRequest,
    GetConversationResponse,
    GetConversationUseCase,
)
from .get_unread_count import (
    GetUnreadCountRequest,
    GetUnreadCountResponse,
    GetUnreadCountUseCase,
)
from .list_conversations import (
    ListConversationsRequest,
    ListConversationsResponse,
    ListConversationsUseCase,
)
from .mark_message_read import (
    MarkMessageReadRequest,
    MarkMessageReadResponse,
    MarkMessageReadUseCase,
)
from .send_message import SendMessageRequest, SendMessageUseCase

__all__ = [
    "DeleteMessageRequest",
    "DeleteMessageResponse",
    "DeleteMessageUseCase",
    "GetConversationRequest",
    "GetConversationResponse",
    "GetConversationUseCase",
    "GetUnreadCountRequest",
    "GetUnreadCountResponse",
    "GetUnreadCountUseCase",
    "ListConversationsRequest",
    "ListConversationsResponse",
    "ListConversationsUseCase",
    "MarkMessageReadRequest",
    "MarkMessageReadResponse",
    "MarkMessageReadUseCase",
    "SendMessageRequest",
    "SendMessageUseCase",
]
