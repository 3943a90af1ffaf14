"""Application layer DI providers."""

from dishka import Scope, provide

from forum.adapter.realtime import RealtimeHub
from forum.application.usecase.message import (
    DeleteMessageUseCase,
    GetConversationUseCase,
    GetUnreadCountUseCase,
    ListConversationsUseCase,
    MarkMessageReadUseCase,
    SendMessageUseCase,
)
from forum.application.usecase.notification import (
    GetUnreadNotificationCountUseCase,
    ListNotificationsUseCase,
    MarkAllNotificationsReadUseCase,
    MarkNotificationReadUseCase,
    NotifyCommentUseCase,
    PurgeNotificationsUseCase,
)
from forum.application.usecase.vote import ApplyVoteUseCase
from forum.config import MessagingSettings, NotificationSettings
from forum.domain.repository import CommentRepository, ThreadRepository
from forum.domain.service import (
    MessageService,
    NotificationService,
    UserService,
    VoteService,
)
from forum.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Vote use cases
    @provide(scope=Scope.REQUEST)
    def get_apply_vote_use_case(
        self,
        vote_service: VoteService,
        notification_service: NotificationService,
        realtime_hub: RealtimeHub,
    ) -> ApplyVoteUseCase:
        """Provide apply vote use case."""
        return ApplyVoteUseCase(
            vote_service=vote_service,
            notification_service=notification_service,
            realtime_hub=realtime_hub,
        )

    # Message use cases
    @provide(scope=Scope.REQUEST)
    def get_send_message_use_case(
        self,
        message_service: MessageService,
        user_service: UserService,
        notification_service: NotificationService,
        realtime_hub: RealtimeHub,
    ) -> SendMessageUseCase:
        """Provide send message use case."""
        return SendMessageUseCase(
            message_service=message_service,
            user_service=user_service,
            notification_service=notification_service,
            realtime_hub=realtime_hub,
        )

    @provide(scope=Scope.REQUEST)
    def get_get_conversation_use_case(
        self,
        message_service: MessageService,
        user_service: UserService,
        messaging_settings: MessagingSettings,
    ) -> GetConversationUseCase:
        """Provide get conversation use case."""
        return GetConversationUseCase(
            message_service=message_service,
            user_service=user_service,
            messaging_settings=messaging_settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_list_conversations_use_case(
        self, message_service: MessageService, user_service: UserService
    ) -> ListConversationsUseCase:
        """Provide list conversations use case."""
        return ListConversationsUseCase(
            message_service=message_service, user_service=user_service
        )

    @provide(scope=Scope.REQUEST)
    def get_mark_message_read_use_case(
        self, message_service: MessageService
    ) -> MarkMessageReadUseCase:
        """Provide mark message read use case."""
        return MarkMessageReadUseCase(message_service=message_service)

    @provide(scope=Scope.REQUEST)
    def get_delete_message_use_case(
        self, message_service: MessageService
    ) -> DeleteMessageUseCase:
        """Provide delete message use case."""
        return DeleteMessageUseCase(message_service=message_service)

    @provide(scope=Scope.REQUEST)
    def get_unread_count_use_case(
        self, message_service: MessageService
    ) -> GetUnreadCountUseCase:
        """Provide unread message count use case."""
        return GetUnreadCountUseCase(message_service=message_service)

    # Notification use cases
    @provide(scope=Scope.REQUEST)
    def get_list_notifications_use_case(
        self,
        notification_service: NotificationService,
        notification_settings: NotificationSettings,
    ) -> ListNotificationsUseCase:
        """Provide list notifications use case."""
        return ListNotificationsUseCase(
            notification_service=notification_service,
            notification_settings=notification_settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_mark_notification_read_use_case(
        self, notification_service: NotificationService
    ) -> MarkNotificationReadUseCase:
        """Provide mark notification read use case."""
        return MarkNotificationReadUseCase(notification_service=notification_service)

    @provide(scope=Scope.REQUEST)
    def get_mark_all_notifications_read_use_case(
        self, notification_service: NotificationService
    ) -> MarkAllNotificationsReadUseCase:
        """Provide mark all notifications read use case."""
        return MarkAllNotificationsReadUseCase(
            notification_service=notification_service
        )

    @provide(scope=Scope.REQUEST)
    def get_unread_notification_count_use_case(
        self, notification_service: NotificationService
    ) -> GetUnreadNotificationCountUseCase:
        """Provide unread notification count use case."""
        return GetUnreadNotificationCountUseCase(
            notification_service=notification_service
        )

    @provide(scope=Scope.REQUEST)
    def get_notify_comment_use_case(
        self,
        comment_repository: CommentRepository,
        thread_repository: ThreadRepository,
        user_service: UserService,
        notification_service: NotificationService,
        realtime_hub: RealtimeHub,
    ) -> NotifyCommentUseCase:
        """Provide notify comment use case."""
        return NotifyCommentUseCase(
            comment_repository=comment_repository,
            thread_repository=thread_repository,
            user_service=user_service,
            notification_service=notification_service,
            realtime_hub=realtime_hub,
        )

    @provide(scope=Scope.REQUEST)
    def get_purge_notifications_use_case(
        self, notification_service: NotificationService
    ) -> PurgeNotificationsUseCase:
        """Provide purge notifications use case."""
        return PurgeNotificationsUseCase(notification_service=notification_service)
