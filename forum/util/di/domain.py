"""Domain layer DI providers."""

from dishka import Scope, provide

from forum.config import (
    AuthSettings,
    MessagingSettings,
    NotificationSettings,
    VotingSettings,
)
from forum.domain.repository import (
    MessageRepository,
    NotificationRepository,
    UserRepository,
    VoteRepository,
)
from forum.domain.service import (
    JWTService,
    MessageService,
    NotificationService,
    UserService,
    VoteService,
)
from forum.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    """

    scope = Scope.REQUEST

    @provide
    def get_jwt_service(self, auth_settings: AuthSettings) -> JWTService:
        """Provide JWT token domain service."""
        return JWTService(auth_settings=auth_settings)

    @provide
    def get_user_service(self, user_repository: UserRepository) -> UserService:
        """Provide user domain service."""
        return UserService(user_repository=user_repository)

    @provide
    def get_vote_service(
        self, vote_repository: VoteRepository, voting_settings: VotingSettings
    ) -> VoteService:
        """Provide vote domain service."""
        return VoteService(
            vote_repository=vote_repository, voting_settings=voting_settings
        )

    @provide
    def get_notification_service(
        self,
        notification_repository: NotificationRepository,
        user_service: UserService,
        notification_settings: NotificationSettings,
    ) -> NotificationService:
        """Provide notification emitter."""
        return NotificationService(
            notification_repository=notification_repository,
            user_service=user_service,
            notification_settings=notification_settings,
        )

    @provide
    def get_message_service(
        self,
        message_repository: MessageRepository,
        user_service: UserService,
        messaging_settings: MessagingSettings,
    ) -> MessageService:
        """Provide message domain service."""
        return MessageService(
            message_repository=message_repository,
            user_service=user_service,
            messaging_settings=messaging_settings,
        )
