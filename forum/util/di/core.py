"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from forum.config import (
    AuthSettings,
    MessagingSettings,
    NotificationSettings,
    RealtimeSettings,
    Settings,
    VotingSettings,
)
from forum.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    Each section is also provided on its own so services depend only on
    the part they read.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide(scope=Scope.APP)
    def provide_auth_settings(self, settings: Settings) -> AuthSettings:
        """Provide auth settings."""
        return settings.auth

    @provide(scope=Scope.APP)
    def provide_voting_settings(self, settings: Settings) -> VotingSettings:
        return settings.voting

    @provide(scope=Scope.APP)
    def provide_notification_settings(
        self, settings: Settings
    ) -> NotificationSettings:
        return settings.notifications

    @provide(scope=Scope.APP)
    def provide_messaging_settings(self, settings: Settings) -> MessagingSettings:
        return settings.messaging

    @provide(scope=Scope.APP)
    def provide_realtime_settings(self, settings: Settings) -> RealtimeSettings:
        return settings.realtime
