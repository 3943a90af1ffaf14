"""Realtime infrastructure providers."""

from dishka import Scope, provide

from forum.adapter.realtime import ConnectionHub, RealtimeHub
from forum.config import RealtimeSettings
from forum.util.di.base import ProviderBase


class RealtimeProvider(ProviderBase):
    """Realtime component base."""

    __mock_component__ = "realtime"


class ProdRealtimeProvider(RealtimeProvider):
    """Production realtime provider.

    The hub is APP-scoped: every request and every socket shares one
    connection registry.
    """

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_realtime_hub(self, realtime_settings: RealtimeSettings) -> RealtimeHub:
        """Provide the live connection hub."""
        return ConnectionHub(send_timeout=realtime_settings.send_timeout_seconds)
