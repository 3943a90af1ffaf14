"""Realtime delivery adapter."""

from .hub import (
    Connection,
    ConnectionHub,
    RealtimeEvent,
    RealtimeHub,
    RecordingRealtimeHub,
)

__all__ = [
    "Connection",
    "ConnectionHub",
    "RealtimeEvent",
    "RealtimeHub",
    "RecordingRealtimeHub",
]
