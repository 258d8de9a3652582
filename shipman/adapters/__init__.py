"""
Shipman Adapters.

Implementations of protocols for external systems.
"""

from shipman.adapters.noop import NoopNotificationSink
from shipman.adapters.sink import get_notification_sink, reset_notification_sink

__all__ = [
    "NoopNotificationSink",
    "get_notification_sink",
    "reset_notification_sink",
]
