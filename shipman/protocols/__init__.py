"""
Shipman Protocols.

Defines interfaces for external system integration.
"""

from shipman.protocols.notifications import (
    Notification,
    NotificationEvent,
    NotificationSink,
)

__all__ = [
    "Notification",
    "NotificationEvent",
    "NotificationSink",
]
