"""
Noop Notification Sink: stub adapter for development and testing.

Usage in settings.py:
    SHIPMAN = {
        "NOTIFICATION_SINK": "shipman.adapters.noop.NoopNotificationSink",
    }

This is the default when NOTIFICATION_SINK is not configured. Nothing is
delivered; each call is logged at DEBUG level.
"""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)


class NoopNotificationSink:
    """
    No-operation sink. Implements ``NotificationSink`` without any
    external dependency, suitable for local development and CI.
    """

    def notify(
        self,
        recipient_id: int,
        event_type: str,
        related_id: int | None,
        payload: dict[str, Any],
    ) -> None:
        logger.debug(
            "shipman.notify.noop",
            extra={
                "recipient_id": recipient_id,
                "event_type": event_type,
                "related_id": related_id,
            },
        )
