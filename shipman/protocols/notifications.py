"""
Notification Sink Protocol: interface for outbound notifications.

Shipman defines this protocol; the host project's notification app
implements it. Delivery is fire-and-forget: Shipman never waits on it
and never fails a state change because of it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


class NotificationEvent:
    """Event types emitted by Shipman."""

    CONTAINER_HELD = "container_held"
    HOLD_RESOLVED = "hold_resolved"
    EXTERNAL_QC_REPORTED = "external_qc_reported"
    TRACKING_UPDATED = "tracking_updated"
    CONTAINER_FILE_UPLOADED = "container_file_uploaded"
    NEW_FILE_UPLOAD = "new_file_upload"


@dataclass(frozen=True)
class Notification:
    """One (recipient, event type, subject id, payload) tuple."""

    recipient_id: int
    event_type: str
    related_id: int | None
    payload: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class NotificationSink(Protocol):
    """
    Protocol for notification delivery.

    Implementations may raise; Shipman logs and moves on.
    """

    def notify(
        self,
        recipient_id: int,
        event_type: str,
        related_id: int | None,
        payload: dict[str, Any],
    ) -> None:
        """
        Deliver (or enqueue) one notification.

        Args:
            recipient_id: User pk
            event_type: One of NotificationEvent
            related_id: Subject id (usually the CapacityRequest pk)
            payload: JSON-serializable context
        """
        ...
