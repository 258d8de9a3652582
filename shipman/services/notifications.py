"""
Notification fan-out with settle-all delivery after commit.

Usage:
    from shipman.services.notifications import notify_after_commit

    notify_after_commit([
        Notification(admin.pk, NotificationEvent.CONTAINER_HELD, request.pk, data),
    ])
"""

import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Q

from shipman.adapters.sink import get_notification_sink
from shipman.conf import shipman_settings
from shipman.protocols.notifications import Notification

logger = logging.getLogger('shipman')


def admin_recipient_ids() -> list[int]:
    """Active superusers plus active members of NOTIFY_GROUPS."""
    User = get_user_model()
    groups = [g.lower() for g in shipman_settings.NOTIFY_GROUPS]
    query = Q(is_superuser=True)
    if groups:
        group_q = Q()
        for name in groups:
            group_q |= Q(groups__name__iexact=name)
        query |= group_q
    return list(
        User.objects.filter(query, is_active=True)
        .order_by('pk')
        .values_list('pk', flat=True)
        .distinct()
    )


def fan_out(event_type: str, related_id, payload: dict, *user_ids, admins: bool = True) -> list[Notification]:
    """
    Build notifications for admins plus extra recipients (buyer, supplier).

    None recipients are skipped and each user is notified once. Pass
    admins=False to address only the given users.
    """
    candidates = [*admin_recipient_ids(), *user_ids] if admins else list(user_ids)
    recipients: list[int] = []
    for uid in candidates:
        if uid is not None and uid not in recipients:
            recipients.append(uid)
    return [
        Notification(recipient_id=uid, event_type=event_type,
                     related_id=related_id, payload=payload)
        for uid in recipients
    ]


def dispatch(notifications: list[Notification]) -> int:
    """
    Deliver every notification, never raising.

    Returns:
        Number of notifications the sink accepted
    """
    if not notifications:
        return 0

    try:
        sink = get_notification_sink()
    except Exception:
        logger.exception(
            "shipman.notify.sink_unavailable",
            extra={"pending": len(notifications)},
        )
        return 0

    delivered = 0
    for n in notifications:
        try:
            sink.notify(n.recipient_id, n.event_type, n.related_id, n.payload)
            delivered += 1
        except Exception:
            logger.exception(
                "shipman.notify.failed",
                extra={
                    "recipient_id": n.recipient_id,
                    "event_type": n.event_type,
                    "related_id": n.related_id,
                },
            )

    if delivered < len(notifications):
        logger.warning(
            "shipman.notify.partial",
            extra={"delivered": delivered, "total": len(notifications)},
        )
    return delivered


def notify_after_commit(notifications: list[Notification]) -> None:
    """Schedule dispatch() for when the surrounding transaction commits."""
    if notifications:
        transaction.on_commit(lambda: dispatch(notifications))
