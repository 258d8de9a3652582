"""
Default signal receivers, connected in ShipmanConfig.ready().
"""

import logging

from django.dispatch import receiver
from django.utils import timezone

from shipman.models.enums import RequestStatus
from shipman.signals import first_plan_created

logger = logging.getLogger('shipman')


@receiver(first_plan_created, dispatch_uid='shipman.mark_request_on_first_plan')
def mark_request_on_first_plan(sender, request, plan, actor=None, **kwargs):
    """Stamp the acceptance marker and accept a pending request."""
    update_fields = []
    if request.first_plan_at is None:
        request.first_plan_at = timezone.now()
        update_fields.append('first_plan_at')
    if request.status == RequestStatus.PENDING:
        request.status = RequestStatus.ACCEPTED
        update_fields.append('status')
    if not update_fields:
        return

    update_fields.append('updated_at')
    request.save(update_fields=update_fields)
    logger.info(
        "shipman.request.first_plan",
        extra={"request_id": request.pk, "plan_id": plan.pk, "status": request.status},
    )
