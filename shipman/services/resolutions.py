"""
Hold resolution: decisions on held containers, logged immutably.
"""

import logging

from django.db import transaction
from django.utils import timezone

from shipman.exceptions import ShipmanError
from shipman.models.enums import QcStatus, ResolutionAction
from shipman.models.resolution import HoldResolution
from shipman.protocols.notifications import NotificationEvent
from shipman.scope import ensure_in_scope, resolve_scope
from shipman.services.notifications import fan_out, notify_after_commit
from shipman.services.qc import lock_container

logger = logging.getLogger('shipman')


def _target_status(action: str, send_back_to_qc: bool) -> str:
    if action == ResolutionAction.RELEASE_HOLD:
        return QcStatus.QC_SUBMITTED if send_back_to_qc else QcStatus.APPROVED
    if action == ResolutionAction.REQUEST_REINSPECTION:
        return QcStatus.ARRIVED
    return QcStatus.REJECTED


class HoldResolutions:
    """Hold resolution methods."""

    @classmethod
    def resolve_hold(cls, license, container_id, action, note='', send_back_to_qc=False) -> HoldResolution:
        """
        Resolve a held container and append one HoldResolution row.

        Actions:
        - release_hold: approved, or qc_submitted when send_back_to_qc
        - request_reinspection: arrived, inspection data cleared
        - reject_container: rejected (terminal)

        Returns:
            The created HoldResolution

        Raises:
            ShipmanError('VALIDATION_ERROR'): Unknown action
            ShipmanError('ACCESS_DENIED'): License or country mismatch
            ShipmanError('NOT_FOUND'): Unknown container
            ShipmanError('INVALID_TRANSITION'): Container not held
        """
        if action not in ResolutionAction.values:
            raise ShipmanError(
                'VALIDATION_ERROR',
                'Ação de resolução inválida',
                field='action',
                value=str(action),
                allowed=list(ResolutionAction.values),
            )
        send_back_to_qc = bool(send_back_to_qc)
        scope = resolve_scope(license)

        with transaction.atomic():
            container = lock_container(container_id)
            ensure_in_scope(scope, container)
            if container.qc_status != QcStatus.HELD:
                raise ShipmanError(
                    'INVALID_TRANSITION',
                    container_id=container.pk,
                    current=container.qc_status,
                    expected=QcStatus.HELD,
                )

            previous = container.qc_status
            target = _target_status(action, send_back_to_qc)

            container.qc_status = target
            container.qc_hold_reason = ''
            container.qc_hold_details = ''
            if action == ResolutionAction.REQUEST_REINSPECTION:
                container.qc_inspection_info = {}
            container.qc_reviewed_by = scope.license
            container.qc_reviewed_at = timezone.now()
            container.save(update_fields=[
                'qc_status', 'qc_hold_reason', 'qc_hold_details', 'qc_inspection_info',
                'qc_reviewed_by', 'qc_reviewed_at', 'updated_at',
            ])

            resolution = HoldResolution.objects.create(
                container=container,
                previous_qc_status=previous,
                resolution_action=action,
                resolution_note=note or '',
                resolved_by=scope.license,
                send_back_to_qc=send_back_to_qc,
            )

            notify_after_commit(fan_out(
                NotificationEvent.HOLD_RESOLVED,
                container.request_id,
                {
                    'container_id': container.pk,
                    'container_no': container.container_no,
                    'action': action,
                    'qc_status': target,
                },
                container.supplier_id,
            ))

        logger.info(
            "shipman.hold.resolved",
            extra={
                "container_id": container.pk,
                "license_id": scope.license_id,
                "action": action,
                "qc_status": target,
            },
        )
        return resolution

    @classmethod
    def resolutions(cls, container_id) -> list[HoldResolution]:
        """Resolution log of a container, oldest first."""
        return list(
            HoldResolution.objects.filter(container_id=container_id)
            .select_related('resolved_by')
            .order_by('resolved_at', 'pk')
        )
