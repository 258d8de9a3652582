"""
External QC confirmation: one corroborating report per approved container.
"""

import json
import logging

from django.db import IntegrityError, transaction
from django.db.models import F

from shipman.exceptions import ShipmanError
from shipman.models.container import Container
from shipman.models.enums import QcStatus
from shipman.models.report import ExternalQcReport
from shipman.protocols.notifications import NotificationEvent
from shipman.scope import resolve_scope
from shipman.services.notifications import fan_out, notify_after_commit
from shipman.services.pagination import Page, paginate
from shipman.services.qc import lock_container

logger = logging.getLogger('shipman')


def _quantity(value) -> int:
    if isinstance(value, bool):
        raise ShipmanError('VALIDATION_ERROR', field='actual_quantity', value=value)
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ShipmanError('VALIDATION_ERROR', field='actual_quantity', value=str(value)) from None
    if number < 0:
        raise ShipmanError('VALIDATION_ERROR', field='actual_quantity', value=number)
    return number


def _text(value) -> str:
    if value is None:
        return ''
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


class ExternalConfirmation:
    """External QC methods, scoped by license country."""

    @classmethod
    def submit_report(cls, license, container_id, actual_quantity,
                      quality_condition=None, packaging_condition=None,
                      discrepancies=None, attachments=None) -> ExternalQcReport:
        """
        File the external report of an approved container.

        Guards run in order: scope, existence, approved status, country,
        no previous report. The container stays approved.

        Raises:
            ShipmanError('ACCESS_DENIED'): License invalid or other country
            ShipmanError('NOT_FOUND'): Unknown container
            ShipmanError('INVALID_STATE'): Container not approved
            ShipmanError('ALREADY_REPORTED'): Report already filed
            ShipmanError('VALIDATION_ERROR'): Bad quantity or attachments
        """
        scope = resolve_scope(license)
        quantity = _quantity(actual_quantity)
        if attachments is None:
            attachments = []
        if not isinstance(attachments, (list, tuple)):
            raise ShipmanError('VALIDATION_ERROR', field='attachments', value=str(attachments))

        with transaction.atomic():
            container = lock_container(container_id)

            if container.qc_status != QcStatus.APPROVED:
                raise ShipmanError(
                    'INVALID_STATE',
                    'Somente contêineres aprovados podem ser reportados',
                    container_id=container.pk,
                    current=container.qc_status,
                )

            if container.request.import_country != scope.import_country:
                raise ShipmanError(
                    'ACCESS_DENIED',
                    container_id=container.pk,
                    import_country=container.request.import_country,
                    license_country=scope.import_country,
                )

            if ExternalQcReport.objects.filter(container=container).exists():
                raise ShipmanError('ALREADY_REPORTED', container_id=container.pk)

            try:
                with transaction.atomic():
                    report = ExternalQcReport.objects.create(
                        container=container,
                        qc_license=scope.license,
                        actual_quantity=quantity,
                        quality_condition=_text(quality_condition),
                        packaging_condition=_text(packaging_condition),
                        discrepancies=_text(discrepancies),
                        attachments=list(attachments),
                    )
            except IntegrityError:
                raise ShipmanError('ALREADY_REPORTED', container_id=container.pk) from None

            notify_after_commit(fan_out(
                NotificationEvent.EXTERNAL_QC_REPORTED,
                container.request_id,
                {
                    'container_id': container.pk,
                    'container_no': container.container_no,
                    'report_id': report.pk,
                    'actual_quantity': quantity,
                },
                container.request.buyer_id,
            ))

        logger.info(
            "shipman.external.reported",
            extra={"container_id": container.pk, "license_id": scope.license_id, "report_id": report.pk},
        )
        return report

    @classmethod
    def list_approved_for_country(cls, license, page=1, limit=None) -> Page:
        """Approved, unreported containers of the license country, latest review first."""
        scope = resolve_scope(license)
        qs = (
            Container.objects.visible_to_qc(scope.import_country)
            .awaiting_external_report()
            .select_related('request', 'supplier')
            .order_by(F('qc_reviewed_at').desc(nulls_last=True), '-id')
        )
        return paginate(qs, page, limit)

    @classmethod
    def list_reported_by_officer(cls, license, page=1, limit=None) -> Page:
        """Reports filed by this license in its country, newest first."""
        scope = resolve_scope(license)
        qs = (
            ExternalQcReport.objects.filter(
                qc_license=scope.license,
                container__request__import_country=scope.import_country,
            )
            .select_related('container', 'container__request', 'container__supplier')
            .order_by('-confirmed_at', '-id')
        )
        return paginate(qs, page, limit)
