"""
QC state machine: arrival, inspection, clearance and hold.

Every write resolves the officer's license scope, locks the container
row, checks country and request acceptance, then checks the status
guard. A loser of a concurrent race sees the committed status and gets
INVALID_TRANSITION.
"""

import logging
from dataclasses import dataclass
from datetime import date

from django.db import transaction
from django.db.models import CharField, Count, F, Q
from django.db.models.functions import Cast
from django.utils import timezone
from django.utils.dateparse import parse_date

from shipman.exceptions import ShipmanError
from shipman.models.container import Container
from shipman.models.enums import QcStatus
from shipman.payloads import ArrivalInfo, HoldInfo, InspectionInfo
from shipman.protocols.notifications import NotificationEvent
from shipman.scope import QcScope, ensure_in_scope, resolve_scope
from shipman.services.notifications import fan_out, notify_after_commit
from shipman.services.pagination import Page, paginate

logger = logging.getLogger('shipman')

SORTABLE_FIELDS = {
    'id': ('id',),
    'container_no': ('container_no',),
    'qc_status': ('qc_status',),
    'created_at': ('created_at',),
    'supplier_name': ('supplier__first_name', 'supplier__last_name', 'supplier__username'),
    'import_country': ('request__import_country',),
}


@dataclass(frozen=True)
class ContainerListing:
    """Result of list_containers()."""

    country: str
    import_country: str
    page: Page
    status_counts: dict[str, int]

    @property
    def containers(self) -> list[Container]:
        return self.page.items


def lock_container(container_id) -> Container:
    """
    Lock a container row (caller must be inside transaction.atomic()).

    Raises:
        ShipmanError('NOT_FOUND'): If the container doesn't exist
    """
    try:
        return (
            Container.objects.select_for_update()
            .select_related('request')
            .get(pk=container_id)
        )
    except (Container.DoesNotExist, ValueError, TypeError):
        raise ShipmanError('NOT_FOUND', entity='container', container_id=container_id) from None


def _guard(container: Container, expected: str) -> None:
    if container.qc_status != expected:
        raise ShipmanError(
            'INVALID_TRANSITION',
            container_id=container.pk,
            current=container.qc_status,
            expected=expected,
        )


def _require_inspection(container: Container) -> None:
    if not container.has_inspection:
        raise ShipmanError(
            'INVALID_TRANSITION',
            'Inspeção de QC ainda não registrada',
            container_id=container.pk,
            current=container.qc_status,
        )


def _stamp(container: Container, scope: QcScope) -> None:
    container.qc_reviewed_by = scope.license
    container.qc_reviewed_at = timezone.now()


def _as_date(value, field_name: str) -> date | None:
    if value in (None, ''):
        return None
    if isinstance(value, date):
        return value
    try:
        parsed = parse_date(str(value).strip())
    except ValueError:
        parsed = None
    if parsed is None:
        raise ShipmanError('VALIDATION_ERROR', field=field_name, value=str(value))
    return parsed


def _check_status(qc_status) -> str:
    if qc_status not in QcStatus.values:
        raise ShipmanError('VALIDATION_ERROR', field='qc_status', value=str(qc_status))
    return qc_status


def _search_filter(search: str) -> Q:
    term = search.strip().lstrip('#').strip()
    query = Q(container_no_text__icontains=term) | Q(tracking_code__icontains=term)
    if term.isdigit():
        query |= Q(pk=int(term))
    return query


def _supplier_filter(name: str) -> Q:
    name = name.strip()
    return (
        Q(supplier__first_name__icontains=name)
        | Q(supplier__last_name__icontains=name)
        | Q(supplier__username__icontains=name)
    )


class QcTransitions:
    """Internal QC methods, scoped by license country."""

    # ══════════════════════════════════════════════════════════════
    # WRITES
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def mark_arrived(cls, license, container_id, arrived_at, place) -> Container:
        """
        pending -> arrived.

        Raises:
            ShipmanError('ACCESS_DENIED'): License or country mismatch
            ShipmanError('NOT_FOUND'): Unknown container
            ShipmanError('INVALID_TRANSITION'): Not pending
            ShipmanError('VALIDATION_ERROR'): Bad arrival data
        """
        scope = resolve_scope(license)
        arrival = ArrivalInfo.build(arrived_at, place)

        with transaction.atomic():
            container = lock_container(container_id)
            ensure_in_scope(scope, container)
            _guard(container, QcStatus.PENDING)

            container.qc_status = QcStatus.ARRIVED
            container.qc_arrival_info = arrival.as_json()
            _stamp(container, scope)
            container.save(update_fields=[
                'qc_status', 'qc_arrival_info', 'qc_reviewed_by', 'qc_reviewed_at', 'updated_at',
            ])

        logger.info(
            "shipman.qc.arrived",
            extra={"container_id": container.pk, "license_id": scope.license_id, "place": arrival.place},
        )
        return container

    @classmethod
    def start_inspection(cls, license, container_id, inspection_data) -> Container:
        """
        arrived -> qc_submitted, storing the inspection payload.

        Raises:
            ShipmanError('INVALID_TRANSITION'): Not arrived
            ShipmanError('ALREADY_SUBMITTED'): Inspection already recorded
            ShipmanError('VALIDATION_ERROR'): Empty or malformed payload
        """
        scope = resolve_scope(license)
        inspection = InspectionInfo.from_payload(inspection_data)

        with transaction.atomic():
            container = lock_container(container_id)
            ensure_in_scope(scope, container)
            _guard(container, QcStatus.ARRIVED)
            if container.has_inspection:
                raise ShipmanError('ALREADY_SUBMITTED', container_id=container.pk)

            now = timezone.now()
            container.qc_status = QcStatus.QC_SUBMITTED
            container.qc_inspection_info = inspection.as_json(
                inspected_by=scope.license_id,
                inspected_at=now,
            )
            container.qc_reviewed_by = scope.license
            container.qc_reviewed_at = now
            container.save(update_fields=[
                'qc_status', 'qc_inspection_info', 'qc_reviewed_by', 'qc_reviewed_at', 'updated_at',
            ])

        logger.info(
            "shipman.qc.inspected",
            extra={"container_id": container.pk, "license_id": scope.license_id},
        )
        return container

    @classmethod
    def clear(cls, license, container_id) -> Container:
        """qc_submitted -> approved."""
        scope = resolve_scope(license)

        with transaction.atomic():
            container = lock_container(container_id)
            ensure_in_scope(scope, container)
            _guard(container, QcStatus.QC_SUBMITTED)
            _require_inspection(container)

            container.qc_status = QcStatus.APPROVED
            _stamp(container, scope)
            container.save(update_fields=['qc_status', 'qc_reviewed_by', 'qc_reviewed_at', 'updated_at'])

        logger.info(
            "shipman.qc.cleared",
            extra={"container_id": container.pk, "license_id": scope.license_id},
        )
        return container

    @classmethod
    def hold(cls, license, container_id, reason, details=None) -> Container:
        """
        qc_submitted -> held. Admins are notified after commit.

        Raises:
            ShipmanError('INVALID_TRANSITION'): Not qc_submitted (held included)
            ShipmanError('VALIDATION_ERROR'): Missing or too long reason
        """
        scope = resolve_scope(license)
        info = HoldInfo.build(reason, details)

        with transaction.atomic():
            container = lock_container(container_id)
            ensure_in_scope(scope, container)
            _guard(container, QcStatus.QC_SUBMITTED)
            _require_inspection(container)

            container.qc_status = QcStatus.HELD
            container.qc_hold_reason = info.reason
            container.qc_hold_details = info.details
            _stamp(container, scope)
            container.save(update_fields=[
                'qc_status', 'qc_hold_reason', 'qc_hold_details',
                'qc_reviewed_by', 'qc_reviewed_at', 'updated_at',
            ])

            notify_after_commit(fan_out(
                NotificationEvent.CONTAINER_HELD,
                container.request_id,
                {
                    'container_id': container.pk,
                    'container_no': container.container_no,
                    'import_country': scope.import_country,
                    'reason': info.reason,
                    'details': info.details,
                },
            ))

        logger.info(
            "shipman.qc.held",
            extra={"container_id": container.pk, "license_id": scope.license_id, "reason": info.reason},
        )
        return container

    # ══════════════════════════════════════════════════════════════
    # READS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def list_containers(cls, license, qc_status=None, search=None, supplier_name=None,
                        start_date=None, end_date=None, sort_by='created_at',
                        sort_direction='desc', page=1, limit=None) -> ContainerListing:
        """
        Containers visible to the license, filtered, sorted and paginated.

        status_counts covers every QC status and honors all filters
        except qc_status.
        """
        scope = resolve_scope(license)
        start = _as_date(start_date, 'start_date')
        end = _as_date(end_date, 'end_date')

        base = (
            Container.objects.visible_to_qc(scope.import_country)
            .select_related('request', 'supplier', 'plan')
        )
        if search and search.strip().lstrip('#').strip():
            base = base.annotate(
                container_no_text=Cast('container_no', output_field=CharField()),
            ).filter(_search_filter(search))
        if supplier_name and supplier_name.strip():
            base = base.filter(_supplier_filter(supplier_name))
        if start is not None:
            base = base.filter(created_at__date__gte=start)
        if end is not None:
            base = base.filter(created_at__date__lte=end)

        status_counts = {status: 0 for status in QcStatus.values}
        for row in base.order_by().values('qc_status').annotate(n=Count('pk')):
            status_counts[row['qc_status']] = row['n']

        filtered = base
        if qc_status:
            filtered = filtered.filter(qc_status=_check_status(qc_status))

        columns = SORTABLE_FIELDS.get(sort_by, SORTABLE_FIELDS['created_at'])
        prefix = '' if sort_direction == 'asc' else '-'
        ordering = [f'{prefix}{column}' for column in columns]
        filtered = filtered.order_by(*ordering, f'{prefix}id')

        return ContainerListing(
            country=scope.country_code,
            import_country=scope.import_country,
            page=paginate(filtered, page, limit),
            status_counts=status_counts,
        )

    @classmethod
    def get_container(cls, license, container_id) -> Container:
        """
        Scoped container detail.

        Raises:
            ShipmanError('NOT_FOUND'): Absent or outside the license scope
        """
        scope = resolve_scope(license)
        try:
            return (
                Container.objects.visible_to_qc(scope.import_country)
                .select_related('request', 'plan', 'supplier', 'qc_reviewed_by')
                .prefetch_related('files', 'hold_resolutions')
                .get(pk=container_id)
            )
        except (Container.DoesNotExist, ValueError, TypeError):
            raise ShipmanError('NOT_FOUND', entity='container', container_id=container_id) from None

    @classmethod
    def list_by_status(cls, license, qc_status, page=1, limit=None) -> Page:
        """Containers in one QC status, most recently reviewed first."""
        scope = resolve_scope(license)
        qs = (
            Container.objects.visible_to_qc(scope.import_country)
            .filter(qc_status=_check_status(qc_status))
            .select_related('request', 'supplier')
            .order_by(F('qc_reviewed_at').desc(nulls_last=True), '-id')
        )
        return paginate(qs, page, limit)