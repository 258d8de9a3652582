"""
Tracking ledger: status events and tracking codes of containers.

Events are keyed by (container, tracking_code); recording the same key
again updates the row in place. A NULL tracking code is its own key.
"""

import logging
from dataclasses import dataclass
from datetime import date

from django.db import IntegrityError, transaction
from django.utils.crypto import get_random_string

from shipman.conf import shipman_settings
from shipman.countries import tracking_prefix
from shipman.exceptions import ShipmanError
from shipman.models.container import Container
from shipman.models.tracking import TrackingEvent
from shipman.protocols.notifications import NotificationEvent
from shipman.services.notifications import fan_out, notify_after_commit
from shipman.services.qc import lock_container

logger = logging.getLogger('shipman')

TY_ASSIGNED_STATUS = 'TY Number Assigned'
CODE_ISSUED_STATUS = 'Tracking Code Issued'
CODE_ALPHABET = 'ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789'
MAX_CODE_ATTEMPTS = 10


@dataclass(frozen=True)
class TrackingLookup:
    """Public view of a tracking code: event plus route context."""

    event: TrackingEvent
    container: Container
    plan_date: date | None
    import_country: str
    entry_border: str
    exit_border: str
    transport_type: str
    product_type: str
    container_amount: int
    description: str
    supplier_name: str | None

    def as_dict(self) -> dict:
        return {
            'tracking_code': self.event.tracking_code,
            'status': self.event.status,
            'note': self.event.note,
            'created_at': self.event.created_at.isoformat(),
            'container_id': self.container.pk,
            'container_no': self.container.container_no,
            'plan_date': self.plan_date.isoformat() if self.plan_date else None,
            'import_country': self.import_country,
            'entry_border': self.entry_border,
            'exit_border': self.exit_border,
            'transport_type': self.transport_type,
            'product_type': self.product_type,
            'container_amount': self.container_amount,
            'description': self.description,
            'supplier_name': self.supplier_name,
        }


def _supplier_name(request) -> str | None:
    if request.preferred_supplier_name:
        return request.preferred_supplier_name
    user = request.preferred_supplier
    if user is None:
        return None
    return user.get_full_name() or user.get_username()


def _notify_tracking(container: Container, event: TrackingEvent) -> None:
    notify_after_commit(fan_out(
        NotificationEvent.TRACKING_UPDATED,
        container.pk,
        {
            'container_id': container.pk,
            'container_no': container.container_no,
            'tracking_code': event.tracking_code,
            'status': event.status,
        },
        container.request.buyer_id,
    ))


def _upsert(container: Container, actor, status: str, tracking_code, note: str) -> tuple[TrackingEvent, bool]:
    event = TrackingEvent.objects.for_key(container.pk, tracking_code).first()
    if event is not None:
        event.status = status
        event.note = note
        event.save(update_fields=['status', 'note', 'updated_at'])
        return event, False
    event = TrackingEvent.objects.create(
        container=container,
        tracking_code=tracking_code,
        status=status,
        note=note,
        created_by=actor,
    )
    return event, True


class TrackingLedger:
    """Tracking methods."""

    @classmethod
    def record_event(cls, container_id, actor, status, tracking_code=None, note='') -> tuple[TrackingEvent, bool]:
        """
        Record (or update) the status for a (container, tracking_code) key.

        Returns:
            (event, created)

        Raises:
            ShipmanError('VALIDATION_ERROR'): Empty status
            ShipmanError('NOT_FOUND'): Unknown container
        """
        status = str(status or '').strip()
        if not status:
            raise ShipmanError('VALIDATION_ERROR', 'Status de rastreio obrigatório', field='status')
        if tracking_code is not None:
            tracking_code = str(tracking_code).strip() or None

        with transaction.atomic():
            container = lock_container(container_id)
            event, created = _upsert(container, actor, status, tracking_code, note or '')
            _notify_tracking(container, event)

        logger.info(
            "shipman.tracking.recorded",
            extra={
                "container_id": container.pk,
                "tracking_code": tracking_code,
                "status": status,
                "created": created,
            },
        )
        return event, created

    @classmethod
    def latest_per_container(cls) -> list[TrackingEvent]:
        """Newest event of each container."""
        return list(
            TrackingEvent.objects.latest_per_container()
            .select_related('container')
            .order_by('container_id')
        )

    @classmethod
    def history(cls, container_id) -> list[TrackingEvent]:
        """Events of a container, newest first."""
        return list(
            TrackingEvent.objects.filter(container_id=container_id)
            .order_by('-created_at', '-pk')
        )

    @classmethod
    def find_by_code(cls, code) -> TrackingLookup | None:
        """Case-insensitive lookup of a tracking code; None if unknown."""
        code = str(code or '').strip()
        if not code:
            return None
        event = (
            TrackingEvent.objects.filter(tracking_code__iexact=code)
            .select_related(
                'container',
                'container__plan',
                'container__request',
                'container__request__preferred_supplier',
            )
            .order_by('-created_at', '-pk')
            .first()
        )
        if event is None:
            return None

        container = event.container
        request = container.request
        return TrackingLookup(
            event=event,
            container=container,
            plan_date=container.plan.plan_date if container.plan_id else None,
            import_country=request.import_country,
            entry_border=request.entry_border,
            exit_border=request.exit_border,
            transport_type=request.transport_type,
            product_type=request.product_type,
            container_amount=request.container_amount,
            description=request.description,
            supplier_name=_supplier_name(request),
        )

    @classmethod
    def issue_tracking_code(cls, container_id) -> str:
        """
        Give a container its tracking code if it has none.

        Format: country prefix + random A-Z0-9 characters. Idempotent:
        an existing code is returned unchanged. A new code is recorded
        as a "Tracking Code Issued" event so find_by_code resolves it.

        Raises:
            ShipmanError('NOT_FOUND'): Unknown container
        """
        with transaction.atomic():
            container = lock_container(container_id)
            if container.tracking_code:
                return container.tracking_code

            prefix = tracking_prefix(container.request.import_country)
            length = shipman_settings.TRACKING_CODE_LENGTH
            for attempt in range(1, MAX_CODE_ATTEMPTS + 1):
                code = prefix + get_random_string(length, allowed_chars=CODE_ALPHABET)
                if Container.objects.filter(tracking_code=code).exists():
                    continue
                try:
                    with transaction.atomic():
                        Container.objects.filter(pk=container.pk).update(tracking_code=code)
                except IntegrityError:
                    logger.warning(
                        "shipman.tracking.code_collision",
                        extra={"container_id": container.pk, "attempt": attempt},
                    )
                    continue
                container.tracking_code = code
                event, _ = _upsert(container, None, CODE_ISSUED_STATUS, code, '')
                _notify_tracking(container, event)
                logger.info(
                    "shipman.tracking.code_issued",
                    extra={"container_id": container.pk, "tracking_code": code},
                )
                return code

        raise ShipmanError(
            'VALIDATION_ERROR',
            'Não foi possível gerar um código de rastreio único',
            container_id=container_id,
            attempts=MAX_CODE_ATTEMPTS,
        )

    @classmethod
    def issue_missing_codes(cls) -> int:
        """
        Issue tracking codes to every live container still without one.

        Returns:
            Number of codes issued

        Concurrency:
            - Processes TRACKING_BATCH_SIZE rows per transaction
            - Uses select_for_update() with SKIP LOCKED
            - Safe for multiple instances
        """
        total = 0
        batch_size = shipman_settings.TRACKING_BATCH_SIZE

        while True:
            with transaction.atomic():
                batch_ids = list(
                    Container.objects.select_for_update(skip_locked=True)
                    .missing_tracking_code()
                    .order_by('pk')
                    .values_list('pk', flat=True)[:batch_size]
                )

                if not batch_ids:
                    break

                for container_id in batch_ids:
                    cls.issue_tracking_code(container_id)
                total += len(batch_ids)

        if total:
            logger.info(
                "shipman.tracking.codes_issued",
                extra={"issued": total},
            )
        return total

    @classmethod
    def assign_tracking_code(cls, container_id, actor, code) -> Container:
        """
        Assign a manual TY number to a container.

        Sets Container.tracking_code and metadata['tracking_code'] and
        records a "TY Number Assigned" event when that key is new.

        Raises:
            ShipmanError('VALIDATION_ERROR'): Empty code or code in use
            ShipmanError('NOT_FOUND'): Unknown container
        """
        code = str(code or '').strip()
        if not code:
            raise ShipmanError('VALIDATION_ERROR', 'Número TY obrigatório', field='tracking_code')
        if len(code) > 150:
            raise ShipmanError('VALIDATION_ERROR', field='tracking_code', max_length=150)

        with transaction.atomic():
            container = lock_container(container_id)
            taken = Container.objects.filter(tracking_code=code).exclude(pk=container.pk).exists()
            if taken:
                raise ShipmanError(
                    'VALIDATION_ERROR',
                    'Código de rastreio já em uso',
                    field='tracking_code',
                    value=code,
                )

            container.tracking_code = code
            container.metadata = {**(container.metadata or {}), 'tracking_code': code}
            container.save(update_fields=['tracking_code', 'metadata', 'updated_at'])

            created = False
            if not TrackingEvent.objects.for_key(container.pk, code).exists():
                event = TrackingEvent.objects.create(
                    container=container,
                    tracking_code=code,
                    status=TY_ASSIGNED_STATUS,
                    created_by=actor,
                )
                created = True
                _notify_tracking(container, event)

        logger.info(
            "shipman.tracking.ty_assigned",
            extra={"container_id": container.pk, "tracking_code": code, "event_created": created},
        )
        return container
