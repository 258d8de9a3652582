"""
Plan allocation: dated plans carved out of a request's container quota.

All writes run under the CapacityRequest row lock, so concurrent
suppliers allocating against the same request are serialized and the
quota can never be overdrawn.
"""

import logging
from dataclasses import dataclass

from django.db import transaction
from django.db.models import Prefetch

from shipman.exceptions import ShipmanError
from shipman.models.container import Container
from shipman.models.enums import PlanStatus, QcStatus, RequestStatus
from shipman.models.plan import Plan
from shipman.models.request import CapacityRequest
from shipman.payloads import parse_plan_date
from shipman.services.capacity import count_used, summarize
from shipman.signals import first_plan_created

logger = logging.getLogger('shipman')

CLOSED_REQUEST_STATUSES = (RequestStatus.REJECTED, RequestStatus.COMPLETED)


@dataclass(frozen=True)
class PlanListing:
    """Plans of a request with its quota position."""

    plans: list[Plan]
    used: int
    remaining: int
    total: int


def _validate_count(container_count) -> int:
    if isinstance(container_count, bool) or not isinstance(container_count, int):
        raise ShipmanError('VALIDATION_ERROR', field='container_count', value=str(container_count))
    if container_count <= 0:
        raise ShipmanError(
            'VALIDATION_ERROR',
            'Quantidade de contêineres deve ser positiva',
            field='container_count',
            value=container_count,
        )
    return container_count


def _plans_with_containers():
    return Plan.objects.prefetch_related(
        Prefetch(
            'containers',
            queryset=Container.objects.order_by('container_no').prefetch_related('files'),
        )
    )


class PlanAllocation:
    """Plan allocation methods."""

    @classmethod
    def allocate(cls, request_id, actor, plan_date, container_count: int) -> Plan:
        """
        Create (or replace) the plan of a request for a given date.

        An existing plan on the same date is replaced while all of its
        containers are still pending. The quota check counts every
        container of the request, the replaced plan included.

        Args:
            request_id: CapacityRequest pk
            actor: Supplier user creating the plan
            plan_date: date or 'YYYY-MM-DD'
            container_count: Containers to allocate (> 0)

        Returns:
            Plan with containers prefetched. Containers fetched through
            plan.containers also prefetch files; reload a container
            before reading files attached later.

        Raises:
            ShipmanError('VALIDATION_ERROR'): Bad date or count
            ShipmanError('NOT_FOUND'): Request doesn't exist
            ShipmanError('INVALID_STATE'): Request rejected or completed
            ShipmanError('OUT_OF_WINDOW'): Date outside delivery window
            ShipmanError('QUOTA_EXCEEDED'): Not enough remaining quota
            ShipmanError('PLAN_LOCKED'): Existing plan already in QC
        """
        plan_date = parse_plan_date(plan_date)
        container_count = _validate_count(container_count)

        with transaction.atomic():
            try:
                request = CapacityRequest.objects.select_for_update().get(pk=request_id)
            except CapacityRequest.DoesNotExist:
                raise ShipmanError('NOT_FOUND', entity='capacity_request', request_id=request_id) from None

            if request.status in CLOSED_REQUEST_STATUSES:
                raise ShipmanError('INVALID_STATE', request_id=request.pk, status=request.status)

            if not request.accepts_date(plan_date):
                raise ShipmanError(
                    'OUT_OF_WINDOW',
                    plan_date=plan_date,
                    start=request.start_date,
                    end=request.end_date or request.deadline_date,
                )

            used = count_used(request.pk)
            total = request.container_amount or 0
            if container_count > total - used:
                raise ShipmanError(
                    'QUOTA_EXCEEDED',
                    used=used,
                    total=total,
                    requested=container_count,
                )

            first_for_actor = not Plan.objects.filter(request=request, created_by=actor).exists()

            existing = Plan.objects.filter(request=request, plan_date=plan_date).first()
            if existing is not None:
                started = existing.containers.exclude(qc_status=QcStatus.PENDING).count()
                if started:
                    raise ShipmanError(
                        'PLAN_LOCKED',
                        plan_id=existing.pk,
                        plan_date=plan_date,
                        started=started,
                    )
                replaced_id = existing.pk
                existing.delete()
                logger.info(
                    "shipman.plan.replaced",
                    extra={"request_id": request.pk, "plan_id": replaced_id, "plan_date": plan_date.isoformat()},
                )

            plan = Plan.objects.create(
                request=request,
                plan_date=plan_date,
                status=PlanStatus.SUBMITTED,
                created_by=actor,
            )
            Container.objects.bulk_create([
                Container(
                    plan=plan,
                    request=request,
                    container_no=n,
                    supplier=actor,
                    qc_status=QcStatus.PENDING,
                )
                for n in range(1, container_count + 1)
            ])

            if first_for_actor:
                first_plan_created.send(sender=Plan, request=request, plan=plan, actor=actor)

            logger.info(
                "shipman.plan.allocated",
                extra={
                    "request_id": request.pk,
                    "plan_id": plan.pk,
                    "plan_date": plan_date.isoformat(),
                    "containers": container_count,
                    "total": total,
                },
            )

        return _plans_with_containers().get(pk=plan.pk)

    @classmethod
    def list_with_quota(cls, request_id) -> PlanListing:
        """
        Plans of a request ordered by date, with quota totals.

        Raises:
            ShipmanError('NOT_FOUND'): If the request doesn't exist
        """
        try:
            request = CapacityRequest.objects.get(pk=request_id)
        except CapacityRequest.DoesNotExist:
            raise ShipmanError('NOT_FOUND', entity='capacity_request', request_id=request_id) from None

        plans = list(_plans_with_containers().filter(request=request).order_by('plan_date'))
        used = sum(len(p.containers.all()) for p in plans)
        quota = summarize(request, used=used)
        return PlanListing(plans=plans, used=quota.used, remaining=quota.remaining, total=quota.total)
