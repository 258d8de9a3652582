"""
Capacity ledger: used and remaining containers of a request.

Computed by live aggregation. Callers that write must hold the
CapacityRequest row lock (see PlanAllocation.allocate).
"""

from dataclasses import dataclass

from shipman.exceptions import ShipmanError
from shipman.models.container import Container
from shipman.models.request import CapacityRequest


@dataclass(frozen=True)
class QuotaSummary:
    """Quota position of a request."""

    used: int
    remaining: int
    total: int


def count_used(request_id) -> int:
    """Containers allocated across all plans of the request."""
    return Container.objects.filter(plan__request_id=request_id).count()


def summarize(request: CapacityRequest, used: int | None = None) -> QuotaSummary:
    """Build a QuotaSummary; `used` is recomputed when not given."""
    if used is None:
        used = count_used(request.pk)
    total = request.container_amount or 0
    return QuotaSummary(used=used, remaining=max(0, total - used), total=total)


class CapacityLedger:
    """Read-only quota methods."""

    @classmethod
    def used(cls, request_id) -> int:
        """Number of containers already allocated to the request."""
        return count_used(request_id)

    @classmethod
    def quota(cls, request_id) -> QuotaSummary:
        """
        Used, remaining and total containers of a request.

        Raises:
            ShipmanError('NOT_FOUND'): If the request doesn't exist
        """
        try:
            request = CapacityRequest.objects.get(pk=request_id)
        except CapacityRequest.DoesNotExist:
            raise ShipmanError('NOT_FOUND', entity='capacity_request', request_id=request_id) from None
        return summarize(request)
