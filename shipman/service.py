"""
Ship Service: the single public interface for shipment operations.

Usage:
    from shipman import ship, ShipmanError

    plan = ship.allocate(request.pk, farmer, date(2025, 1, 10), 3)
    ship.quota(request.pk)               # QuotaSummary(used=3, remaining=2, total=5)
    ship.mark_arrived(license, c.pk, now, 'Sohar')
    ship.start_inspection(license, c.pk, {'actual_carton_count': 1200})
    ship.clear(license, c.pk)
    ship.submit_report(external_license, c.pk, actual_quantity=1200)
"""

from shipman.services.allocation import PlanAllocation
from shipman.services.capacity import CapacityLedger
from shipman.services.external import ExternalConfirmation
from shipman.services.files import ContainerFiles
from shipman.services.metadata import ContainerMetadata
from shipman.services.qc import QcTransitions
from shipman.services.resolutions import HoldResolutions
from shipman.services.tracking import TrackingLedger


class Ship(
    CapacityLedger,
    PlanAllocation,
    QcTransitions,
    HoldResolutions,
    ExternalConfirmation,
    TrackingLedger,
    ContainerFiles,
    ContainerMetadata,
):
    """
    Single interface for all shipment operations.

    Parameter convention: (actor or license, target id, ...)

    IMPORTANT: All state-changing methods use atomic transactions with
    row locks on the CapacityRequest (allocation) or the Container
    (everything else). Notifications are sent after commit.
    """
