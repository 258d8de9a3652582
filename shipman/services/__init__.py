"""
Shipment services, one module per concern.

Re-exports the service classes composed by shipman.service.Ship:
    from shipman.services import PlanAllocation, QcTransitions, HoldResolutions
"""

from shipman.services.allocation import PlanAllocation, PlanListing
from shipman.services.capacity import CapacityLedger, QuotaSummary
from shipman.services.external import ExternalConfirmation
from shipman.services.files import ContainerFiles
from shipman.services.metadata import ContainerMetadata
from shipman.services.qc import ContainerListing, QcTransitions
from shipman.services.resolutions import HoldResolutions
from shipman.services.tracking import TrackingLedger, TrackingLookup

__all__ = [
    'CapacityLedger',
    'QuotaSummary',
    'PlanAllocation',
    'PlanListing',
    'QcTransitions',
    'ContainerListing',
    'HoldResolutions',
    'ExternalConfirmation',
    'TrackingLedger',
    'TrackingLookup',
    'ContainerFiles',
    'ContainerMetadata',
]
