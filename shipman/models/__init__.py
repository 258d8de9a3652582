"""
Shipman Models.

Core models for container allocation and QC:
- CapacityRequest: Buyer quota and delivery window (external, mirrored)
- QcLicense: Officer credential bound to a country (external, mirrored)
- Plan: Dated allocation against a request
- Container: Unit that walks the QC state machine
- ContainerFile: File references attached to a container
- ExternalQcReport: One corroborating report per approved container
- HoldResolution: Immutable log of hold decisions
- TrackingEvent: Human-facing status history
"""

from shipman.models.container import Container, ContainerFile
from shipman.models.enums import (
    MetadataStatus,
    PlanStatus,
    QcStatus,
    RequestStatus,
    ResolutionAction,
)
from shipman.models.license import QcLicense
from shipman.models.plan import Plan
from shipman.models.report import ExternalQcReport
from shipman.models.request import CapacityRequest
from shipman.models.resolution import HoldResolution
from shipman.models.tracking import TrackingEvent

__all__ = [
    'RequestStatus',
    'PlanStatus',
    'QcStatus',
    'ResolutionAction',
    'MetadataStatus',
    'CapacityRequest',
    'QcLicense',
    'Plan',
    'Container',
    'ContainerFile',
    'ExternalQcReport',
    'HoldResolution',
    'TrackingEvent',
]
