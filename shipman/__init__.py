"""
Django Shipman: Export container allocation and QC engine.

Capacity requests become dated plans, plans become numbered containers,
containers walk the QC state machine.

Uso:
    from shipman import ship, ShipmanError

    plan = ship.allocate(request.pk, farmer, '2025-01-10', 3)
    ship.mark_arrived(license, container.pk, arrived_at, 'Bandar Abbas')
    ship.quota(request.pk)  # QuotaSummary(used=3, remaining=2, total=5)
"""


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'ship':
        from shipman.service import Ship
        return Ship
    elif name == 'ShipmanError':
        from shipman.exceptions import ShipmanError
        return ShipmanError
    elif name == 'CapacityRequest':
        from shipman.models.request import CapacityRequest
        return CapacityRequest
    elif name == 'QcLicense':
        from shipman.models.license import QcLicense
        return QcLicense
    elif name == 'Plan':
        from shipman.models.plan import Plan
        return Plan
    elif name == 'Container':
        from shipman.models.container import Container
        return Container
    elif name == 'ExternalQcReport':
        from shipman.models.report import ExternalQcReport
        return ExternalQcReport
    elif name == 'HoldResolution':
        from shipman.models.resolution import HoldResolution
        return HoldResolution
    elif name == 'TrackingEvent':
        from shipman.models.tracking import TrackingEvent
        return TrackingEvent
    elif name == 'QcStatus':
        from shipman.models.enums import QcStatus
        return QcStatus
    elif name == 'ResolutionAction':
        from shipman.models.enums import ResolutionAction
        return ResolutionAction
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'ship',
    'ShipmanError',
    'CapacityRequest',
    'QcLicense',
    'Plan',
    'Container',
    'ExternalQcReport',
    'HoldResolution',
    'TrackingEvent',
    'QcStatus',
    'ResolutionAction',
]

__version__ = '0.1.0'
