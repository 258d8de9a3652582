"""
Shipman configuration.

Usage in settings.py:
    SHIPMAN = {
        "NOTIFICATION_SINK": "notifications.adapters.DatabaseNotificationSink",
        "QC_COUNTRIES": {"OM": "Oman", "QA": "Qatar", "BA": "Bahrain"},
        "DEFAULT_PAGE_SIZE": 20,
        "NOTIFY_GROUPS": ["admin", "manager"],
    }
"""

from dataclasses import dataclass, field
from typing import Any

from django.conf import settings


def _default_countries() -> dict[str, str]:
    return {"OM": "Oman", "QA": "Qatar", "BA": "Bahrain"}


def _default_prefixes() -> dict[str, str]:
    return {"Qatar": "Q12-", "Oman": "O12-", "Bahrain": "B12-"}


@dataclass
class ShipmanSettings:
    """Shipman configuration settings."""

    # Notification sink backend (dotted path)
    NOTIFICATION_SINK: str = "shipman.adapters.noop.NoopNotificationSink"

    # License country code -> CapacityRequest.import_country
    QC_COUNTRIES: dict[str, str] = field(default_factory=_default_countries)

    # Import country -> tracking code prefix
    TRACKING_CODE_PREFIXES: dict[str, str] = field(default_factory=_default_prefixes)
    TRACKING_CODE_FALLBACK_PREFIX: str = "X12-"
    TRACKING_CODE_LENGTH: int = 6

    # Pagination for QC listings
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100

    # Group names whose active members receive admin notifications
    NOTIFY_GROUPS: list[str] = field(default_factory=lambda: ["admin", "manager"])

    # Batch size for issue_tracking_codes processing
    TRACKING_BATCH_SIZE: int = 200


def get_shipman_settings() -> ShipmanSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "SHIPMAN", {})
    return ShipmanSettings(**{
        k: v for k, v in user_settings.items()
        if k in ShipmanSettings.__dataclass_fields__
    })


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_shipman_settings(), name)


shipman_settings = _LazySettings()
