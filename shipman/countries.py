"""
Country table: isolated, testable, reusable.

Single place that turns a license country code into the import country
stored on CapacityRequest, and an import country into a tracking code
prefix. Both QC and external QC read from here.

Examples:
    - OM → Oman → "O12-"
    - QA → Qatar → "Q12-"
    - BA → Bahrain → "B12-"
    - unknown country → "X12-"
"""

from shipman.conf import shipman_settings


def country_for_code(country_code: str | None) -> str | None:
    """
    Map a license country code to an import country name.

    Args:
        country_code: Two-letter code from QcLicense (case-insensitive)

    Returns:
        Country name, or None if the code is empty or unknown
    """
    if not country_code:
        return None
    return shipman_settings.QC_COUNTRIES.get(country_code.strip().upper())


def tracking_prefix(import_country: str | None) -> str:
    """Tracking code prefix for the import country (fallback for unknown)."""
    prefixes = shipman_settings.TRACKING_CODE_PREFIXES
    if import_country and import_country in prefixes:
        return prefixes[import_country]
    return shipman_settings.TRACKING_CODE_FALLBACK_PREFIX
