"""
QC scope: which containers a license may act on.

A license grants access when it is active, carries a country code, and
that code maps to a known import country. Containers are in scope when
their request imports into that country (and, for internal QC, the
request is accepted).
"""

from dataclasses import dataclass

from shipman.countries import country_for_code
from shipman.exceptions import ShipmanError
from shipman.models.enums import RequestStatus
from shipman.models.license import QcLicense


@dataclass(frozen=True)
class QcScope:
    """Resolved license plus the import country it covers."""

    license: QcLicense
    country_code: str
    import_country: str

    @property
    def license_id(self) -> int:
        return self.license.pk


def resolve_scope(license) -> QcScope:
    """
    Validate a license and resolve its country.

    Args:
        license: QcLicense instance or its pk

    Raises:
        ShipmanError('ACCESS_DENIED'): inactive, missing, no country,
            or unmapped country code
    """
    if not isinstance(license, QcLicense):
        try:
            license = QcLicense.objects.get(pk=license)
        except (QcLicense.DoesNotExist, ValueError, TypeError):
            raise ShipmanError(
                'ACCESS_DENIED', 'Licença de QC não encontrada', license_id=license,
            ) from None

    if not license.is_active:
        raise ShipmanError('ACCESS_DENIED', 'Licença de QC inativa', license_id=license.pk)

    if not license.country_code:
        raise ShipmanError('ACCESS_DENIED', 'Licença de QC sem país', license_id=license.pk)

    import_country = country_for_code(license.country_code)
    if import_country is None:
        raise ShipmanError(
            'ACCESS_DENIED',
            'País da licença de QC não mapeado',
            license_id=license.pk,
            country_code=license.country_code,
        )

    return QcScope(
        license=license,
        country_code=license.country_code.strip().upper(),
        import_country=import_country,
    )


def ensure_in_scope(scope: QcScope, container) -> None:
    """
    Check a container against a resolved scope.

    Raises:
        ShipmanError('ACCESS_DENIED'): country mismatch, or request
            not accepted
    """
    request = container.request
    if request.import_country != scope.import_country:
        raise ShipmanError(
            'ACCESS_DENIED',
            container_id=container.pk,
            import_country=request.import_country,
            license_country=scope.import_country,
        )
    if request.status != RequestStatus.ACCEPTED:
        raise ShipmanError(
            'ACCESS_DENIED',
            'Solicitação ainda não aceita',
            container_id=container.pk,
            request_status=request.status,
        )
