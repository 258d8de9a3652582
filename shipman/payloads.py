"""
QC payloads: explicit structs for the JSON blobs stored on Container.

Validated at the write boundary; unknown inspection keys are kept in
`extra` and written back alongside the documented ones.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from shipman.exceptions import ShipmanError


def parse_plan_date(value) -> date:
    """Accept a date or 'YYYY-MM-DD' string."""
    if isinstance(value, datetime):
        raise ShipmanError('VALIDATION_ERROR', 'Data do plano não pode ter horário',
                           field='plan_date', value=str(value))
    if isinstance(value, date):
        return value
    parsed = None
    if isinstance(value, str):
        try:
            parsed = parse_date(value.strip())
        except ValueError:
            parsed = None
    if parsed is None:
        raise ShipmanError('VALIDATION_ERROR', 'Data do plano inválida, use AAAA-MM-DD',
                           field='plan_date', value=str(value))
    return parsed


def _parse_moment(value, field_name: str) -> datetime:
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, str):
        try:
            moment = parse_datetime(value.strip())
        except ValueError:
            moment = None
        if moment is None:
            raise ShipmanError('VALIDATION_ERROR', field=field_name, value=value)
    else:
        raise ShipmanError('VALIDATION_ERROR', field=field_name, value=str(value))
    if timezone.is_naive(moment):
        moment = timezone.make_aware(moment)
    return moment


def _optional_int(payload: dict, key: str) -> int | None:
    value = payload.get(key)
    if value is None:
        return None
    if isinstance(value, bool):
        raise ShipmanError('VALIDATION_ERROR', field=key, value=value)
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ShipmanError('VALIDATION_ERROR', field=key, value=value) from None
    if number < 0:
        raise ShipmanError('VALIDATION_ERROR', field=key, value=value)
    return number


@dataclass(frozen=True)
class ArrivalInfo:
    """Where and when a container reached the QC site."""

    arrived_at: datetime
    place: str

    @classmethod
    def build(cls, arrived_at, place) -> ArrivalInfo:
        if not place or not str(place).strip():
            raise ShipmanError('VALIDATION_ERROR', 'Local de chegada obrigatório', field='arrival_place')
        return cls(
            arrived_at=_parse_moment(arrived_at, 'arrived_at'),
            place=str(place).strip(),
        )

    def as_json(self) -> dict[str, Any]:
        return {
            'arrived_at': self.arrived_at.isoformat(),
            'arrival_place': self.place,
        }


@dataclass(frozen=True)
class InspectionInfo:
    """
    Officer-entered inspection results.

    Documented keys are typed; anything else lands in `extra`.
    """

    actual_carton_count: int | None = None
    sample_size: int | None = None
    carton_condition: str = ''
    product_condition: str = ''
    temperature: str = ''
    notes: str = ''
    photos: tuple[str, ...] = ()
    extra: dict[str, Any] = field(default_factory=dict)

    _KNOWN = (
        'actual_carton_count', 'sample_size', 'carton_condition',
        'product_condition', 'temperature', 'notes', 'photos',
    )
    # Written by the service, never accepted from callers
    _RESERVED = ('inspected_at', 'inspected_by')

    @classmethod
    def from_payload(cls, payload) -> InspectionInfo:
        """
        Validate a caller payload.

        Raises:
            ShipmanError('VALIDATION_ERROR'): not a dict, empty, or bad types
        """
        if not isinstance(payload, dict) or not payload:
            raise ShipmanError('VALIDATION_ERROR', 'Dados de inspeção obrigatórios',
                               field='inspection_data')

        photos = payload.get('photos') or ()
        if isinstance(photos, str) or not isinstance(photos, (list, tuple)):
            raise ShipmanError('VALIDATION_ERROR', field='photos', value=str(photos))

        extra = {
            k: v for k, v in payload.items()
            if k not in cls._KNOWN and k not in cls._RESERVED
        }
        return cls(
            actual_carton_count=_optional_int(payload, 'actual_carton_count'),
            sample_size=_optional_int(payload, 'sample_size'),
            carton_condition=str(payload.get('carton_condition') or ''),
            product_condition=str(payload.get('product_condition') or ''),
            temperature=str(payload.get('temperature') or ''),
            notes=str(payload.get('notes') or ''),
            photos=tuple(str(p) for p in photos),
            extra=extra,
        )

    def as_json(self, inspected_by: int, inspected_at: datetime) -> dict[str, Any]:
        data: dict[str, Any] = dict(self.extra)
        if self.actual_carton_count is not None:
            data['actual_carton_count'] = self.actual_carton_count
        if self.sample_size is not None:
            data['sample_size'] = self.sample_size
        for key in ('carton_condition', 'product_condition', 'temperature', 'notes'):
            value = getattr(self, key)
            if value:
                data[key] = value
        if self.photos:
            data['photos'] = list(self.photos)
        data['inspected_at'] = inspected_at.isoformat()
        data['inspected_by'] = inspected_by
        return data


@dataclass(frozen=True)
class HoldInfo:
    """Reason a container was held."""

    reason: str
    details: str = ''

    MAX_REASON = 50

    @classmethod
    def build(cls, reason, details=None) -> HoldInfo:
        reason = str(reason or '').strip()
        if not reason:
            raise ShipmanError('VALIDATION_ERROR', 'Motivo da retenção obrigatório', field='reason')
        if len(reason) > cls.MAX_REASON:
            raise ShipmanError('VALIDATION_ERROR', field='reason', max_length=cls.MAX_REASON)
        return cls(reason=reason, details=str(details or '').strip())
