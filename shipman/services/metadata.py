"""
Container metadata: supplier and admin blobs with their own review cycle.

The two blobs are independent. `admin=True` selects the admin blob on
both submit and review.
"""

import logging

from django.db import transaction
from django.utils import timezone

from shipman.exceptions import ShipmanError
from shipman.models.container import Container
from shipman.models.enums import MetadataStatus
from shipman.services.qc import lock_container

logger = logging.getLogger('shipman')

REVIEW_OUTCOMES = (MetadataStatus.APPROVED, MetadataStatus.REJECTED)


def _fields(admin: bool) -> dict[str, str]:
    prefix = 'admin_metadata' if admin else 'metadata'
    return {
        'data': prefix,
        'status': f'{prefix}_status',
        'note': f'{prefix}_review_note',
        'by': f'{prefix}_reviewed_by',
        'at': f'{prefix}_reviewed_at',
    }


class ContainerMetadata:
    """Metadata submission and review methods."""

    @classmethod
    def submit_metadata(cls, container_id, actor, metadata, admin=False) -> Container:
        """
        Replace the metadata blob and reset it to submitted.

        Suppliers may only write their own containers' metadata.

        Raises:
            ShipmanError('VALIDATION_ERROR'): metadata is not a dict
            ShipmanError('NOT_FOUND'): Unknown container
            ShipmanError('ACCESS_DENIED'): Actor is not the supplier
        """
        if not isinstance(metadata, dict):
            raise ShipmanError('VALIDATION_ERROR', 'Metadados devem ser um objeto', field='metadata')
        f = _fields(admin)

        with transaction.atomic():
            container = lock_container(container_id)
            if not admin and container.supplier_id != getattr(actor, 'pk', None):
                raise ShipmanError(
                    'ACCESS_DENIED',
                    'Somente o fornecedor pode enviar metadados',
                    container_id=container.pk,
                )

            data = dict(metadata)
            # Manual TY number lives in the supplier blob too
            if not admin and container.tracking_code and 'tracking_code' in container.metadata:
                data.setdefault('tracking_code', container.metadata['tracking_code'])

            setattr(container, f['data'], data)
            setattr(container, f['status'], MetadataStatus.SUBMITTED)
            setattr(container, f['note'], '')
            setattr(container, f['by'], None)
            setattr(container, f['at'], None)
            container.save(update_fields=[*f.values(), 'updated_at'])

        logger.info(
            "shipman.metadata.submitted",
            extra={"container_id": container.pk, "admin": bool(admin), "keys": sorted(data)},
        )
        return container

    @classmethod
    def review_metadata(cls, container_id, reviewer, status, note='', admin=False) -> Container:
        """
        Approve or reject a submitted blob.

        Raises:
            ShipmanError('VALIDATION_ERROR'): status not approved/rejected
            ShipmanError('NOT_FOUND'): Unknown container
            ShipmanError('INVALID_STATE'): Nothing submitted to review
        """
        if status not in REVIEW_OUTCOMES:
            raise ShipmanError(
                'VALIDATION_ERROR',
                field='status',
                value=str(status),
                allowed=[str(s) for s in REVIEW_OUTCOMES],
            )
        f = _fields(admin)

        with transaction.atomic():
            container = lock_container(container_id)
            current = getattr(container, f['status'])
            if current == MetadataStatus.EMPTY:
                raise ShipmanError('INVALID_STATE', container_id=container.pk, current=current)

            setattr(container, f['status'], status)
            setattr(container, f['note'], note or '')
            setattr(container, f['by'], reviewer)
            setattr(container, f['at'], timezone.now())
            container.save(update_fields=[f['status'], f['note'], f['by'], f['at'], 'updated_at'])

        logger.info(
            "shipman.metadata.reviewed",
            extra={"container_id": container.pk, "admin": bool(admin), "status": status},
        )
        return container
