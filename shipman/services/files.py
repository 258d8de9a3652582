"""
Container files: references to externally stored uploads.
"""

import logging

from django.db import transaction

from shipman.exceptions import ShipmanError
from shipman.models.container import Container, ContainerFile
from shipman.protocols.notifications import NotificationEvent
from shipman.services.notifications import fan_out, notify_after_commit

logger = logging.getLogger('shipman')


class ContainerFiles:
    """File attachment methods."""

    @classmethod
    def attach_file(cls, container_id, actor, file_key, original_name, mime_type='',
                    size_bytes=0, path='', kind='') -> ContainerFile:
        """
        Record an uploaded file against a container.

        Admins get container_file_uploaded; the buyer and the supplier
        get new_file_upload.

        Raises:
            ShipmanError('VALIDATION_ERROR'): Missing key/name or bad size
            ShipmanError('NOT_FOUND'): Unknown container
        """
        file_key = str(file_key or '').strip()
        original_name = str(original_name or '').strip()
        if not file_key:
            raise ShipmanError('VALIDATION_ERROR', field='file_key')
        if not original_name:
            raise ShipmanError('VALIDATION_ERROR', field='original_name')
        try:
            size_bytes = int(size_bytes or 0)
        except (TypeError, ValueError):
            raise ShipmanError('VALIDATION_ERROR', field='size_bytes', value=str(size_bytes)) from None
        if size_bytes < 0:
            raise ShipmanError('VALIDATION_ERROR', field='size_bytes', value=size_bytes)

        try:
            container = Container.objects.select_related('request').get(pk=container_id)
        except (Container.DoesNotExist, ValueError, TypeError):
            raise ShipmanError('NOT_FOUND', entity='container', container_id=container_id) from None

        with transaction.atomic():
            record = ContainerFile.objects.create(
                container=container,
                file_key=file_key,
                original_name=original_name,
                mime_type=mime_type or '',
                size_bytes=size_bytes,
                path=path or '',
                kind=kind or '',
                uploaded_by=actor,
            )

            payload = {
                'container_id': container.pk,
                'container_no': container.container_no,
                'file_id': record.pk,
                'original_name': original_name,
                'kind': record.kind,
            }
            notify_after_commit(
                fan_out(NotificationEvent.CONTAINER_FILE_UPLOADED, container.pk, payload)
                + fan_out(
                    NotificationEvent.NEW_FILE_UPLOAD,
                    container.pk,
                    payload,
                    container.request.buyer_id,
                    container.supplier_id,
                    admins=False,
                )
            )

        logger.info(
            "shipman.file.attached",
            extra={"container_id": container.pk, "file_id": record.pk, "kind": record.kind},
        )
        return record
