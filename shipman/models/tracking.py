"""
TrackingEvent model: human-facing status history per container.
"""

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class TrackingEventQuerySet(models.QuerySet):
    """Convenience filters for tracking lookups."""

    def for_key(self, container_id, tracking_code: str | None):
        """Rows for (container, tracking_code). None is its own key."""
        qs = self.filter(container_id=container_id)
        if tracking_code is None:
            return qs.filter(tracking_code__isnull=True)
        return qs.filter(tracking_code=tracking_code)

    def latest_per_container(self):
        """Newest event of each container."""
        newest = self.filter(
            container_id=models.OuterRef('container_id'),
        ).order_by('-created_at', '-pk').values('pk')[:1]
        return self.filter(pk=models.Subquery(newest))


class TrackingEvent(models.Model):
    """
    Status event for a container ("Loaded", "At border", "TY Number Assigned").

    Keyed by (container, tracking_code): recording the same key again
    updates status/note in place.
    """

    container = models.ForeignKey(
        'shipman.Container',
        on_delete=models.CASCADE,
        related_name='tracking_events',
        verbose_name=_('Contêiner'),
    )
    tracking_code = models.CharField(
        max_length=150,
        null=True,
        blank=True,
        db_index=True,
        verbose_name=_('Código de Rastreio'),
    )
    status = models.CharField(max_length=100, verbose_name=_('Status'))
    note = models.TextField(blank=True, default='', verbose_name=_('Observação'))
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Criado por'),
    )

    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TrackingEventQuerySet.as_manager()

    class Meta:
        verbose_name = _('Evento de Rastreio')
        verbose_name_plural = _('Eventos de Rastreio')
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['container', 'tracking_code'],
                name='unique_container_tracking',
            )
        ]
        indexes = [
            models.Index(fields=['container', 'created_at'], name='shipman_track_cont_idx'),
            models.Index(fields=['status', 'created_at'], name='shipman_track_status_idx'),
        ]

    def __str__(self) -> str:
        code = self.tracking_code or '-'
        return f"{code}: {self.status}"
