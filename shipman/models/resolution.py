"""
HoldResolution model: immutable log of decisions on held containers.
"""

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from shipman.models.enums import QcStatus, ResolutionAction


class HoldResolution(models.Model):
    """
    One row per resolution of a held container.

    Rules:
    - NEVER update() or delete()
    - previous_qc_status snapshots the status before the decision
    """

    container = models.ForeignKey(
        'shipman.Container',
        on_delete=models.CASCADE,
        related_name='hold_resolutions',
        verbose_name=_('Contêiner'),
    )
    previous_qc_status = models.CharField(
        max_length=20,
        choices=QcStatus.choices,
        verbose_name=_('Status Anterior'),
    )
    resolution_action = models.CharField(
        max_length=30,
        choices=ResolutionAction.choices,
        db_index=True,
        verbose_name=_('Ação'),
    )
    resolution_note = models.TextField(blank=True, default='', verbose_name=_('Observação'))
    resolved_by = models.ForeignKey(
        'shipman.QcLicense',
        on_delete=models.PROTECT,
        related_name='hold_resolutions',
        verbose_name=_('Resolvido por'),
    )
    send_back_to_qc = models.BooleanField(default=False, verbose_name=_('Reenviar ao QC'))
    resolved_at = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Resolvido em'))

    class Meta:
        verbose_name = _('Resolução de Retenção')
        verbose_name_plural = _('Resoluções de Retenção')
        ordering = ['resolved_at']

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValueError(
                "Resoluções são imutáveis. "
                "Para registrar nova decisão, crie outra resolução."
            )
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError("Resoluções são imutáveis e não podem ser removidas.")

    def __str__(self) -> str:
        return f"{self.get_resolution_action_display()} ({self.previous_qc_status})"
