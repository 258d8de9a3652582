"""
ExternalQcReport model: one corroborating report per approved container.
"""

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class ExternalQcReport(models.Model):
    """
    Report filed by a country-scoped external QC officer.

    Created once per container, never edited afterwards.
    """

    container = models.OneToOneField(
        'shipman.Container',
        on_delete=models.CASCADE,
        related_name='external_report',
        verbose_name=_('Contêiner'),
    )
    qc_license = models.ForeignKey(
        'shipman.QcLicense',
        on_delete=models.PROTECT,
        related_name='external_reports',
        verbose_name=_('Licença'),
    )

    actual_quantity = models.PositiveIntegerField(verbose_name=_('Quantidade Real'))
    quality_condition = models.TextField(blank=True, default='', verbose_name=_('Qualidade'))
    packaging_condition = models.TextField(blank=True, default='', verbose_name=_('Embalagem'))
    discrepancies = models.TextField(blank=True, default='', verbose_name=_('Divergências'))
    attachments = models.JSONField(default=list, blank=True, verbose_name=_('Anexos'))

    confirmed_at = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Confirmado em'))
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Relatório de QC Externo')
        verbose_name_plural = _('Relatórios de QC Externo')
        ordering = ['-confirmed_at']

    def __str__(self) -> str:
        return f"QC externo {self.container_id}: {self.actual_quantity}"
