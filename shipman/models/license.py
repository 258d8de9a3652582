"""
QcLicense model: officer credential bound to a country.
"""

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class QcLicense(models.Model):
    """
    License key assigned to an internal or external QC officer.

    The country_code decides which containers the officer may act on
    (see shipman.countries). Issuing and revoking licenses happens
    outside Shipman.
    """

    key = models.CharField(
        max_length=64,
        unique=True,
        verbose_name=_('Chave'),
    )
    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='qc_licenses',
        verbose_name=_('Atribuída a'),
    )
    country_code = models.CharField(
        max_length=2,
        blank=True,
        default='',
        verbose_name=_('Código do País'),
    )
    is_active = models.BooleanField(default=True, verbose_name=_('Ativa'))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Licença de QC')
        verbose_name_plural = _('Licenças de QC')
        ordering = ['-created_at']

    def __str__(self) -> str:
        state = '' if self.is_active else ' (inativa)'
        return f"{self.key} [{self.country_code or '?'}]{state}"
