"""
CapacityRequest model: buyer demand for containers.
"""

from datetime import date

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from shipman.models.enums import RequestStatus


class CapacityRequest(models.Model):
    """
    Buyer request carrying a container quota and a delivery window.

    Owned by the request component; Shipman reads it, locks it during
    allocation, and only writes the first-plan marker (via signal).

    Window:
        start_date / end_date: inclusive bounds, each optional
        deadline_date: legacy single-date window (plan_date <= deadline)
    """

    buyer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='capacity_requests',
        verbose_name=_('Comprador'),
    )
    container_amount = models.PositiveIntegerField(
        default=0,
        verbose_name=_('Cota de Contêineres'),
    )

    start_date = models.DateField(null=True, blank=True, verbose_name=_('Início da Entrega'))
    end_date = models.DateField(null=True, blank=True, verbose_name=_('Fim da Entrega'))
    deadline_date = models.DateField(
        null=True,
        blank=True,
        verbose_name=_('Prazo Final'),
        help_text=_('Janela antiga de data única'),
    )

    import_country = models.CharField(
        max_length=100,
        db_index=True,
        verbose_name=_('País de Importação'),
    )
    entry_border = models.CharField(max_length=100, blank=True, default='', verbose_name=_('Fronteira de Entrada'))
    exit_border = models.CharField(max_length=100, blank=True, default='', verbose_name=_('Fronteira de Saída'))
    transport_type = models.CharField(max_length=50, blank=True, default='', verbose_name=_('Transporte'))
    product_type = models.CharField(max_length=100, blank=True, default='', verbose_name=_('Produto'))
    description = models.TextField(blank=True, default='', verbose_name=_('Descrição'))

    preferred_supplier = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='preferred_requests',
        verbose_name=_('Fornecedor Preferido'),
    )
    preferred_supplier_name = models.CharField(
        max_length=200,
        blank=True,
        default='',
        verbose_name=_('Nome do Fornecedor'),
    )

    status = models.CharField(
        max_length=20,
        choices=RequestStatus.choices,
        default=RequestStatus.PENDING,
        db_index=True,
        verbose_name=_('Status'),
    )
    first_plan_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_('Primeiro Plano em'),
        help_text=_('Marcado quando o fornecedor cria o primeiro plano'),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Solicitação de Capacidade')
        verbose_name_plural = _('Solicitações de Capacidade')
        ordering = ['-created_at']

    def accepts_date(self, plan_date: date) -> bool:
        """Is plan_date inside the delivery window? Missing bounds are open."""
        if self.start_date is not None and plan_date < self.start_date:
            return False
        if self.end_date is not None and plan_date > self.end_date:
            return False
        if self.deadline_date is not None and plan_date > self.deadline_date:
            return False
        return True

    def __str__(self) -> str:
        return f"#{self.pk} {self.import_country} ({self.container_amount})"
