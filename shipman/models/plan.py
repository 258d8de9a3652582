"""
Plan model: dated allocation against a capacity request.
"""

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from shipman.models.enums import PlanStatus


class Plan(models.Model):
    """
    Claims part of a CapacityRequest's quota for one calendar date.

    One plan per (request, plan_date). Re-submitting the same date
    replaces the plan and cascades to its containers and files,
    unless QC already started on any of them (see ship.allocate).
    """

    request = models.ForeignKey(
        'shipman.CapacityRequest',
        on_delete=models.CASCADE,
        related_name='plans',
        verbose_name=_('Solicitação'),
    )
    plan_date = models.DateField(
        db_index=True,
        verbose_name=_('Data do Plano'),
    )
    status = models.CharField(
        max_length=20,
        choices=PlanStatus.choices,
        default=PlanStatus.SUBMITTED,
        verbose_name=_('Status'),
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='shipman_plans',
        verbose_name=_('Criado por'),
    )
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Revisado por'),
    )
    reviewed_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Revisado em'))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Plano')
        verbose_name_plural = _('Planos')
        ordering = ['plan_date']
        constraints = [
            models.UniqueConstraint(
                fields=['request', 'plan_date'],
                name='unique_plan_per_request_date',
            )
        ]

    def __str__(self) -> str:
        return f"Plano {self.plan_date} (solicitação #{self.request_id})"
