"""
Enums for Shipman models.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class RequestStatus(models.TextChoices):
    """CapacityRequest lifecycle (owned by the request component)."""
    PENDING = 'pending', _('Pendente')
    ACCEPTED = 'accepted', _('Aceita')
    REJECTED = 'rejected', _('Rejeitada')
    COMPLETED = 'completed', _('Concluída')


class PlanStatus(models.TextChoices):
    """Administrative review of a plan. Does not gate container flow."""
    SUBMITTED = 'submitted', _('Enviado')
    APPROVED = 'approved', _('Aprovado')
    REJECTED = 'rejected', _('Rejeitado')


class QcStatus(models.TextChoices):
    """
    Internal QC stage of a container.

    pending → arrived → qc_submitted → approved
                                    ↘ held → (resolution)

    REJECTED is terminal and only reachable through hold resolution.
    """
    PENDING = 'pending', _('Aguardando chegada')
    ARRIVED = 'arrived', _('Chegou')
    QC_SUBMITTED = 'qc_submitted', _('Inspecionado')
    APPROVED = 'approved', _('Aprovado')
    HELD = 'held', _('Retido')
    REJECTED = 'rejected', _('Rejeitado')


class ResolutionAction(models.TextChoices):
    """Decision taken on a held container."""
    RELEASE_HOLD = 'release_hold', _('Liberar retenção')
    REQUEST_REINSPECTION = 'request_reinspection', _('Solicitar reinspeção')
    REJECT_CONTAINER = 'reject_container', _('Rejeitar contêiner')


class MetadataStatus(models.TextChoices):
    """Review state of supplier/admin metadata blobs."""
    EMPTY = 'empty', _('Vazio')
    SUBMITTED = 'submitted', _('Enviado')
    APPROVED = 'approved', _('Aprovado')
    REJECTED = 'rejected', _('Rejeitado')
