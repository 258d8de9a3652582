"""
Container model: the unit that walks the QC state machine.
"""

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from shipman.models.enums import MetadataStatus, QcStatus


class ContainerQuerySet(models.QuerySet):
    """Convenience filters for QC views."""

    def for_country(self, import_country: str):
        """Containers whose request imports into the given country."""
        return self.filter(request__import_country=import_country)

    def visible_to_qc(self, import_country: str):
        """Containers a QC officer of this country may see (accepted requests)."""
        from shipman.models.enums import RequestStatus
        return self.for_country(import_country).filter(
            request__status=RequestStatus.ACCEPTED,
        )

    def awaiting_external_report(self):
        """Approved containers with no external report yet."""
        return self.filter(
            qc_status=QcStatus.APPROVED,
            external_report__isnull=True,
        )

    def missing_tracking_code(self):
        """Live containers that were never given a tracking code."""
        return self.filter(tracking_code__isnull=True).exclude(qc_status=QcStatus.REJECTED)


class Container(models.Model):
    """
    Export container allocated by a Plan.

    QC LIFECYCLE:

        pending ─► arrived ─► qc_submitted ─┬─► approved
                                            └─► held

        held ── release_hold ──────────► approved | qc_submitted
        held ── request_reinspection ──► arrived (inspection cleared)
        held ── reject_container ──────► rejected (terminal)

    Status only moves forward; the only way back is a HoldResolution.
    """

    plan = models.ForeignKey(
        'shipman.Plan',
        on_delete=models.CASCADE,
        related_name='containers',
        verbose_name=_('Plano'),
    )
    # Denormalized for country scoping without joining through Plan
    request = models.ForeignKey(
        'shipman.CapacityRequest',
        on_delete=models.CASCADE,
        related_name='containers',
        verbose_name=_('Solicitação'),
    )
    container_no = models.PositiveIntegerField(verbose_name=_('Número'))
    supplier = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='supplied_containers',
        verbose_name=_('Fornecedor'),
    )

    # QC
    qc_status = models.CharField(
        max_length=20,
        choices=QcStatus.choices,
        default=QcStatus.PENDING,
        db_index=True,
        verbose_name=_('Status de QC'),
    )
    qc_reviewed_by = models.ForeignKey(
        'shipman.QcLicense',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='reviewed_containers',
        verbose_name=_('Última licença de QC'),
    )
    qc_reviewed_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Última ação de QC'))
    qc_arrival_info = models.JSONField(default=dict, blank=True, verbose_name=_('Chegada'))
    qc_inspection_info = models.JSONField(default=dict, blank=True, verbose_name=_('Inspeção'))
    qc_hold_reason = models.CharField(max_length=50, blank=True, default='', verbose_name=_('Motivo da Retenção'))
    qc_hold_details = models.TextField(blank=True, default='', verbose_name=_('Detalhes da Retenção'))

    tracking_code = models.CharField(
        max_length=150,
        unique=True,
        null=True,
        blank=True,
        verbose_name=_('Código de Rastreio'),
    )

    # Supplier metadata, reviewed independently of QC
    metadata = models.JSONField(default=dict, blank=True, verbose_name=_('Metadados'))
    metadata_status = models.CharField(
        max_length=20,
        choices=MetadataStatus.choices,
        default=MetadataStatus.EMPTY,
        verbose_name=_('Status dos Metadados'),
    )
    metadata_review_note = models.TextField(blank=True, default='')
    metadata_reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )
    metadata_reviewed_at = models.DateTimeField(null=True, blank=True)

    # Admin metadata, same review cycle
    admin_metadata = models.JSONField(default=dict, blank=True, verbose_name=_('Metadados do Admin'))
    admin_metadata_status = models.CharField(
        max_length=20,
        choices=MetadataStatus.choices,
        default=MetadataStatus.EMPTY,
        verbose_name=_('Status dos Metadados do Admin'),
    )
    admin_metadata_review_note = models.TextField(blank=True, default='')
    admin_metadata_reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )
    admin_metadata_reviewed_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ContainerQuerySet.as_manager()

    class Meta:
        verbose_name = _('Contêiner')
        verbose_name_plural = _('Contêineres')
        ordering = ['plan', 'container_no']
        constraints = [
            models.UniqueConstraint(
                fields=['plan', 'container_no'],
                name='unique_container_per_plan',
            )
        ]
        indexes = [
            models.Index(fields=['qc_status', 'qc_reviewed_at'], name='shipman_cont_qc_review_idx'),
            models.Index(fields=['request', 'qc_status'], name='shipman_cont_request_qc_idx'),
        ]

    @property
    def has_inspection(self) -> bool:
        """Inspection payload present and non-empty?"""
        return bool(self.qc_inspection_info)

    def __str__(self) -> str:
        code = f" {self.tracking_code}" if self.tracking_code else ""
        return f"#{self.container_no} ({self.get_qc_status_display()}){code}"


class ContainerFile(models.Model):
    """
    File record attached to a container. Storage is external;
    only the reference is kept here.
    """

    container = models.ForeignKey(
        'shipman.Container',
        on_delete=models.CASCADE,
        related_name='files',
        verbose_name=_('Contêiner'),
    )
    file_key = models.CharField(max_length=255, verbose_name=_('Chave'))
    kind = models.CharField(max_length=50, blank=True, default='', verbose_name=_('Tipo'))
    original_name = models.CharField(max_length=255, verbose_name=_('Nome Original'))
    mime_type = models.CharField(max_length=100, blank=True, default='')
    size_bytes = models.PositiveBigIntegerField(default=0)
    path = models.CharField(max_length=500, blank=True, default='')
    status = models.CharField(max_length=20, default='submitted')
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _('Arquivo')
        verbose_name_plural = _('Arquivos')
        ordering = ['created_at']

    def __str__(self) -> str:
        return self.original_name
