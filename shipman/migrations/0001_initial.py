"""
Initial migration for Shipman models.
"""

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


QC_STATUS_CHOICES = [
    ('pending', 'Aguardando chegada'),
    ('arrived', 'Chegou'),
    ('qc_submitted', 'Inspecionado'),
    ('approved', 'Aprovado'),
    ('held', 'Retido'),
    ('rejected', 'Rejeitado'),
]

METADATA_STATUS_CHOICES = [
    ('empty', 'Vazio'),
    ('submitted', 'Enviado'),
    ('approved', 'Aprovado'),
    ('rejected', 'Rejeitado'),
]


class Migration(migrations.Migration):
    """Create Shipman models: requests, licenses, plans, containers, QC logs, tracking."""

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='CapacityRequest',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('container_amount', models.PositiveIntegerField(default=0, verbose_name='Cota de Contêineres')),
                ('start_date', models.DateField(blank=True, null=True, verbose_name='Início da Entrega')),
                ('end_date', models.DateField(blank=True, null=True, verbose_name='Fim da Entrega')),
                ('deadline_date', models.DateField(blank=True, help_text='Janela antiga de data única', null=True, verbose_name='Prazo Final')),
                ('import_country', models.CharField(db_index=True, max_length=100, verbose_name='País de Importação')),
                ('entry_border', models.CharField(blank=True, default='', max_length=100, verbose_name='Fronteira de Entrada')),
                ('exit_border', models.CharField(blank=True, default='', max_length=100, verbose_name='Fronteira de Saída')),
                ('transport_type', models.CharField(blank=True, default='', max_length=50, verbose_name='Transporte')),
                ('product_type', models.CharField(blank=True, default='', max_length=100, verbose_name='Produto')),
                ('description', models.TextField(blank=True, default='', verbose_name='Descrição')),
                ('preferred_supplier_name', models.CharField(blank=True, default='', max_length=200, verbose_name='Nome do Fornecedor')),
                ('status', models.CharField(choices=[('pending', 'Pendente'), ('accepted', 'Aceita'), ('rejected', 'Rejeitada'), ('completed', 'Concluída')], db_index=True, default='pending', max_length=20, verbose_name='Status')),
                ('first_plan_at', models.DateTimeField(blank=True, help_text='Marcado quando o fornecedor cria o primeiro plano', null=True, verbose_name='Primeiro Plano em')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('buyer', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='capacity_requests', to=settings.AUTH_USER_MODEL, verbose_name='Comprador')),
                ('preferred_supplier', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='preferred_requests', to=settings.AUTH_USER_MODEL, verbose_name='Fornecedor Preferido')),
            ],
            options={
                'verbose_name': 'Solicitação de Capacidade',
                'verbose_name_plural': 'Solicitações de Capacidade',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='QcLicense',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('key', models.CharField(max_length=64, unique=True, verbose_name='Chave')),
                ('country_code', models.CharField(blank=True, default='', max_length=2, verbose_name='Código do País')),
                ('is_active', models.BooleanField(default=True, verbose_name='Ativa')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('assigned_to', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='qc_licenses', to=settings.AUTH_USER_MODEL, verbose_name='Atribuída a')),
            ],
            options={
                'verbose_name': 'Licença de QC',
                'verbose_name_plural': 'Licenças de QC',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='Plan',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('plan_date', models.DateField(db_index=True, verbose_name='Data do Plano')),
                ('status', models.CharField(choices=[('submitted', 'Enviado'), ('approved', 'Aprovado'), ('rejected', 'Rejeitado')], default='submitted', max_length=20, verbose_name='Status')),
                ('reviewed_at', models.DateTimeField(blank=True, null=True, verbose_name='Revisado em')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='shipman_plans', to=settings.AUTH_USER_MODEL, verbose_name='Criado por')),
                ('request', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='plans', to='shipman.capacityrequest', verbose_name='Solicitação')),
                ('reviewed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Revisado por')),
            ],
            options={
                'verbose_name': 'Plano',
                'verbose_name_plural': 'Planos',
                'ordering': ['plan_date'],
                'constraints': [models.UniqueConstraint(fields=('request', 'plan_date'), name='unique_plan_per_request_date')],
            },
        ),
        migrations.CreateModel(
            name='Container',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('container_no', models.PositiveIntegerField(verbose_name='Número')),
                ('qc_status', models.CharField(choices=QC_STATUS_CHOICES, db_index=True, default='pending', max_length=20, verbose_name='Status de QC')),
                ('qc_reviewed_at', models.DateTimeField(blank=True, null=True, verbose_name='Última ação de QC')),
                ('qc_arrival_info', models.JSONField(blank=True, default=dict, verbose_name='Chegada')),
                ('qc_inspection_info', models.JSONField(blank=True, default=dict, verbose_name='Inspeção')),
                ('qc_hold_reason', models.CharField(blank=True, default='', max_length=50, verbose_name='Motivo da Retenção')),
                ('qc_hold_details', models.TextField(blank=True, default='', verbose_name='Detalhes da Retenção')),
                ('tracking_code', models.CharField(blank=True, max_length=150, null=True, unique=True, verbose_name='Código de Rastreio')),
                ('metadata', models.JSONField(blank=True, default=dict, verbose_name='Metadados')),
                ('metadata_status', models.CharField(choices=METADATA_STATUS_CHOICES, default='empty', max_length=20, verbose_name='Status dos Metadados')),
                ('metadata_review_note', models.TextField(blank=True, default='')),
                ('metadata_reviewed_at', models.DateTimeField(blank=True, null=True)),
                ('admin_metadata', models.JSONField(blank=True, default=dict, verbose_name='Metadados do Admin')),
                ('admin_metadata_status', models.CharField(choices=METADATA_STATUS_CHOICES, default='empty', max_length=20, verbose_name='Status dos Metadados do Admin')),
                ('admin_metadata_review_note', models.TextField(blank=True, default='')),
                ('admin_metadata_reviewed_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('admin_metadata_reviewed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('metadata_reviewed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('plan', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='containers', to='shipman.plan', verbose_name='Plano')),
                ('qc_reviewed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='reviewed_containers', to='shipman.qclicense', verbose_name='Última licença de QC')),
                ('request', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='containers', to='shipman.capacityrequest', verbose_name='Solicitação')),
                ('supplier', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='supplied_containers', to=settings.AUTH_USER_MODEL, verbose_name='Fornecedor')),
            ],
            options={
                'verbose_name': 'Contêiner',
                'verbose_name_plural': 'Contêineres',
                'ordering': ['plan', 'container_no'],
                'indexes': [
                    models.Index(fields=['qc_status', 'qc_reviewed_at'], name='shipman_cont_qc_review_idx'),
                    models.Index(fields=['request', 'qc_status'], name='shipman_cont_request_qc_idx'),
                ],
                'constraints': [models.UniqueConstraint(fields=('plan', 'container_no'), name='unique_container_per_plan')],
            },
        ),
        migrations.CreateModel(
            name='ContainerFile',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('file_key', models.CharField(max_length=255, verbose_name='Chave')),
                ('kind', models.CharField(blank=True, default='', max_length=50, verbose_name='Tipo')),
                ('original_name', models.CharField(max_length=255, verbose_name='Nome Original')),
                ('mime_type', models.CharField(blank=True, default='', max_length=100)),
                ('size_bytes', models.PositiveBigIntegerField(default=0)),
                ('path', models.CharField(blank=True, default='', max_length=500)),
                ('status', models.CharField(default='submitted', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('container', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='files', to='shipman.container', verbose_name='Contêiner')),
                ('uploaded_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Arquivo',
                'verbose_name_plural': 'Arquivos',
                'ordering': ['created_at'],
            },
        ),
        migrations.CreateModel(
            name='ExternalQcReport',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('actual_quantity', models.PositiveIntegerField(verbose_name='Quantidade Real')),
                ('quality_condition', models.TextField(blank=True, default='', verbose_name='Qualidade')),
                ('packaging_condition', models.TextField(blank=True, default='', verbose_name='Embalagem')),
                ('discrepancies', models.TextField(blank=True, default='', verbose_name='Divergências')),
                ('attachments', models.JSONField(blank=True, default=list, verbose_name='Anexos')),
                ('confirmed_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Confirmado em')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('container', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='external_report', to='shipman.container', verbose_name='Contêiner')),
                ('qc_license', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='external_reports', to='shipman.qclicense', verbose_name='Licença')),
            ],
            options={
                'verbose_name': 'Relatório de QC Externo',
                'verbose_name_plural': 'Relatórios de QC Externo',
                'ordering': ['-confirmed_at'],
            },
        ),
        migrations.CreateModel(
            name='HoldResolution',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('previous_qc_status', models.CharField(choices=QC_STATUS_CHOICES, max_length=20, verbose_name='Status Anterior')),
                ('resolution_action', models.CharField(choices=[('release_hold', 'Liberar retenção'), ('request_reinspection', 'Solicitar reinspeção'), ('reject_container', 'Rejeitar contêiner')], db_index=True, max_length=30, verbose_name='Ação')),
                ('resolution_note', models.TextField(blank=True, default='', verbose_name='Observação')),
                ('send_back_to_qc', models.BooleanField(default=False, verbose_name='Reenviar ao QC')),
                ('resolved_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Resolvido em')),
                ('container', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='hold_resolutions', to='shipman.container', verbose_name='Contêiner')),
                ('resolved_by', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='hold_resolutions', to='shipman.qclicense', verbose_name='Resolvido por')),
            ],
            options={
                'verbose_name': 'Resolução de Retenção',
                'verbose_name_plural': 'Resoluções de Retenção',
                'ordering': ['resolved_at'],
            },
        ),
        migrations.CreateModel(
            name='TrackingEvent',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('tracking_code', models.CharField(blank=True, db_index=True, max_length=150, null=True, verbose_name='Código de Rastreio')),
                ('status', models.CharField(max_length=100, verbose_name='Status')),
                ('note', models.TextField(blank=True, default='', verbose_name='Observação')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('container', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='tracking_events', to='shipman.container', verbose_name='Contêiner')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Criado por')),
            ],
            options={
                'verbose_name': 'Evento de Rastreio',
                'verbose_name_plural': 'Eventos de Rastreio',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['container', 'created_at'], name='shipman_track_cont_idx'),
                    models.Index(fields=['status', 'created_at'], name='shipman_track_status_idx'),
                ],
                'constraints': [models.UniqueConstraint(fields=('container', 'tracking_code'), name='unique_container_tracking')],
            },
        ),
    ]
