"""
Shipman Admin.

Provides views for production debugging:
- CapacityRequest / QcLicense: list + edit (owned by other components)
- Plan: read-only with its containers inline
- Container: read-only with "issue tracking codes" action
- ExternalQcReport, HoldResolution, TrackingEvent: read-only audit trail
"""

import logging

from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from shipman.exceptions import ShipmanError
from shipman.models import (
    CapacityRequest,
    Container,
    ExternalQcReport,
    HoldResolution,
    Plan,
    QcLicense,
    TrackingEvent,
)

logger = logging.getLogger(__name__)


class ReadOnlyAdminMixin:
    """State only changes via the ship service."""

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# =========================================================================
# CAPACITY REQUEST / LICENSE ADMIN
# =========================================================================

@admin.register(CapacityRequest)
class CapacityRequestAdmin(admin.ModelAdmin):
    """CapacityRequest admin, with live quota usage."""

    list_display = ['id', 'import_country', 'container_amount', 'used_display',
                    'start_date', 'end_date', 'status', 'first_plan_at']
    list_filter = ['status', 'import_country']
    search_fields = ['import_country', 'preferred_supplier_name', 'description']
    readonly_fields = ['first_plan_at', 'created_at', 'updated_at']
    date_hierarchy = 'created_at'

    @admin.display(description=_('Usados'))
    def used_display(self, obj):
        from shipman import ship
        return ship.used(obj.pk)


@admin.register(QcLicense)
class QcLicenseAdmin(admin.ModelAdmin):
    """QcLicense admin."""

    list_display = ['key', 'assigned_to', 'country_code', 'is_active', 'created_at']
    list_filter = ['is_active', 'country_code']
    search_fields = ['key', 'assigned_to__username']
    readonly_fields = ['created_at', 'updated_at']


# =========================================================================
# PLAN ADMIN (read-only)
# =========================================================================

class ContainerInline(ReadOnlyAdminMixin, admin.TabularInline):
    model = Container
    fields = ['container_no', 'qc_status', 'tracking_code', 'supplier']
    readonly_fields = fields
    extra = 0
    show_change_link = True


@admin.register(Plan)
class PlanAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """Plan admin: read-only. Plans change via ship.allocate."""

    list_display = ['id', 'request', 'plan_date', 'status', 'created_by', 'created_at']
    list_filter = ['status', 'plan_date']
    date_hierarchy = 'plan_date'
    inlines = [ContainerInline]


# =========================================================================
# CONTAINER ADMIN (read-only with tracking action)
# =========================================================================

@admin.register(Container)
class ContainerAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """Container admin: read-only with tracking code action."""

    list_display = ['id', 'container_no', 'plan', 'import_country_display',
                    'qc_status', 'tracking_code', 'qc_reviewed_at']
    list_filter = ['qc_status', 'request__import_country', 'metadata_status']
    search_fields = ['tracking_code', 'container_no']
    list_select_related = ['plan', 'request']
    actions = ['issue_tracking_codes']

    @admin.display(description=_('País'))
    def import_country_display(self, obj):
        return obj.request.import_country

    @admin.action(description=_('Gerar códigos de rastreio'))
    def issue_tracking_codes(self, request, queryset):
        from shipman import ship

        count = 0
        for container in queryset.filter(tracking_code__isnull=True):
            try:
                ship.issue_tracking_code(container.pk)
                count += 1
            except ShipmanError as exc:
                logger.warning("issue_tracking_codes: failed for %s: %s", container.pk, exc)

        self.message_user(request, _('{count} código(s) gerado(s).').format(count=count))


# =========================================================================
# AUDIT TRAIL ADMINS (read-only)
# =========================================================================

@admin.register(ExternalQcReport)
class ExternalQcReportAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ['container', 'qc_license', 'actual_quantity', 'confirmed_at']
    list_filter = ['confirmed_at']
    date_hierarchy = 'confirmed_at'


@admin.register(HoldResolution)
class HoldResolutionAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """HoldResolution admin: immutable log."""

    list_display = ['container', 'resolution_action', 'send_back_to_qc', 'resolved_by', 'resolved_at']
    list_filter = ['resolution_action', 'resolved_at']
    date_hierarchy = 'resolved_at'


@admin.register(TrackingEvent)
class TrackingEventAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ['container', 'tracking_code', 'status', 'created_by', 'created_at']
    list_filter = ['status']
    search_fields = ['tracking_code', 'status']
