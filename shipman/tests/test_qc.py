"""
Tests for the internal QC state machine and QC listings.
"""

from datetime import datetime

import pytest
from django.utils import timezone

from shipman import ship, ShipmanError
from shipman.models import CapacityRequest, Container, QcLicense, QcStatus, RequestStatus
from shipman.protocols.notifications import NotificationEvent


pytestmark = pytest.mark.django_db


class TestMarkArrived:
    """pending -> arrived."""

    def test_mark_arrived(self, container, qc_license):
        result = ship.mark_arrived(qc_license, container.pk, '2025-01-10T08:30:00', 'Sohar port')

        container.refresh_from_db()
        assert result.qc_status == QcStatus.ARRIVED
        assert container.qc_status == QcStatus.ARRIVED
        assert container.qc_arrival_info['arrival_place'] == 'Sohar port'
        assert container.qc_arrival_info['arrived_at'].startswith('2025-01-10T08:30:00')
        assert container.qc_reviewed_by == qc_license
        assert container.qc_reviewed_at is not None

    def test_accepts_license_pk(self, container, qc_license):
        ship.mark_arrived(qc_license.pk, container.pk, timezone.now(), 'Sohar')

        container.refresh_from_db()
        assert container.qc_status == QcStatus.ARRIVED

    def test_twice_is_invalid(self, arrived_container, qc_license):
        with pytest.raises(ShipmanError) as exc:
            ship.mark_arrived(qc_license, arrived_container.pk, timezone.now(), 'Sohar')

        assert exc.value.code == 'INVALID_TRANSITION'
        assert exc.value.current == QcStatus.ARRIVED
        assert exc.value.data['expected'] == QcStatus.PENDING

    def test_place_required(self, container, qc_license):
        with pytest.raises(ShipmanError) as exc:
            ship.mark_arrived(qc_license, container.pk, timezone.now(), '  ')

        assert exc.value.code == 'VALIDATION_ERROR'

    def test_bad_timestamp(self, container, qc_license):
        with pytest.raises(ShipmanError) as exc:
            ship.mark_arrived(qc_license, container.pk, 'yesterday', 'Sohar')

        assert exc.value.code == 'VALIDATION_ERROR'

    def test_unknown_container(self, qc_license):
        with pytest.raises(ShipmanError) as exc:
            ship.mark_arrived(qc_license, 987654, timezone.now(), 'Sohar')

        assert exc.value.code == 'NOT_FOUND'


class TestScope:
    """License and country checks shared by every QC write."""

    def test_other_country_denied(self, container, qatar_license):
        with pytest.raises(ShipmanError) as exc:
            ship.mark_arrived(qatar_license, container.pk, timezone.now(), 'Doha')

        assert exc.value.code == 'ACCESS_DENIED'
        container.refresh_from_db()
        assert container.qc_status == QcStatus.PENDING

    def test_inactive_license_denied(self, container, qc_license):
        qc_license.is_active = False
        qc_license.save()

        with pytest.raises(ShipmanError) as exc:
            ship.mark_arrived(qc_license, container.pk, timezone.now(), 'Sohar')

        assert exc.value.code == 'ACCESS_DENIED'

    def test_license_without_country_denied(self, container):
        license = QcLicense.objects.create(key='QC-NONE', country_code='')

        with pytest.raises(ShipmanError) as exc:
            ship.mark_arrived(license, container.pk, timezone.now(), 'Sohar')

        assert exc.value.code == 'ACCESS_DENIED'

    def test_unmapped_country_denied(self, container):
        license = QcLicense.objects.create(key='QC-IR', country_code='IR')

        with pytest.raises(ShipmanError) as exc:
            ship.clear(license, container.pk)

        assert exc.value.code == 'ACCESS_DENIED'

    def test_unknown_license_denied(self, container):
        with pytest.raises(ShipmanError) as exc:
            ship.mark_arrived(555555, container.pk, timezone.now(), 'Sohar')

        assert exc.value.code == 'ACCESS_DENIED'

    def test_request_not_accepted_denied(self, capacity_request, container, qc_license):
        CapacityRequest.objects.filter(pk=capacity_request.pk).update(status=RequestStatus.COMPLETED)

        with pytest.raises(ShipmanError) as exc:
            ship.mark_arrived(qc_license, container.pk, timezone.now(), 'Sohar')

        assert exc.value.code == 'ACCESS_DENIED'

    def test_scope_checked_before_existence(self, qatar_license):
        qatar_license.is_active = False
        qatar_license.save()

        with pytest.raises(ShipmanError) as exc:
            ship.clear(qatar_license, 987654)

        assert exc.value.code == 'ACCESS_DENIED'


class TestStartInspection:
    """arrived -> qc_submitted."""

    def test_stores_payload(self, arrived_container, qc_license):
        ship.start_inspection(qc_license, arrived_container.pk, {
            'actual_carton_count': '1180',
            'temperature': '4C',
            'photos': ['a.jpg'],
            'truck_plate': '12-ABC',
            'inspected_by': 'spoofed',
        })

        arrived_container.refresh_from_db()
        info = arrived_container.qc_inspection_info
        assert arrived_container.qc_status == QcStatus.QC_SUBMITTED
        assert info['actual_carton_count'] == 1180
        assert info['temperature'] == '4C'
        assert info['photos'] == ['a.jpg']
        assert info['truck_plate'] == '12-ABC'
        assert info['inspected_by'] == qc_license.pk
        assert 'inspected_at' in info

    def test_pending_is_invalid(self, container, qc_license):
        with pytest.raises(ShipmanError) as exc:
            ship.start_inspection(qc_license, container.pk, {'notes': 'ok'})

        assert exc.value.code == 'INVALID_TRANSITION'

    def test_empty_payload(self, arrived_container, qc_license):
        with pytest.raises(ShipmanError) as exc:
            ship.start_inspection(qc_license, arrived_container.pk, {})

        assert exc.value.code == 'VALIDATION_ERROR'

    def test_negative_count(self, arrived_container, qc_license):
        with pytest.raises(ShipmanError) as exc:
            ship.start_inspection(qc_license, arrived_container.pk, {'sample_size': -2})

        assert exc.value.code == 'VALIDATION_ERROR'

    def test_already_submitted(self, arrived_container, qc_license):
        Container.objects.filter(pk=arrived_container.pk).update(qc_inspection_info={'notes': 'old'})

        with pytest.raises(ShipmanError) as exc:
            ship.start_inspection(qc_license, arrived_container.pk, {'notes': 'new'})

        assert exc.value.code == 'ALREADY_SUBMITTED'


class TestClearAndHold:
    """qc_submitted -> approved | held."""

    def test_clear(self, inspected_container, qc_license):
        ship.clear(qc_license, inspected_container.pk)

        inspected_container.refresh_from_db()
        assert inspected_container.qc_status == QcStatus.APPROVED

    def test_clear_on_pending_is_invalid(self, container, qc_license):
        """Forward-only: pending cannot be cleared."""
        with pytest.raises(ShipmanError) as exc:
            ship.clear(qc_license, container.pk)

        assert exc.value.code == 'INVALID_TRANSITION'
        assert exc.value.current == QcStatus.PENDING

    def test_clear_requires_inspection(self, inspected_container, qc_license):
        Container.objects.filter(pk=inspected_container.pk).update(qc_inspection_info={})

        with pytest.raises(ShipmanError) as exc:
            ship.clear(qc_license, inspected_container.pk)

        assert exc.value.code == 'INVALID_TRANSITION'

    def test_approved_is_final(self, approved_container, qc_license):
        for op in (ship.clear, lambda lic, pk: ship.hold(lic, pk, 'late')):
            with pytest.raises(ShipmanError) as exc:
                op(qc_license, approved_container.pk)
            assert exc.value.code == 'INVALID_TRANSITION'

    def test_hold(self, inspected_container, qc_license):
        ship.hold(qc_license, inspected_container.pk, 'broken cartons', 'crushed on top row')

        inspected_container.refresh_from_db()
        assert inspected_container.qc_status == QcStatus.HELD
        assert inspected_container.qc_hold_reason == 'broken cartons'
        assert inspected_container.qc_hold_details == 'crushed on top row'

    def test_hold_twice_is_invalid(self, held_container, qc_license):
        with pytest.raises(ShipmanError) as exc:
            ship.hold(qc_license, held_container.pk, 'again')

        assert exc.value.code == 'INVALID_TRANSITION'
        assert exc.value.current == QcStatus.HELD

    def test_hold_reason_required(self, inspected_container, qc_license):
        with pytest.raises(ShipmanError) as exc:
            ship.hold(qc_license, inspected_container.pk, '')

        assert exc.value.code == 'VALIDATION_ERROR'

    def test_hold_reason_too_long(self, inspected_container, qc_license):
        with pytest.raises(ShipmanError) as exc:
            ship.hold(qc_license, inspected_container.pk, 'x' * 51)

        assert exc.value.code == 'VALIDATION_ERROR'

    def test_hold_notifies_admins(self, inspected_container, qc_license, admin_user, manager,
                                  buyer, sink, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            ship.hold(qc_license, inspected_container.pk, 'mould')

        assert sink.recipients(NotificationEvent.CONTAINER_HELD) == sorted([admin_user.pk, manager.pk])
        assert sink.sent[0].payload['reason'] == 'mould'

    def test_failed_delivery_does_not_abort(self, inspected_container, qc_license, admin_user,
                                            manager, sink, django_capture_on_commit_callbacks):
        sink.fail_for.add(admin_user.pk)

        with django_capture_on_commit_callbacks(execute=True):
            ship.hold(qc_license, inspected_container.pk, 'mould')

        inspected_container.refresh_from_db()
        assert inspected_container.qc_status == QcStatus.HELD
        assert sink.recipients(NotificationEvent.CONTAINER_HELD) == [manager.pk]


class TestListContainers:
    """Tests for ship.list_containers()."""

    @pytest.fixture
    def mixed(self, plan, qc_license, inspected_container, qatar_request, other_supplier):
        """Oman plan: #1 qc_submitted, #2 pending, #3 arrived; plus a Qatar plan."""
        third = plan.containers.get(container_no=3)
        ship.mark_arrived(qc_license, third.pk, timezone.now(), 'Sohar')
        ship.allocate(qatar_request.pk, other_supplier, '2025-02-01', 2)
        return plan

    def test_only_license_country(self, mixed, qc_license):
        listing = ship.list_containers(qc_license)

        assert listing.country == 'OM'
        assert listing.import_country == 'Oman'
        assert listing.page.total == 3
        assert {c.request.import_country for c in listing.containers} == {'Oman'}

    def test_status_counts_ignore_status_filter(self, mixed, qc_license):
        listing = ship.list_containers(qc_license, qc_status=QcStatus.PENDING)

        assert listing.page.total == 1
        assert listing.status_counts == {
            'pending': 1,
            'arrived': 1,
            'qc_submitted': 1,
            'approved': 0,
            'held': 0,
            'rejected': 0,
        }

    def test_search_strips_hash(self, mixed, qc_license):
        listing = ship.list_containers(qc_license, search='#2')

        assert 2 in [c.container_no for c in listing.containers]

    def test_search_tracking_code(self, mixed, qc_license):
        target = mixed.containers.get(container_no=2)
        Container.objects.filter(pk=target.pk).update(tracking_code='O12-ABC123')

        listing = ship.list_containers(qc_license, search='abc1')

        assert [c.pk for c in listing.containers] == [target.pk]
        assert sum(listing.status_counts.values()) == 1

    def test_supplier_name_filter(self, mixed, qc_license):
        assert ship.list_containers(qc_license, supplier_name='karimi').page.total == 3
        assert ship.list_containers(qc_license, supplier_name='nobody').page.total == 0

    def test_sort_and_paginate(self, mixed, qc_license):
        listing = ship.list_containers(qc_license, sort_by='container_no', sort_direction='asc',
                                       page=2, limit=2)

        assert [c.container_no for c in listing.containers] == [3]
        assert listing.page.total_pages == 2

    def test_unknown_sort_falls_back(self, mixed, qc_license):
        listing = ship.list_containers(qc_license, sort_by='password', sort_direction='sideways')

        assert listing.page.total == 3

    def test_date_filter(self, mixed, qc_license):
        today = timezone.localdate()

        assert ship.list_containers(qc_license, start_date=today).page.total == 3
        assert ship.list_containers(qc_license, end_date='2000-01-01').page.total == 0

    def test_invalid_status_filter(self, mixed, qc_license):
        with pytest.raises(ShipmanError) as exc:
            ship.list_containers(qc_license, qc_status='lost')

        assert exc.value.code == 'VALIDATION_ERROR'


class TestContainerReads:
    """Tests for ship.get_container() / ship.list_by_status()."""

    def test_get_container(self, container, qc_license):
        assert ship.get_container(qc_license, container.pk).pk == container.pk

    def test_get_container_other_country(self, container, qatar_license):
        with pytest.raises(ShipmanError) as exc:
            ship.get_container(qatar_license, container.pk)

        assert exc.value.code == 'NOT_FOUND'

    def test_list_by_status_most_recent_first(self, plan, qc_license):
        first, second = plan.containers.filter(container_no__in=[1, 2]).order_by('container_no')
        ship.mark_arrived(qc_license, first.pk, timezone.now(), 'Sohar')
        ship.mark_arrived(qc_license, second.pk, timezone.now(), 'Sohar')
        Container.objects.filter(pk=first.pk).update(
            qc_reviewed_at=timezone.make_aware(datetime(2030, 1, 1)),
        )

        page = ship.list_by_status(qc_license, QcStatus.ARRIVED)

        assert [c.pk for c in page.items] == [first.pk, second.pk]
        assert page.total == 2
