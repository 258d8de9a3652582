"""
Tests for the tracking ledger.
"""

import re

import pytest
from django.core.management import call_command

from shipman import ship, ShipmanError
from shipman.models import Container, QcStatus, TrackingEvent
from shipman.protocols.notifications import NotificationEvent


pytestmark = pytest.mark.django_db


class TestRecordEvent:
    """Tests for ship.record_event()."""

    def test_upsert_is_idempotent(self, container, supplier):
        event, created = ship.record_event(container.pk, supplier, 'Loaded', 'TY-100')
        again, created_again = ship.record_event(container.pk, supplier, 'At border', 'TY-100', 'Mazandaran')

        assert created is True
        assert created_again is False
        assert again.pk == event.pk
        assert again.status == 'At border'
        assert TrackingEvent.objects.filter(container=container).count() == 1

    def test_null_code_is_its_own_key(self, container, supplier):
        ship.record_event(container.pk, supplier, 'Loaded')
        _, created = ship.record_event(container.pk, supplier, 'Departed')
        ship.record_event(container.pk, supplier, 'Loaded', 'TY-1')

        assert created is False
        assert TrackingEvent.objects.filter(container=container).count() == 2
        assert TrackingEvent.objects.get(container=container, tracking_code__isnull=True).status == 'Departed'

    def test_empty_status(self, container, supplier):
        with pytest.raises(ShipmanError) as exc:
            ship.record_event(container.pk, supplier, '  ')

        assert exc.value.code == 'VALIDATION_ERROR'

    def test_unknown_container(self, supplier):
        with pytest.raises(ShipmanError) as exc:
            ship.record_event(123456, supplier, 'Loaded')

        assert exc.value.code == 'NOT_FOUND'

    def test_notifies_admins_and_buyer(self, container, supplier, buyer, manager, sink,
                                       django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            ship.record_event(container.pk, supplier, 'Loaded', 'TY-9')

        assert sink.recipients(NotificationEvent.TRACKING_UPDATED) == sorted([buyer.pk, manager.pk])

    def test_notification_waits_for_commit(self, container, supplier, sink):
        """Nothing is delivered until the surrounding transaction commits."""
        ship.record_event(container.pk, supplier, 'Loaded')

        assert sink.sent == []


class TestHistory:
    """Tests for ship.history() / ship.latest_per_container()."""

    def test_history_newest_first(self, container, supplier):
        ship.record_event(container.pk, supplier, 'Loaded', 'A')
        ship.record_event(container.pk, supplier, 'Departed', 'B')

        assert [e.status for e in ship.history(container.pk)] == ['Departed', 'Loaded']

    def test_latest_per_container(self, plan, supplier):
        first, second = plan.containers.filter(container_no__in=[1, 2]).order_by('container_no')
        ship.record_event(first.pk, supplier, 'Loaded', 'A')
        ship.record_event(first.pk, supplier, 'Arrived', 'B')
        ship.record_event(second.pk, supplier, 'Loaded', 'C')

        latest = {e.container_id: e.status for e in ship.latest_per_container()}

        assert latest == {first.pk: 'Arrived', second.pk: 'Loaded'}


class TestFindByCode:
    """Tests for ship.find_by_code()."""

    def test_case_insensitive_with_context(self, container, supplier, plan_date):
        ship.record_event(container.pk, supplier, 'At border', 'O12-AB12CD', 'Sohar')

        lookup = ship.find_by_code('o12-ab12cd')

        assert lookup.container.pk == container.pk
        assert lookup.event.status == 'At border'
        assert lookup.plan_date == plan_date
        assert lookup.import_country == 'Oman'
        assert lookup.entry_border == 'Sohar'
        assert lookup.supplier_name == 'Karimi Farms'
        assert lookup.as_dict()['tracking_code'] == 'O12-AB12CD'

    def test_supplier_name_from_user(self, capacity_request, container, supplier):
        capacity_request.preferred_supplier_name = ''
        capacity_request.preferred_supplier = supplier
        capacity_request.save()
        ship.record_event(container.pk, supplier, 'Loaded', 'TY-7')

        assert ship.find_by_code('ty-7').supplier_name == 'Reza Karimi'

    def test_unknown_code(self, db):
        assert ship.find_by_code('nope') is None
        assert ship.find_by_code('') is None


class TestTrackingCodes:
    """Tests for ship.issue_tracking_code() / ship.assign_tracking_code()."""

    def test_issue_uses_country_prefix(self, container):
        code = ship.issue_tracking_code(container.pk)

        container.refresh_from_db()
        assert re.fullmatch(r'O12-[A-Z0-9]{6}', code)
        assert container.tracking_code == code

    def test_issue_is_idempotent(self, container):
        assert ship.issue_tracking_code(container.pk) == ship.issue_tracking_code(container.pk)
        assert TrackingEvent.objects.filter(container=container).count() == 1

    def test_issued_code_can_be_looked_up(self, container):
        code = ship.issue_tracking_code(container.pk)

        lookup = ship.find_by_code(code.lower())

        assert lookup is not None
        assert lookup.container.pk == container.pk
        assert lookup.event.status == 'Tracking Code Issued'
        assert lookup.event.created_by is None

    def test_issued_code_notifies(self, container, buyer, admin_user, sink,
                                  django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            ship.issue_tracking_code(container.pk)

        assert sink.recipients(NotificationEvent.TRACKING_UPDATED) == sorted([admin_user.pk, buyer.pk])

    def test_batch_issued_codes_can_be_looked_up(self, plan):
        assert ship.issue_missing_codes() == 3

        for c in Container.objects.filter(plan=plan):
            assert ship.find_by_code(c.tracking_code).container.pk == c.pk

    def test_unknown_country_fallback(self, capacity_request, container):
        capacity_request.import_country = 'Kuwait'
        capacity_request.save()

        assert ship.issue_tracking_code(container.pk).startswith('X12-')

    def test_issue_retries_collision(self, plan, container, monkeypatch):
        other = plan.containers.get(container_no=2)
        Container.objects.filter(pk=other.pk).update(tracking_code='O12-AAAAAA')
        codes = iter(['AAAAAA', 'BBBBBB'])
        monkeypatch.setattr(
            'shipman.services.tracking.get_random_string',
            lambda length, allowed_chars: next(codes),
        )

        assert ship.issue_tracking_code(container.pk) == 'O12-BBBBBB'

    def test_assign_ty_number(self, container, supplier):
        ship.assign_tracking_code(container.pk, supplier, ' TY-2025-001 ')

        container.refresh_from_db()
        assert container.tracking_code == 'TY-2025-001'
        assert container.metadata['tracking_code'] == 'TY-2025-001'
        event = TrackingEvent.objects.get(container=container)
        assert event.status == 'TY Number Assigned'
        assert event.tracking_code == 'TY-2025-001'

    def test_assign_twice_keeps_single_event(self, container, supplier):
        ship.assign_tracking_code(container.pk, supplier, 'TY-1')
        ship.assign_tracking_code(container.pk, supplier, 'TY-1')

        assert TrackingEvent.objects.filter(container=container).count() == 1

    def test_assign_code_in_use(self, plan, container, supplier):
        other = plan.containers.get(container_no=2)
        ship.assign_tracking_code(other.pk, supplier, 'TY-1')

        with pytest.raises(ShipmanError) as exc:
            ship.assign_tracking_code(container.pk, supplier, 'TY-1')

        assert exc.value.code == 'VALIDATION_ERROR'


class TestIssueTrackingCodesCommand:
    """Tests for the issue_tracking_codes management command."""

    def test_dry_run(self, plan, capsys):
        call_command('issue_tracking_codes', '--dry-run')

        assert '3 código(s) seria(m) gerado(s)' in capsys.readouterr().out
        assert not Container.objects.filter(tracking_code__isnull=False).exists()

    def test_issues_missing_codes(self, plan, container, capsys):
        ship.issue_tracking_code(container.pk)
        Container.objects.filter(plan=plan, container_no=3).update(qc_status=QcStatus.REJECTED)

        call_command('issue_tracking_codes')

        assert '1 código(s) gerado(s)' in capsys.readouterr().out
        assert Container.objects.filter(tracking_code__isnull=True).count() == 1
