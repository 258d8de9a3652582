"""
Pytest fixtures for Shipman tests.
"""

from datetime import date

import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from django.utils import timezone

from shipman import ship
from shipman.adapters import reset_notification_sink
from shipman.models import CapacityRequest, Container, QcLicense, RequestStatus
from shipman.tests.sinks import RecordingSink


User = get_user_model()


@pytest.fixture(autouse=True)
def sink():
    """Fresh recording sink for every test."""
    reset_notification_sink()
    RecordingSink.clear()
    yield RecordingSink
    RecordingSink.clear()
    reset_notification_sink()


@pytest.fixture
def buyer(db):
    return User.objects.create_user(username='buyer', password='x', first_name='Bahram')


@pytest.fixture
def supplier(db):
    """Farmer who allocates plans."""
    return User.objects.create_user(
        username='farmer',
        password='x',
        first_name='Reza',
        last_name='Karimi',
    )


@pytest.fixture
def other_supplier(db):
    return User.objects.create_user(username='farmer2', password='x', first_name='Ali')


@pytest.fixture
def admin_user(db):
    return User.objects.create_superuser(username='admin', password='x', email='admin@example.com')


@pytest.fixture
def manager(db):
    """Staff member notified through the manager group."""
    user = User.objects.create_user(username='manager', password='x')
    group, _ = Group.objects.get_or_create(name='Manager')
    user.groups.add(group)
    return user


@pytest.fixture
def officer(db):
    return User.objects.create_user(username='officer', password='x')


@pytest.fixture
def capacity_request(db, buyer):
    """Pending request for 5 containers to Oman during January 2025."""
    return CapacityRequest.objects.create(
        buyer=buyer,
        container_amount=5,
        start_date=date(2025, 1, 1),
        end_date=date(2025, 1, 31),
        import_country='Oman',
        entry_border='Sohar',
        exit_border='Bandar Abbas',
        transport_type='reefer',
        product_type='eggs',
        preferred_supplier_name='Karimi Farms',
    )


@pytest.fixture
def qatar_request(db, buyer):
    return CapacityRequest.objects.create(
        buyer=buyer,
        container_amount=2,
        import_country='Qatar',
        status=RequestStatus.ACCEPTED,
    )


@pytest.fixture
def qc_license(db, officer):
    """Active internal QC license for Oman."""
    return QcLicense.objects.create(key='QC-OM-001', assigned_to=officer, country_code='OM')


@pytest.fixture
def qatar_license(db, officer):
    return QcLicense.objects.create(key='QC-QA-001', assigned_to=officer, country_code='QA')


@pytest.fixture
def external_license(db):
    """External QC license for Oman."""
    user = User.objects.create_user(username='external', password='x')
    return QcLicense.objects.create(key='EXT-OM-001', assigned_to=user, country_code='om')


@pytest.fixture
def plan_date():
    return date(2025, 1, 10)


@pytest.fixture
def plan(capacity_request, supplier, plan_date):
    """Three containers allocated on plan_date (accepts the request)."""
    return ship.allocate(capacity_request.pk, supplier, plan_date, 3)


@pytest.fixture
def container(plan):
    """Container #1 of the plan, still pending."""
    return Container.objects.get(plan=plan, container_no=1)


@pytest.fixture
def arrived_container(container, qc_license):
    return ship.mark_arrived(qc_license, container.pk, timezone.now(), 'Sohar port')


@pytest.fixture
def inspected_container(arrived_container, qc_license):
    return ship.start_inspection(
        qc_license,
        arrived_container.pk,
        {'actual_carton_count': 1200, 'sample_size': 30, 'product_condition': 'good'},
    )


@pytest.fixture
def held_container(inspected_container, qc_license):
    return ship.hold(qc_license, inspected_container.pk, 'broken cartons', '12 cartons crushed')


@pytest.fixture
def approved_container(inspected_container, qc_license):
    return ship.clear(qc_license, inspected_container.pk)
