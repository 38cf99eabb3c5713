"""
Visitor registry: creation rules and lifecycle transitions.
"""
from datetime import datetime, timedelta

import pytest

from conftest import COMMUNITY_A, COMMUNITY_B
from gatehouse.core.exceptions import (
    ConflictError,
    ErrorCode,
    PreconditionFailedError,
    ResourceNotFoundError,
    ValidationError,
)
from gatehouse.models.enums import VisitorStatus, VisitorType
from gatehouse.schemas.visitor import VisitorResponse
from gatehouse.services.visitor.visitor_service import VisitorService


@pytest.fixture
def service(db):
    return VisitorService(db)


@pytest.fixture
def host(make_user, make_unit):
    return make_user(unit=make_unit(), name="Rahul Host")


def assert_timestamps_consistent(visitor):
    if visitor.check_out_at is not None:
        assert visitor.check_in_at is not None
        assert visitor.check_out_at >= visitor.check_in_at


# ==================== create ====================

def test_create_defaults_to_pending_guest(service, host):
    visitor = service.create(COMMUNITY_A, host.id, {"name": "Alice", "contact": "alice@example.com"})

    assert visitor.status == VisitorStatus.PENDING
    assert visitor.visitor_type == VisitorType.GUEST
    assert visitor.community_id == COMMUNITY_A
    assert visitor.user_id == host.id
    assert visitor.visit_date is not None
    assert visitor.check_in_at is None and visitor.check_out_at is None


def test_create_accepts_camel_case_and_lowercase_type(service, host):
    visitor = service.create(
        COMMUNITY_A,
        host.id,
        {"name": "Cab", "contact": "+91 98765 43210", "visitorType": "cab_auto", "vehicleNo": "KA01AB1234"},
    )
    assert visitor.visitor_type == VisitorType.CAB_AUTO
    assert visitor.vehicle_no == "KA01AB1234"


def test_create_converts_aware_visit_date_to_utc(service, host):
    visitor = service.create(
        COMMUNITY_A,
        host.id,
        {"name": "Alice", "contact": "alice@example.com", "visitDate": "2024-05-01T15:30:00+05:30"},
    )
    assert visitor.visit_date == datetime(2024, 5, 1, 10, 0)


@pytest.mark.parametrize("attrs,field", [
    ({"contact": "alice@example.com"}, "name"),
    ({"name": "   ", "contact": "alice@example.com"}, "name"),
    ({"name": "Alice"}, "contact"),
    ({"name": "Alice", "contact": ""}, "contact"),
])
def test_create_rejects_missing_fields(service, host, attrs, field):
    with pytest.raises(ValidationError) as exc_info:
        service.create(COMMUNITY_A, host.id, attrs)
    assert field in exc_info.value.details["field_errors"]


def test_create_rejects_unknown_visitor_type(service, host):
    with pytest.raises(ValidationError):
        service.create(COMMUNITY_A, host.id, {"name": "A", "contact": "a@example.com", "visitorType": "PLUMBER"})


def test_guest_contact_must_be_email(service, host):
    with pytest.raises(ValidationError):
        service.create(COMMUNITY_A, host.id, {"name": "A", "contact": "98765", "visitorType": "GUEST"})

    delivery = service.create(COMMUNITY_A, host.id, {"name": "A", "contact": "98765", "visitorType": "DELIVERY"})
    assert delivery.contact == "98765"


# ==================== transition ====================

def test_full_lifecycle(service, host, make_visitor):
    visitor = make_visitor(host)
    t0 = datetime(2024, 5, 1, 10, 0)

    visitor = service.transition(COMMUNITY_A, visitor.id, VisitorStatus.CHECKED_IN, now=t0)
    assert visitor.status == VisitorStatus.CHECKED_IN
    assert visitor.check_in_at == t0
    assert_timestamps_consistent(visitor)

    visitor = service.transition(COMMUNITY_A, visitor.id, "checked_out", now=t0 + timedelta(hours=2))
    assert visitor.status == VisitorStatus.CHECKED_OUT
    assert visitor.check_out_at == t0 + timedelta(hours=2)
    assert_timestamps_consistent(visitor)

    visitor = service.transition(COMMUNITY_A, visitor.id, VisitorStatus.PENDING)
    assert visitor.status == VisitorStatus.PENDING
    assert visitor.check_in_at is None and visitor.check_out_at is None


def test_double_check_in_conflicts_without_mutation(service, host, make_visitor):
    checked_in_at = datetime(2024, 5, 1, 9, 0)
    visitor = make_visitor(host, check_in_at=checked_in_at)

    with pytest.raises(ConflictError) as exc_info:
        service.transition(COMMUNITY_A, visitor.id, VisitorStatus.CHECKED_IN, now=datetime(2024, 5, 1, 11, 0))

    assert exc_info.value.status_code == 409
    assert exc_info.value.error_code == ErrorCode.VISITOR_ALREADY_CHECKED_IN
    refreshed = service.repository.get_in_tenant(COMMUNITY_A, visitor.id)
    assert refreshed.check_in_at == checked_in_at
    assert refreshed.check_out_at is None


def test_check_out_before_check_in_is_precondition_failure(service, host, make_visitor):
    visitor = make_visitor(host)

    with pytest.raises(PreconditionFailedError) as exc_info:
        service.transition(COMMUNITY_A, visitor.id, VisitorStatus.CHECKED_OUT)

    assert exc_info.value.error_code == ErrorCode.VISITOR_NOT_CHECKED_IN
    refreshed = service.repository.get_in_tenant(COMMUNITY_A, visitor.id)
    assert refreshed.check_in_at is None
    assert refreshed.check_out_at is None


def test_double_check_out_conflicts(service, host, make_visitor):
    visitor = make_visitor(
        host,
        check_in_at=datetime(2024, 5, 1, 9, 0),
        check_out_at=datetime(2024, 5, 1, 10, 0),
    )
    with pytest.raises(ConflictError) as exc_info:
        service.transition(COMMUNITY_A, visitor.id, VisitorStatus.CHECKED_OUT)

    assert not isinstance(exc_info.value, PreconditionFailedError)
    assert exc_info.value.error_code == ErrorCode.VISITOR_ALREADY_CHECKED_OUT


def test_check_out_never_precedes_check_in(service, host, make_visitor):
    checked_in_at = datetime(2024, 5, 1, 12, 0)
    visitor = make_visitor(host, check_in_at=checked_in_at)

    visitor = service.transition(COMMUNITY_A, visitor.id, VisitorStatus.CHECKED_OUT, now=checked_in_at - timedelta(minutes=5))

    assert visitor.check_out_at == checked_in_at
    assert_timestamps_consistent(visitor)


def test_transition_is_tenant_scoped(service, host, make_visitor):
    visitor = make_visitor(host)

    with pytest.raises(ResourceNotFoundError):
        service.transition(COMMUNITY_B, visitor.id, VisitorStatus.CHECKED_IN)

    assert service.repository.get_in_tenant(COMMUNITY_A, visitor.id).check_in_at is None


def test_transition_unknown_visitor(service):
    with pytest.raises(ResourceNotFoundError):
        service.transition(COMMUNITY_A, "missing-id", VisitorStatus.CHECKED_IN)


@pytest.mark.parametrize("visitor_id,target", [("", "checked_in"), ("some-id", "arrived")])
def test_transition_validates_input(service, visitor_id, target):
    with pytest.raises(ValidationError):
        service.transition(COMMUNITY_A, visitor_id, target)


def test_unknown_status_keeps_cause(service):
    with pytest.raises(ValidationError) as exc_info:
        service.transition(COMMUNITY_A, "some-id", "arrived")
    assert isinstance(exc_info.value.__cause__, ValueError)


# ==================== query ====================

def test_query_filters_and_orders(service, host, make_user, make_visitor):
    other_host = make_user()
    early = make_visitor(host, name="Early", visit_date=datetime(2024, 5, 1, 8, 0))
    late = make_visitor(host, name="Late", visit_date=datetime(2024, 5, 3, 8, 0),
                        check_in_at=datetime(2024, 5, 3, 8, 5))
    cab = make_visitor(other_host, name="Cab", visit_date=datetime(2024, 5, 2, 8, 0),
                       visitor_type=VisitorType.CAB_AUTO)
    make_visitor(make_user(community_id=COMMUNITY_B), name="Elsewhere")

    everyone = service.query(COMMUNITY_A)
    assert [v.id for v in everyone] == [late.id, cab.id, early.id]

    assert [v.id for v in service.query(COMMUNITY_A, status=VisitorStatus.CHECKED_IN)] == [late.id]
    assert [v.id for v in service.query(COMMUNITY_A, visitor_type=VisitorType.CAB_AUTO)] == [cab.id]
    assert [v.id for v in service.query(COMMUNITY_A, host_id=host.id)] == [late.id, early.id]

    bounded = service.query(
        COMMUNITY_A,
        date_from=datetime(2024, 5, 1, 8, 0),
        date_to=datetime(2024, 5, 2, 8, 0),
    )
    assert {v.id for v in bounded} == {early.id, cab.id}


def test_response_display_fields(service, host, make_user, make_visitor):
    visitor = make_visitor(host)
    response = VisitorResponse.from_visitor(visitor)
    assert response.host_name == "Rahul Host"
    assert response.unit_number == "A-101"
    assert response.block_name == "Tower A"

    homeless_host = make_user(name="No Unit")
    bare = VisitorResponse.from_visitor(make_visitor(homeless_host))
    assert bare.unit_number == "N/A"
    assert bare.block_name == "N/A"
    assert bare.model_dump(by_alias=True)["status"] == VisitorStatus.PENDING


def test_today_lists_current_day_only(service, host, make_visitor):
    now = datetime(2024, 5, 1, 15, 0)
    today = make_visitor(host, visit_date=datetime(2024, 5, 1, 9, 0))
    make_visitor(host, visit_date=datetime(2024, 4, 30, 23, 59))
    make_visitor(host, visit_date=datetime(2024, 5, 2, 0, 0))

    assert [v.id for v in service.today(COMMUNITY_A, now=now)] == [today.id]
