"""
Shared fixtures: in-memory SQLite, fake push/email collaborators and
row factories.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-for-gatehouse-suite"
os.environ["CRON_SECRET"] = "cron-test-secret"
os.environ["PASS_BASE_URL"] = "https://gate.example.com"
os.environ["SMTP_HOST"] = "smtp.example.com"
os.environ["FROM_EMAIL"] = "gate@example.com"

from datetime import datetime  # noqa: E402
from typing import Any, Dict, List, Optional  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from gatehouse.api import deps  # noqa: E402
from gatehouse.core.exceptions import EmailDeliveryError, PushDeliveryError  # noqa: E402
from gatehouse.core.security import create_access_token  # noqa: E402
from gatehouse.db.init_db import drop_db, init_db  # noqa: E402
from gatehouse.db.session import SessionLocal  # noqa: E402
from gatehouse.models.booking import Booking, Facility  # noqa: E402
from gatehouse.models.enums import BookingStatus, UserRole, VisitorType  # noqa: E402
from gatehouse.models.user import Block, Unit, User  # noqa: E402
from gatehouse.models.visitor import Visitor  # noqa: E402

COMMUNITY_A = "community-a"
COMMUNITY_B = "community-b"


class FakePushClient:
    """Records every batch; batches whose index is in ``fail_batches`` raise."""

    def __init__(self, fail_batches=()):
        self.batches: List[List[Dict[str, Any]]] = []
        self.fail_batches = set(fail_batches)
        self.calls = 0

    def send(self, messages):
        index = self.calls
        self.calls += 1
        if index in self.fail_batches:
            raise PushDeliveryError("simulated outage", batch_size=len(messages))
        self.batches.append(list(messages))
        return [{"status": "ok", "id": f"ticket-{index}-{i}"} for i in range(len(messages))]

    @property
    def messages(self):
        return [message for batch in self.batches for message in batch]


class ExplodingClient:
    """Raises something other than PushDeliveryError on selected calls."""

    def __init__(self, fail_calls=(0,)):
        self.fail_calls = set(fail_calls)
        self.calls = 0

    def send(self, messages):
        index = self.calls
        self.calls += 1
        if index in self.fail_calls:
            raise RuntimeError("client bug")
        return [{"status": "ok"} for _ in messages]


class FakeEmailService:

    def __init__(self, fail: bool = False):
        self.sent: List[Dict[str, Any]] = []
        self.fail = fail

    def send(self, to, subject, html, text=None, attachments=()):
        if self.fail:
            raise EmailDeliveryError("simulated SMTP failure", recipient=to)
        self.sent.append(
            {"to": to, "subject": subject, "html": html, "text": text, "attachments": list(attachments)}
        )


@pytest.fixture
def db():
    init_db()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        drop_db()


@pytest.fixture
def push_client():
    return FakePushClient()


@pytest.fixture
def email_service():
    return FakeEmailService()


@pytest.fixture
def client(db, push_client, email_service):
    from gatehouse.main import app

    app.dependency_overrides[deps.get_push_client] = lambda: push_client
    app.dependency_overrides[deps.get_email_service] = lambda: email_service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_unit(db):
    def _make(community_id: str = COMMUNITY_A, number: str = "A-101", block_name: Optional[str] = "Tower A") -> Unit:
        block = None
        if block_name:
            block = Block(community_id=community_id, name=block_name)
            db.add(block)
            db.flush()
        unit = Unit(community_id=community_id, number=number, block_id=block.id if block else None)
        db.add(unit)
        db.commit()
        return unit
    return _make


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(
        community_id: str = COMMUNITY_A,
        role: UserRole = UserRole.RESIDENT,
        unit: Optional[Unit] = None,
        push_token: Optional[str] = None,
        name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> User:
        counter["n"] += 1
        user = User(
            community_id=community_id,
            name=name or f"User {counter['n']}",
            email=email or f"user{counter['n']}@example.com",
            role=role,
            unit_id=unit.id if unit else None,
            push_token=push_token,
        )
        db.add(user)
        db.commit()
        return user
    return _make


@pytest.fixture
def make_visitor(db):
    def _make(
        host: User,
        name: str = "Alice Guest",
        visit_date: Optional[datetime] = None,
        visitor_type: VisitorType = VisitorType.GUEST,
        check_in_at: Optional[datetime] = None,
        check_out_at: Optional[datetime] = None,
        community_id: Optional[str] = None,
    ) -> Visitor:
        visitor = Visitor(
            community_id=community_id or host.community_id,
            user_id=host.id,
            name=name,
            contact="alice@example.com",
            visitor_type=visitor_type,
            visit_date=visit_date or datetime(2024, 5, 1, 10, 0),
            check_in_at=check_in_at,
            check_out_at=check_out_at,
        )
        db.add(visitor)
        db.commit()
        return visitor
    return _make


@pytest.fixture
def make_booking(db):
    def _make(
        owner: User,
        starts_at: datetime,
        status: BookingStatus = BookingStatus.CONFIRMED,
        facility_name: str = "Tennis Court",
    ) -> Booking:
        facility = Facility(community_id=owner.community_id, name=facility_name)
        db.add(facility)
        db.flush()
        booking = Booking(
            community_id=owner.community_id,
            facility_id=facility.id,
            user_id=owner.id,
            starts_at=starts_at,
            status=status,
        )
        db.add(booking)
        db.commit()
        return booking
    return _make


def auth_headers(user: User) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


def expo_token(n: int) -> str:
    return f"ExponentPushToken[device-{n}]"
