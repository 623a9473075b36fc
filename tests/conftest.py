import os
import uuid
from datetime import datetime, timedelta, UTC
from decimal import Decimal
from types import SimpleNamespace

import pytest

os.environ.setdefault("PYTEST_RUNNING", "1")

from fastapi import Depends
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from eventdesk.db import models
from eventdesk.db import database as db_module
from eventdesk.db.database import SessionLocal, engine
from eventdesk.api.main import app
from eventdesk.services.email_service import EmailService
from eventdesk.services.notification_service import NotificationService, get_notification_service
from eventdesk.utils.identifiers import generate_qr_code, slugify
from eventdesk.utils.rate_limit import get_rate_limiter

# Session shared between the test body and the app for the current test
_CURRENT_SESSION = None


@pytest.fixture(scope="session", autouse=True)
def create_schema_once():
    """Create all tables once per test session (in-memory SQLite lives per process)."""
    models.Base.metadata.create_all(bind=engine)
    yield
    models.Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def clean_data():
    """Empty every table between tests without dropping metadata."""
    with engine.begin() as connection:
        for table in reversed(models.Base.metadata.sorted_tables):
            connection.execute(table.delete())
    yield


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    for var in ("DEV_MODE", "ADMIN_EMAILS", "APP_BASE_URL", "APP_HOST", "INVITATION_TTL_DAYS"):
        monkeypatch.delenv(var, raising=False)
    get_rate_limiter().reset()
    yield
    get_rate_limiter().reset()


@pytest.fixture
def db_session():
    global _CURRENT_SESSION
    db = SessionLocal()
    _CURRENT_SESSION = db
    try:
        yield db
    finally:
        _CURRENT_SESSION = None
        db.close()


def _override_get_db():
    if _CURRENT_SESSION is not None:
        yield _CURRENT_SESSION
        return
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[db_module.get_db] = _override_get_db


class RecordingEmailService(EmailService):
    """Renders the real templates but keeps messages in memory."""

    def __init__(self):
        super().__init__()
        self.sent = []
        self.fail_with = None

    async def send_email(self, to_email, subject, html_content, text_content=None, reply_to=None):
        if self.fail_with:
            return {"success": False, "error": self.fail_with}
        self.sent.append(
            {"to": to_email, "subject": subject, "html": html_content, "text": text_content}
        )
        return {"success": True, "message_id": f"<test-{len(self.sent)}@eventdesk.test>"}


@pytest.fixture
def mailer():
    return RecordingEmailService()


@pytest.fixture
def client(db_session, mailer):
    def _notifications(db: Session = Depends(db_module.get_db)):
        return NotificationService(db, email_service=mailer)

    app.dependency_overrides[get_notification_service] = _notifications
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_notification_service, None)


# Factories

def auth(user) -> dict:
    """Headers the auth proxy would set for ``user``."""
    return {"x-auth-request-email": user.email}


@pytest.fixture
def auth_headers():
    return auth


@pytest.fixture
def organization_factory(db_session: Session):
    def _create(name: str = "Acme Events"):
        org = models.Organization(name=name, slug=f"{slugify(name)}-{uuid.uuid4().hex[:6]}", settings={})
        db_session.add(org)
        db_session.commit()
        db_session.refresh(org)
        return org
    return _create


@pytest.fixture
def user_factory(db_session: Session):
    def _create(email: str, role: str = "ADMIN", organization=None, verified: bool = True):
        user = models.User(
            email=email,
            first_name=email.split("@")[0].title(),
            last_name="Tester",
            role=role,
            organization_id=organization.id if organization else None,
            password_hash="unusable",
            email_verified_at=datetime.now(UTC) if verified else None,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user
    return _create


@pytest.fixture
def event_factory(db_session: Session):
    def _create(organization, name: str = "PyData Summit", status: str = "PUBLISHED", **fields):
        start = fields.pop("start_date", datetime.now(UTC) + timedelta(days=30))
        event = models.Event(
            organization_id=organization.id,
            name=name,
            slug=fields.pop("slug", slugify(name)),
            start_date=start,
            end_date=fields.pop("end_date", start + timedelta(days=2)),
            status=status,
            settings=fields.pop("settings", {}),
            **fields,
        )
        db_session.add(event)
        db_session.commit()
        db_session.refresh(event)
        return event
    return _create


@pytest.fixture
def ticket_factory(db_session: Session):
    def _create(event, name: str = "General Admission", price="0", quantity: int = 100, **fields):
        ticket = models.TicketType(
            event_id=event.id,
            name=name,
            price=Decimal(str(price)),
            quantity=quantity,
            **fields,
        )
        db_session.add(ticket)
        db_session.commit()
        db_session.refresh(ticket)
        return ticket
    return _create


@pytest.fixture
def registration_factory(db_session: Session):
    def _create(event, ticket, email: str = "ada@example.com", status: str = "CONFIRMED", **fields):
        attendee = db_session.query(models.Attendee).filter_by(email=email).first()
        if attendee is None:
            attendee = models.Attendee(email=email, first_name="Ada", last_name="Lovelace", custom_fields={})
            db_session.add(attendee)
            db_session.flush()
        registration = models.Registration(
            event_id=event.id,
            ticket_type_id=ticket.id,
            attendee_id=attendee.id,
            status=status,
            payment_status=fields.pop("payment_status", "PAID"),
            qr_code=fields.pop("qr_code", generate_qr_code()),
            **fields,
        )
        db_session.add(registration)
        if status != "CANCELLED":
            ticket.sold_count = (ticket.sold_count or 0) + 1
        db_session.commit()
        db_session.refresh(registration)
        return registration
    return _create


@pytest.fixture
def org_admin(organization_factory, user_factory):
    """An organization with one ADMIN; ``headers`` signs requests in as that admin."""
    org = organization_factory("Acme Events")
    admin = user_factory("admin@acme.example", role="ADMIN", organization=org)
    return SimpleNamespace(org=org, user=admin, headers=auth(admin))


@pytest.fixture
def published_event(org_admin, event_factory):
    return event_factory(org_admin.org)
