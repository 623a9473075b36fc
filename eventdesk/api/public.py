"""
Anonymous public event page endpoints.

Only PUBLISHED and LIVE events are visible. Registration applies the same
ticket rules as the dashboard and is rate limited per IP and per e-mail.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from eventdesk.api.registrations import register_for_event
from eventdesk.db import models, schemas
from eventdesk.db.database import get_db
from eventdesk.db.repositories import events as event_repo
from eventdesk.db.repositories import tickets as ticket_repo
from eventdesk.services.notification_service import NotificationService, get_notification_service
from eventdesk.utils.rate_limit import client_ip, enforce_rate_limit

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/public/events", tags=["public"])

RATE_WINDOW_SECONDS = 15 * 60
REGISTER_LIMIT_PER_IP = 30
REGISTER_LIMIT_PER_EMAIL = 5


def load_public_event(db: Session, slug: str) -> models.Event:
    event = event_repo.get_public_event(db, slug)
    if event is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
    return event


@router.get("/{slug}", response_model=schemas.PublicEvent)
def get_public_event(slug: str, db: Session = Depends(get_db)):
    event = load_public_event(db, slug)
    tickets = [
        schemas.PublicTicketType(
            id=t.id,
            name=t.name,
            description=t.description,
            price=t.price,
            currency=t.currency,
            quantity=t.quantity,
            sold_count=t.sold_count,
            max_per_order=t.max_per_order,
            sales_start=t.sales_start,
            sales_end=t.sales_end,
            **ticket_repo.availability(t),
        )
        for t in ticket_repo.list_active_ticket_types(db, event_id=event.id)
    ]
    org = event.organization
    return schemas.PublicEvent(
        id=event.id,
        name=event.name,
        slug=event.slug,
        description=event.description,
        start_date=event.start_date,
        end_date=event.end_date,
        timezone=event.timezone,
        venue=event.venue,
        address=event.address,
        city=event.city,
        country=event.country,
        banner_image=event.banner_image,
        organization=schemas.PublicOrganization(name=org.name, logo=org.logo),
        ticket_types=tickets,
    )


@router.post("/{slug}/register", response_model=schemas.PublicRegistrationResponse, status_code=status.HTTP_201_CREATED)
def public_register(
    slug: str,
    payload: schemas.PublicRegistrationRequest,
    request: Request,
    db: Session = Depends(get_db),
    notifications: NotificationService = Depends(get_notification_service),
):
    enforce_rate_limit(
        f"public-register:ip:{client_ip(request)}",
        limit=REGISTER_LIMIT_PER_IP,
        window_seconds=RATE_WINDOW_SECONDS,
    )
    enforce_rate_limit(
        f"public-register:email:{payload.email}",
        limit=REGISTER_LIMIT_PER_EMAIL,
        window_seconds=RATE_WINDOW_SECONDS,
    )
    event = load_public_event(db, slug)
    registration = register_for_event(
        db, event, payload, duplicate_detail="You are already registered for this event"
    )
    logger.info("public_registration event=%s registration=%s", event.slug, registration.id)

    result = notifications.send_registration_confirmation(registration)
    if not result.get("success"):
        logger.warning(
            "registration_confirmation_failed registration=%s error=%s", registration.id, result.get("error")
        )

    return schemas.PublicRegistrationResponse(
        id=registration.id,
        status=registration.status,
        qr_code=registration.qr_code,
        ticket_type=registration.ticket_type.name,
        event_name=event.name,
        event_start_date=event.start_date,
    )
