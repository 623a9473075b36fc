"""
Registrations API endpoints.

Attendee signups against an event's ticket types, the CSV export and
per-registration e-mails. ``register_for_event`` is shared with the public
registration page so both paths apply the same ticket rules.
"""
import csv
import io
import logging
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy.orm import Session

from eventdesk.audit import AuditAction, log as audit_log
from eventdesk.api.deps import get_current_user_context, get_org_context
from eventdesk.api.permissions import get_readable_event, get_writable_event
from eventdesk.db import models, schemas
from eventdesk.db.database import get_db
from eventdesk.db.models.base import as_utc
from eventdesk.db.repositories import registrations as registration_repo
from eventdesk.db.repositories import tickets as ticket_repo
from eventdesk.services.notification_service import NotificationService, get_notification_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events/{event_id}/registrations", tags=["registrations"])

CANCELLED = models.RegistrationStatus.CANCELLED.value

EXPORT_COLUMNS = [
    "Registration ID",
    "QR Code",
    "Status",
    "Payment Status",
    "Ticket Type",
    "First Name",
    "Last Name",
    "Email",
    "Company",
    "Job Title",
    "Phone",
    "Registered At",
    "Checked In At",
]


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def _get_registration(db: Session, event_id: uuid.UUID, registration_id: uuid.UUID) -> models.Registration:
    registration = registration_repo.get_registration(db, event_id=event_id, registration_id=registration_id)
    if registration is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Registration not found")
    return registration


def _sellable_ticket(db: Session, event_id: uuid.UUID, ticket_type_id: uuid.UUID) -> models.TicketType:
    ticket = ticket_repo.get_ticket_type(db, event_id=event_id, ticket_type_id=ticket_type_id)
    if ticket is None or not ticket.is_active:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Ticket type not found or inactive")
    reason = ticket_repo.unavailable_reason(ticket)
    if reason:
        raise _bad_request(reason)
    return ticket


def register_for_event(
    db: Session,
    event: models.Event,
    payload,
    *,
    duplicate_detail: str = "Attendee already registered for this event",
) -> models.Registration:
    """Validate the ticket, reuse or create the attendee and book one ticket.

    ``payload`` is a RegistrationCreate or PublicRegistrationRequest.
    """
    ticket = _sellable_ticket(db, event.id, payload.ticket_type_id)
    attendee_fields = {
        name: getattr(payload, name, None)
        for name in ("company", "job_title", "phone", "city", "country", "dietary_reqs", "custom_fields")
    }
    attendee = registration_repo.find_or_create_attendee(
        db,
        email=payload.email,
        first_name=payload.first_name,
        last_name=payload.last_name,
        **attendee_fields,
    )
    if registration_repo.has_active_registration(db, event_id=event.id, attendee_id=attendee.id):
        db.rollback()
        raise _bad_request(duplicate_detail)
    return registration_repo.create_registration(
        db,
        event_id=event.id,
        ticket=ticket,
        attendee=attendee,
        notes=getattr(payload, "notes", None),
    )


@router.get("", response_model=List[schemas.Registration])
def list_registrations(
    event_id: uuid.UUID,
    status_filter: Optional[models.RegistrationStatus] = Query(default=None, alias="status"),
    payment_status: Optional[models.PaymentStatus] = Query(default=None),
    ticket_type_id: Optional[uuid.UUID] = Query(default=None),
    db: Session = Depends(get_db),
    context=Depends(get_org_context),
):
    _user, current_user = context
    event = get_readable_event(db, event_id, current_user)
    return registration_repo.list_registrations(
        db,
        event_id=event.id,
        status=status_filter.value if status_filter else None,
        payment_status=payment_status.value if payment_status else None,
        ticket_type_id=ticket_type_id,
    )


def _iso(value) -> str:
    return as_utc(value).isoformat() if value is not None else ""


@router.get("/export")
def export_registrations(
    event_id: uuid.UUID,
    status_filter: Optional[models.RegistrationStatus] = Query(default=None, alias="status"),
    payment_status: Optional[models.PaymentStatus] = Query(default=None),
    ticket_type_id: Optional[uuid.UUID] = Query(default=None),
    db: Session = Depends(get_db),
    context=Depends(get_org_context),
):
    """Download the (filtered) registrations as CSV, one row per registration."""
    _user, current_user = context
    event = get_readable_event(db, event_id, current_user)
    registrations = registration_repo.list_registrations(
        db,
        event_id=event.id,
        status=status_filter.value if status_filter else None,
        payment_status=payment_status.value if payment_status else None,
        ticket_type_id=ticket_type_id,
    )
    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(EXPORT_COLUMNS)
    for r in registrations:
        a = r.attendee
        writer.writerow([
            str(r.id),
            r.qr_code or "",
            r.status,
            r.payment_status,
            r.ticket_type.name if r.ticket_type else "",
            a.first_name,
            a.last_name,
            a.email,
            a.company or "",
            a.job_title or "",
            a.phone or "",
            _iso(r.created_at),
            _iso(r.checked_in_at),
        ])
    filename = f"{event.slug}-registrations.csv"
    return Response(
        content=buf.getvalue(),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("", response_model=schemas.Registration, status_code=status.HTTP_201_CREATED)
def create_registration(
    event_id: uuid.UUID,
    payload: schemas.RegistrationCreate,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    event = get_writable_event(db, event_id, current_user)
    registration = register_for_event(db, event, payload)
    audit_log(
        db,
        action=AuditAction.CREATE,
        entity_type="Registration",
        entity_id=registration.id,
        event_id=event.id,
        actor=current_user,
        changes={
            "email": payload.email,
            "ticket_type_id": payload.ticket_type_id,
            "status": registration.status,
            "qr_code": registration.qr_code,
        },
        request=request,
    )
    return registration


@router.get("/{registration_id}", response_model=schemas.RegistrationDetail)
def get_registration(
    event_id: uuid.UUID,
    registration_id: uuid.UUID,
    db: Session = Depends(get_db),
    context=Depends(get_org_context),
):
    _user, current_user = context
    event = get_readable_event(db, event_id, current_user)
    return _get_registration(db, event.id, registration_id)


@router.put("/{registration_id}", response_model=schemas.Registration)
def update_registration(
    event_id: uuid.UUID,
    registration_id: uuid.UUID,
    payload: schemas.RegistrationUpdate,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    event = get_writable_event(db, event_id, current_user)
    registration = _get_registration(db, event.id, registration_id)
    before = {
        "status": registration.status,
        "payment_status": registration.payment_status,
        "ticket_type_id": registration.ticket_type_id,
        "notes": registration.notes,
    }

    old_ticket = registration.ticket_type
    new_ticket = old_ticket
    if payload.ticket_type_id is not None and payload.ticket_type_id != registration.ticket_type_id:
        new_ticket = ticket_repo.get_ticket_type(db, event_id=event.id, ticket_type_id=payload.ticket_type_id)
        if new_ticket is None or not new_ticket.is_active:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Ticket type not found or inactive")

    was_active = registration.status != CANCELLED
    new_status = payload.status.value if payload.status is not None else registration.status
    will_be_active = new_status != CANCELLED

    # A ticket is taken on the target type whenever the registration ends up
    # active and did not already hold one on that same type.
    if will_be_active and (not was_active or new_ticket is not old_ticket):
        if new_ticket.sold_count >= new_ticket.quantity:
            raise _bad_request("Tickets sold out")
        if was_active:
            old_ticket.sold_count = max(old_ticket.sold_count - 1, 0)
        new_ticket.sold_count += 1
    elif was_active and not will_be_active:
        old_ticket.sold_count = max(old_ticket.sold_count - 1, 0)

    registration.ticket_type = new_ticket
    registration.status = new_status
    if payload.payment_status is not None:
        registration.payment_status = payload.payment_status.value
    if "notes" in payload.model_fields_set:
        registration.notes = payload.notes or None
    if payload.attendee is not None:
        registration_repo.update_attendee(db, registration.attendee, payload.attendee.model_dump(exclude_unset=True))
    db.commit()
    db.refresh(registration)

    audit_log(
        db,
        action=AuditAction.UPDATE,
        entity_type="Registration",
        entity_id=registration.id,
        event_id=event.id,
        actor=current_user,
        changes={"before": before, "after": payload.model_dump(exclude_unset=True)},
        request=request,
    )
    return registration


@router.delete("/{registration_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_registration(
    event_id: uuid.UUID,
    registration_id: uuid.UUID,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    event = get_writable_event(db, event_id, current_user)
    registration = _get_registration(db, event.id, registration_id)
    snapshot = {"status": registration.status, "attendee_email": registration.attendee.email}
    registration_repo.delete_registration(db, registration)
    audit_log(
        db,
        action=AuditAction.DELETE,
        entity_type="Registration",
        entity_id=registration_id,
        event_id=event.id,
        actor=current_user,
        changes=snapshot,
        request=request,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{registration_id}/email", response_model=schemas.EmailSendResult)
def email_registration(
    event_id: uuid.UUID,
    registration_id: uuid.UUID,
    payload: schemas.RegistrationEmailRequest,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
    notifications: NotificationService = Depends(get_notification_service),
):
    _user, current_user = user_context
    event = get_writable_event(db, event_id, current_user)
    registration = _get_registration(db, event.id, registration_id)
    attendee = registration.attendee

    if payload.type == "confirmation":
        result = notifications.send_registration_confirmation(registration)
    elif payload.type == "reminder":
        result = notifications.send_event_reminder(registration, payload.days_until_event)
    else:
        if not payload.custom_subject or not payload.custom_message:
            raise _bad_request("Subject and message are required for custom emails")
        result = notifications.send_custom(
            recipient=attendee.email,
            recipient_name=attendee.first_name,
            subject=payload.custom_subject,
            message=payload.custom_message,
            event=event,
        )

    if not result.get("success"):
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=result.get("error") or "Failed to send email")

    audit_log(
        db,
        action=AuditAction.EMAIL_SENT,
        entity_type="Registration",
        entity_id=registration.id,
        event_id=event.id,
        actor=current_user,
        changes={"type": payload.type, "recipient": attendee.email},
        request=request,
    )
    return schemas.EmailSendResult(
        success=True,
        message=f"Email sent to {attendee.email}",
        message_id=result.get("message_id"),
    )
