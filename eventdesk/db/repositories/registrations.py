"""
Registration and attendee repository functions.

Keeps ticket ``sold_count`` in step with registration status: every
registration that is not CANCELLED holds one sold ticket.
"""
from __future__ import annotations

import uuid
from datetime import datetime, UTC
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from eventdesk.db import models
from eventdesk.db.models.enums import AccommodationStatus, RegistrationStatus, PaymentStatus
from eventdesk.utils.identifiers import generate_qr_code

CANCELLED = RegistrationStatus.CANCELLED.value


def list_registrations(
    db: Session,
    *,
    event_id: uuid.UUID,
    status: Optional[str] = None,
    payment_status: Optional[str] = None,
    ticket_type_id: Optional[uuid.UUID] = None,
) -> List[models.Registration]:
    query = (
        db.query(models.Registration)
        .options(joinedload(models.Registration.attendee), joinedload(models.Registration.ticket_type))
        .filter(models.Registration.event_id == event_id)
    )
    if status:
        query = query.filter(models.Registration.status == status)
    if payment_status:
        query = query.filter(models.Registration.payment_status == payment_status)
    if ticket_type_id:
        query = query.filter(models.Registration.ticket_type_id == ticket_type_id)
    return query.order_by(models.Registration.created_at.desc()).all()


def get_registration(db: Session, *, event_id: uuid.UUID, registration_id: uuid.UUID) -> Optional[models.Registration]:
    return (
        db.query(models.Registration)
        .filter(models.Registration.id == registration_id, models.Registration.event_id == event_id)
        .first()
    )


def get_by_qr_code(db: Session, *, event_id: uuid.UUID, qr_code: str) -> Optional[models.Registration]:
    return (
        db.query(models.Registration)
        .filter(models.Registration.qr_code == qr_code, models.Registration.event_id == event_id)
        .first()
    )


def find_or_create_attendee(db: Session, *, email: str, first_name: str, last_name: str, **fields) -> models.Attendee:
    """Reuse the attendee with this e-mail or add a new one (flushed, not committed)."""
    email = email.strip().lower()
    attendee = db.query(models.Attendee).filter(models.Attendee.email == email).first()
    if attendee is not None:
        return attendee
    attendee = models.Attendee(
        email=email,
        first_name=first_name,
        last_name=last_name,
        custom_fields=fields.pop("custom_fields", None) or {},
        **{k: (v or None) for k, v in fields.items()},
    )
    db.add(attendee)
    db.flush()
    return attendee


def has_active_registration(db: Session, *, event_id: uuid.UUID, attendee_id: uuid.UUID) -> bool:
    return (
        db.query(models.Registration.id)
        .filter(
            models.Registration.event_id == event_id,
            models.Registration.attendee_id == attendee_id,
            models.Registration.status != CANCELLED,
        )
        .first()
        is not None
    )


def create_registration(
    db: Session,
    *,
    event_id: uuid.UUID,
    ticket: models.TicketType,
    attendee: models.Attendee,
    notes: Optional[str] = None,
) -> models.Registration:
    registration = models.Registration(
        event_id=event_id,
        ticket_type_id=ticket.id,
        attendee_id=attendee.id,
        status=(RegistrationStatus.PENDING if ticket.requires_approval else RegistrationStatus.CONFIRMED).value,
        payment_status=(PaymentStatus.PAID if float(ticket.price or 0) == 0 else PaymentStatus.UNPAID).value,
        qr_code=generate_qr_code(),
        notes=notes or None,
    )
    db.add(registration)
    ticket.sold_count = (ticket.sold_count or 0) + 1
    db.commit()
    db.refresh(registration)
    return registration


def update_attendee(db: Session, attendee: models.Attendee, changes: dict) -> None:
    for key, value in changes.items():
        if key in ("first_name", "last_name") and not value:
            continue
        setattr(attendee, key, value if value != "" else None)


def check_in(db: Session, registration: models.Registration) -> models.Registration:
    registration.status = RegistrationStatus.CHECKED_IN.value
    registration.checked_in_at = datetime.now(UTC)
    db.commit()
    db.refresh(registration)
    return registration


def delete_registration(db: Session, registration: models.Registration) -> None:
    booking = registration.accommodation
    if booking is not None and booking.status != AccommodationStatus.CANCELLED.value and booking.room_type is not None:
        booking.room_type.booked_rooms = max((booking.room_type.booked_rooms or 0) - 1, 0)
    if registration.status != CANCELLED and registration.ticket_type is not None:
        registration.ticket_type.sold_count = max((registration.ticket_type.sold_count or 0) - 1, 0)
    db.delete(registration)
    db.commit()
