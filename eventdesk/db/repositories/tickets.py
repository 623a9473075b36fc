"""
Ticket type repository functions and availability rules.
"""
from __future__ import annotations

import uuid
from datetime import datetime, UTC
from typing import List, Optional

from sqlalchemy.orm import Session

from eventdesk.db import models, schemas
from eventdesk.db.models.base import as_utc


def list_ticket_types(db: Session, *, event_id: uuid.UUID) -> List[models.TicketType]:
    return (
        db.query(models.TicketType)
        .filter(models.TicketType.event_id == event_id)
        .order_by(models.TicketType.created_at.asc())
        .all()
    )


def list_active_ticket_types(db: Session, *, event_id: uuid.UUID) -> List[models.TicketType]:
    return (
        db.query(models.TicketType)
        .filter(models.TicketType.event_id == event_id, models.TicketType.is_active.is_(True))
        .order_by(models.TicketType.price.asc(), models.TicketType.created_at.asc())
        .all()
    )


def get_ticket_type(db: Session, *, event_id: uuid.UUID, ticket_type_id: uuid.UUID) -> Optional[models.TicketType]:
    return (
        db.query(models.TicketType)
        .filter(models.TicketType.id == ticket_type_id, models.TicketType.event_id == event_id)
        .first()
    )


def create_ticket_type(db: Session, *, event_id: uuid.UUID, payload: schemas.TicketTypeCreate) -> models.TicketType:
    ticket = models.TicketType(event_id=event_id, **payload.model_dump(exclude_none=True))
    db.add(ticket)
    db.commit()
    db.refresh(ticket)
    return ticket


def update_ticket_type(db: Session, ticket: models.TicketType, payload: schemas.TicketTypeUpdate) -> models.TicketType:
    for key, value in payload.model_dump(exclude_unset=True).items():
        if value is None and key not in ("description", "sales_start", "sales_end"):
            continue
        setattr(ticket, key, value)
    db.commit()
    db.refresh(ticket)
    return ticket


def delete_ticket_type(db: Session, ticket: models.TicketType) -> None:
    db.delete(ticket)
    db.commit()


def unavailable_reason(ticket: models.TicketType, now: Optional[datetime] = None) -> Optional[str]:
    """Return why ``ticket`` cannot be sold right now, or None when it can."""
    now = now or datetime.now(UTC)
    if ticket.sold_count >= ticket.quantity:
        return "Tickets sold out"
    if ticket.sales_start is not None and as_utc(ticket.sales_start) > now:
        return "Ticket sales have not started"
    if ticket.sales_end is not None and as_utc(ticket.sales_end) < now:
        return "Ticket sales have ended"
    return None


def availability(ticket: models.TicketType, now: Optional[datetime] = None) -> dict:
    """Availability flags shown on the public event page."""
    now = now or datetime.now(UTC)
    available = max(ticket.quantity - ticket.sold_count, 0)
    sales_started = ticket.sales_start is None or as_utc(ticket.sales_start) <= now
    sales_ended = ticket.sales_end is not None and as_utc(ticket.sales_end) < now
    sold_out = available <= 0
    return {
        "available": available,
        "sold_out": sold_out,
        "sales_started": sales_started,
        "sales_ended": sales_ended,
        "can_purchase": bool(ticket.is_active) and not sold_out and sales_started and not sales_ended,
    }
