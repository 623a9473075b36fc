"""
Ticket type endpoints for an event.
"""
import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from eventdesk.audit import AuditAction, log as audit_log
from eventdesk.api.deps import get_current_user_context, get_org_context
from eventdesk.api.permissions import get_readable_event, get_writable_event
from eventdesk.db import schemas
from eventdesk.db.database import get_db
from eventdesk.db.repositories import tickets as ticket_repo

router = APIRouter(prefix="/events/{event_id}/tickets", tags=["tickets"])


def _get_ticket(db: Session, event_id: uuid.UUID, ticket_id: uuid.UUID):
    ticket = ticket_repo.get_ticket_type(db, event_id=event_id, ticket_type_id=ticket_id)
    if ticket is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Ticket type not found")
    return ticket


@router.get("", response_model=List[schemas.TicketType])
def list_ticket_types(
    event_id: uuid.UUID,
    db: Session = Depends(get_db),
    context=Depends(get_org_context),
):
    _user, current_user = context
    event = get_readable_event(db, event_id, current_user)
    return ticket_repo.list_ticket_types(db, event_id=event.id)


@router.post("", response_model=schemas.TicketType, status_code=status.HTTP_201_CREATED)
def create_ticket_type(
    event_id: uuid.UUID,
    payload: schemas.TicketTypeCreate,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    event = get_writable_event(db, event_id, current_user)
    ticket = ticket_repo.create_ticket_type(db, event_id=event.id, payload=payload)
    audit_log(
        db,
        action=AuditAction.CREATE,
        entity_type="TicketType",
        entity_id=ticket.id,
        event_id=event.id,
        actor=current_user,
        changes=payload.model_dump(exclude_none=True),
        request=request,
    )
    return ticket


@router.get("/{ticket_id}", response_model=schemas.TicketType)
def get_ticket_type(
    event_id: uuid.UUID,
    ticket_id: uuid.UUID,
    db: Session = Depends(get_db),
    context=Depends(get_org_context),
):
    _user, current_user = context
    event = get_readable_event(db, event_id, current_user)
    return _get_ticket(db, event.id, ticket_id)


@router.put("/{ticket_id}", response_model=schemas.TicketType)
def update_ticket_type(
    event_id: uuid.UUID,
    ticket_id: uuid.UUID,
    payload: schemas.TicketTypeUpdate,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    event = get_writable_event(db, event_id, current_user)
    ticket = _get_ticket(db, event.id, ticket_id)
    if payload.quantity is not None and payload.quantity < ticket.sold_count:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Quantity cannot be less than sold count ({ticket.sold_count})",
        )
    ticket = ticket_repo.update_ticket_type(db, ticket, payload)
    audit_log(
        db,
        action=AuditAction.UPDATE,
        entity_type="TicketType",
        entity_id=ticket.id,
        event_id=event.id,
        actor=current_user,
        changes=payload.model_dump(exclude_unset=True),
        request=request,
    )
    return ticket


@router.delete("/{ticket_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_ticket_type(
    event_id: uuid.UUID,
    ticket_id: uuid.UUID,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    event = get_writable_event(db, event_id, current_user)
    ticket = _get_ticket(db, event.id, ticket_id)
    if ticket.registration_count > 0:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot delete ticket type with registrations")
    name = ticket.name
    ticket_repo.delete_ticket_type(db, ticket)
    audit_log(
        db,
        action=AuditAction.DELETE,
        entity_type="TicketType",
        entity_id=ticket_id,
        event_id=event.id,
        actor=current_user,
        changes={"name": name},
        request=request,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
