"""
Events API endpoints.

Event CRUD for the caller's organization. Reads accept API keys and show
reviewers only the events they are assigned to.
"""
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy.orm import Session

from eventdesk.audit import AuditAction, log as audit_log
from eventdesk.api.deps import get_current_user_context, get_org_context
from eventdesk.api.permissions import (
    get_readable_event,
    get_writable_event,
    require_organization,
    require_write,
    visible_events,
)
from eventdesk.db import models, schemas
from eventdesk.db.database import get_db
from eventdesk.db.models.base import as_utc
from eventdesk.db.repositories import events as event_repo
from eventdesk.utils.identifiers import slugify

router = APIRouter(prefix="/events", tags=["events"])


def _with_counts(event: models.Event, counts: Optional[schemas.EventCounts], model=schemas.Event):
    item = model.model_validate(event)
    return item.model_copy(update={"counts": counts or schemas.EventCounts()})


@router.get("", response_model=List[schemas.Event])
def list_events(
    status_filter: Optional[models.EventStatus] = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
    context=Depends(get_org_context),
):
    _user, current_user = context
    events = visible_events(db, current_user, status_filter.value if status_filter else None)
    counts = event_repo.event_counts(db, [e.id for e in events])
    return [_with_counts(e, counts.get(e.id)) for e in events]


@router.post("", response_model=schemas.Event, status_code=status.HTTP_201_CREATED)
def create_event(
    payload: schemas.EventCreate,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    require_write(current_user)
    org_id = require_organization(current_user)
    event = event_repo.create_event(db, organization_id=org_id, payload=payload)
    audit_log(
        db,
        action=AuditAction.CREATE,
        entity_type="Event",
        entity_id=event.id,
        event_id=event.id,
        actor=current_user,
        changes=payload.model_dump(exclude_none=True),
        request=request,
    )
    return _with_counts(event, None)


@router.get("/{event_id}", response_model=schemas.EventDetail)
def get_event(
    event_id: uuid.UUID,
    db: Session = Depends(get_db),
    context=Depends(get_org_context),
):
    _user, current_user = context
    event = get_readable_event(db, event_id, current_user)
    counts = event_repo.event_counts(db, [event.id]).get(event.id)
    return _with_counts(event, counts, model=schemas.EventDetail)


@router.put("/{event_id}", response_model=schemas.Event)
def update_event(
    event_id: uuid.UUID,
    payload: schemas.EventUpdate,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    event = get_writable_event(db, event_id, current_user)

    if payload.slug is not None:
        payload.slug = slugify(payload.slug)
        if not payload.slug:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid slug")
        if event_repo.slug_taken(db, organization_id=event.organization_id, slug=payload.slug, exclude_id=event.id):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Slug already in use")

    start = payload.start_date or as_utc(event.start_date)
    end = payload.end_date or as_utc(event.end_date)
    if end < start:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="End date must be after start date")

    event = event_repo.update_event(db, event, payload)
    audit_log(
        db,
        action=AuditAction.UPDATE,
        entity_type="Event",
        entity_id=event.id,
        event_id=event.id,
        actor=current_user,
        changes=payload.model_dump(exclude_unset=True),
        request=request,
    )
    counts = event_repo.event_counts(db, [event.id]).get(event.id)
    return _with_counts(event, counts)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(
    event_id: uuid.UUID,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    event = get_writable_event(db, event_id, current_user)
    snapshot = {"name": event.name, "slug": event.slug}
    event_repo.delete_event(db, event)
    audit_log(
        db,
        action=AuditAction.DELETE,
        entity_type="Event",
        entity_id=event_id,
        event_id=event_id,
        actor=current_user,
        changes=snapshot,
        request=request,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
