"""
Event repository functions.

Implements event CRUD scoped to an organization, per-event child counts and
the public lookup by slug or id.
"""
from __future__ import annotations

import uuid
from typing import Dict, Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from eventdesk.db import models, schemas
from eventdesk.utils.identifiers import slugify, unique_slug

_COUNTED = (
    ("registrations", models.Registration),
    ("speakers", models.Speaker),
    ("sessions", models.EventSession),
    ("tracks", models.Track),
)


def list_events(db: Session, *, organization_id: uuid.UUID, status: Optional[str] = None) -> List[models.Event]:
    query = db.query(models.Event).filter(models.Event.organization_id == organization_id)
    if status:
        query = query.filter(models.Event.status == status)
    return query.order_by(models.Event.start_date.desc()).all()


def get_event_in_org(db: Session, *, event_id: uuid.UUID, organization_id: uuid.UUID) -> Optional[models.Event]:
    return (
        db.query(models.Event)
        .filter(models.Event.id == event_id, models.Event.organization_id == organization_id)
        .first()
    )


def get_public_event(db: Session, slug_or_id: str) -> Optional[models.Event]:
    """Find a published or live event by slug, falling back to its id."""
    public = db.query(models.Event).filter(models.Event.status.in_(models.PUBLIC_EVENT_STATUSES))
    event = public.filter(models.Event.slug == slug_or_id).order_by(models.Event.created_at.asc()).first()
    if event is not None:
        return event
    try:
        event_id = uuid.UUID(slug_or_id)
    except ValueError:
        return None
    return public.filter(models.Event.id == event_id).first()


def slug_taken(
    db: Session, *, organization_id: uuid.UUID, slug: str, exclude_id: Optional[uuid.UUID] = None
) -> bool:
    query = db.query(models.Event.id).filter(
        models.Event.organization_id == organization_id, models.Event.slug == slug
    )
    if exclude_id is not None:
        query = query.filter(models.Event.id != exclude_id)
    return query.first() is not None


def event_counts(db: Session, event_ids: Iterable[uuid.UUID]) -> Dict[uuid.UUID, schemas.EventCounts]:
    """Return registration/speaker/session/track counts keyed by event id."""
    ids = list(event_ids)
    raw: Dict[uuid.UUID, dict] = {eid: {} for eid in ids}
    if not ids:
        return {}
    for label, model in _COUNTED:
        rows = (
            db.query(model.event_id, func.count(model.id))
            .filter(model.event_id.in_(ids))
            .group_by(model.event_id)
            .all()
        )
        for event_id, count in rows:
            raw[event_id][label] = count
    return {eid: schemas.EventCounts(**values) for eid, values in raw.items()}


def create_event(db: Session, *, organization_id: uuid.UUID, payload: schemas.EventCreate) -> models.Event:
    data = payload.model_dump(exclude_none=True)
    slug = slugify(payload.name) or "event"
    if slug_taken(db, organization_id=organization_id, slug=slug):
        slug = unique_slug(slug)
    data["status"] = payload.status.value
    event = models.Event(organization_id=organization_id, slug=slug, settings={}, **data)
    db.add(event)
    db.commit()
    db.refresh(event)
    return event


def update_event(db: Session, event: models.Event, payload: schemas.EventUpdate) -> models.Event:
    update_data = payload.model_dump(exclude_unset=True)
    settings = update_data.pop("settings", None)
    for key, value in update_data.items():
        if value is None and key in ("name", "slug", "start_date", "end_date", "status", "timezone"):
            continue
        if key == "status":
            value = value.value if hasattr(value, "value") else value
        setattr(event, key, value)
    if settings is not None:
        event.settings = {**(event.settings or {}), **settings}
    db.commit()
    db.refresh(event)
    return event


def set_reviewer_ids(db: Session, event: models.Event, reviewer_ids: List[str]) -> models.Event:
    event.settings = {**(event.settings or {}), "reviewerUserIds": list(reviewer_ids)}
    db.commit()
    db.refresh(event)
    return event


def delete_event(db: Session, event: models.Event) -> None:
    db.delete(event)
    db.commit()
