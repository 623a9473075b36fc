"""
Permission helpers for role and event-scope checks.

Route handlers call these after resolving the acting context; each raises
the HTTPException the caller should see.
"""
import uuid
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from eventdesk.db import models
from eventdesk.db.repositories import events as event_repo
from eventdesk.utils.role_permissions import (
    role_allows_manage,
    role_allows_review,
    role_allows_write,
    role_is_restricted,
)

EVENT_NOT_FOUND = "Event not found"


def _forbidden(detail: str = "Forbidden") -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def require_organization(current_user: Dict[str, Any]) -> uuid.UUID:
    """Return the caller's organization id; org-less callers have nothing to act on."""
    org_id = current_user.get("organization_id")
    if org_id is None:
        raise _forbidden()
    return org_id


def require_write(current_user: Dict[str, Any]) -> None:
    """Deny API keys, reviewers and submitters on mutating routes."""
    if current_user.get("from_api_key") or not role_allows_write(current_user.get("role")):
        raise _forbidden()


def require_manage(current_user: Dict[str, Any]) -> uuid.UUID:
    """ADMIN and SUPER_ADMIN only; returns the organization id they manage."""
    if current_user.get("from_api_key") or not role_allows_manage(current_user.get("role")):
        raise _forbidden()
    return require_organization(current_user)


def is_event_reviewer(event: models.Event, current_user: Dict[str, Any]) -> bool:
    user_id = current_user.get("id")
    return user_id is not None and str(user_id) in {str(r) for r in event.reviewer_user_ids()}


def can_review_abstracts(event: models.Event, current_user: Dict[str, Any]) -> bool:
    """Admins of the owning organization, or reviewers assigned to the event."""
    role = current_user.get("role")
    if current_user.get("from_api_key") or not role_allows_review(role):
        return False
    if role_is_restricted(role):
        return is_event_reviewer(event, current_user)
    return event.organization_id == current_user.get("organization_id")


def can_read_event(event: models.Event, current_user: Dict[str, Any]) -> bool:
    if role_is_restricted(current_user.get("role")):
        return is_event_reviewer(event, current_user)
    return event.organization_id == current_user.get("organization_id")


def _load_event(db: Session, event_id: uuid.UUID) -> Optional[models.Event]:
    return db.query(models.Event).filter(models.Event.id == event_id).first()


def get_readable_event(db: Session, event_id: uuid.UUID, current_user: Dict[str, Any]) -> models.Event:
    """Return the event when the caller may read it, else 404."""
    event = _load_event(db, event_id)
    if event is None or not can_read_event(event, current_user):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=EVENT_NOT_FOUND)
    return event


def get_writable_event(db: Session, event_id: uuid.UUID, current_user: Dict[str, Any]) -> models.Event:
    """Return an event of the caller's organization the caller may modify."""
    require_write(current_user)
    org_id = require_organization(current_user)
    event = event_repo.get_event_in_org(db, event_id=event_id, organization_id=org_id)
    if event is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=EVENT_NOT_FOUND)
    return event


def visible_events(db: Session, current_user: Dict[str, Any], status_filter: Optional[str] = None) -> List[models.Event]:
    """Events the caller can list: the organization's, or assigned ones for reviewers."""
    if role_is_restricted(current_user.get("role")):
        query = db.query(models.Event)
        if status_filter:
            query = query.filter(models.Event.status == status_filter)
        # reviewer ids live in a JSON column; filtered here to stay dialect-neutral
        events = [e for e in query.order_by(models.Event.start_date.desc()).all() if is_event_reviewer(e, current_user)]
        return events
    org_id = current_user.get("organization_id")
    if org_id is None:
        return []
    return event_repo.list_events(db, organization_id=org_id, status=status_filter)
