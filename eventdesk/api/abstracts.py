"""
Dashboard endpoints for abstract review.

Writers (SUPER_ADMIN, ADMIN, ORGANIZER) manage abstracts of their
organization's events. Review decisions, notes and scores are reserved to
admins and to reviewers assigned to the event; the speaker is e-mailed when a
review status is set.
"""
import logging
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy.orm import Session

from eventdesk.audit import AuditAction, log as audit_log
from eventdesk.api.deps import get_current_user_context, get_org_context
from eventdesk.api.permissions import can_review_abstracts, get_readable_event, get_writable_event
from eventdesk.db import models, schemas
from eventdesk.db.database import get_db
from eventdesk.db.models.enums import ABSTRACT_REVIEW_STATUSES
from eventdesk.db.repositories import abstracts as abstract_repo
from eventdesk.db.repositories import program as program_repo
from eventdesk.services.notification_service import NotificationService, get_notification_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events/{event_id}/abstracts", tags=["abstracts"])

REVIEW_FIELDS = {"review_notes", "review_score"}


def _get_abstract(db: Session, event_id: uuid.UUID, abstract_id: uuid.UUID) -> models.Abstract:
    abstract = abstract_repo.get_abstract(db, event_id=event_id, abstract_id=abstract_id)
    if abstract is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Abstract not found")
    return abstract


def _require_track(db: Session, event_id: uuid.UUID, track_id: Optional[uuid.UUID]) -> None:
    if track_id is not None and program_repo.get_track(db, event_id=event_id, track_id=track_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Track not found")


@router.get("", response_model=List[schemas.Abstract])
def list_abstracts(
    event_id: uuid.UUID,
    status_filter: Optional[models.AbstractStatus] = Query(default=None, alias="status"),
    track_id: Optional[uuid.UUID] = Query(default=None),
    speaker_id: Optional[uuid.UUID] = Query(default=None),
    db: Session = Depends(get_db),
    context=Depends(get_org_context),
):
    _user, current_user = context
    event = get_readable_event(db, event_id, current_user)
    return abstract_repo.list_abstracts(
        db,
        event_id=event.id,
        status=status_filter.value if status_filter else None,
        track_id=track_id,
        speaker_id=speaker_id,
    )


@router.post("", response_model=schemas.Abstract, status_code=status.HTTP_201_CREATED)
def create_abstract(
    event_id: uuid.UUID,
    payload: schemas.AbstractCreate,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    event = get_writable_event(db, event_id, current_user)
    if program_repo.get_speaker(db, event_id=event.id, speaker_id=payload.speaker_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Speaker not found")
    _require_track(db, event.id, payload.track_id)

    abstract, _token = abstract_repo.create_abstract(
        db,
        event_id=event.id,
        speaker_id=payload.speaker_id,
        title=payload.title,
        content=payload.content,
        track_id=payload.track_id,
        status=payload.status,
    )
    audit_log(
        db,
        action=AuditAction.CREATE,
        entity_type="Abstract",
        entity_id=abstract.id,
        event_id=event.id,
        actor=current_user,
        changes=payload.model_dump(exclude_none=True),
        request=request,
    )
    return abstract


@router.get("/{abstract_id}", response_model=schemas.Abstract)
def get_abstract(
    event_id: uuid.UUID,
    abstract_id: uuid.UUID,
    db: Session = Depends(get_db),
    context=Depends(get_org_context),
):
    _user, current_user = context
    event = get_readable_event(db, event_id, current_user)
    return _get_abstract(db, event.id, abstract_id)


@router.put("/{abstract_id}", response_model=schemas.Abstract)
def update_abstract(
    event_id: uuid.UUID,
    abstract_id: uuid.UUID,
    payload: schemas.AbstractUpdate,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
    notifications: NotificationService = Depends(get_notification_service),
):
    _user, current_user = user_context
    fields = payload.model_dump(exclude_unset=True)
    sets_review_status = payload.status is not None and payload.status.value in ABSTRACT_REVIEW_STATUSES
    edits_content = bool(set(fields) - REVIEW_FIELDS - {"status"}) or (
        payload.status is not None and not sets_review_status
    )

    # Assigned reviewers only score and decide; content edits need a writer of the organization
    if edits_content:
        event = get_writable_event(db, event_id, current_user)
    else:
        event = get_readable_event(db, event_id, current_user)
    abstract = _get_abstract(db, event.id, abstract_id)

    if sets_review_status and not can_review_abstracts(event, current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only admins and assigned reviewers can approve, reject, or set review status",
        )
    if REVIEW_FIELDS & set(fields) and not can_review_abstracts(event, current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only admins and assigned reviewers can add review notes or scores",
        )
    if "track_id" in fields:
        _require_track(db, event.id, fields["track_id"])

    previous_status = abstract.status
    abstract = abstract_repo.update_abstract(db, abstract, payload)
    reviewed = sets_review_status and abstract.status != previous_status

    audit_log(
        db,
        action=AuditAction.REVIEW if reviewed else AuditAction.UPDATE,
        entity_type="Abstract",
        entity_id=abstract.id,
        event_id=event.id,
        actor=current_user,
        changes={**fields, "previous_status": previous_status} if reviewed else fields,
        request=request,
    )

    if reviewed:
        result = notifications.send_abstract_status_update(abstract)
        if not result.get("success"):
            logger.warning("abstract_status_email_failed abstract=%s error=%s", abstract.id, result.get("error"))
    return abstract


@router.delete("/{abstract_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_abstract(
    event_id: uuid.UUID,
    abstract_id: uuid.UUID,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    event = get_writable_event(db, event_id, current_user)
    abstract = _get_abstract(db, event.id, abstract_id)
    if abstract.session is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot delete abstract that is linked to a session"
        )
    title = abstract.title
    abstract_repo.delete_abstract(db, abstract)
    audit_log(
        db,
        action=AuditAction.DELETE,
        entity_type="Abstract",
        entity_id=abstract_id,
        event_id=event.id,
        actor=current_user,
        changes={"title": title},
        request=request,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
