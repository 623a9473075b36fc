"""
Track endpoints: the thematic lanes sessions are scheduled in.
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
from eventdesk.db.repositories import program as program_repo

router = APIRouter(prefix="/events/{event_id}/tracks", tags=["tracks"])


def _get_track(db: Session, event_id: uuid.UUID, track_id: uuid.UUID):
    track = program_repo.get_track(db, event_id=event_id, track_id=track_id)
    if track is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Track not found")
    return track


@router.get("", response_model=List[schemas.Track])
def list_tracks(
    event_id: uuid.UUID,
    db: Session = Depends(get_db),
    context=Depends(get_org_context),
):
    _user, current_user = context
    event = get_readable_event(db, event_id, current_user)
    return program_repo.list_tracks(db, event_id=event.id)


@router.post("", response_model=schemas.Track, status_code=status.HTTP_201_CREATED)
def create_track(
    event_id: uuid.UUID,
    payload: schemas.TrackCreate,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    event = get_writable_event(db, event_id, current_user)
    track = program_repo.create_track(db, event_id=event.id, payload=payload)
    audit_log(
        db,
        action=AuditAction.CREATE,
        entity_type="Track",
        entity_id=track.id,
        event_id=event.id,
        actor=current_user,
        changes={"name": track.name, "color": track.color, "sort_order": track.sort_order},
        request=request,
    )
    return track


@router.put("/{track_id}", response_model=schemas.Track)
def update_track(
    event_id: uuid.UUID,
    track_id: uuid.UUID,
    payload: schemas.TrackUpdate,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    event = get_writable_event(db, event_id, current_user)
    track = program_repo.update_track(db, _get_track(db, event.id, track_id), payload)
    audit_log(
        db,
        action=AuditAction.UPDATE,
        entity_type="Track",
        entity_id=track.id,
        event_id=event.id,
        actor=current_user,
        changes=payload.model_dump(exclude_unset=True),
        request=request,
    )
    return track


@router.delete("/{track_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_track(
    event_id: uuid.UUID,
    track_id: uuid.UUID,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    event = get_writable_event(db, event_id, current_user)
    track = _get_track(db, event.id, track_id)
    if track.session_count > 0:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot delete track with sessions")
    name = track.name
    program_repo.delete_track(db, track)
    audit_log(
        db,
        action=AuditAction.DELETE,
        entity_type="Track",
        entity_id=track_id,
        event_id=event.id,
        actor=current_user,
        changes={"name": name},
        request=request,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
