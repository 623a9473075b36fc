"""
Session endpoints: scheduled talks with optional track and speakers.
"""
import uuid
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy.orm import Session

from eventdesk.audit import AuditAction, log as audit_log
from eventdesk.api.deps import get_current_user_context, get_org_context
from eventdesk.api.permissions import get_readable_event, get_writable_event
from eventdesk.db import models, schemas
from eventdesk.db.database import get_db
from eventdesk.db.models.base import as_utc
from eventdesk.db.models.enums import AbstractStatus
from eventdesk.db.repositories import abstracts as abstract_repo
from eventdesk.db.repositories import program as program_repo

router = APIRouter(prefix="/events/{event_id}/sessions", tags=["sessions"])


def _get_session(db: Session, event_id: uuid.UUID, session_id: uuid.UUID) -> models.EventSession:
    session = program_repo.get_session(db, event_id=event_id, session_id=session_id)
    if session is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
    return session


def _require_track(db: Session, event_id: uuid.UUID, track_id: Optional[uuid.UUID]) -> None:
    if track_id is not None and program_repo.get_track(db, event_id=event_id, track_id=track_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Track not found")


def _resolve_speakers(db: Session, event_id: uuid.UUID, speaker_ids: List[uuid.UUID]) -> List[models.Speaker]:
    speakers = program_repo.get_speakers_in_event(db, event_id=event_id, speaker_ids=speaker_ids)
    if speaker_ids and not speakers:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="One or more speakers not found")
    return speakers


def _require_schedulable_abstract(
    db: Session,
    event_id: uuid.UUID,
    abstract_id: Optional[uuid.UUID],
    session: Optional[models.EventSession] = None,
) -> Optional[models.Abstract]:
    """An abstract backs at most one session and only once it was accepted."""
    if abstract_id is None:
        return None
    abstract = abstract_repo.get_abstract(db, event_id=event_id, abstract_id=abstract_id)
    if abstract is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Abstract not found")
    if abstract.status != AbstractStatus.ACCEPTED.value:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Only accepted abstracts can be scheduled")
    if abstract.session is not None and (session is None or abstract.session.id != session.id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Abstract is already scheduled")
    return abstract


def _parse_day(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="date must be YYYY-MM-DD")


@router.get("", response_model=List[schemas.Session])
def list_sessions(
    event_id: uuid.UUID,
    track_id: Optional[uuid.UUID] = Query(default=None),
    status_filter: Optional[models.SessionStatus] = Query(default=None, alias="status"),
    date: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    context=Depends(get_org_context),
):
    _user, current_user = context
    event = get_readable_event(db, event_id, current_user)
    return program_repo.list_sessions(
        db,
        event_id=event.id,
        track_id=track_id,
        status=status_filter.value if status_filter else None,
        date=_parse_day(date),
    )


@router.post("", response_model=schemas.Session, status_code=status.HTTP_201_CREATED)
def create_session(
    event_id: uuid.UUID,
    payload: schemas.SessionCreate,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    event = get_writable_event(db, event_id, current_user)
    _require_track(db, event.id, payload.track_id)
    abstract = _require_schedulable_abstract(db, event.id, payload.abstract_id)
    speakers = _resolve_speakers(db, event.id, payload.speaker_ids)
    if abstract is not None and not payload.speaker_ids:
        speakers = [abstract.speaker]
    session = program_repo.create_session(db, event_id=event.id, payload=payload, speakers=speakers)
    audit_log(
        db,
        action=AuditAction.CREATE,
        entity_type="Session",
        entity_id=session.id,
        event_id=event.id,
        actor=current_user,
        changes=payload.model_dump(exclude_none=True),
        request=request,
    )
    return session


@router.get("/{session_id}", response_model=schemas.Session)
def get_session(
    event_id: uuid.UUID,
    session_id: uuid.UUID,
    db: Session = Depends(get_db),
    context=Depends(get_org_context),
):
    _user, current_user = context
    event = get_readable_event(db, event_id, current_user)
    return _get_session(db, event.id, session_id)


@router.put("/{session_id}", response_model=schemas.Session)
def update_session(
    event_id: uuid.UUID,
    session_id: uuid.UUID,
    payload: schemas.SessionUpdate,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    event = get_writable_event(db, event_id, current_user)
    session = _get_session(db, event.id, session_id)

    changes = payload.model_dump(exclude_unset=True, exclude={"speaker_ids"})
    for required in ("name", "start_time", "end_time", "status"):
        if changes.get(required, "") is None:
            changes.pop(required)
    if "track_id" in changes:
        _require_track(db, event.id, changes["track_id"])
    if "abstract_id" in changes:
        _require_schedulable_abstract(db, event.id, changes["abstract_id"], session=session)

    start = changes.get("start_time", as_utc(session.start_time))
    end = changes.get("end_time", as_utc(session.end_time))
    if end <= start:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="End time must be after start time")

    speakers = None
    if payload.speaker_ids is not None:
        speakers = _resolve_speakers(db, event.id, payload.speaker_ids)

    session = program_repo.update_session(db, session, changes, speakers=speakers)
    audit_log(
        db,
        action=AuditAction.UPDATE,
        entity_type="Session",
        entity_id=session.id,
        event_id=event.id,
        actor=current_user,
        changes=payload.model_dump(exclude_unset=True),
        request=request,
    )
    return session


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_session(
    event_id: uuid.UUID,
    session_id: uuid.UUID,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    event = get_writable_event(db, event_id, current_user)
    session = _get_session(db, event.id, session_id)
    name = session.name
    program_repo.delete_session(db, session)
    audit_log(
        db,
        action=AuditAction.DELETE,
        entity_type="Session",
        entity_id=session_id,
        event_id=event.id,
        actor=current_user,
        changes={"name": name},
        request=request,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
