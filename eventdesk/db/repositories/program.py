"""
Speaker, track and session repository functions.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timedelta, UTC
from typing import List, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session

from eventdesk.db import models, schemas


# Speakers

def list_speakers(db: Session, *, event_id: uuid.UUID, status: Optional[str] = None) -> List[models.Speaker]:
    query = db.query(models.Speaker).filter(models.Speaker.event_id == event_id)
    if status:
        query = query.filter(models.Speaker.status == status)
    return query.order_by(models.Speaker.created_at.desc()).all()


def get_speaker(db: Session, *, event_id: uuid.UUID, speaker_id: uuid.UUID) -> Optional[models.Speaker]:
    return (
        db.query(models.Speaker)
        .filter(models.Speaker.id == speaker_id, models.Speaker.event_id == event_id)
        .first()
    )


def speaker_email_taken(
    db: Session, *, event_id: uuid.UUID, email: str, exclude_id: Optional[uuid.UUID] = None
) -> bool:
    query = db.query(models.Speaker.id).filter(
        models.Speaker.event_id == event_id, models.Speaker.email == email
    )
    if exclude_id is not None:
        query = query.filter(models.Speaker.id != exclude_id)
    return query.first() is not None


def create_speaker(db: Session, *, event_id: uuid.UUID, payload: schemas.SpeakerCreate) -> models.Speaker:
    data = payload.model_dump(exclude_none=True)
    data["status"] = payload.status.value
    data.setdefault("social_links", {})
    speaker = models.Speaker(event_id=event_id, **data)
    db.add(speaker)
    db.commit()
    db.refresh(speaker)
    return speaker


def update_speaker(db: Session, speaker: models.Speaker, payload: schemas.SpeakerUpdate) -> models.Speaker:
    for key, value in payload.model_dump(exclude_unset=True).items():
        if value is None and key in ("email", "first_name", "last_name", "status", "social_links"):
            continue
        if key == "status":
            value = value.value
        setattr(speaker, key, value)
    db.commit()
    db.refresh(speaker)
    return speaker


def delete_speaker(db: Session, speaker: models.Speaker) -> None:
    db.delete(speaker)
    db.commit()


# Tracks

def list_tracks(db: Session, *, event_id: uuid.UUID) -> List[models.Track]:
    return (
        db.query(models.Track)
        .filter(models.Track.event_id == event_id)
        .order_by(models.Track.sort_order.asc(), models.Track.created_at.asc())
        .all()
    )


def get_track(db: Session, *, event_id: uuid.UUID, track_id: uuid.UUID) -> Optional[models.Track]:
    return (
        db.query(models.Track)
        .filter(models.Track.id == track_id, models.Track.event_id == event_id)
        .first()
    )


def next_sort_order(db: Session, *, event_id: uuid.UUID) -> int:
    current = db.query(func.max(models.Track.sort_order)).filter(models.Track.event_id == event_id).scalar()
    return 0 if current is None else current + 1


def create_track(db: Session, *, event_id: uuid.UUID, payload: schemas.TrackCreate) -> models.Track:
    sort_order = payload.sort_order if payload.sort_order is not None else next_sort_order(db, event_id=event_id)
    track = models.Track(
        event_id=event_id,
        name=payload.name,
        description=payload.description,
        color=payload.color,
        sort_order=sort_order,
    )
    db.add(track)
    db.commit()
    db.refresh(track)
    return track


def update_track(db: Session, track: models.Track, payload: schemas.TrackUpdate) -> models.Track:
    for key, value in payload.model_dump(exclude_unset=True).items():
        if value is None and key != "description":
            continue
        setattr(track, key, value)
    db.commit()
    db.refresh(track)
    return track


def delete_track(db: Session, track: models.Track) -> None:
    db.delete(track)
    db.commit()


# Sessions

def list_sessions(
    db: Session,
    *,
    event_id: uuid.UUID,
    track_id: Optional[uuid.UUID] = None,
    status: Optional[str] = None,
    date: Optional[datetime] = None,
) -> List[models.EventSession]:
    """List sessions by start time; ``date`` keeps the 24 hours from its UTC midnight."""
    query = db.query(models.EventSession).filter(models.EventSession.event_id == event_id)
    if track_id:
        query = query.filter(models.EventSession.track_id == track_id)
    if status:
        query = query.filter(models.EventSession.status == status)
    if date is not None:
        day_start = datetime(date.year, date.month, date.day, tzinfo=UTC)
        query = query.filter(
            models.EventSession.start_time >= day_start,
            models.EventSession.start_time < day_start + timedelta(days=1),
        )
    return query.order_by(models.EventSession.start_time.asc()).all()


def get_session(db: Session, *, event_id: uuid.UUID, session_id: uuid.UUID) -> Optional[models.EventSession]:
    return (
        db.query(models.EventSession)
        .filter(models.EventSession.id == session_id, models.EventSession.event_id == event_id)
        .first()
    )


def get_speakers_in_event(db: Session, *, event_id: uuid.UUID, speaker_ids: Sequence[uuid.UUID]) -> List[models.Speaker]:
    wanted = list(dict.fromkeys(speaker_ids))
    if not wanted:
        return []
    found = (
        db.query(models.Speaker)
        .filter(models.Speaker.event_id == event_id, models.Speaker.id.in_(wanted))
        .all()
    )
    return found if len(found) == len(wanted) else []


def _set_speakers(session: models.EventSession, speakers: Sequence[models.Speaker]) -> None:
    # Existing links are kept so the unique (session, speaker) pair is never re-inserted
    wanted = {s.id: s for s in speakers}
    kept = [link for link in session.speaker_links if link.speaker_id in wanted]
    kept_ids = {link.speaker_id for link in kept}
    session.speaker_links = kept + [
        models.SessionSpeaker(speaker=s) for sid, s in wanted.items() if sid not in kept_ids
    ]


def create_session(
    db: Session,
    *,
    event_id: uuid.UUID,
    payload: schemas.SessionCreate,
    speakers: Sequence[models.Speaker] = (),
) -> models.EventSession:
    data = payload.model_dump(exclude={"speaker_ids"}, exclude_none=True)
    data["status"] = payload.status.value
    session = models.EventSession(event_id=event_id, **data)
    _set_speakers(session, speakers)
    db.add(session)
    db.commit()
    db.refresh(session)
    return session


def update_session(
    db: Session,
    session: models.EventSession,
    changes: dict,
    speakers: Optional[Sequence[models.Speaker]] = None,
) -> models.EventSession:
    for key, value in changes.items():
        if key == "status" and value is not None:
            value = value.value
        setattr(session, key, value)
    if speakers is not None:
        _set_speakers(session, speakers)
    db.commit()
    db.refresh(session)
    return session


def delete_session(db: Session, session: models.EventSession) -> None:
    db.delete(session)
    db.commit()
