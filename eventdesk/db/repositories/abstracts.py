"""
Abstract repository functions.

Abstracts are created either from the dashboard or by a speaker through the
public submission form. Every abstract carries a management token; only the
token id and its Argon2 hash are stored, the raw token goes out in the
confirmation e-mail.
"""
from __future__ import annotations

import uuid
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from eventdesk.db import models, schemas
from eventdesk.db.models.base import now_utc
from eventdesk.db.models.enums import (
    ABSTRACT_EDITABLE_STATUSES,
    ABSTRACT_REVIEW_STATUSES,
    AbstractStatus,
    SpeakerStatus,
)
from eventdesk.utils import token_crypto


def list_abstracts(
    db: Session,
    *,
    event_id: uuid.UUID,
    status: Optional[str] = None,
    track_id: Optional[uuid.UUID] = None,
    speaker_id: Optional[uuid.UUID] = None,
) -> List[models.Abstract]:
    query = db.query(models.Abstract).filter(models.Abstract.event_id == event_id)
    if status:
        query = query.filter(models.Abstract.status == status)
    if track_id:
        query = query.filter(models.Abstract.track_id == track_id)
    if speaker_id:
        query = query.filter(models.Abstract.speaker_id == speaker_id)
    return query.order_by(
        models.Abstract.submitted_at.desc().nullslast(),
        models.Abstract.created_at.desc(),
    ).all()


def get_abstract(db: Session, *, event_id: uuid.UUID, abstract_id: uuid.UUID) -> Optional[models.Abstract]:
    return (
        db.query(models.Abstract)
        .filter(models.Abstract.id == abstract_id, models.Abstract.event_id == event_id)
        .first()
    )


def get_by_management_token(db: Session, raw_token: str) -> Optional[models.Abstract]:
    parsed = token_crypto.parse_key(raw_token, prefix=token_crypto.MANAGEMENT_TOKEN_PREFIX)
    if parsed is None:
        return None
    abstract = (
        db.query(models.Abstract)
        .filter(models.Abstract.management_token_id == parsed.key_id)
        .first()
    )
    if abstract is None or not token_crypto.verify_secret(parsed.secret, abstract.management_token_hash):
        return None
    return abstract


def list_for_user(db: Session, *, user_id: uuid.UUID) -> List[models.Abstract]:
    """Abstracts of every speaker profile linked to a submitter account."""
    return (
        db.query(models.Abstract)
        .join(models.Speaker, models.Abstract.speaker_id == models.Speaker.id)
        .filter(models.Speaker.user_id == user_id)
        .order_by(models.Abstract.created_at.desc())
        .all()
    )


def get_for_user(db: Session, *, user_id: uuid.UUID, abstract_id: uuid.UUID) -> Optional[models.Abstract]:
    return (
        db.query(models.Abstract)
        .join(models.Speaker, models.Abstract.speaker_id == models.Speaker.id)
        .filter(models.Abstract.id == abstract_id, models.Speaker.user_id == user_id)
        .first()
    )


def is_editable(abstract: models.Abstract) -> bool:
    """Speakers may edit until a reviewer has decided and until the deadline."""
    return abstract.status in ABSTRACT_EDITABLE_STATUSES and not abstract.event.abstract_deadline_passed()


def find_speaker(db: Session, *, event_id: uuid.UUID, email: str) -> Optional[models.Speaker]:
    return (
        db.query(models.Speaker)
        .filter(models.Speaker.event_id == event_id, models.Speaker.email == email)
        .first()
    )


def upsert_submitting_speaker(
    db: Session,
    *,
    event_id: uuid.UUID,
    email: str,
    first_name: str,
    last_name: str,
    user_id: Optional[uuid.UUID] = None,
    profile: Optional[Dict[str, Optional[str]]] = None,
) -> models.Speaker:
    """Find the event's speaker by e-mail or create a confirmed one; flushes without committing."""
    speaker = find_speaker(db, event_id=event_id, email=email)
    if speaker is None:
        speaker = models.Speaker(
            event_id=event_id,
            email=email,
            first_name=first_name,
            last_name=last_name,
            status=SpeakerStatus.CONFIRMED.value,
            social_links={},
        )
        db.add(speaker)
    else:
        speaker.first_name = first_name
        speaker.last_name = last_name
    for key, value in (profile or {}).items():
        if value is not None:
            setattr(speaker, key, value)
    if user_id is not None:
        speaker.user_id = user_id
    db.flush()
    return speaker


def create_abstract(
    db: Session,
    *,
    event_id: uuid.UUID,
    speaker_id: uuid.UUID,
    title: str,
    content: str,
    track_id: Optional[uuid.UUID] = None,
    status: str = AbstractStatus.SUBMITTED.value,
) -> Tuple[models.Abstract, str]:
    """Create an abstract and return it with the raw management token."""
    key_id, secret, raw_token = token_crypto.generate_management_token()
    abstract = models.Abstract(
        event_id=event_id,
        speaker_id=speaker_id,
        track_id=track_id,
        title=title,
        content=content,
        status=status,
        submitted_at=now_utc() if status == AbstractStatus.SUBMITTED.value else None,
        management_token_id=key_id,
        management_token_hash=token_crypto.hash_secret(secret),
    )
    db.add(abstract)
    db.commit()
    db.refresh(abstract)
    return abstract, raw_token


def update_abstract(db: Session, abstract: models.Abstract, payload: schemas.AbstractUpdate) -> models.Abstract:
    """Apply a dashboard edit and stamp the review or submission time on status changes."""
    previous = abstract.status
    for key, value in payload.model_dump(exclude_unset=True).items():
        if value is None and key in ("title", "content", "status"):
            continue
        if key == "status":
            value = value.value
        setattr(abstract, key, value)
    if abstract.status != previous:
        if abstract.status in ABSTRACT_REVIEW_STATUSES:
            abstract.reviewed_at = now_utc()
        elif previous == AbstractStatus.DRAFT.value and abstract.status == AbstractStatus.SUBMITTED.value:
            abstract.submitted_at = now_utc()
    db.commit()
    db.refresh(abstract)
    return abstract


def update_by_speaker(
    db: Session, abstract: models.Abstract, payload: schemas.SubmitterAbstractUpdate
) -> models.Abstract:
    """Apply a speaker edit; an abstract sent back for revision is resubmitted."""
    for key, value in payload.model_dump(exclude_unset=True).items():
        if value is None and key != "track_id":
            continue
        setattr(abstract, key, value)
    if abstract.status == AbstractStatus.REVISION_REQUESTED.value:
        abstract.status = AbstractStatus.SUBMITTED.value
        abstract.submitted_at = now_utc()
    db.commit()
    db.refresh(abstract)
    return abstract


def delete_abstract(db: Session, abstract: models.Abstract) -> None:
    db.delete(abstract)
    db.commit()
