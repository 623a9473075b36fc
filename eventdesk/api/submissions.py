"""
Speaker-facing abstract endpoints.

Anonymous speakers submit through an event's public page and follow their
abstract with the management link from the confirmation e-mail. Speakers who
open a SUBMITTER account see every abstract linked to their speaker profiles.
"""
import logging
import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from eventdesk.audit import AuditAction, log as audit_log
from eventdesk.api.deps import get_current_user_context
from eventdesk.api.public import RATE_WINDOW_SECONDS, load_public_event
from eventdesk.db import models, schemas
from eventdesk.db.database import get_db
from eventdesk.db.models.enums import ABSTRACT_EDITABLE_STATUSES, AbstractStatus
from eventdesk.db.repositories import abstracts as abstract_repo
from eventdesk.db.repositories import program as program_repo
from eventdesk.db.repositories import users as user_repo
from eventdesk.services.notification_service import NotificationService, get_notification_service
from eventdesk.utils.rate_limit import client_ip, enforce_rate_limit
from eventdesk.utils.role_permissions import ROLE_SUBMITTER

logger = logging.getLogger(__name__)

router = APIRouter(tags=["submissions"])

SUBMIT_LIMIT_PER_IP = 10
ACCOUNT_LIMIT_PER_IP = 5
MANAGE_LIMIT_PER_IP = 60

SUBMISSIONS_CLOSED = "Abstract submissions are not open for this event"
DEADLINE_PASSED = "The abstract submission deadline has passed"


def _open_for_submissions(db: Session, slug: str) -> models.Event:
    event = load_public_event(db, slug)
    if not event.accepts_abstracts():
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=SUBMISSIONS_CLOSED)
    if event.abstract_deadline_passed():
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=DEADLINE_PASSED)
    return event


def _require_track(db: Session, event_id: uuid.UUID, track_id) -> None:
    if track_id is not None and program_repo.get_track(db, event_id=event_id, track_id=track_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Track not found")


def _managed_view(db: Session, abstract: models.Abstract) -> schemas.ManagedAbstract:
    event = abstract.event
    return schemas.ManagedAbstract(
        id=abstract.id,
        event_name=event.name,
        event_slug=event.slug,
        title=abstract.title,
        content=abstract.content,
        status=abstract.status,
        track=abstract.track,
        review_notes=abstract.review_notes,
        submitted_at=abstract.submitted_at,
        is_editable=abstract_repo.is_editable(abstract),
        deadline_passed=event.abstract_deadline_passed(),
        tracks=program_repo.list_tracks(db, event_id=event.id),
    )


def _apply_speaker_edit(
    db: Session,
    abstract: models.Abstract,
    payload: schemas.SubmitterAbstractUpdate,
    request: Request,
    actor=None,
) -> models.Abstract:
    if abstract.status not in ABSTRACT_EDITABLE_STATUSES:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="This abstract can no longer be edited")
    if abstract.event.abstract_deadline_passed():
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=DEADLINE_PASSED)
    if "track_id" in payload.model_fields_set:
        _require_track(db, abstract.event_id, payload.track_id)

    previous_status = abstract.status
    abstract = abstract_repo.update_by_speaker(db, abstract, payload)
    changes = payload.model_dump(exclude_unset=True)
    if abstract.status != previous_status:
        changes["status"] = abstract.status
    audit_log(
        db,
        action=AuditAction.UPDATE,
        entity_type="Abstract",
        entity_id=abstract.id,
        event_id=abstract.event_id,
        organization_id=abstract.event.organization_id,
        actor=actor,
        changes=changes,
        request=request,
    )
    return abstract


@router.post(
    "/public/events/{slug}/abstracts",
    response_model=schemas.AbstractSubmissionResponse,
    status_code=status.HTTP_201_CREATED,
)
def submit_abstract(
    slug: str,
    payload: schemas.AbstractSubmission,
    request: Request,
    db: Session = Depends(get_db),
    notifications: NotificationService = Depends(get_notification_service),
):
    enforce_rate_limit(
        f"abstract-submit:ip:{client_ip(request)}",
        limit=SUBMIT_LIMIT_PER_IP,
        window_seconds=RATE_WINDOW_SECONDS,
    )
    event = _open_for_submissions(db, slug)
    _require_track(db, event.id, payload.track_id)

    speaker = abstract_repo.upsert_submitting_speaker(
        db,
        event_id=event.id,
        email=payload.email,
        first_name=payload.first_name,
        last_name=payload.last_name,
        profile={"bio": payload.bio, "company": payload.company, "job_title": payload.job_title},
    )
    abstract, token = abstract_repo.create_abstract(
        db,
        event_id=event.id,
        speaker_id=speaker.id,
        title=payload.title,
        content=payload.content,
        track_id=payload.track_id,
        status=AbstractStatus.SUBMITTED.value,
    )
    logger.info("abstract_submitted event=%s abstract=%s", event.slug, abstract.id)
    audit_log(
        db,
        action=AuditAction.CREATE,
        entity_type="Abstract",
        entity_id=abstract.id,
        event_id=event.id,
        organization_id=event.organization_id,
        changes={"title": abstract.title, "speaker_email": speaker.email},
        request=request,
    )

    result = notifications.send_abstract_submission_confirmation(abstract, token)
    if not result.get("success"):
        logger.warning("abstract_confirmation_failed abstract=%s error=%s", abstract.id, result.get("error"))

    return schemas.AbstractSubmissionResponse(
        id=abstract.id,
        status=abstract.status,
        message="Abstract submitted successfully. Check your email for a link to track your submission.",
    )


@router.post(
    "/public/events/{slug}/submitter",
    response_model=schemas.SubmitterAccountResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_submitter_account(
    slug: str,
    payload: schemas.SubmitterAccountRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """Open a SUBMITTER account tied to the speaker profile of this event."""
    enforce_rate_limit(
        f"submitter-account:ip:{client_ip(request)}",
        limit=ACCOUNT_LIMIT_PER_IP,
        window_seconds=RATE_WINDOW_SECONDS,
    )
    event = _open_for_submissions(db, slug)
    if user_repo.get_user_by_email(db, payload.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="An account with this email already exists. Please log in instead.",
        )

    user = user_repo.create_user(
        db,
        email=payload.email,
        first_name=payload.first_name,
        last_name=payload.last_name,
        role=ROLE_SUBMITTER,
        organization_id=event.organization_id,
        password=payload.password,
    )
    speaker = abstract_repo.upsert_submitting_speaker(
        db,
        event_id=event.id,
        email=payload.email,
        first_name=payload.first_name,
        last_name=payload.last_name,
        user_id=user.id,
    )
    db.commit()
    logger.info("submitter_account_created event=%s user=%s", event.slug, user.id)
    return schemas.SubmitterAccountResponse(
        message="Account created. You can now sign in to manage your submissions.",
        user_id=user.id,
        speaker_id=speaker.id,
    )


def _abstract_by_token(db: Session, request: Request, token: str) -> models.Abstract:
    enforce_rate_limit(
        f"abstract-manage:ip:{client_ip(request)}",
        limit=MANAGE_LIMIT_PER_IP,
        window_seconds=RATE_WINDOW_SECONDS,
    )
    abstract = abstract_repo.get_by_management_token(db, token)
    if abstract is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Abstract not found")
    return abstract


@router.get("/public/abstracts/{token}", response_model=schemas.ManagedAbstract)
def get_abstract_by_token(token: str, request: Request, db: Session = Depends(get_db)):
    return _managed_view(db, _abstract_by_token(db, request, token))


@router.put("/public/abstracts/{token}", response_model=schemas.ManagedAbstract)
def update_abstract_by_token(
    token: str,
    payload: schemas.SubmitterAbstractUpdate,
    request: Request,
    db: Session = Depends(get_db),
):
    abstract = _apply_speaker_edit(db, _abstract_by_token(db, request, token), payload, request)
    return _managed_view(db, abstract)


@router.get("/submitter/abstracts", response_model=List[schemas.ManagedAbstract])
def list_my_abstracts(
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _current_user = user_context
    return [_managed_view(db, a) for a in abstract_repo.list_for_user(db, user_id=user.id)]


@router.put("/submitter/abstracts/{abstract_id}", response_model=schemas.ManagedAbstract)
def update_my_abstract(
    abstract_id: uuid.UUID,
    payload: schemas.SubmitterAbstractUpdate,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, current_user = user_context
    abstract = abstract_repo.get_for_user(db, user_id=user.id, abstract_id=abstract_id)
    if abstract is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Abstract not found")
    abstract = _apply_speaker_edit(db, abstract, payload, request, actor=current_user)
    return _managed_view(db, abstract)
