"""
Event reviewer endpoints.

Reviewers are REVIEWER users listed in the event's ``settings.reviewerUserIds``.
They belong to no organization and may be linked to a speaker record of the
event. New reviewer accounts receive an invitation link.
"""
import logging
import uuid
from typing import Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from eventdesk.audit import AuditAction, log as audit_log
from eventdesk.api.deps import get_current_user_context
from eventdesk.api.permissions import get_writable_event
from eventdesk.db import models, schemas
from eventdesk.db.database import get_db
from eventdesk.db.repositories import events as event_repo
from eventdesk.db.repositories import program as program_repo
from eventdesk.db.repositories import users as user_repo
from eventdesk.services.notification_service import NotificationService, get_notification_service
from eventdesk.utils.role_permissions import ROLE_REVIEWER

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events/{event_id}/reviewers", tags=["reviewers"])


def _find_or_create_reviewer(
    db: Session, *, email: str, first_name: str, last_name: str
) -> Tuple[models.User, Optional[str]]:
    """Return (user, raw invitation token); the token is None for existing users."""
    existing = user_repo.get_user_by_email(db, email)
    if existing is not None:
        if existing.role != ROLE_REVIEWER:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"User already exists with role {existing.role}. Change their role in Settings > Users first.",
            )
        return existing, None
    user = user_repo.create_user(
        db,
        email=email,
        first_name=first_name,
        last_name=last_name,
        role=ROLE_REVIEWER,
        organization_id=None,
    )
    _row, token = user_repo.issue_invitation(db, email=user.email)
    return user, token


@router.get("", response_model=schemas.ReviewerList)
def list_reviewers(
    event_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    event = get_writable_event(db, event_id, current_user)
    reviewer_ids = [str(r) for r in event.reviewer_user_ids()]
    users = {str(u.id): u for u in user_repo.get_users_by_ids(db, reviewer_ids)}
    speakers = program_repo.list_speakers(db, event_id=event.id)
    speaker_by_user = {str(s.user_id): s for s in speakers if s.user_id is not None}

    reviewers = []
    for rid in reviewer_ids:
        user = users.get(rid)
        if user is None:
            continue
        speaker = speaker_by_user.get(rid)
        reviewers.append(
            schemas.Reviewer(
                user_id=user.id,
                speaker_id=speaker.id if speaker else None,
                email=speaker.email if speaker else user.email,
                first_name=speaker.first_name if speaker else user.first_name,
                last_name=speaker.last_name if speaker else user.last_name,
                company=speaker.company if speaker else None,
                job_title=speaker.job_title if speaker else None,
                speaker_status=speaker.status if speaker else None,
                account_active=user.email_verified_at is not None,
            )
        )

    reviewer_speaker_ids = {r.speaker_id for r in reviewers if r.speaker_id}
    available = [s for s in speakers if s.id not in reviewer_speaker_ids]
    return schemas.ReviewerList(reviewers=reviewers, available_speakers=available)


@router.post("", response_model=schemas.ReviewerAddResponse, status_code=status.HTTP_201_CREATED)
def add_reviewer(
    event_id: uuid.UUID,
    payload: schemas.ReviewerAddRequest,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
    notifications: NotificationService = Depends(get_notification_service),
):
    inviter, current_user = user_context
    event = get_writable_event(db, event_id, current_user)

    token = None
    if isinstance(payload, schemas.SpeakerReviewerRequest):
        speaker = program_repo.get_speaker(db, event_id=event.id, speaker_id=payload.speaker_id)
        if speaker is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Speaker not found")
        reviewer = user_repo.get_user(db, speaker.user_id) if speaker.user_id is not None else None
        if reviewer is None:
            reviewer, token = _find_or_create_reviewer(
                db, email=speaker.email, first_name=speaker.first_name, last_name=speaker.last_name
            )
            speaker.user_id = reviewer.id
    else:
        reviewer, token = _find_or_create_reviewer(
            db, email=payload.email, first_name=payload.first_name, last_name=payload.last_name
        )

    existing_ids = [str(r) for r in event.reviewer_user_ids()]
    if str(reviewer.id) in existing_ids:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="This person is already a reviewer for this event"
        )

    event_repo.set_reviewer_ids(db, event, existing_ids + [str(reviewer.id)])

    invitation_sent = False
    if token is not None:
        result = notifications.notify_reviewer_invitation(
            user=reviewer,
            token=token,
            event=event,
            inviter_name=inviter.full_name if inviter else None,
        )
        invitation_sent = bool(result.get("success"))
        if not invitation_sent:
            logger.warning("reviewer_invitation_email_failed email=%s error=%s", reviewer.email, result.get("error"))

    audit_log(
        db,
        action=AuditAction.CREATE,
        entity_type="EventReviewer",
        entity_id=reviewer.id,
        event_id=event.id,
        actor=current_user,
        changes={"type": payload.type, "email": reviewer.email, "invitation_sent": invitation_sent},
        request=request,
    )
    return schemas.ReviewerAddResponse(
        user_id=reviewer.id,
        invitation_sent=invitation_sent,
        message="Reviewer added and invitation email sent" if invitation_sent else "Reviewer added to event",
    )


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_reviewer(
    event_id: uuid.UUID,
    user_id: uuid.UUID,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    event = get_writable_event(db, event_id, current_user)
    existing_ids = [str(r) for r in event.reviewer_user_ids()]
    if str(user_id) not in existing_ids:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Reviewer not found")
    event_repo.set_reviewer_ids(db, event, [r for r in existing_ids if r != str(user_id)])
    audit_log(
        db,
        action=AuditAction.DELETE,
        entity_type="EventReviewer",
        entity_id=user_id,
        event_id=event.id,
        actor=current_user,
        changes={"removed_user_id": user_id},
        request=request,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
