"""
Speaker endpoints for an event.
"""
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy.orm import Session

from eventdesk.audit import AuditAction, log as audit_log
from eventdesk.api.deps import get_current_user_context, get_org_context
from eventdesk.api.permissions import get_readable_event, get_writable_event
from eventdesk.db import models, schemas
from eventdesk.db.database import get_db
from eventdesk.db.repositories import program as program_repo
from eventdesk.services.notification_service import NotificationService, get_notification_service

router = APIRouter(prefix="/events/{event_id}/speakers", tags=["speakers"])

DUPLICATE_EMAIL = "Speaker with this email already exists for this event"


def _get_speaker(db: Session, event_id: uuid.UUID, speaker_id: uuid.UUID) -> models.Speaker:
    speaker = program_repo.get_speaker(db, event_id=event_id, speaker_id=speaker_id)
    if speaker is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Speaker not found")
    return speaker


@router.get("", response_model=List[schemas.Speaker])
def list_speakers(
    event_id: uuid.UUID,
    status_filter: Optional[models.SpeakerStatus] = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
    context=Depends(get_org_context),
):
    _user, current_user = context
    event = get_readable_event(db, event_id, current_user)
    return program_repo.list_speakers(
        db, event_id=event.id, status=status_filter.value if status_filter else None
    )


@router.post("", response_model=schemas.Speaker, status_code=status.HTTP_201_CREATED)
def create_speaker(
    event_id: uuid.UUID,
    payload: schemas.SpeakerCreate,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    event = get_writable_event(db, event_id, current_user)
    if program_repo.speaker_email_taken(db, event_id=event.id, email=payload.email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=DUPLICATE_EMAIL)
    speaker = program_repo.create_speaker(db, event_id=event.id, payload=payload)
    audit_log(
        db,
        action=AuditAction.CREATE,
        entity_type="Speaker",
        entity_id=speaker.id,
        event_id=event.id,
        actor=current_user,
        changes={"email": speaker.email, "name": speaker.full_name, "status": speaker.status},
        request=request,
    )
    return speaker


@router.get("/{speaker_id}", response_model=schemas.Speaker)
def get_speaker(
    event_id: uuid.UUID,
    speaker_id: uuid.UUID,
    db: Session = Depends(get_db),
    context=Depends(get_org_context),
):
    _user, current_user = context
    event = get_readable_event(db, event_id, current_user)
    return _get_speaker(db, event.id, speaker_id)


@router.put("/{speaker_id}", response_model=schemas.Speaker)
def update_speaker(
    event_id: uuid.UUID,
    speaker_id: uuid.UUID,
    payload: schemas.SpeakerUpdate,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    event = get_writable_event(db, event_id, current_user)
    speaker = _get_speaker(db, event.id, speaker_id)
    if payload.email and payload.email != speaker.email:
        if program_repo.speaker_email_taken(db, event_id=event.id, email=payload.email, exclude_id=speaker.id):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=DUPLICATE_EMAIL)
    speaker = program_repo.update_speaker(db, speaker, payload)
    audit_log(
        db,
        action=AuditAction.UPDATE,
        entity_type="Speaker",
        entity_id=speaker.id,
        event_id=event.id,
        actor=current_user,
        changes=payload.model_dump(exclude_unset=True),
        request=request,
    )
    return speaker


@router.delete("/{speaker_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_speaker(
    event_id: uuid.UUID,
    speaker_id: uuid.UUID,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    event = get_writable_event(db, event_id, current_user)
    speaker = _get_speaker(db, event.id, speaker_id)
    snapshot = {"email": speaker.email, "name": speaker.full_name}
    program_repo.delete_speaker(db, speaker)
    audit_log(
        db,
        action=AuditAction.DELETE,
        entity_type="Speaker",
        entity_id=speaker_id,
        event_id=event.id,
        actor=current_user,
        changes=snapshot,
        request=request,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{speaker_id}/email", response_model=schemas.EmailSendResult)
def email_speaker(
    event_id: uuid.UUID,
    speaker_id: uuid.UUID,
    payload: schemas.SpeakerEmailRequest,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
    notifications: NotificationService = Depends(get_notification_service),
):
    user, current_user = user_context
    event = get_writable_event(db, event_id, current_user)
    speaker = _get_speaker(db, event.id, speaker_id)

    if payload.type == "invitation":
        result = notifications.send_speaker_invitation(
            speaker, organizer=user, personal_message=payload.custom_message
        )
    else:
        if not payload.custom_subject or not payload.custom_message:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Subject and message are required for custom emails",
            )
        result = notifications.send_custom(
            recipient=speaker.email,
            recipient_name=speaker.first_name,
            subject=payload.custom_subject,
            message=payload.custom_message,
            event=event,
        )

    if not result.get("success"):
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=result.get("error") or "Failed to send email")

    audit_log(
        db,
        action=AuditAction.EMAIL_SENT,
        entity_type="Speaker",
        entity_id=speaker.id,
        event_id=event.id,
        actor=current_user,
        changes={"type": payload.type, "recipient": speaker.email},
        request=request,
    )
    return schemas.EmailSendResult(
        success=True,
        message=f"Email sent to {speaker.email}",
        message_id=result.get("message_id"),
    )
