"""
Check-in endpoints: by registration id or by scanned QR code.

Registered ahead of the registrations router so ``/check-in`` is never
captured as a registration id.
"""
import uuid

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from eventdesk.audit import AuditAction, log as audit_log
from eventdesk.api.deps import get_current_user_context
from eventdesk.api.permissions import get_writable_event
from eventdesk.db import models, schemas
from eventdesk.db.database import get_db
from eventdesk.db.models.base import as_utc
from eventdesk.db.repositories import registrations as registration_repo

router = APIRouter(prefix="/events/{event_id}/registrations", tags=["check-in"])


def _check_in(db: Session, registration: models.Registration, *, method: str, current_user, request: Request):
    if registration.status == models.RegistrationStatus.CANCELLED.value:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot check in a cancelled registration")
    if registration.checked_in_at is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "message": "Already checked in",
                "checked_in_at": as_utc(registration.checked_in_at).isoformat(),
            },
        )
    registration = registration_repo.check_in(db, registration)
    audit_log(
        db,
        action=AuditAction.CHECK_IN,
        entity_type="Registration",
        entity_id=registration.id,
        event_id=registration.event_id,
        actor=current_user,
        changes={"method": method, "qr_code": registration.qr_code},
        request=request,
    )
    return registration


@router.put("/check-in", response_model=schemas.CheckInResult)
def check_in_by_code(
    event_id: uuid.UUID,
    payload: schemas.CheckInByCode,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    event = get_writable_event(db, event_id, current_user)
    code = (payload.qr_code or "").strip()
    if not code:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="QR code required")
    registration = registration_repo.get_by_qr_code(db, event_id=event.id, qr_code=code)
    if registration is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invalid QR code")
    return _check_in(db, registration, method="qr_code", current_user=current_user, request=request)


@router.post("/{registration_id}/check-in", response_model=schemas.CheckInResult)
def check_in_registration(
    event_id: uuid.UUID,
    registration_id: uuid.UUID,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    event = get_writable_event(db, event_id, current_user)
    registration = registration_repo.get_registration(db, event_id=event.id, registration_id=registration_id)
    if registration is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Registration not found")
    return _check_in(db, registration, method="manual", current_user=current_user, request=request)
