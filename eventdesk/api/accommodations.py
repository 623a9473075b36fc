"""
Accommodation endpoints: hotel room bookings tied to registrations.

Every booking that is not CANCELLED holds one of its room type's
``booked_rooms``; create, update and delete keep that count in step.
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
from eventdesk.db.models.base import as_utc
from eventdesk.db.repositories import lodging as lodging_repo
from eventdesk.db.repositories import registrations as registration_repo

router = APIRouter(prefix="/events/{event_id}/accommodations", tags=["accommodations"])

CANCELLED = models.AccommodationStatus.CANCELLED.value


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def _get_accommodation(db: Session, event_id: uuid.UUID, accommodation_id: uuid.UUID) -> models.Accommodation:
    accommodation = lodging_repo.get_accommodation(db, event_id=event_id, accommodation_id=accommodation_id)
    if accommodation is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Accommodation not found")
    return accommodation


def _active_room(db: Session, event_id: uuid.UUID, room_type_id: uuid.UUID) -> models.RoomType:
    room = lodging_repo.get_room_type_in_event(db, event_id=event_id, room_type_id=room_type_id)
    if room is None or not room.is_active:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room type not found or inactive")
    return room


def _check_capacity(room: models.RoomType, guest_count: int) -> None:
    if guest_count > room.capacity:
        raise _bad_request(f"Guest count exceeds room capacity ({room.capacity})")


def _nights(check_in, check_out) -> int:
    nights = lodging_repo.nights_between(check_in, check_out)
    if nights <= 0:
        raise _bad_request("Check-out must be after check-in")
    return nights


@router.get("", response_model=List[schemas.Accommodation])
def list_accommodations(
    event_id: uuid.UUID,
    status_filter: Optional[models.AccommodationStatus] = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
    context=Depends(get_org_context),
):
    _user, current_user = context
    event = get_readable_event(db, event_id, current_user)
    return lodging_repo.list_accommodations(
        db, event_id=event.id, status=status_filter.value if status_filter else None
    )


@router.post("", response_model=schemas.Accommodation, status_code=status.HTTP_201_CREATED)
def create_accommodation(
    event_id: uuid.UUID,
    payload: schemas.AccommodationCreate,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    event = get_writable_event(db, event_id, current_user)
    registration = registration_repo.get_registration(db, event_id=event.id, registration_id=payload.registration_id)
    if registration is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Registration not found")
    if lodging_repo.registration_has_accommodation(db, registration_id=registration.id):
        raise _bad_request("Registration already has accommodation")
    room = _active_room(db, event.id, payload.room_type_id)
    if not lodging_repo.has_room_available(room):
        raise _bad_request("No rooms available")
    _check_capacity(room, payload.guest_count)
    nights = _nights(payload.check_in, payload.check_out)

    accommodation = lodging_repo.create_accommodation(
        db, event_id=event.id, registration=registration, room=room, payload=payload, nights=nights
    )
    audit_log(
        db,
        action=AuditAction.CREATE,
        entity_type="Accommodation",
        entity_id=accommodation.id,
        event_id=event.id,
        actor=current_user,
        changes={
            "registration_id": registration.id,
            "room_type_id": room.id,
            "nights": nights,
            "total_price": str(accommodation.total_price),
            "confirmation_no": accommodation.confirmation_no,
        },
        request=request,
    )
    return accommodation


@router.get("/{accommodation_id}", response_model=schemas.Accommodation)
def get_accommodation(
    event_id: uuid.UUID,
    accommodation_id: uuid.UUID,
    db: Session = Depends(get_db),
    context=Depends(get_org_context),
):
    _user, current_user = context
    event = get_readable_event(db, event_id, current_user)
    return _get_accommodation(db, event.id, accommodation_id)


@router.put("/{accommodation_id}", response_model=schemas.Accommodation)
def update_accommodation(
    event_id: uuid.UUID,
    accommodation_id: uuid.UUID,
    payload: schemas.AccommodationUpdate,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    event = get_writable_event(db, event_id, current_user)
    accommodation = _get_accommodation(db, event.id, accommodation_id)
    before = {
        "room_type_id": accommodation.room_type_id,
        "status": accommodation.status,
        "check_in": accommodation.check_in,
        "check_out": accommodation.check_out,
    }

    old_room = accommodation.room_type
    new_room = old_room
    if payload.room_type_id is not None and payload.room_type_id != accommodation.room_type_id:
        new_room = _active_room(db, event.id, payload.room_type_id)

    was_active = accommodation.status != CANCELLED
    new_status = payload.status.value if payload.status is not None else accommodation.status
    will_be_active = new_status != CANCELLED

    if will_be_active and (not was_active or new_room is not old_room):
        if not lodging_repo.has_room_available(new_room):
            raise _bad_request("No rooms available")

    guest_count = payload.guest_count if payload.guest_count is not None else accommodation.guest_count
    _check_capacity(new_room, guest_count)
    check_in = payload.check_in or as_utc(accommodation.check_in)
    check_out = payload.check_out or as_utc(accommodation.check_out)
    nights = _nights(check_in, check_out)

    if was_active and (not will_be_active or new_room is not old_room):
        lodging_repo.release_room(old_room)
    if will_be_active and (not was_active or new_room is not old_room):
        lodging_repo.book_room(new_room)

    accommodation.room_type = new_room
    accommodation.status = new_status
    accommodation.check_in = check_in
    accommodation.check_out = check_out
    accommodation.guest_count = guest_count
    if "special_requests" in payload.model_fields_set:
        accommodation.special_requests = payload.special_requests
    accommodation.total_price = lodging_repo.total_price(new_room, nights)
    accommodation.currency = new_room.currency
    db.commit()
    db.refresh(accommodation)

    audit_log(
        db,
        action=AuditAction.UPDATE,
        entity_type="Accommodation",
        entity_id=accommodation.id,
        event_id=event.id,
        actor=current_user,
        changes={"before": before, "after": payload.model_dump(exclude_unset=True)},
        request=request,
    )
    return accommodation


@router.delete("/{accommodation_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_accommodation(
    event_id: uuid.UUID,
    accommodation_id: uuid.UUID,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    event = get_writable_event(db, event_id, current_user)
    accommodation = _get_accommodation(db, event.id, accommodation_id)
    snapshot = {"confirmation_no": accommodation.confirmation_no, "status": accommodation.status}
    lodging_repo.delete_accommodation(db, accommodation)
    audit_log(
        db,
        action=AuditAction.DELETE,
        entity_type="Accommodation",
        entity_id=accommodation_id,
        event_id=event.id,
        actor=current_user,
        changes=snapshot,
        request=request,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
