"""
Hotel and room type endpoints for an event.

Room types live under ``/hotels/{hotel_id}/rooms``; ``booked_rooms`` is only
moved by the accommodations endpoints.
"""
import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from eventdesk.audit import AuditAction, log as audit_log
from eventdesk.api.deps import get_current_user_context, get_org_context
from eventdesk.api.permissions import get_readable_event, get_writable_event
from eventdesk.db import models, schemas
from eventdesk.db.database import get_db
from eventdesk.db.repositories import lodging as lodging_repo

router = APIRouter(prefix="/events/{event_id}/hotels", tags=["hotels"])


def _get_hotel(db: Session, event_id: uuid.UUID, hotel_id: uuid.UUID) -> models.Hotel:
    hotel = lodging_repo.get_hotel(db, event_id=event_id, hotel_id=hotel_id)
    if hotel is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Hotel not found")
    return hotel


def _get_room(db: Session, hotel_id: uuid.UUID, room_type_id: uuid.UUID) -> models.RoomType:
    room = lodging_repo.get_room_type(db, hotel_id=hotel_id, room_type_id=room_type_id)
    if room is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room type not found")
    return room


# Hotels

@router.get("", response_model=List[schemas.Hotel])
def list_hotels(
    event_id: uuid.UUID,
    db: Session = Depends(get_db),
    context=Depends(get_org_context),
):
    _user, current_user = context
    event = get_readable_event(db, event_id, current_user)
    return lodging_repo.list_hotels(db, event_id=event.id)


@router.post("", response_model=schemas.Hotel, status_code=status.HTTP_201_CREATED)
def create_hotel(
    event_id: uuid.UUID,
    payload: schemas.HotelCreate,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    event = get_writable_event(db, event_id, current_user)
    hotel = lodging_repo.create_hotel(db, event_id=event.id, payload=payload)
    audit_log(
        db,
        action=AuditAction.CREATE,
        entity_type="Hotel",
        entity_id=hotel.id,
        event_id=event.id,
        actor=current_user,
        changes=payload.model_dump(exclude_none=True),
        request=request,
    )
    return hotel


@router.get("/{hotel_id}", response_model=schemas.Hotel)
def get_hotel(
    event_id: uuid.UUID,
    hotel_id: uuid.UUID,
    db: Session = Depends(get_db),
    context=Depends(get_org_context),
):
    _user, current_user = context
    event = get_readable_event(db, event_id, current_user)
    return _get_hotel(db, event.id, hotel_id)


@router.put("/{hotel_id}", response_model=schemas.Hotel)
def update_hotel(
    event_id: uuid.UUID,
    hotel_id: uuid.UUID,
    payload: schemas.HotelUpdate,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    event = get_writable_event(db, event_id, current_user)
    hotel = lodging_repo.update_hotel(db, _get_hotel(db, event.id, hotel_id), payload)
    audit_log(
        db,
        action=AuditAction.UPDATE,
        entity_type="Hotel",
        entity_id=hotel.id,
        event_id=event.id,
        actor=current_user,
        changes=payload.model_dump(exclude_unset=True),
        request=request,
    )
    return hotel


@router.delete("/{hotel_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_hotel(
    event_id: uuid.UUID,
    hotel_id: uuid.UUID,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    event = get_writable_event(db, event_id, current_user)
    hotel = _get_hotel(db, event.id, hotel_id)
    if hotel.booking_count > 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot delete hotel with existing bookings"
        )
    name = hotel.name
    lodging_repo.delete_hotel(db, hotel)
    audit_log(
        db,
        action=AuditAction.DELETE,
        entity_type="Hotel",
        entity_id=hotel_id,
        event_id=event.id,
        actor=current_user,
        changes={"name": name},
        request=request,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Room types

@router.get("/{hotel_id}/rooms", response_model=List[schemas.RoomType])
def list_room_types(
    event_id: uuid.UUID,
    hotel_id: uuid.UUID,
    db: Session = Depends(get_db),
    context=Depends(get_org_context),
):
    _user, current_user = context
    event = get_readable_event(db, event_id, current_user)
    hotel = _get_hotel(db, event.id, hotel_id)
    return lodging_repo.list_room_types(db, hotel_id=hotel.id)


@router.post("/{hotel_id}/rooms", response_model=schemas.RoomType, status_code=status.HTTP_201_CREATED)
def create_room_type(
    event_id: uuid.UUID,
    hotel_id: uuid.UUID,
    payload: schemas.RoomTypeCreate,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    event = get_writable_event(db, event_id, current_user)
    hotel = _get_hotel(db, event.id, hotel_id)
    room = lodging_repo.create_room_type(db, hotel_id=hotel.id, payload=payload)
    audit_log(
        db,
        action=AuditAction.CREATE,
        entity_type="RoomType",
        entity_id=room.id,
        event_id=event.id,
        actor=current_user,
        changes=payload.model_dump(exclude_none=True),
        request=request,
    )
    return room


@router.get("/{hotel_id}/rooms/{room_type_id}", response_model=schemas.RoomType)
def get_room_type(
    event_id: uuid.UUID,
    hotel_id: uuid.UUID,
    room_type_id: uuid.UUID,
    db: Session = Depends(get_db),
    context=Depends(get_org_context),
):
    _user, current_user = context
    event = get_readable_event(db, event_id, current_user)
    hotel = _get_hotel(db, event.id, hotel_id)
    return _get_room(db, hotel.id, room_type_id)


@router.put("/{hotel_id}/rooms/{room_type_id}", response_model=schemas.RoomType)
def update_room_type(
    event_id: uuid.UUID,
    hotel_id: uuid.UUID,
    room_type_id: uuid.UUID,
    payload: schemas.RoomTypeUpdate,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    event = get_writable_event(db, event_id, current_user)
    hotel = _get_hotel(db, event.id, hotel_id)
    room = _get_room(db, hotel.id, room_type_id)
    if payload.total_rooms is not None and payload.total_rooms < room.booked_rooms:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Total rooms cannot be less than booked rooms ({room.booked_rooms})",
        )
    room = lodging_repo.update_room_type(db, room, payload)
    audit_log(
        db,
        action=AuditAction.UPDATE,
        entity_type="RoomType",
        entity_id=room.id,
        event_id=event.id,
        actor=current_user,
        changes=payload.model_dump(exclude_unset=True),
        request=request,
    )
    return room


@router.delete("/{hotel_id}/rooms/{room_type_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_room_type(
    event_id: uuid.UUID,
    hotel_id: uuid.UUID,
    room_type_id: uuid.UUID,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    event = get_writable_event(db, event_id, current_user)
    hotel = _get_hotel(db, event.id, hotel_id)
    room = _get_room(db, hotel.id, room_type_id)
    if room.accommodations:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot delete room type with existing bookings"
        )
    name = room.name
    lodging_repo.delete_room_type(db, room)
    audit_log(
        db,
        action=AuditAction.DELETE,
        entity_type="RoomType",
        entity_id=room_type_id,
        event_id=event.id,
        actor=current_user,
        changes={"name": name, "hotel_id": hotel.id},
        request=request,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
