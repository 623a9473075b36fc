"""
Hotel, room type and accommodation repository functions.

``RoomType.booked_rooms`` counts accommodations that are not CANCELLED;
``book_room`` and ``release_room`` are the only places that move it.
"""
from __future__ import annotations

import math
import uuid
from datetime import datetime, timedelta
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from eventdesk.db import models, schemas
from eventdesk.db.models.base import as_utc
from eventdesk.utils.identifiers import generate_confirmation_number

_ONE_DAY = timedelta(days=1)


# Hotels

def list_hotels(db: Session, *, event_id: uuid.UUID) -> List[models.Hotel]:
    return (
        db.query(models.Hotel)
        .options(joinedload(models.Hotel.room_types))
        .filter(models.Hotel.event_id == event_id)
        .order_by(models.Hotel.created_at.asc())
        .all()
    )


def get_hotel(db: Session, *, event_id: uuid.UUID, hotel_id: uuid.UUID) -> Optional[models.Hotel]:
    return (
        db.query(models.Hotel)
        .filter(models.Hotel.id == hotel_id, models.Hotel.event_id == event_id)
        .first()
    )


def create_hotel(db: Session, *, event_id: uuid.UUID, payload: schemas.HotelCreate) -> models.Hotel:
    data = payload.model_dump(exclude_none=True)
    data.setdefault("images", [])
    hotel = models.Hotel(event_id=event_id, **data)
    db.add(hotel)
    db.commit()
    db.refresh(hotel)
    return hotel


def update_hotel(db: Session, hotel: models.Hotel, payload: schemas.HotelUpdate) -> models.Hotel:
    for key, value in payload.model_dump(exclude_unset=True).items():
        if value is None and key in ("name", "images", "is_active"):
            continue
        setattr(hotel, key, value)
    db.commit()
    db.refresh(hotel)
    return hotel


def delete_hotel(db: Session, hotel: models.Hotel) -> None:
    db.delete(hotel)
    db.commit()


# Room types

def list_room_types(db: Session, *, hotel_id: uuid.UUID) -> List[models.RoomType]:
    return (
        db.query(models.RoomType)
        .filter(models.RoomType.hotel_id == hotel_id)
        .order_by(models.RoomType.price_per_night.asc(), models.RoomType.created_at.asc())
        .all()
    )


def get_room_type(db: Session, *, hotel_id: uuid.UUID, room_type_id: uuid.UUID) -> Optional[models.RoomType]:
    return (
        db.query(models.RoomType)
        .filter(models.RoomType.id == room_type_id, models.RoomType.hotel_id == hotel_id)
        .first()
    )


def get_room_type_in_event(db: Session, *, event_id: uuid.UUID, room_type_id: uuid.UUID) -> Optional[models.RoomType]:
    return (
        db.query(models.RoomType)
        .join(models.Hotel, models.Hotel.id == models.RoomType.hotel_id)
        .filter(models.RoomType.id == room_type_id, models.Hotel.event_id == event_id)
        .first()
    )


def create_room_type(db: Session, *, hotel_id: uuid.UUID, payload: schemas.RoomTypeCreate) -> models.RoomType:
    data = payload.model_dump(exclude_none=True)
    data.setdefault("amenities", [])
    data.setdefault("images", [])
    room = models.RoomType(hotel_id=hotel_id, **data)
    db.add(room)
    db.commit()
    db.refresh(room)
    return room


def update_room_type(db: Session, room: models.RoomType, payload: schemas.RoomTypeUpdate) -> models.RoomType:
    for key, value in payload.model_dump(exclude_unset=True).items():
        if value is None and key != "description":
            continue
        setattr(room, key, value)
    db.commit()
    db.refresh(room)
    return room


def delete_room_type(db: Session, room: models.RoomType) -> None:
    db.delete(room)
    db.commit()


def has_room_available(room: models.RoomType) -> bool:
    return (room.booked_rooms or 0) < (room.total_rooms or 0)


def book_room(room: models.RoomType) -> None:
    room.booked_rooms = (room.booked_rooms or 0) + 1


def release_room(room: models.RoomType) -> None:
    room.booked_rooms = max((room.booked_rooms or 0) - 1, 0)


# Accommodations

def nights_between(check_in: datetime, check_out: datetime) -> int:
    """Whole nights between two instants, rounding a partial day up."""
    return math.ceil((as_utc(check_out) - as_utc(check_in)) / _ONE_DAY)


def total_price(room: models.RoomType, nights: int) -> Decimal:
    return Decimal(str(room.price_per_night)) * nights


def list_accommodations(db: Session, *, event_id: uuid.UUID, status: Optional[str] = None) -> List[models.Accommodation]:
    query = db.query(models.Accommodation).filter(models.Accommodation.event_id == event_id)
    if status:
        query = query.filter(models.Accommodation.status == status)
    return query.order_by(models.Accommodation.created_at.desc()).all()


def get_accommodation(db: Session, *, event_id: uuid.UUID, accommodation_id: uuid.UUID) -> Optional[models.Accommodation]:
    return (
        db.query(models.Accommodation)
        .filter(models.Accommodation.id == accommodation_id, models.Accommodation.event_id == event_id)
        .first()
    )


def registration_has_accommodation(db: Session, *, registration_id: uuid.UUID) -> bool:
    return (
        db.query(models.Accommodation.id)
        .filter(models.Accommodation.registration_id == registration_id)
        .first()
        is not None
    )


def create_accommodation(
    db: Session,
    *,
    event_id: uuid.UUID,
    registration: models.Registration,
    room: models.RoomType,
    payload: schemas.AccommodationCreate,
    nights: int,
) -> models.Accommodation:
    accommodation = models.Accommodation(
        event_id=event_id,
        registration_id=registration.id,
        room_type_id=room.id,
        check_in=payload.check_in,
        check_out=payload.check_out,
        guest_count=payload.guest_count,
        special_requests=payload.special_requests,
        total_price=total_price(room, nights),
        currency=room.currency,
        confirmation_no=generate_confirmation_number(),
    )
    db.add(accommodation)
    book_room(room)
    db.commit()
    db.refresh(accommodation)
    return accommodation


def delete_accommodation(db: Session, accommodation: models.Accommodation) -> None:
    if accommodation.status != models.AccommodationStatus.CANCELLED.value and accommodation.room_type is not None:
        release_room(accommodation.room_type)
    db.delete(accommodation)
    db.commit()
