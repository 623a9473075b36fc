import uuid
from decimal import Decimal
from typing import List
from pydantic import BaseModel, ConfigDict, Field

from eventdesk.db.models.enums import AccommodationStatus
from .common import UTCDateTime


# Hotels

class HotelFields(BaseModel):
    address: str | None = None
    description: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    stars: int | None = Field(default=None, ge=1, le=5)
    images: List[str] | None = None
    is_active: bool | None = None


class HotelCreate(HotelFields):
    name: str = Field(min_length=1)


class HotelUpdate(HotelFields):
    name: str | None = Field(default=None, min_length=1)


# Room types

class RoomTypeFields(BaseModel):
    description: str | None = None
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    capacity: int | None = Field(default=None, ge=1)
    amenities: List[str] | None = None
    images: List[str] | None = None
    is_active: bool | None = None


class RoomTypeCreate(RoomTypeFields):
    name: str = Field(min_length=1)
    price_per_night: Decimal = Field(ge=0)
    total_rooms: int = Field(ge=0)


class RoomTypeUpdate(RoomTypeFields):
    name: str | None = Field(default=None, min_length=1)
    price_per_night: Decimal | None = Field(default=None, ge=0)
    total_rooms: int | None = Field(default=None, ge=0)


class RoomType(BaseModel):
    id: uuid.UUID
    hotel_id: uuid.UUID
    name: str
    description: str | None = None
    price_per_night: Decimal
    currency: str
    capacity: int
    total_rooms: int
    booked_rooms: int
    available_rooms: int
    amenities: List[str] = []
    images: List[str] = []
    is_active: bool
    created_at: UTCDateTime
    model_config = ConfigDict(from_attributes=True)


class Hotel(BaseModel):
    id: uuid.UUID
    event_id: uuid.UUID
    name: str
    address: str | None = None
    description: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    stars: int | None = None
    images: List[str] = []
    is_active: bool
    booking_count: int = 0
    room_types: List[RoomType] = []
    created_at: UTCDateTime
    model_config = ConfigDict(from_attributes=True)


# Accommodations

class AccommodationCreate(BaseModel):
    registration_id: uuid.UUID
    room_type_id: uuid.UUID
    check_in: UTCDateTime
    check_out: UTCDateTime
    guest_count: int = Field(default=1, ge=1)
    special_requests: str | None = None


class AccommodationUpdate(BaseModel):
    room_type_id: uuid.UUID | None = None
    check_in: UTCDateTime | None = None
    check_out: UTCDateTime | None = None
    guest_count: int | None = Field(default=None, ge=1)
    special_requests: str | None = None
    status: AccommodationStatus | None = None


class GuestBrief(BaseModel):
    id: uuid.UUID
    email: str
    first_name: str
    last_name: str
    model_config = ConfigDict(from_attributes=True)


class RegistrationBrief(BaseModel):
    id: uuid.UUID
    status: str
    attendee: GuestBrief
    model_config = ConfigDict(from_attributes=True)


class HotelBrief(BaseModel):
    id: uuid.UUID
    name: str
    model_config = ConfigDict(from_attributes=True)


class RoomTypeBrief(BaseModel):
    id: uuid.UUID
    name: str
    price_per_night: Decimal
    hotel: HotelBrief
    model_config = ConfigDict(from_attributes=True)


class Accommodation(BaseModel):
    id: uuid.UUID
    event_id: uuid.UUID
    registration_id: uuid.UUID
    room_type_id: uuid.UUID
    check_in: UTCDateTime
    check_out: UTCDateTime
    guest_count: int
    special_requests: str | None = None
    status: str
    total_price: Decimal
    currency: str
    confirmation_no: str | None = None
    created_at: UTCDateTime
    registration: RegistrationBrief
    room_type: RoomTypeBrief
    model_config = ConfigDict(from_attributes=True)
