import uuid
from decimal import Decimal
from typing import Any, Dict, List
from pydantic import BaseModel, ConfigDict, Field, model_validator

from eventdesk.db.models.enums import EventStatus
from .common import UTCDateTime


class EventBase(BaseModel):
    description: str | None = None
    timezone: str | None = None
    venue: str | None = None
    address: str | None = None
    city: str | None = None
    country: str | None = None
    banner_image: str | None = None


class EventCreate(EventBase):
    name: str = Field(min_length=2)
    start_date: UTCDateTime
    end_date: UTCDateTime
    status: EventStatus = EventStatus.DRAFT

    @model_validator(mode="after")
    def _dates_in_order(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class EventUpdate(EventBase):
    name: str | None = Field(default=None, min_length=2)
    slug: str | None = Field(default=None, min_length=1)
    start_date: UTCDateTime | None = None
    end_date: UTCDateTime | None = None
    status: EventStatus | None = None
    settings: Dict[str, Any] | None = None


class EventCounts(BaseModel):
    registrations: int = 0
    speakers: int = 0
    sessions: int = 0
    tracks: int = 0


class Event(EventBase):
    id: uuid.UUID
    organization_id: uuid.UUID
    name: str
    slug: str
    start_date: UTCDateTime
    end_date: UTCDateTime
    timezone: str
    status: str
    settings: Dict[str, Any] = {}
    created_at: UTCDateTime
    updated_at: UTCDateTime
    counts: EventCounts = EventCounts()
    model_config = ConfigDict(from_attributes=True)


class TicketTypeBase(BaseModel):
    description: str | None = None
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    max_per_order: int | None = Field(default=None, ge=1)
    sales_start: UTCDateTime | None = None
    sales_end: UTCDateTime | None = None
    is_active: bool | None = None
    requires_approval: bool | None = None


class TicketTypeCreate(TicketTypeBase):
    name: str = Field(min_length=1)
    price: Decimal = Field(default=Decimal("0"), ge=0)
    quantity: int = Field(ge=1)


class TicketTypeUpdate(TicketTypeBase):
    name: str | None = Field(default=None, min_length=1)
    price: Decimal | None = Field(default=None, ge=0)
    quantity: int | None = Field(default=None, ge=1)


class TicketType(BaseModel):
    id: uuid.UUID
    event_id: uuid.UUID
    name: str
    description: str | None = None
    price: Decimal
    currency: str
    quantity: int
    sold_count: int
    max_per_order: int
    sales_start: UTCDateTime | None = None
    sales_end: UTCDateTime | None = None
    is_active: bool
    requires_approval: bool
    registration_count: int = 0
    created_at: UTCDateTime
    model_config = ConfigDict(from_attributes=True)


class EventDetail(Event):
    ticket_types: List[TicketType] = []
