import uuid
from decimal import Decimal
from typing import List
from pydantic import BaseModel, Field

from .common import Email, UTCDateTime


class PublicOrganization(BaseModel):
    name: str
    logo: str | None = None


class PublicTicketType(BaseModel):
    id: uuid.UUID
    name: str
    description: str | None = None
    price: Decimal
    currency: str
    quantity: int
    sold_count: int
    max_per_order: int
    sales_start: UTCDateTime | None = None
    sales_end: UTCDateTime | None = None
    available: int
    sold_out: bool
    sales_started: bool
    sales_ended: bool
    can_purchase: bool


class PublicEvent(BaseModel):
    id: uuid.UUID
    name: str
    slug: str
    description: str | None = None
    start_date: UTCDateTime
    end_date: UTCDateTime
    timezone: str
    venue: str | None = None
    address: str | None = None
    city: str | None = None
    country: str | None = None
    banner_image: str | None = None
    organization: PublicOrganization
    ticket_types: List[PublicTicketType]


class PublicRegistrationRequest(BaseModel):
    ticket_type_id: uuid.UUID
    email: Email
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    company: str | None = None
    job_title: str | None = None
    phone: str | None = None
    city: str | None = None
    country: str | None = None
    dietary_reqs: str | None = None


class PublicRegistrationResponse(BaseModel):
    id: uuid.UUID
    status: str
    qr_code: str | None = None
    ticket_type: str
    event_name: str
    event_start_date: UTCDateTime
