import uuid
from decimal import Decimal
from typing import Any, Dict, List, Literal
from pydantic import BaseModel, ConfigDict, Field

from eventdesk.db.models.enums import RegistrationStatus, PaymentStatus
from .common import Email, UTCDateTime


class AttendeeFields(BaseModel):
    company: str | None = None
    job_title: str | None = None
    phone: str | None = None
    city: str | None = None
    country: str | None = None
    dietary_reqs: str | None = None


class RegistrationCreate(AttendeeFields):
    ticket_type_id: uuid.UUID
    email: Email
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    notes: str | None = None
    custom_fields: Dict[str, Any] | None = None


class AttendeeUpdate(AttendeeFields):
    # e-mail keys the attendee shared across events, so it is read-only here
    first_name: str | None = Field(default=None, min_length=1)
    last_name: str | None = Field(default=None, min_length=1)


class RegistrationUpdate(BaseModel):
    status: RegistrationStatus | None = None
    payment_status: PaymentStatus | None = None
    ticket_type_id: uuid.UUID | None = None
    notes: str | None = None
    attendee: AttendeeUpdate | None = None


class Attendee(AttendeeFields):
    id: uuid.UUID
    email: str
    first_name: str
    last_name: str
    custom_fields: Dict[str, Any] = {}
    model_config = ConfigDict(from_attributes=True)


class TicketTypeBrief(BaseModel):
    id: uuid.UUID
    name: str
    price: Decimal
    currency: str
    model_config = ConfigDict(from_attributes=True)


class Payment(BaseModel):
    id: uuid.UUID
    amount: Decimal
    currency: str
    status: str
    provider_payment_id: str | None = None
    receipt_url: str | None = None
    created_at: UTCDateTime
    model_config = ConfigDict(from_attributes=True)


class AccommodationBrief(BaseModel):
    id: uuid.UUID
    room_type_id: uuid.UUID
    check_in: UTCDateTime
    check_out: UTCDateTime
    status: str
    confirmation_no: str | None = None
    model_config = ConfigDict(from_attributes=True)


class Registration(BaseModel):
    id: uuid.UUID
    event_id: uuid.UUID
    ticket_type_id: uuid.UUID
    attendee_id: uuid.UUID
    status: str
    payment_status: str
    qr_code: str | None = None
    checked_in_at: UTCDateTime | None = None
    notes: str | None = None
    created_at: UTCDateTime
    attendee: Attendee
    ticket_type: TicketTypeBrief
    model_config = ConfigDict(from_attributes=True)


class RegistrationDetail(Registration):
    payments: List[Payment] = []
    accommodation: AccommodationBrief | None = None


class CheckInByCode(BaseModel):
    qr_code: str | None = None


class CheckInResult(BaseModel):
    id: uuid.UUID
    status: str
    checked_in_at: UTCDateTime
    attendee: Attendee
    model_config = ConfigDict(from_attributes=True)


class RegistrationEmailRequest(BaseModel):
    type: Literal["confirmation", "reminder", "custom"]
    custom_subject: str | None = None
    custom_message: str | None = None
    days_until_event: int | None = Field(default=None, ge=0)


class SpeakerEmailRequest(BaseModel):
    type: Literal["invitation", "custom"]
    custom_subject: str | None = None
    custom_message: str | None = None


class EmailSendResult(BaseModel):
    success: bool
    message: str
    message_id: str | None = None
