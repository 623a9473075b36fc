"""
Domain-split SQLAlchemy models with a single import surface.

Exposes `Base`, the timestamp helpers and every ORM class so callers can use
`from eventdesk.db import models` and `models.Event`.
"""

from .base import Base, now_utc, as_utc  # re-export

# Domain models
from .organizations import Organization
from .users import User, VerificationToken
from .tokens import ApiKey
from .events import Event, TicketType
from .registrations import Attendee, Registration, Payment
from .program import Speaker, Track, EventSession, SessionSpeaker, Abstract
from .lodging import Hotel, RoomType, Accommodation
from .audit import AuditLog
from .notifications import EmailLog
from .enums import (
    EventStatus,
    RegistrationStatus,
    PaymentStatus,
    SpeakerStatus,
    SessionStatus,
    AccommodationStatus,
    AbstractStatus,
    ABSTRACT_REVIEW_STATUSES,
    ABSTRACT_EDITABLE_STATUSES,
    PUBLIC_EVENT_STATUSES,
)

__all__ = [
    # base
    "Base",
    "now_utc",
    "as_utc",
    # tenancy
    "Organization",
    "User",
    "VerificationToken",
    "ApiKey",
    # events/tickets
    "Event",
    "TicketType",
    # attendees
    "Attendee",
    "Registration",
    "Payment",
    # program
    "Speaker",
    "Track",
    "EventSession",
    "SessionSpeaker",
    "Abstract",
    # lodging
    "Hotel",
    "RoomType",
    "Accommodation",
    # audit/email
    "AuditLog",
    "EmailLog",
    # enums
    "EventStatus",
    "RegistrationStatus",
    "PaymentStatus",
    "SpeakerStatus",
    "SessionStatus",
    "AccommodationStatus",
    "AbstractStatus",
    "ABSTRACT_REVIEW_STATUSES",
    "ABSTRACT_EDITABLE_STATUSES",
    "PUBLIC_EVENT_STATUSES",
]
