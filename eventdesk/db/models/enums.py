"""
Status enums shared by models, schemas and routers.

Values are stored as plain strings so the schema stays portable between
PostgreSQL and the SQLite test database.
"""
from enum import Enum


class EventStatus(str, Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    LIVE = "LIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class RegistrationStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    WAITLISTED = "WAITLISTED"
    CHECKED_IN = "CHECKED_IN"


class PaymentStatus(str, Enum):
    UNPAID = "UNPAID"
    PENDING = "PENDING"
    PAID = "PAID"
    REFUNDED = "REFUNDED"
    FAILED = "FAILED"


class SpeakerStatus(str, Enum):
    INVITED = "INVITED"
    CONFIRMED = "CONFIRMED"
    DECLINED = "DECLINED"
    CANCELLED = "CANCELLED"


class SessionStatus(str, Enum):
    DRAFT = "DRAFT"
    SCHEDULED = "SCHEDULED"
    LIVE = "LIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class AccommodationStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    CHECKED_IN = "CHECKED_IN"
    CHECKED_OUT = "CHECKED_OUT"


class AbstractStatus(str, Enum):
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    UNDER_REVIEW = "UNDER_REVIEW"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    REVISION_REQUESTED = "REVISION_REQUESTED"


# Statuses only a reviewer may set
ABSTRACT_REVIEW_STATUSES = (
    AbstractStatus.UNDER_REVIEW.value,
    AbstractStatus.ACCEPTED.value,
    AbstractStatus.REJECTED.value,
    AbstractStatus.REVISION_REQUESTED.value,
)
# Statuses in which the submitter may still edit the abstract
ABSTRACT_EDITABLE_STATUSES = (
    AbstractStatus.DRAFT.value,
    AbstractStatus.SUBMITTED.value,
    AbstractStatus.REVISION_REQUESTED.value,
)

# Events a visitor can see and register for without signing in
PUBLIC_EVENT_STATUSES = (EventStatus.PUBLISHED.value, EventStatus.LIVE.value)
